"""Proxy validado para o serviço de dados (lectures).

Cada operação tem um modelo de inputs e uma rota no serviço de dados.
A identidade do chamador segue nos headers x-user-id / x-request-id.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from app.handlers._validation import require_user, validate_inputs
from app.protocols import HandlerContext, HandlerResult
from utils.errors import GatewayError, ValidationError

if TYPE_CHECKING:
    from app.protocols import DataServiceClientProtocol

logger = logging.getLogger(__name__)

DATA_PROXY_HANDLER_NAME = "data.proxy"


class _Inputs(BaseModel):
    model_config = ConfigDict(extra="ignore")


class LectureRef(_Inputs):
    lectureId: str = Field(min_length=1)  # noqa: N815


class LectureFields(_Inputs):
    file_id: str | None = None
    courseCode: str | None = None  # noqa: N815
    language: str | None = None
    sessionName: str | None = None  # noqa: N815
    subtitle: str | None = None
    description: str | None = None
    outline: Any = None
    audioDeviceId: str | None = None  # noqa: N815
    audioDeviceLabel: str | None = None  # noqa: N815
    audioReady: bool | None = None  # noqa: N815
    status: int | None = None


class CreateLecture(LectureFields):
    lecture_id: str | None = None


class UpdateLecture(LectureFields):
    lectureId: str = Field(min_length=1)  # noqa: N815


class NoInputs(_Inputs):
    pass


class TimedEntry(_Inputs):
    lecture_id: str = Field(min_length=1)
    t_start_ms: float = Field(ge=0)
    t_end_ms: float = Field(ge=0)
    content: str = Field(min_length=1)
    seq_no: int | None = Field(default=None, gt=0)
    start_at: str | None = None
    end_at: str | None = None


class UpsertReport(_Inputs):
    lecture_id: str = Field(min_length=1)
    seq_no: int = Field(gt=0)
    md: str = Field(min_length=1)


@dataclass(frozen=True, slots=True)
class _Route:
    """Operação -> (modelo, método, caminho, corpo)."""

    model: type[_Inputs]
    method: str
    path: Callable[[Any], str]
    body: Callable[[Any], dict[str, Any] | None] = lambda _inputs: None


def _provided(inputs: _Inputs, *exclude: str) -> dict[str, Any]:
    """Somente campos enviados pelo cliente."""
    return inputs.model_dump(exclude_unset=True, exclude=set(exclude))


ROUTES: dict[str, _Route] = {
    "getLecture": _Route(LectureRef, "GET", lambda i: f"/lectures/{i.lectureId}"),
    "createLecture": _Route(CreateLecture, "POST", lambda _i: "/lectures", _provided),
    "updateLecture": _Route(
        UpdateLecture,
        "PATCH",
        lambda i: f"/lectures/{i.lectureId}",
        lambda i: _provided(i, "lectureId"),
    ),
    "deleteLecture": _Route(LectureRef, "DELETE", lambda i: f"/lectures/{i.lectureId}"),
    "listLectures": _Route(NoInputs, "GET", lambda _i: "/lectures"),
    "appendTranscription": _Route(
        TimedEntry,
        "POST",
        lambda i: f"/lectures/{i.lecture_id}/transcription",
        lambda i: _provided(i, "lecture_id"),
    ),
    "appendSummary": _Route(
        TimedEntry,
        "POST",
        lambda i: f"/lectures/{i.lecture_id}/transcription-summary",
        lambda i: _provided(i, "lecture_id"),
    ),
    "upsertReport": _Route(
        UpsertReport,
        "POST",
        lambda i: f"/lectures/{i.lecture_id}/report",
        lambda i: {"seq_no": i.seq_no, "md": i.md},
    ),
    "getPostClassBackground": _Route(
        LectureRef, "GET", lambda i: f"/lectures/{i.lectureId}/post-class-background"
    ),
    "getStageSummariesText": _Route(
        LectureRef, "GET", lambda i: f"/lectures/{i.lectureId}/stage-summaries-text"
    ),
}


class DataProxyHandler:
    """Encaminha operações de lecture ao serviço de dados."""

    __slots__ = ("_client",)

    def __init__(self, client: DataServiceClientProtocol) -> None:
        self._client = client

    @staticmethod
    def operations() -> list[str]:
        return sorted(ROUTES)

    async def execute(self, context: HandlerContext) -> HandlerResult:
        route = ROUTES.get(context.operation)
        try:
            require_user(context.user_id)
            if route is None:
                raise ValidationError(f"unsupported operation: {context.operation}")
            inputs = validate_inputs(route.model, context.inputs)
            data = await self._client.request(
                route.method,
                route.path(inputs),
                user_id=context.user_id,
                request_id=context.request_id,
                body=route.body(inputs),
            )
        except GatewayError as exc:
            logger.info(
                "data_proxy_request_failed",
                extra={
                    "operation": context.operation,
                    "kind": exc.kind,
                    "status_code": exc.status_code,
                },
            )
            return HandlerResult.from_error(exc)

        logger.debug("data_proxy_request_completed", extra={"operation": context.operation})
        return HandlerResult(status_code=200, message="success", data=data)
