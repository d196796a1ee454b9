"""Envelope de entrada: pluginName + intent {operation, inputs}.

Validado com Pydantic; qualquer problema vira ValidationError (400)
antes de qualquer admissão.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from app.gateway.signature import HEADER_REQUEST_ID, normalize_headers
from utils.errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.gateway.signature import VerifiedCaller


class IntentModel(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    operation: str = Field(min_length=1)
    inputs: dict[str, Any] = Field(default_factory=dict)

    @field_validator("inputs", mode="before")
    @classmethod
    def _null_inputs_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class EnvelopeModel(BaseModel):
    """Corpo JSON de POST /v1/invoke."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)

    plugin_name: str = Field(
        min_length=1,
        validation_alias=AliasChoices("pluginName", "handlerName", "plugin_name"),
    )
    intent: IntentModel


@dataclass(frozen=True, slots=True)
class Envelope:
    """Requisição autenticada e validada (imutável)."""

    handler_name: str
    operation: str
    user_id: str
    request_id: str
    inputs: dict[str, Any] = field(default_factory=dict)


def parse_envelope(
    raw_body: bytes,
    headers: Mapping[str, str],
    caller: VerifiedCaller,
) -> Envelope:
    """Decodifica e valida o corpo bruto.

    Raises:
        ValidationError: JSON inválido, campos ausentes ou x-request-id ausente.
    """
    request_id = normalize_headers(headers).get(HEADER_REQUEST_ID, "").strip()
    if not request_id:
        raise ValidationError("missing header: x-request-id")

    try:
        payload = json.loads(raw_body or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError("invalid JSON body") from exc
    if not isinstance(payload, dict):
        raise ValidationError("envelope must be a JSON object")

    try:
        model = EnvelopeModel.model_validate(payload)
    except PydanticValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise ValidationError("invalid envelope", details={"fields": fields}) from exc

    return Envelope(
        handler_name=model.plugin_name,
        operation=model.intent.operation,
        user_id=caller.user_id,
        request_id=request_id,
        inputs=model.intent.inputs,
    )
