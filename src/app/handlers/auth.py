"""Handlers de login e registro (encaminham credenciais ao serviço de auth)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols import HandlerContext, HandlerResult
from utils.errors import GatewayError, ValidationError

if TYPE_CHECKING:
    from app.protocols import AuthServiceClientProtocol

logger = logging.getLogger(__name__)

AUTH_PASSWORD_HANDLER_NAME = "auth_password"
AUTH_REGISTER_HANDLER_NAME = "auth_register"

LOGIN_PATH = "/auth/login"
REGISTER_PATH = "/auth/register"


def _credentials(inputs: dict[str, object]) -> tuple[str, str]:
    username = inputs.get("username")
    password = inputs.get("password")
    username = username.strip() if isinstance(username, str) else ""
    password = password if isinstance(password, str) else ""
    if not username or not password:
        raise ValidationError("missing credentials")
    return username, password


class AuthCredentialsHandler:
    """POST {username, password} em `path`; a operação do intent é ignorada."""

    __slots__ = ("_client", "_failure_message", "_path")

    def __init__(
        self,
        client: AuthServiceClientProtocol,
        *,
        path: str,
        failure_message: str,
    ) -> None:
        self._client = client
        self._path = path
        self._failure_message = failure_message

    async def execute(self, context: HandlerContext) -> HandlerResult:
        try:
            username, password = _credentials(context.inputs)
            data = await self._client.post_credentials(self._path, username, password)
        except ValidationError as exc:
            return HandlerResult.from_error(exc)
        except GatewayError as exc:
            logger.info(
                "auth_request_failed",
                extra={"path": self._path, "status_code": exc.status_code},
            )
            return HandlerResult(
                status_code=exc.status_code,
                message=f"{self._failure_message}: {exc.message}",
                data={},
            )
        return HandlerResult.success(data)


def login_handler(client: AuthServiceClientProtocol) -> AuthCredentialsHandler:
    return AuthCredentialsHandler(client, path=LOGIN_PATH, failure_message="auth failed")


def register_handler(client: AuthServiceClientProtocol) -> AuthCredentialsHandler:
    return AuthCredentialsHandler(client, path=REGISTER_PATH, failure_message="register failed")
