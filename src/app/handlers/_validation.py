"""Validação de inputs de handlers com Pydantic."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from utils.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_inputs(model: type[ModelT], inputs: dict[str, Any]) -> ModelT:
    """Valida inputs contra o modelo.

    Raises:
        ValidationError: com a lista de problemas em details["errors"]
    """
    try:
        return model.model_validate(inputs)
    except PydanticValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        message = "; ".join(f"{item['field']}: {item['message']}" for item in errors)
        raise ValidationError(message or "invalid inputs", details={"errors": errors}) from exc


def require_user(user_id: str) -> str:
    """Garante identidade do chamador (ValidationError se ausente)."""
    if not user_id:
        raise ValidationError("missing user id")
    return user_id
