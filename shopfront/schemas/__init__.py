from typing import Any, Type, TypeVar

import pydantic
from pydantic import BaseModel

from ..exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_input(model: Type[ModelT], raw: Any) -> ModelT:
    """Validate request input, reporting schema problems as ``ValidationError``."""
    if raw is not None and not isinstance(raw, dict):
        raise ValidationError("Input must be a JSON object")
    try:
        return model.model_validate(raw or {})
    except pydantic.ValidationError as e:
        errors = [
            {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]}
            for err in e.errors()
        ]
        message = "; ".join(f"{'.'.join(err['loc']) or 'input'}: {err['msg']}" for err in errors)
        raise ValidationError(message, details={"errors": errors}) from e
