# taskmanager/core/validation.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from taskmanager.core.errors import ValidationError

M = TypeVar("M", bound=BaseModel)

# pydantic prefixes messages raised from field validators
_VALUE_ERROR_PREFIX = "Value error, "
_LOC_ROOTS = {"body", "query", "path", "header", "cookie"}


@dataclass(frozen=True)
class Checked(Generic[M]):
    """Outcome of running a request schema: either a value or the first failure."""

    value: Optional[M] = None
    field: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.message is None

    def unwrap(self) -> M:
        if not self.ok:
            raise ValidationError(self.message, field=self.field)
        return self.value


def first_error(errors: Sequence[dict]) -> Tuple[Optional[str], str]:
    """Pick (field, message) of the first violated constraint."""
    if not errors:
        return None, "Invalid request"
    err = errors[0]
    loc = [str(p) for p in err.get("loc", ()) if p not in _LOC_ROOTS]
    field = ".".join(loc) or None
    if err.get("type") == "missing":
        return field, f"{field or 'value'} is required"
    msg = str(err.get("msg") or "Invalid value")
    if msg.startswith(_VALUE_ERROR_PREFIX):
        msg = msg[len(_VALUE_ERROR_PREFIX):]
    return field, msg


def check(model: Type[M], data: Any) -> Checked[M]:
    try:
        return Checked(value=model.model_validate(data))
    except PydanticValidationError as exc:
        field, message = first_error(exc.errors())
        return Checked(field=field, message=message)
