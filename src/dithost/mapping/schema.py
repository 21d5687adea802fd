"""Schema validation for untyped JSON configuration.

``SchemaValidator`` is the single place where raw JSON trees become typed
configuration. It wraps a pydantic ``TypeAdapter`` (built once per model and
cached) and converts pydantic's error report into a dithost
``ValidationError`` whose ``path`` names the first offending location.

Example:
    >>> from dithost.models import InstanceConfig
    >>> SchemaValidator(InstanceConfig).validate({"user_data": "#cloud-config"})
    InstanceConfig(user_data='#cloud-config')
    >>> SchemaValidator(InstanceConfig).validate({})
    Traceback (most recent call last):
    ...
    dithost.core.errors.ValidationError: InstanceConfig validation failed at 'user_data': Field required
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python

from dithost.core.errors import ValidationError
from dithost.models.app import JSONValue

M = TypeVar("M")

ROOT_PATH = "<root>"


@lru_cache(maxsize=None)
def _type_adapter(model: type) -> TypeAdapter:
    return TypeAdapter(model)


def _format_loc(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or ROOT_PATH


class SchemaValidator:
    """Validate raw JSON against a model and parse it into that model."""

    def __init__(self, model: type[M]):
        self.model = model
        self._adapter = _type_adapter(model)

    @property
    def name(self) -> str:
        return getattr(self.model, "__name__", repr(self.model))

    def validate(self, raw: JSONValue) -> M:
        """Validate ``raw`` and return the typed value.

        Raises:
            ValidationError: With ``path`` set to the first violation and
                ``errors`` listing every violation.
        """
        try:
            return self._adapter.validate_python(raw)
        except PydanticValidationError as e:
            errors = [
                {"path": _format_loc(err["loc"]), "message": err["msg"], "type": err["type"]}
                for err in e.errors()
            ]
            first = errors[0] if errors else {"path": ROOT_PATH, "message": str(e)}
            raise ValidationError(
                f"{self.name} validation failed at '{first['path']}': {first['message']}",
                path=first["path"],
                errors=errors,
                cause=e,
            ) from e

    def json_schema(self) -> dict[str, Any]:
        """JSON Schema of the model, using field aliases."""
        return self._adapter.json_schema(by_alias=True)

    def __repr__(self) -> str:
        return f"SchemaValidator({self.name})"


def to_json_value(value: Any) -> JSONValue:
    """Serialize a typed value to a plain JSON tree.

    Pydantic models dump by alias. Fields explicitly set to ``None`` stay
    ``null``, so the result re-validates to an equal value.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    return to_jsonable_python(value, by_alias=True)


def transcode(value: Any, target_model: type[M]) -> M:
    """Convert ``value`` into ``target_model`` through its JSON form."""
    return SchemaValidator(target_model).validate(to_json_value(value))


__all__ = ["SchemaValidator", "to_json_value", "transcode"]
