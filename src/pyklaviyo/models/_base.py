"""Base model for caller-supplied request input.

Every input model inherits from :class:`KlaviyoRequestModel` which
provides:

* ``alias_generator=to_camel`` so helper-style camelCase keys
  (``eventName``) are accepted next to snake_case ones.
* Whitespace stripping on every string field.
* Frozen instances.

:func:`parse_request` turns pydantic's ``ValidationError`` into
:class:`~pyklaviyo.exceptions.KlaviyoValidationError` so callers only
deal with the library's own exception hierarchy.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from pyklaviyo.exceptions import KlaviyoValidationError

TModel = TypeVar("TModel", bound=BaseModel)


class KlaviyoRequestModel(BaseModel):
    """Base for validated caller input."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )


def non_empty(value: str, name: str) -> str:
    """Return *value* stripped, raising ``ValueError`` when blank."""
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{name} must be non-empty")
    return stripped


def parse_request(model_cls: type[TModel], data: Any, *, label: str) -> TModel:
    """Validate *data* into *model_cls* or raise :class:`KlaviyoValidationError`."""
    if isinstance(data, model_cls):
        return data
    if not isinstance(data, Mapping):
        raise KlaviyoValidationError(f"{label} must be a mapping, got {type(data).__name__}")
    try:
        return model_cls.model_validate(dict(data))
    except ValidationError as exc:
        fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
        messages = "; ".join(err["msg"] for err in exc.errors())
        raise KlaviyoValidationError(f"Invalid {label}: {messages}", fields=fields) from exc
