"""Parameter Projector - Flattens request options into query parameters.

project() turns whatever a caller hands the dispatcher as a payload into a
flat dict[str, str] suitable for a URL query string:

    project(None)                      -> {}
    project({"page": "2"})             -> {"page": "2"}  (same object)
    project(CallQuery(from_="+1919"))  -> {"from": "+1919"}

Typed option records (pydantic models, dataclasses) are walked over their
declared fields. Fields still holding their declared default, or the zero
value of their type when they declare none, are left out, so unset options
never reach the server as explicit zero values.
"""

from __future__ import annotations

import dataclasses
import enum
import typing
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

_SCALAR_ZERO_VALUES: dict[Any, Any] = {bool: False, int: 0, float: 0.0, str: "", bytes: b""}
_CONTAINER_TYPES = (list, dict, set, frozenset, tuple)


def query_key(name: str) -> str:
    """Convert a field name to its query parameter key.

    snake_case names are joined to CamelCase first, then the first character
    is lower-cased and every literal "ID" becomes "Id":

        UserID  -> userId
        user_id -> userId
        CallID  -> callId
    """
    if "_" in name:
        name = "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)
    if not name:
        return name
    return (name[0].lower() + name[1:]).replace("ID", "Id")


def format_value(value: Any) -> str:
    """Render a field value the way it appears in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return format_value(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _zero_value(annotation: Any) -> Any:
    """Zero value of an annotated type, or MISSING when it has none.

    Optional[...] and other unions have no zero value here; None is
    treated as unset separately.
    """
    origin = typing.get_origin(annotation) or annotation
    if origin in _SCALAR_ZERO_VALUES:
        return _SCALAR_ZERO_VALUES[origin]
    if origin in _CONTAINER_TYPES:
        return origin()
    return dataclasses.MISSING


def _is_default(value: Any, default: Any) -> bool:
    if value is None:
        return True
    if default is dataclasses.MISSING:
        return False
    try:
        return bool(value == default)
    except Exception:
        # Values that refuse comparison (e.g. ambiguous array truthiness)
        # cannot equal a declared default.
        return False


def project_model(model: BaseModel) -> dict[str, str]:
    """Project a pydantic model over its declared fields.

    Fields without a default are compared against the zero value of their
    annotation. A declared alias (Field(alias="from")) is used verbatim as
    the key.
    """
    params: dict[str, str] = {}
    for name, field_info in type(model).model_fields.items():
        value = getattr(model, name)
        if field_info.is_required():
            default = _zero_value(field_info.annotation)
        else:
            default = field_info.get_default(call_default_factory=True)
        if _is_default(value, default):
            continue
        key = field_info.alias or query_key(name)
        params[key] = format_value(value)
    return params


def project_dataclass(obj: Any) -> dict[str, str]:
    """Project a dataclass instance over dataclasses.fields()."""
    try:
        hints = typing.get_type_hints(type(obj))
    except NameError:
        hints = {}
    params: dict[str, str] = {}
    for f in dataclasses.fields(obj):
        value = getattr(obj, f.name)
        if f.default is not dataclasses.MISSING:
            default = f.default
        elif f.default_factory is not dataclasses.MISSING:
            default = f.default_factory()
        else:
            default = _zero_value(hints.get(f.name, f.type))
        if _is_default(value, default):
            continue
        params[query_key(f.name)] = format_value(value)
    return params


def _is_string_map(payload: Mapping[Any, Any]) -> bool:
    return all(isinstance(k, str) and isinstance(v, str) for k, v in payload.items())


def project(payload: Any) -> dict[str, str]:
    """Project a payload into query parameters.

    Raises:
        TypeError: If the payload is not a mapping or a typed options record.
    """
    if payload is None:
        return {}

    if isinstance(payload, Mapping):
        if isinstance(payload, dict) and _is_string_map(payload):
            return payload
        return {
            str(key): format_value(value)
            for key, value in payload.items()
            if value is not None
        }

    to_params = getattr(payload, "to_params", None)
    if callable(to_params):
        return to_params()

    if isinstance(payload, BaseModel):
        return project_model(payload)

    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        return project_dataclass(payload)

    raise TypeError(
        f"Cannot project {type(payload).__name__} into query parameters; "
        "use a mapping, a QueryOptions model or a dataclass"
    )
