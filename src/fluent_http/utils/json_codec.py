"""
JSON codec used for request bodies and typed responses.

Serialization goes through the stdlib ``json`` module with pydantic's
``to_jsonable_python`` as fallback encoder, so pydantic models, dataclasses,
datetimes, UUIDs and enums serialize without extra setup.

Deserialization parses with ``json`` and validates with ``pydantic.TypeAdapter``.
Object keys are matched to model / dataclass fields case-insensitively, so
``{"Message": "ok"}`` populates a field named ``message``.
"""

import dataclasses
import json
import types
import typing
from functools import lru_cache
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from ..core.exceptions import DeserializationError


def public_attributes(obj: Any) -> Dict[str, Any]:
    """
    Public instance attributes and class-level properties of a plain object.

    Raises:
        TypeError: If the object exposes neither
    """
    values: Dict[str, Any] = {}
    if hasattr(obj, "__dict__"):
        values.update((k, v) for k, v in vars(obj).items() if not k.startswith("_"))
    for name in dir(type(obj)):
        if not name.startswith("_") and isinstance(getattr(type(obj), name, None), property):
            values[name] = getattr(obj, name)
    if not values and not hasattr(obj, "__dict__"):
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
    return values


def to_jsonable(obj: Any, exclude_none: bool = False) -> Any:
    """Convert ``obj`` to a tree of dicts, lists and scalars."""
    try:
        return to_jsonable_python(obj, by_alias=True, exclude_none=exclude_none)
    except PydanticSerializationError:
        attrs = public_attributes(obj)
        if exclude_none:
            attrs = {k: v for k, v in attrs.items() if v is not None}
        return {k: to_jsonable(v, exclude_none) for k, v in attrs.items()}


def to_json(obj: Any) -> str:
    """
    Serialize ``obj`` to a JSON string.

    Example:
        >>> to_json({"name": "test", "value": 456})
        '{"name": "test", "value": 456}'
    """
    return json.dumps(obj, default=to_jsonable, ensure_ascii=False)


def from_json(text: Union[str, bytes], target: Any = Any) -> Any:
    """
    Deserialize JSON text into ``target``.

    Args:
        text: JSON document
        target: Pydantic model, dataclass, builtin or typing construct.
            ``Any`` returns the parsed tree unchanged.

    Raises:
        DeserializationError: On malformed JSON or validation failure
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DeserializationError(str(exc), _target_type(target)) from exc

    if target is Any or target is object:
        return data

    try:
        return _adapter(target).validate_python(_align_keys(data, target))
    except ValidationError as exc:
        raise DeserializationError(str(exc), _target_type(target)) from exc


def _target_type(target: Any) -> Optional[type]:
    return target if isinstance(target, type) else None


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _field_map(target: type) -> Dict[str, tuple]:
    """lower-case key -> (input key, annotation) for a model or dataclass."""
    fields: Dict[str, tuple] = {}
    if typing.get_origin(target) is not None or not isinstance(target, type):
        return fields
    if issubclass(target, BaseModel):
        for name, info in target.model_fields.items():
            key = info.alias or name
            fields[name.lower()] = (key, info.annotation)
            fields[key.lower()] = (key, info.annotation)
    elif dataclasses.is_dataclass(target):
        hints = typing.get_type_hints(target)
        for f in dataclasses.fields(target):
            fields[f.name.lower()] = (f.name, hints.get(f.name, Any))
    return fields


def _align_keys(data: Any, target: Any) -> Any:
    """Rename object keys to the target's field names, ignoring case."""
    origin = typing.get_origin(target)

    if origin is Union or origin is types.UnionType:
        for arg in typing.get_args(target):
            if _field_map(arg):
                return _align_keys(data, arg)
        return data

    if origin in (list, tuple, set, frozenset) and isinstance(data, list):
        args = typing.get_args(target)
        item_type = args[0] if args else Any
        return [_align_keys(item, item_type) for item in data]

    if origin is dict and isinstance(data, dict):
        args = typing.get_args(target)
        value_type = args[1] if len(args) == 2 else Any
        return {k: _align_keys(v, value_type) for k, v in data.items()}

    if not isinstance(data, dict):
        return data

    fields = _field_map(target)
    if not fields:
        return data

    exact = {key for key, _ in fields.values()}
    aligned = {}
    for key, value in data.items():
        if key in exact:
            annotation = next(a for k, a in fields.values() if k == key)
            aligned[key] = _align_keys(value, annotation)
            continue
        match = fields.get(str(key).lower())
        if match is None:
            aligned[key] = value
        elif match[0] not in data:
            aligned[match[0]] = _align_keys(value, match[1])
    return aligned
