"""
Projection of mappings and structured objects into flat key/value pairs.

Used for query strings and form-urlencoded bodies.
"""

import json
from typing import Any, List, Mapping, Tuple

from .json_codec import to_jsonable

Pair = Tuple[str, str]


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def to_key_value(source: Any) -> List[Pair]:
    """
    Flatten ``source`` one level into ordered ``(key, value)`` string pairs.

    Mappings are used as-is, anything else (pydantic model, dataclass, plain
    object) is first converted to a JSON-like tree. ``None`` values are dropped,
    booleans become ``true`` / ``false``, nested containers are JSON-encoded.

    Raises:
        TypeError: If ``source`` does not project onto an object

    Example:
        >>> to_key_value({"q": "hello world", "page": 2, "debug": None})
        [('q', 'hello world'), ('page', '2')]
    """
    if isinstance(source, Mapping):
        tree = {k: to_jsonable(v, exclude_none=True) for k, v in source.items() if v is not None}
    else:
        tree = to_jsonable(source, exclude_none=True)

    if not isinstance(tree, dict):
        raise TypeError(
            f"Cannot project {type(source).__name__} into key/value pairs"
        )

    return [(str(key), _stringify(value)) for key, value in tree.items() if value is not None]
