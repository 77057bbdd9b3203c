"""
Tests for the JSON codec.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

import pytest
from pydantic import BaseModel, Field

from fluent_http.core.exceptions import DeserializationError
from fluent_http.utils.json_codec import from_json, public_attributes, to_json, to_jsonable


class Status(str, Enum):
    ACTIVE = "active"


class User(BaseModel):
    user_id: int = Field(alias="userId")
    name: str
    email: Optional[str] = None


@dataclass
class Point:
    x: int
    y: int


class Plain:
    def __init__(self):
        self.title = "report"
        self.pages = 3
        self._secret = "hidden"

    @property
    def summary(self):
        return f"{self.title}:{self.pages}"


class TestSerialization:
    """to_json / to_jsonable."""

    def test_dict(self):
        assert json.loads(to_json({"name": "test", "value": 456})) == {"name": "test", "value": 456}

    def test_pydantic_model_uses_alias(self):
        data = json.loads(to_json(User(userId=1, name="Ann")))
        assert data == {"userId": 1, "name": "Ann", "email": None}

    def test_dataclass_datetime_enum(self):
        payload = {
            "point": Point(1, 2),
            "at": datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
            "status": Status.ACTIVE,
        }
        data = json.loads(to_json(payload))

        assert data["point"] == {"x": 1, "y": 2}
        assert data["at"].startswith("2024-01-15T10:30:00")
        assert data["status"] == "active"

    def test_unicode_not_escaped(self):
        assert to_json({"greeting": "привет"}) == '{"greeting": "привет"}'

    def test_plain_object_public_attributes(self):
        assert json.loads(to_json(Plain())) == {"title": "report", "pages": 3, "summary": "report:3"}

    def test_exclude_none(self):
        assert to_jsonable(User(userId=1, name="Ann"), exclude_none=True) == {"userId": 1, "name": "Ann"}

    def test_public_attributes_rejects_opaque_object(self):
        with pytest.raises(TypeError):
            public_attributes(object())


class TestDeserialization:
    """from_json."""

    def test_any_returns_tree(self):
        assert from_json('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_bytes_input(self):
        assert from_json(b'[1, 2, 3]', List[int]) == [1, 2, 3]

    def test_model_keys_case_insensitive(self):
        user = from_json('{"USERID": 7, "Name": "Bob"}', User)

        assert user.user_id == 7
        assert user.name == "Bob"

    def test_dataclass_keys_case_insensitive(self):
        assert from_json('{"X": 1, "y": 2}', Point) == Point(1, 2)

    def test_nested_generics(self):
        result = from_json('{"a": [{"Name": "A", "userId": 1}]}', Dict[str, List[User]])
        assert result["a"][0].name == "A"

    def test_optional_model(self):
        assert from_json('{"NAME": "C", "userid": 3}', Optional[User]).user_id == 3

    def test_exact_key_wins(self):
        point = from_json('{"x": 1, "X": 9, "y": 2}', Point)
        assert point.x == 1

    def test_malformed_json(self):
        with pytest.raises(DeserializationError) as exc_info:
            from_json("{not json", User)

        assert "into User" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_validation_failure(self):
        with pytest.raises(DeserializationError):
            from_json('{"name": "missing id"}', User)
