"""Utility modules for fluent-http."""

from .json_codec import to_json, from_json, to_jsonable
from .projection import to_key_value
from .multipart import MultipartContentBuilder, MultipartContent, MultipartPart
from .sanitizer import (
    mask_sensitive_data,
    mask_url,
    mask_headers,
)

__all__ = [
    'to_json',
    'from_json',
    'to_jsonable',
    'to_key_value',
    'MultipartContentBuilder',
    'MultipartContent',
    'MultipartPart',
    'mask_sensitive_data',
    'mask_url',
    'mask_headers',
]
