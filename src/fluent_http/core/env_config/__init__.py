"""
Environment configuration for fluent-http.

Example:
    >>> from fluent_http.core.env_config import load_from_env
    >>> config = load_from_env()
"""

from .loader import load_from_env
from .validator import HTTPClientSettings

__all__ = [
    "load_from_env",
    "HTTPClientSettings",
]
