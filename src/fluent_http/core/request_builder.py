"""
Fluent request builder.

Every with_* method mutates the builder and returns it, so calls chain:

    >>> descriptor = (
    ...     RequestBuilder()
    ...     .with_uri("https://api.example.com/users")
    ...     .with_query_parameters({"page": 2})
    ...     .with_method("POST")
    ...     .with_header("X-Request-Id", "42")
    ...     .with_json_body({"name": "test"})
    ...     .build()
    ... )

The builder is not safe for concurrent use; give each task its own builder.
"""

from dataclasses import replace
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, urlsplit, urlunsplit

import httpx

from .exceptions import InvalidArgumentError, InvalidStateError
from .request import (
    HttpMethod,
    RawBody,
    RequestContent,
    RequestDescriptor,
    TimeoutValue,
    is_content_header,
    normalize_method,
)
from ..utils.multipart import MultipartContent, MultipartContentBuilder
from ..utils.projection import to_key_value

MultipartConfigurator = Callable[
    [MultipartContentBuilder], Union[MultipartContentBuilder, MultipartContent, None]
]


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _encode_pairs(pairs: List[Tuple[str, str]]) -> str:
    """RFC 3986 percent-encoding, пробел кодируется как %20."""
    return "&".join(f"{quote(key, safe='')}={quote(value, safe='')}" for key, value in pairs)


class RequestBuilder:
    """
    Накапливает метод, URI, query, заголовки, тело и таймаут запроса.

    Правила:
    - метод по умолчанию GET
    - заголовки регистронезависимые, последняя запись побеждает
    - тело одно, последний with_*_body / with_content побеждает
    - build() не меняет состояние, повторный вызов даёт такой же descriptor
    """

    def __init__(self):
        self.reset()

    def reset(self) -> "RequestBuilder":
        """Сбросить состояние к значениям по умолчанию."""
        self._method: str = HttpMethod.GET.value
        self._uri: Optional[str] = None
        self._query: List[str] = []
        # lower-case name -> (name as given, value)
        self._headers: Dict[str, Tuple[str, str]] = {}
        self._content: Optional[RequestContent] = None
        self._timeout: Optional[TimeoutValue] = None
        return self

    # ==================== URI ====================

    def with_uri(self, uri: str) -> "RequestBuilder":
        """
        Задать URI (абсолютный или относительный base_url клиента).

        Ранее добавленные query параметры сбрасываются, query внутри ``uri``
        сохраняется.

        Raises:
            InvalidArgumentError: Пустой URI
        """
        if _is_blank(uri):
            raise InvalidArgumentError("Request URI cannot be empty", argument="uri")
        self._uri = str(uri).strip()
        self._query = []
        return self

    def with_query_parameters(self, parameters: Any) -> "RequestBuilder":
        """
        Добавить query параметры из mapping или объекта (dataclass,
        pydantic модель, обычный объект). None значения пропускаются.

        Raises:
            InvalidStateError: URI ещё не задан
            InvalidArgumentError: parameters=None или не проецируется в пары
        """
        if self._uri is None:
            raise InvalidStateError("Request URI must be set before adding query parameters. Call with_uri() first.")
        if parameters is None:
            raise InvalidArgumentError("Query parameters cannot be None", argument="parameters")

        pairs = self._project(parameters, "parameters")
        if pairs:
            self._query.append(_encode_pairs(pairs))
        return self

    # ==================== Method & headers ====================

    def with_method(self, method: Union[str, HttpMethod]) -> "RequestBuilder":
        """
        Raises:
            InvalidArgumentError: Пустой метод
        """
        if _is_blank(method):
            raise InvalidArgumentError("HTTP method cannot be empty", argument="method")
        self._method = normalize_method(method)
        return self

    def with_header(self, key: str, value: str) -> "RequestBuilder":
        """
        Raises:
            InvalidArgumentError: Пустое имя заголовка или value=None
        """
        if _is_blank(key):
            raise InvalidArgumentError("Header key cannot be empty", argument="key")
        if value is None:
            raise InvalidArgumentError(f"Header '{key}' value cannot be None", argument="value")
        name = str(key).strip()
        self._headers[name.lower()] = (name, str(value))
        return self

    def with_headers(self, headers: Mapping[str, str]) -> "RequestBuilder":
        if headers is None:
            raise InvalidArgumentError("Headers cannot be None", argument="headers")
        for key, value in headers.items():
            self.with_header(key, value)
        return self

    # ==================== Body ====================

    def with_json_body(self, obj: Any) -> "RequestBuilder":
        """
        JSON тело (UTF-8, ``application/json``).

        Raises:
            InvalidArgumentError: obj=None
        """
        if obj is None:
            raise InvalidArgumentError("JSON body cannot be None", argument="obj")
        self._content = RequestContent.json(obj)
        return self

    def with_form_urlencoded_body(self, obj: Any) -> "RequestBuilder":
        """
        ``application/x-www-form-urlencoded`` тело; поля проецируются так же,
        как query параметры.
        """
        if obj is None:
            raise InvalidArgumentError("Form body cannot be None", argument="obj")
        self._content = RequestContent.form(self._project(obj, "obj"))
        return self

    def with_multipart_body(self, configure: MultipartConfigurator) -> "RequestBuilder":
        """
        multipart/form-data тело.

        ``configure`` получает пустой MultipartContentBuilder и может вернуть
        сам builder, готовый MultipartContent или ничего.

        Example:
            >>> builder.with_multipart_body(
            ...     lambda mp: mp.add_text("title", "report").add_file_from_path("file", "report.pdf")
            ... )
        """
        if configure is None or not callable(configure):
            raise InvalidArgumentError("Multipart configurator must be callable", argument="configure")

        parts = MultipartContentBuilder()
        produced = configure(parts)
        if isinstance(produced, MultipartContent):
            content = produced
        elif produced is None or isinstance(produced, MultipartContentBuilder):
            content = (produced or parts).build()
        else:
            raise InvalidArgumentError(
                f"Multipart configurator returned {type(produced).__name__}", argument="configure"
            )

        self._content = RequestContent.multipart(content)
        return self

    def with_content(
        self,
        content: Union[RequestContent, RawBody],
        content_type: Optional[str] = None,
    ) -> "RequestBuilder":
        """
        Готовое тело: RequestContent или bytes / str / итератор байт.

        ``content_type`` перекрывает media type готового RequestContent.
        """
        if content is None:
            raise InvalidArgumentError("Content cannot be None", argument="content")
        if isinstance(content, RequestContent):
            self._content = replace(content, content_type=content_type) if content_type else content
        else:
            self._content = RequestContent.raw(content, content_type)
        return self

    # ==================== Timeout ====================

    def with_timeout(self, timeout: Optional[Union[float, httpx.Timeout]]) -> "RequestBuilder":
        """
        Таймаут только для этого запроса; транспорт не перенастраивается.
        None возвращает таймаут клиента.
        """
        if timeout is None or isinstance(timeout, httpx.Timeout):
            self._timeout = timeout
            return self
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise InvalidArgumentError("Timeout must be a positive number of seconds", argument="timeout")
        self._timeout = float(timeout)
        return self

    # ==================== Build ====================

    @property
    def method(self) -> str:
        return self._method

    @property
    def uri(self) -> Optional[str]:
        """Текущий URI вместе с накопленным query."""
        if self._uri is None:
            return None
        return self._compose_url()

    def build(self) -> RequestDescriptor:
        """
        Собрать immutable RequestDescriptor из текущего состояния.

        Заголовки тела (Content-Type, Content-Length, ...) отделяются от
        остальных по точному имени и отбрасываются, если тела нет.

        Raises:
            InvalidStateError: URI не задан
        """
        if self._uri is None:
            raise InvalidStateError("Request URI must be set. Call with_uri() first.")

        headers: Dict[str, str] = {}
        content_headers: Dict[str, str] = {}
        for name, value in self._headers.values():
            if not is_content_header(name):
                headers[name] = value
            elif self._content is not None:
                content_headers[name] = value

        return RequestDescriptor(
            method=self._method,
            url=self._compose_url(),
            headers=MappingProxyType(headers),
            content_headers=MappingProxyType(content_headers),
            content=self._content,
            timeout=self._timeout,
        )

    def _compose_url(self) -> str:
        if not self._query:
            return self._uri
        parts = urlsplit(self._uri)
        query = "&".join(q for q in (parts.query, *self._query) if q)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))

    @staticmethod
    def _project(source: Any, argument: str) -> List[Tuple[str, str]]:
        try:
            return to_key_value(source)
        except TypeError as exc:
            raise InvalidArgumentError(str(exc), argument=argument) from exc
