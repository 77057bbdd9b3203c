"""
Immutable request model produced by RequestBuilder.build().

RequestDescriptor is the snapshot that actually gets dispatched; it is
converted into an ``httpx.Request`` through the transport's ``build_request``
so that client-level defaults (base_url, headers, cookies) still apply.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, AsyncIterable, AsyncIterator, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

import httpx

from .exceptions import InvalidArgumentError
from ..utils.json_codec import to_json
from ..utils.multipart import MultipartContent

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# METHOD
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HttpMethod(str, Enum):
    """Стандартные HTTP методы. Любой другой непустой токен тоже допустим."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    def __str__(self) -> str:
        return self.value


def normalize_method(method: Union[str, HttpMethod]) -> str:
    """
    Known method names are matched case-insensitively and upper-cased,
    custom tokens are returned unchanged.

    Example:
        >>> normalize_method("post")
        'POST'
        >>> normalize_method("PROPFIND")
        'PROPFIND'
    """
    if isinstance(method, HttpMethod):
        return method.value
    upper = method.strip().upper()
    if upper in HttpMethod.__members__:
        return upper
    return method.strip()

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HEADER CLASSIFICATION
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

# Entity headers; they describe the body and travel with it
CONTENT_HEADER_NAMES = frozenset({
    "content-type",
    "content-length",
    "content-encoding",
    "content-language",
    "content-location",
    "content-md5",
    "content-range",
    "content-disposition",
    "expires",
    "last-modified",
    "allow",
})


def is_content_header(name: str) -> bool:
    """Exact, case-insensitive name match (``X-Content-Id`` is not a content header)."""
    return name.strip().lower() in CONTENT_HEADER_NAMES

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONTENT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ContentKind(str, Enum):
    JSON = "json"
    FORM = "form"
    MULTIPART = "multipart"
    RAW = "raw"


RawBody = Union[bytes, str, Iterable[bytes], AsyncIterable[bytes]]


async def _iterate_async(chunks: Iterable[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


@dataclass(frozen=True)
class RequestContent:
    """
    Тело запроса вместе с его media type.

    Создаётся фабриками json() / form() / raw() / multipart().
    """
    kind: ContentKind
    payload: Any
    content_type: Optional[str] = None

    @classmethod
    def json(cls, obj: Any) -> "RequestContent":
        """
        UTF-8 JSON, ``application/json``.

        Raises:
            InvalidArgumentError: obj не сериализуется в JSON
        """
        try:
            payload = to_json(obj).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"Cannot serialize JSON body: {exc}", argument="obj") from exc
        return cls(ContentKind.JSON, payload, "application/json")

    @classmethod
    def form(cls, pairs: Sequence[Tuple[str, str]]) -> "RequestContent":
        """``application/x-www-form-urlencoded`` из готовых пар ключ/значение."""
        return cls(
            ContentKind.FORM,
            urlencode(list(pairs)).encode("ascii"),
            "application/x-www-form-urlencoded",
        )

    @classmethod
    def raw(cls, body: RawBody, content_type: Optional[str] = None) -> "RequestContent":
        """
        Произвольное тело; без content_type заголовок Content-Type не ставится.

        Синхронный итератор байт оборачивается в async generator,
        AsyncClient принимает только асинхронные потоки.
        """
        if isinstance(body, (bytearray, memoryview)):
            body = bytes(body)
        elif not isinstance(body, (bytes, str)) and not isinstance(body, AsyncIterable):
            if not isinstance(body, Iterable):
                raise InvalidArgumentError(
                    f"Unsupported raw body type: {type(body).__name__}", argument="content"
                )
            body = _iterate_async(body)
        return cls(ContentKind.RAW, body, content_type or None)

    @classmethod
    def multipart(cls, content: MultipartContent) -> "RequestContent":
        """multipart/form-data; boundary генерирует httpx."""
        return cls(ContentKind.MULTIPART, content)

    def httpx_kwargs(self) -> Dict[str, Any]:
        if self.kind is ContentKind.MULTIPART:
            return self.payload.httpx_kwargs()
        return {"content": self.payload}

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# DESCRIPTOR
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

TimeoutValue = Union[float, httpx.Timeout]


def _empty_headers() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Снимок запроса, готовый к отправке.

    Args:
        method: HTTP метод (нормализованный)
        url: Итоговый URL вместе с query string
        headers: Заголовки запроса (не относящиеся к телу)
        content_headers: Заголовки тела (пустые, если тела нет)
        content: Тело запроса или None
        timeout: Таймаут только для этого запроса (None = таймаут клиента)
    """
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=_empty_headers)
    content_headers: Mapping[str, str] = field(default_factory=_empty_headers)
    content: Optional[RequestContent] = None
    timeout: Optional[TimeoutValue] = None

    @property
    def has_body(self) -> bool:
        return self.content is not None

    def to_httpx(self, client: httpx.AsyncClient) -> httpx.Request:
        """
        Собрать ``httpx.Request`` через ``client.build_request``.

        Content-Type тела ставится первым, явно заданные заголовки тела
        перекрывают его.
        """
        kwargs: Dict[str, Any] = {}
        if self.content is not None:
            kwargs.update(self.content.httpx_kwargs())

        request = client.build_request(
            self.method,
            self.url,
            headers=dict(self.headers),
            timeout=self.timeout if self.timeout is not None else httpx.USE_CLIENT_DEFAULT,
            **kwargs,
        )

        if self.content is not None:
            if self.content.content_type:
                request.headers["Content-Type"] = self.content.content_type
            for name, value in self.content_headers.items():
                request.headers[name] = value

        return request
