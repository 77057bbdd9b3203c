"""
Система конфигурации для fluent-http.

Все конфиги immutable (frozen dataclasses). Таймауты, пул и security
используются только когда AsyncHTTPClient сам создаёт httpx.AsyncClient;
инжектированный транспорт не перенастраивается.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Dict, Set, Union, TYPE_CHECKING, Mapping
from types import MappingProxyType

import httpx

if TYPE_CHECKING:
    from .logging import LoggingConfig

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)
        total: Ожидание свободного соединения в пуле (сек, опционально)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
        >>> TimeoutConfig(connect=3, read=60, total=90)
    """
    connect: float = 5
    read: float = 30
    total: Optional[float] = None

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")
        if self.total is not None and self.total <= 0:
            raise ValueError("total timeout must be positive")

    def to_httpx(self) -> httpx.Timeout:
        """Вернуть как httpx.Timeout (write использует read)."""
        return httpx.Timeout(
            connect=self.connect,
            read=self.read,
            write=self.read,
            pool=self.total,
        )

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONNECTION POOL CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ConnectionPoolConfig:
    """
    Конфигурация connection pool собственного транспорта.

    Args:
        pool_connections: Максимум keep-alive соединений
        pool_maxsize: Максимум соединений в пуле
        max_redirects: Максимум редиректов

    Examples:
        >>> ConnectionPoolConfig(pool_maxsize=20)
    """
    pool_connections: int = 10
    pool_maxsize: int = 100
    max_redirects: int = 20

    def __post_init__(self):
        """Валидация."""
        if self.pool_connections <= 0:
            raise ValueError("pool_connections must be positive")
        if self.pool_maxsize <= 0:
            raise ValueError("pool_maxsize must be positive")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")

    def to_httpx(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self.pool_maxsize,
            max_keepalive_connections=self.pool_connections,
        )

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SECURITY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class SecurityConfig:
    """
    Конфигурация безопасности.

    Args:
        verify_ssl: Проверять SSL сертификаты
        allow_redirects: Следовать редиректам
        sensitive_url_params: Дополнительные sensitive параметры для маскирования в логах

    Examples:
        >>> SecurityConfig(verify_ssl=False)  # Для тестов
        >>> SecurityConfig(sensitive_url_params={'custom_token', 'app_key'})
    """
    verify_ssl: bool = True
    allow_redirects: bool = True
    sensitive_url_params: Set[str] = field(default_factory=set)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


TimeoutLike = Union[int, float, Tuple[float, float], TimeoutConfig]


def _to_timeout_config(timeout: TimeoutLike) -> TimeoutConfig:
    if isinstance(timeout, TimeoutConfig):
        return timeout
    if isinstance(timeout, tuple):
        return TimeoutConfig(connect=timeout[0], read=timeout[1])
    return TimeoutConfig(connect=min(5, timeout), read=timeout)


@dataclass(frozen=True)
class HTTPClientConfig:
    """
    Главная конфигурация AsyncHTTPClient.

    Args:
        base_url: Базовый URL собственного транспорта (опционально)
        headers: Дефолтные заголовки собственного транспорта
        timeout: Конфигурация таймаутов
        pool: Конфигурация connection pool
        security: Конфигурация безопасности
        error_body_max_chars: Сколько символов тела ответа добавлять в error_message
        default_encoding: Кодировка тела, если сервер не указал charset
        logging: Конфигурация логирования (None = без логирования)

    Examples:
        >>> config = HTTPClientConfig(base_url="https://api.example.com")
        >>> config = HTTPClientConfig.create(timeout=60, verify_ssl=False)
    """
    base_url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    pool: ConnectionPoolConfig = field(default_factory=ConnectionPoolConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    error_body_max_chars: int = 1024
    default_encoding: str = "utf-8"
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Normalize base_url, freeze headers, validate limits."""
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))

        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

        if self.error_body_max_chars < 0:
            raise ValueError("error_body_max_chars must be non-negative")

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        timeout: TimeoutLike = 30,
        verify_ssl: bool = True,
        allow_redirects: bool = True,
        headers: Optional[Dict[str, str]] = None,
        pool_connections: Optional[int] = None,
        pool_maxsize: Optional[int] = None,
        max_redirects: Optional[int] = None,
        logging: Optional['LoggingConfig'] = None,
        **kwargs
    ) -> 'HTTPClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Базовый URL
            timeout: Таймаут (число, (connect, read) или TimeoutConfig)
            verify_ssl: Проверять SSL
            allow_redirects: Следовать редиректам
            headers: Заголовки
            pool_connections: Максимум keep-alive соединений
            pool_maxsize: Максимальный размер connection pool
            max_redirects: Максимальное количество редиректов
            logging: Конфигурация логирования

        Examples:
            >>> config = HTTPClientConfig.create(timeout=60)
            >>> config = HTTPClientConfig.create(timeout=(5, 60), verify_ssl=False)
        """
        pool_kwargs = {}
        if pool_connections is not None:
            pool_kwargs['pool_connections'] = pool_connections
        if pool_maxsize is not None:
            pool_kwargs['pool_maxsize'] = pool_maxsize
        if max_redirects is not None:
            pool_kwargs['max_redirects'] = max_redirects

        return cls(
            base_url=base_url,
            headers=headers or {},
            timeout=_to_timeout_config(timeout),
            pool=ConnectionPoolConfig(**pool_kwargs),
            security=SecurityConfig(verify_ssl=verify_ssl, allow_redirects=allow_redirects),
            logging=logging,
            **kwargs
        )

    def with_timeout(self, timeout: TimeoutLike) -> 'HTTPClientConfig':
        """
        Создать новый конфиг с изменённым timeout.

        Example:
            >>> new_config = config.with_timeout(60)
        """
        return replace(self, timeout=_to_timeout_config(timeout))

    def with_headers(self, headers: Dict[str, str]) -> 'HTTPClientConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)

    def create_transport(self) -> httpx.AsyncClient:
        """Создать httpx.AsyncClient по этой конфигурации."""
        return httpx.AsyncClient(
            base_url=self.base_url or "",
            headers=dict(self.headers),
            timeout=self.timeout.to_httpx(),
            verify=self.security.verify_ssl,
            follow_redirects=self.security.allow_redirects,
            max_redirects=self.pool.max_redirects,
            limits=self.pool.to_httpx(),
            default_encoding=self.default_encoding,
        )
