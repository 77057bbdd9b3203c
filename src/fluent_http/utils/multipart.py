"""
Fluent builder for multipart/form-data bodies.

Parts are kept in insertion order and handed to httpx as a ``files=`` list,
httpx generates the boundary and the per-part headers.

Example:
    >>> content = (
    ...     MultipartContentBuilder()
    ...     .add_text("description", "avatar")
    ...     .add_file("file", b"\\x89PNG...", "avatar.png", "image/png")
    ...     .build()
    ... )
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Tuple, Union

from ..core.exceptions import InvalidArgumentError


@dataclass(frozen=True)
class MultipartPart:
    """
    Одна часть multipart тела.

    Args:
        name: Имя поля формы
        value: Текст, байты или readable binary stream
        file_name: Имя файла (None для текстовых полей)
        content_type: Media type части (опционально)
    """
    name: str
    value: Union[str, bytes, BinaryIO]
    file_name: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.file_name is not None

    def to_httpx(self) -> Tuple[str, Tuple[Any, ...]]:
        if self.file_name is None:
            return self.name, (None, self.value)
        if self.content_type:
            return self.name, (self.file_name, self.value, self.content_type)
        return self.name, (self.file_name, self.value)


@dataclass(frozen=True)
class MultipartContent:
    """Готовое multipart тело (immutable)."""
    parts: Tuple[MultipartPart, ...]

    def __len__(self) -> int:
        return len(self.parts)

    def httpx_kwargs(self) -> Dict[str, Any]:
        """Аргументы для ``httpx.AsyncClient.build_request``."""
        return {"files": [part.to_httpx() for part in self.parts]}


def _require_name(value: Optional[str], argument: str, what: str) -> None:
    if value is None or not str(value).strip():
        raise InvalidArgumentError(f"{what} cannot be empty", argument=argument)


class MultipartContentBuilder:
    """
    Builder для multipart/form-data.

    Все методы add_* возвращают self. ``build()`` очищает накопленные части,
    поэтому builder можно переиспользовать.
    """

    def __init__(self):
        self._parts: List[MultipartPart] = []

    def add_text(self, name: str, value: Optional[str]) -> "MultipartContentBuilder":
        """Добавить текстовое поле (None отправляется как пустая строка)."""
        _require_name(name, "name", "Content name")
        self._parts.append(MultipartPart(name, "" if value is None else str(value)))
        return self

    def add_file(
        self,
        name: str,
        content: bytes,
        file_name: str,
        content_type: Optional[str] = None,
    ) -> "MultipartContentBuilder":
        """
        Добавить файл из памяти.

        Raises:
            InvalidArgumentError: Пустое имя поля / файла или content=None
        """
        _require_name(name, "name", "Content name")
        if content is None:
            raise InvalidArgumentError("File content cannot be None", argument="content")
        _require_name(file_name, "file_name", "File name")

        self._parts.append(MultipartPart(name, bytes(content), file_name, content_type or None))
        return self

    def add_stream(
        self,
        name: str,
        stream: BinaryIO,
        file_name: str,
        content_type: Optional[str] = None,
    ) -> "MultipartContentBuilder":
        """
        Добавить файл из binary stream.

        Stream читается в момент отправки запроса; позиционирование и закрытие
        остаются на вызывающем коде.

        Raises:
            InvalidArgumentError: Пустые имена или stream не readable
        """
        _require_name(name, "name", "Content name")
        if stream is None:
            raise InvalidArgumentError("Stream cannot be None", argument="stream")
        _require_name(file_name, "file_name", "File name")

        readable = getattr(stream, "readable", None)
        if not hasattr(stream, "read") or (callable(readable) and not readable()):
            raise InvalidArgumentError("Stream must be readable", argument="stream")

        self._parts.append(MultipartPart(name, stream, file_name, content_type or None))
        return self

    def add_file_from_path(
        self,
        name: str,
        path: Union[str, Path],
        content_type: Optional[str] = None,
    ) -> "MultipartContentBuilder":
        """
        Прочитать файл с диска и добавить его. Имя файла берётся из пути.

        Raises:
            InvalidArgumentError: Пустое имя поля или путь
            FileNotFoundError: Файл не существует
        """
        _require_name(name, "name", "Content name")
        _require_name(path, "path", "File path")

        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        return self.add_file(name, file_path.read_bytes(), file_path.name, content_type)

    def build(self) -> MultipartContent:
        """
        Собрать MultipartContent и очистить builder.

        Raises:
            InvalidArgumentError: Не добавлено ни одной части
        """
        if not self._parts:
            raise InvalidArgumentError("Multipart body must contain at least one part", argument="parts")

        content = MultipartContent(tuple(self._parts))
        self._parts.clear()
        return content

    def __len__(self) -> int:
        return len(self._parts)
