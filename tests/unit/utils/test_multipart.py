"""
Tests for MultipartContentBuilder.
"""

import io

import httpx
import pytest

from fluent_http.core.exceptions import InvalidArgumentError
from fluent_http.utils.multipart import MultipartContent, MultipartContentBuilder, MultipartPart


class TestMultipartContentBuilder:
    """MultipartContentBuilder."""

    def test_parts_in_order(self):
        content = (
            MultipartContentBuilder()
            .add_text("description", "avatar")
            .add_file("file", b"\x89PNG", "avatar.png", "image/png")
            .build()
        )

        assert isinstance(content, MultipartContent)
        assert [part.name for part in content.parts] == ["description", "file"]
        assert content.parts[1].is_file
        assert not content.parts[0].is_file

    def test_text_none_becomes_empty(self):
        content = MultipartContentBuilder().add_text("note", None).build()
        assert content.parts[0].value == ""

    def test_build_clears_builder(self):
        builder = MultipartContentBuilder().add_text("a", "1")
        builder.build()

        assert len(builder) == 0
        with pytest.raises(InvalidArgumentError):
            builder.build()

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_rejected(self, name):
        with pytest.raises(InvalidArgumentError):
            MultipartContentBuilder().add_text(name, "x")

    def test_file_requires_file_name(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            MultipartContentBuilder().add_file("file", b"data", "")
        assert exc_info.value.argument == "file_name"

    def test_file_content_none_rejected(self):
        with pytest.raises(InvalidArgumentError):
            MultipartContentBuilder().add_file("file", None, "a.bin")

    def test_stream(self):
        stream = io.BytesIO(b"streamed")
        content = MultipartContentBuilder().add_stream("upload", stream, "s.bin").build()

        assert content.parts[0].value is stream

    def test_unreadable_stream_rejected(self, tmp_path):
        path = tmp_path / "out.bin"
        with open(path, "wb") as stream:
            with pytest.raises(InvalidArgumentError, match="readable"):
                MultipartContentBuilder().add_stream("upload", stream, "out.bin")

    def test_file_from_path(self, tmp_path):
        path = tmp_path / "report.csv"
        path.write_bytes(b"a,b\n1,2\n")

        part = MultipartContentBuilder().add_file_from_path("report", path, "text/csv").build().parts[0]

        assert part.file_name == "report.csv"
        assert part.value == b"a,b\n1,2\n"
        assert part.content_type == "text/csv"

    def test_file_from_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            MultipartContentBuilder().add_file_from_path("report", tmp_path / "missing.csv")


class TestHttpxEncoding:
    """Parts handed to httpx."""

    def test_part_tuples(self):
        assert MultipartPart("a", "1").to_httpx() == ("a", (None, "1"))
        assert MultipartPart("f", b"x", "f.txt").to_httpx() == ("f", ("f.txt", b"x"))
        assert MultipartPart("f", b"x", "f.txt", "text/plain").to_httpx() == (
            "f", ("f.txt", b"x", "text/plain"),
        )

    def test_encoded_body(self):
        content = (
            MultipartContentBuilder()
            .add_text("title", "hello")
            .add_file("file", b"payload", "data.bin", "application/octet-stream")
            .build()
        )
        request = httpx.Request("POST", "https://example.com/upload", **content.httpx_kwargs())
        body = request.read()

        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert b'name="title"' in body
        assert b"hello" in body
        assert b'filename="data.bin"' in body
        assert b"Content-Type: application/octet-stream" in body
