"""Test fixtures for formparty unit tests."""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from formparty.formdata.builder import RequestBuilder
from formparty.formdata.handler import UploadHandler
from formparty.models.formdata import MultipartRequest

SAMPLE_CONTENT = b"package party\n\nconst defaultFileFieldName = \"file\"\n" * 64


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request."""

    _data: dict = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: bytes | str = b""
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "POST"
    path: str = "/"


# -----------------------------------------------------------------------------
# Builder / handler fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def builder() -> RequestBuilder:
    return RequestBuilder()


@pytest.fixture
def handler() -> UploadHandler:
    return UploadHandler()


@pytest.fixture
def sample_content() -> bytes:
    return SAMPLE_CONTENT


@pytest.fixture
def sample_file(tmp_path: Path, sample_content: bytes) -> Path:
    """A small file on disk to upload."""
    path = tmp_path / "party.go"
    path.write_bytes(sample_content)
    return path


@pytest.fixture
def make_mock_request() -> Callable[..., MockRequest]:
    """Factory fixture to create mock requests from raw body and content type."""

    def _make(body: bytes | str, content_type: str | None, content_length: int | None = None) -> MockRequest:
        headers = MockHeaders()
        if content_type is not None:
            headers["content-type"] = content_type
        if content_length is not None:
            headers["content-length"] = str(content_length)
        return MockRequest(body=body, headers=headers)

    return _make


@pytest.fixture
def make_upload_request(builder: RequestBuilder, make_mock_request) -> Callable[[MultipartRequest], MockRequest]:
    """Factory fixture turning a MultipartRequest into an incoming mock request."""

    def _make(spec: MultipartRequest) -> MockRequest:
        encoded = builder.build(spec)
        return make_mock_request(encoded.body, encoded.content_type)

    return _make


RAW_BOUNDARY = "formparty-raw-boundary"


@pytest.fixture
def make_raw_request(make_mock_request) -> Callable[..., MockRequest]:
    """Factory fixture for hand-written bodies, as (part headers, value) pairs."""

    def _make(*parts: tuple[list[str], str]) -> MockRequest:
        chunks = [f"--{RAW_BOUNDARY}\r\n" + "\r\n".join(headers) + f"\r\n\r\n{value}\r\n" for headers, value in parts]
        body = ("".join(chunks) + f"--{RAW_BOUNDARY}--\r\n").encode()
        return make_mock_request(body, f"multipart/form-data; boundary={RAW_BOUNDARY}")

    return _make
