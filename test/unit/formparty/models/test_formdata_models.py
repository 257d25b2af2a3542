"""Tests for multipart request and upload models."""

import io

import pytest
from pydantic import ValidationError

from formparty.models.formdata import EncodedBody, MultipartRequest, UploadLimits, UploadResult


class TestMultipartRequest:
    """Tests for MultipartRequest."""

    def test_defaults(self) -> None:
        """Verify the file field and content type defaults."""
        spec = MultipartRequest(fields={"a": "b"})

        assert spec.file_field_name == "file"
        assert spec.file_content_type == "application/octet-stream"
        assert spec.boundary is None
        assert not spec.is_empty

    def test_is_empty(self) -> None:
        """Verify a spec without file and fields reports empty."""
        assert MultipartRequest().is_empty
        assert MultipartRequest(fields={}).is_empty
        assert not MultipartRequest(file_path="party.go").is_empty

    def test_frozen(self) -> None:
        """Verify specs cannot be mutated."""
        spec = MultipartRequest(file_path="party.go", file_field_name="")

        with pytest.raises(ValidationError):
            spec.file_field_name = "file"

        assert spec.effective_file_field_name() == "file"


class TestUploadLimits:
    """Tests for UploadLimits."""

    @pytest.mark.parametrize("max_bytes", [0, -1])
    def test_positive_limit(self, max_bytes: int) -> None:
        """Verify the ceiling must be positive."""
        with pytest.raises(ValidationError):
            UploadLimits(max_bytes=max_bytes)

    def test_effective_field_name(self) -> None:
        """Verify an empty field name resolves to 'file'."""
        assert UploadLimits(max_bytes=1, file_field_name="").effective_file_field_name() == "file"
        assert UploadLimits(max_bytes=1, file_field_name="doc").effective_file_field_name() == "doc"


class TestEncodedBody:
    """Tests for EncodedBody."""

    def test_len(self) -> None:
        """Verify len() reports the body size."""
        body = EncodedBody(body=b"12345", content_type="multipart/form-data; boundary=b", boundary="b")
        assert len(body) == 5


class TestUploadResult:
    """Tests for UploadResult."""

    def test_context_manager_closes_stream(self) -> None:
        """Verify leaving the context closes the file stream."""
        stream = io.BytesIO(b"content")

        with UploadResult(file=stream, filename="a.txt", size=7) as result:
            assert result.read() == b"content"

        assert stream.closed
