"""Models describing outgoing multipart requests and incoming uploads."""

from dataclasses import dataclass, field
from typing import BinaryIO, Self

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_FILE_FIELD_NAME = "file"
DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"


class MultipartRequest(BaseModel):
    """Outgoing multipart request: a file and/or form fields."""

    model_config = ConfigDict(frozen=True)

    file_path: str | None = None
    file_field_name: str = DEFAULT_FILE_FIELD_NAME
    file_content_type: str = DEFAULT_FILE_CONTENT_TYPE
    # Generated by the encoder when absent
    boundary: str | None = None
    fields: dict[str, str] | None = None

    @property
    def is_empty(self) -> bool:
        return not self.file_path and not self.fields

    def effective_file_field_name(self) -> str:
        return self.file_field_name or DEFAULT_FILE_FIELD_NAME


class UploadLimits(BaseModel):
    """Limits applied while parsing an incoming upload."""

    model_config = ConfigDict(frozen=True)

    max_bytes: int = Field(gt=0)
    file_field_name: str = DEFAULT_FILE_FIELD_NAME

    def effective_file_field_name(self) -> str:
        return self.file_field_name or DEFAULT_FILE_FIELD_NAME


@dataclass(frozen=True, slots=True)
class EncodedBody:
    """A finished multipart/form-data body."""

    body: bytes
    content_type: str
    boundary: str

    def __len__(self) -> int:
        return len(self.body)


@dataclass(slots=True)
class UploadResult:
    """An uploaded file extracted from a multipart request.

    The caller owns ``file`` and must close it (or the result) once done.
    """

    file: BinaryIO
    filename: str
    size: int
    headers: dict[str, str] = field(default_factory=dict)
    content_type: str = DEFAULT_FILE_CONTENT_TYPE
    fields: dict[str, str] = field(default_factory=dict)

    def read(self, size: int = -1) -> bytes:
        return self.file.read(size)

    def close(self) -> None:
        self.file.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
