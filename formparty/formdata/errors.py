"""Errors raised while building or handling multipart/form-data payloads."""

from typing import ClassVar


class FormPartyError(Exception):
    """Base class for every error raised by formparty."""

    error: ClassVar[str] = "multipart_error"
    status_code: ClassVar[int] = 400


class EmptyRequestError(FormPartyError):
    """The request has no file and no form fields."""

    error = "empty_request"

    def __init__(self) -> None:
        super().__init__("request has no file and no request params")


class InvalidBoundaryError(FormPartyError):
    """The supplied boundary cannot delimit a multipart body."""

    error = "invalid_boundary"

    def __init__(self, boundary: str) -> None:
        self.boundary = boundary
        super().__init__(f"invalid multipart boundary: {boundary!r}")


class FileOpenError(FormPartyError):
    error = "file_open"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"cannot open file {path!r}")


class IOCopyError(FormPartyError):
    error = "io_copy"
    status_code = 500

    def __init__(self, path: str, reason: str = "copy failed") -> None:
        self.path = path
        super().__init__(f"cannot copy {path!r} into the request body: {reason}")


class FieldWriteError(FormPartyError):
    error = "field_write"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"cannot write form field {key!r}")


class FinalizeError(FormPartyError):
    error = "finalize"
    status_code = 500

    def __init__(self, boundary: str) -> None:
        self.boundary = boundary
        super().__init__(f"multipart body is missing its closing delimiter for boundary {boundary!r}")


class NotMultipartError(FormPartyError):
    """The request is not multipart/form-data or carries no boundary."""

    error = "not_multipart"
    status_code = 415

    def __init__(self, content_type: str | None) -> None:
        self.content_type = content_type
        super().__init__(f"request Content-Type is not multipart/form-data: {content_type!r}")


class PayloadTooLargeError(FormPartyError):
    error = "payload_too_large"
    status_code = 413

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes
        super().__init__(f"request body exceeds {max_bytes} bytes")


class FieldNotFoundError(FormPartyError):
    error = "field_not_found"
    status_code = 422

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"no file uploaded under field {field_name!r}")
