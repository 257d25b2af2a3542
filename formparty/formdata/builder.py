"""Build outgoing multipart/form-data request bodies."""

import re
from contextlib import ExitStack
from pathlib import Path
from typing import Any

import requests
from beartype import beartype
from requests_toolbelt import MultipartEncoder

from formparty.core.logger import LogIcon, logger
from formparty.formdata.errors import (
    EmptyRequestError,
    FieldWriteError,
    FileOpenError,
    FinalizeError,
    InvalidBoundaryError,
    IOCopyError,
)
from formparty.models.formdata import EncodedBody, MultipartRequest

# RFC 2046 bchars, 1..70 characters, not ending with a space
BOUNDARY_PATTERN = re.compile(r"[0-9A-Za-z'()+_,\-./:=? ]{0,69}[0-9A-Za-z'()+_,\-./:=?]")


def validate_boundary(boundary: str) -> str:
    """Return the boundary unchanged or raise InvalidBoundaryError."""
    if not BOUNDARY_PATTERN.fullmatch(boundary):
        raise InvalidBoundaryError(boundary)
    return boundary


class RequestBuilder:
    """Encodes a MultipartRequest into a multipart/form-data body."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def build(self, spec: MultipartRequest) -> EncodedBody:
        """Encode the file and fields of ``spec`` into a single body.

        Nothing is encoded when the spec is empty or its boundary is invalid.
        The file, if any, is closed before this returns or raises.
        """
        if spec.is_empty:
            raise EmptyRequestError()
        if spec.boundary is not None:
            validate_boundary(spec.boundary)

        parts: list[tuple[str, Any]] = []

        with ExitStack() as stack:
            if spec.file_path:
                try:
                    file_handle = stack.enter_context(open(spec.file_path, "rb"))
                except OSError as ex:
                    raise FileOpenError(spec.file_path) from ex

                parts.append(
                    (
                        spec.effective_file_field_name(),
                        (Path(spec.file_path).name, file_handle, spec.file_content_type),
                    )
                )

            for key, value in (spec.fields or {}).items():
                parts.append(self._encode_field(key, value))

            encoder = MultipartEncoder(fields=parts, boundary=spec.boundary, encoding=self.encoding)
            expected = encoder.len

            try:
                payload = encoder.to_string()
            except OSError as ex:
                raise IOCopyError(spec.file_path or "", str(ex)) from ex

        boundary = encoder.boundary_value
        if len(payload) < expected:
            raise IOCopyError(spec.file_path or "", f"wrote {len(payload)} of {expected} bytes")
        if not payload.endswith(f"--{boundary}--\r\n".encode(self.encoding)):
            raise FinalizeError(boundary)

        logger.info(
            "Multipart body built",
            icon=LogIcon.FILE,
            size=len(payload),
            parts=len(parts),
            has_file=bool(spec.file_path),
        )
        return EncodedBody(body=payload, content_type=encoder.content_type, boundary=boundary)

    @beartype
    def to_request(self, spec: MultipartRequest, method: str, url: str) -> requests.PreparedRequest:
        """Build ``spec`` and wrap it into a prepared request for ``method`` and ``url``."""
        encoded = self.build(spec)
        request = requests.Request(
            method=method,
            url=url,
            data=encoded.body,
            headers={"Content-Type": encoded.content_type},
        )
        return request.prepare()

    def _encode_field(self, key: str, value: str) -> tuple[str, bytes]:
        try:
            key.encode(self.encoding)
            return key, value.encode(self.encoding)
        except (AttributeError, UnicodeEncodeError) as ex:
            raise FieldWriteError(key) from ex
