"""Extract uploaded files from incoming multipart/form-data requests."""

import io
from collections.abc import Iterable
from typing import Any, BinaryIO, Protocol

from multipart import MultipartParser, MultipartPart, parse_options_header

from formparty.core.logger import LogIcon, logger
from formparty.formdata.errors import FieldNotFoundError, NotMultipartError, PayloadTooLargeError
from formparty.formdata.limits import LimitedReader
from formparty.models.formdata import DEFAULT_FILE_CONTENT_TYPE, UploadLimits, UploadResult

MULTIPART_FORM_DATA = "multipart/form-data"


class IncomingRequest(Protocol):
    """What the handler needs from a server request (robyn.Request fits)."""

    headers: Any
    body: Any


def get_header(request: IncomingRequest, name: str) -> str | None:
    """Look a header up regardless of how the server cased its name."""
    headers = request.headers
    for candidate in (name.lower(), name.title(), name):
        value = headers.get(candidate)
        if value:
            return value
    return None


def body_stream(request: IncomingRequest, charset: str = "utf-8") -> BinaryIO:
    """Return the request body as a readable binary stream."""
    body = request.body
    match body:
        case bytes() | bytearray() | memoryview():
            return io.BytesIO(bytes(body))
        case str():
            return io.BytesIO(body.encode(charset))
        case None:
            return io.BytesIO(b"")
        case _ if hasattr(body, "read"):
            return body
        case _:
            raise TypeError(f"Unsupported request body type: {type(body).__name__}")


class UploadHandler:
    """Parses a multipart body under a whole-body byte ceiling."""

    def __init__(
        self,
        charset: str = "utf-8",
        spool_limit: int = 64 * 1024,
        buffer_size: int = 64 * 1024,
    ) -> None:
        self.charset = charset
        self.spool_limit = spool_limit
        self.buffer_size = buffer_size

    def open_body(self, limits: UploadLimits, request: IncomingRequest) -> LimitedReader:
        """Raw request body guarded by ``limits.max_bytes``."""
        return LimitedReader(body_stream(request, self.charset), limits.max_bytes)

    def handle(self, limits: UploadLimits, request: IncomingRequest) -> UploadResult:
        """Return the file uploaded under ``limits.file_field_name``.

        The whole body is parsed before returning so the ceiling covers every
        part, not only the file. On any error every parsed part is closed.
        """
        field_name = limits.effective_file_field_name()
        return self.handle_many(limits, request, [field_name])[field_name]

    def handle_many(
        self,
        limits: UploadLimits,
        request: IncomingRequest,
        field_names: Iterable[str],
    ) -> dict[str, UploadResult]:
        """Return one upload per name in ``field_names`` from a single parse.

        ``limits.file_field_name`` is ignored here. Parts without a filename,
        or with an empty one, are plain values and never count as uploads.
        """
        wanted = list(dict.fromkeys(field_names))
        boundary = self._boundary(request)

        content_length = get_header(request, "Content-Length")
        if content_length and content_length.isdecimal() and int(content_length) > limits.max_bytes:
            logger.warning(
                "Upload rejected by declared length",
                icon=LogIcon.FORBIDDEN,
                content_length=int(content_length),
                max_bytes=limits.max_bytes,
            )
            raise PayloadTooLargeError(limits.max_bytes)

        parser = MultipartParser(
            self.open_body(limits, request),
            boundary,
            charset=self.charset,
            buffer_size=self.buffer_size,
            spool_limit=min(self.spool_limit, limits.max_bytes),
            # The reader enforces the real ceiling, these only keep the
            # parser's own defaults from tripping first
            memory_limit=limits.max_bytes,
            disk_limit=limits.max_bytes,
        )

        uploads: dict[str, MultipartPart] = {}
        fields: dict[str, str] = {}
        try:
            for part in parser:
                if part.filename and part.name in wanted and part.name not in uploads:
                    uploads[part.name] = part
                    continue
                if not part.filename:
                    fields.setdefault(part.name, self._decode(part))
                part.close()
        except Exception as ex:
            for upload in uploads.values():
                upload.close()
            if isinstance(ex, PayloadTooLargeError):
                logger.warning("Upload exceeded byte ceiling", icon=LogIcon.FORBIDDEN, max_bytes=limits.max_bytes)
            raise

        if missing := [name for name in wanted if name not in uploads]:
            for upload in uploads.values():
                upload.close()
            raise FieldNotFoundError(missing[0])

        results: dict[str, UploadResult] = {}
        for name, upload in uploads.items():
            logger.info(
                "Upload parsed",
                icon=LogIcon.UPLOAD,
                field=name,
                upload_name=upload.filename,
                size=upload.size,
            )
            results[name] = UploadResult(
                file=upload.file,
                filename=upload.filename,
                size=upload.size,
                headers=dict(upload.headerlist),
                content_type=upload.content_type or DEFAULT_FILE_CONTENT_TYPE,
                fields=dict(fields),
            )
        return results

    def _decode(self, part: MultipartPart) -> str:
        """Text value of a plain part, in the handler charset if the declared one is unknown."""
        try:
            return part.raw.decode(part.charset, errors="replace")
        except LookupError:
            logger.debug("Unknown part charset", icon=LogIcon.VALIDATION, field=part.name, charset=part.charset)
            return part.raw.decode(self.charset, errors="replace")

    @staticmethod
    def _boundary(request: IncomingRequest) -> str:
        content_type = get_header(request, "Content-Type")
        if not content_type:
            raise NotMultipartError(content_type)
        mimetype, options = parse_options_header(content_type)
        boundary = options.get("boundary")
        if mimetype != MULTIPART_FORM_DATA or not boundary:
            raise NotMultipartError(content_type)
        return boundary
