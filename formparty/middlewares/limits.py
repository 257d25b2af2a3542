"""Reject oversized upload requests before they reach a handler."""

from collections.abc import Iterable

from robyn import Request, Response

from formparty.core.router import error_response
from formparty.formdata.errors import PayloadTooLargeError
from formparty.formdata.handler import get_header
from formparty.middlewares.base import BaseMiddleware


class BodySizeLimitMiddleware(BaseMiddleware):
    """Answers 413 when the declared Content-Length exceeds ``max_bytes``.

    Bodies without a declared length are still capped by the upload handler.
    """

    def __init__(self, max_bytes: int, endpoints: Iterable[str] | None = None) -> None:
        super().__init__(endpoints=endpoints)
        self.max_bytes = max_bytes

    def before(self, request: Request) -> Request | Response:
        content_length = get_header(request, "Content-Length")
        if content_length and content_length.isdecimal() and int(content_length) > self.max_bytes:
            return error_response(PayloadTooLargeError(self.max_bytes))
        return request
