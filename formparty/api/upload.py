"""Upload endpoint backed by UploadHandler."""

import hashlib

from pydantic import BaseModel

from formparty.core.logger import LogIcon, logger
from formparty.core.router import Router
from formparty.models.formdata import UploadResult

router = Router(__file__, prefix="/files")


class UploadResponse(BaseModel):
    """Metadata of a received upload."""

    filename: str
    size: int
    content_type: str
    sha256: str
    headers: dict[str, str]
    fields: dict[str, str]


@router.post("/upload")
async def upload_file(file: UploadResult) -> UploadResponse:
    """Receive a file under the ``file`` field and describe it."""
    digest = hashlib.sha256()
    while chunk := file.read(64 * 1024):
        digest.update(chunk)

    logger.info("Upload received", icon=LogIcon.UPLOAD, upload_name=file.filename, size=file.size)
    return UploadResponse(
        filename=file.filename,
        size=file.size,
        content_type=file.content_type,
        sha256=digest.hexdigest(),
        headers=file.headers,
        fields=file.fields,
    )
