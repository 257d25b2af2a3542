"""Health check endpoint."""

from pydantic import BaseModel

from formparty.core.logger import LogIcon, logger
from formparty.core.router import Router
from formparty.core.settings import settings as st

router = Router(__file__, prefix="/")


class HealthResponse(BaseModel):
    """Service status plus the upload ceiling clients must respect."""

    status: str
    service: str
    version: str
    max_upload_bytes: int


@router.get("/health")
async def health_check() -> HealthResponse:
    logger.info("Health check requested", icon=LogIcon.HEALTHCHECK)
    return HealthResponse(
        status="healthy",
        service=st.API_NAME,
        version=st.API_VERSION,
        max_upload_bytes=st.MAX_UPLOAD_BYTES,
    )
