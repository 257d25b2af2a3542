"""formparty - multipart/form-data upload service powered by Robyn."""

from robyn import Robyn

from formparty.api.health import router as health_router
from formparty.api.upload import router as upload_router
from formparty.core.logger import LogIcon, logger
from formparty.core.router import FILE_UPLOAD_ENDPOINTS
from formparty.core.settings import settings as st
from formparty.middlewares.base import MiddlewareHandler
from formparty.middlewares.files import FileUploadOpenAPIMiddleware
from formparty.middlewares.limits import BodySizeLimitMiddleware

app = Robyn(__file__)

# Routers
app.include_router(health_router)
app.include_router(upload_router)

# Middlewares, registered after routers so upload endpoints are known
middlewares = MiddlewareHandler(app)
middlewares.register(FileUploadOpenAPIMiddleware())
middlewares.register(BodySizeLimitMiddleware(st.MAX_UPLOAD_BYTES, endpoints=FILE_UPLOAD_ENDPOINTS))


def main() -> None:
    logger.info(f"Starting {st.API_NAME}", icon=LogIcon.START, host=st.API_HOST, port=st.API_PORT)
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
