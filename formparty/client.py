"""Send multipart requests built by RequestBuilder."""

import requests

from formparty.core.logger import LogIcon, logger
from formparty.core.settings import settings as st
from formparty.formdata.builder import RequestBuilder
from formparty.models.formdata import MultipartRequest


class MultipartClient:
    """Thin wrapper over a requests.Session for multipart uploads."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float | None = None,
        builder: RequestBuilder | None = None,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else st.CLIENT_TIMEOUT
        self.builder = builder or RequestBuilder()

    def send(self, spec: MultipartRequest, url: str, method: str = "POST") -> requests.Response:
        """Build ``spec`` and send it. Transport errors are not caught."""
        prepared = self.builder.to_request(spec, method, url)
        logger.info("Sending multipart request", icon=LogIcon.NETWORK, method=method, url=url)
        response = self.session.send(prepared, timeout=self.timeout)
        logger.info("Multipart request answered", icon=LogIcon.NETWORK, url=url, status=response.status_code)
        return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "MultipartClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
