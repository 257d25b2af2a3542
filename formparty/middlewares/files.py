"""Upload middleware documenting multipart/form-data endpoints in OpenAPI."""

import orjson
from robyn import Response

from formparty.core.logger import LogIcon, logger
from formparty.core.router import FILE_UPLOAD_ENDPOINTS
from formparty.middlewares.base import BaseMiddleware


def multipart_request_body(field_names: frozenset[str]) -> dict:
    """OpenAPI requestBody for a multipart form carrying ``field_names`` as files."""
    properties = {
        name: {"type": "string", "format": "binary", "description": "File to upload"}
        for name in sorted(field_names)
    }
    return {
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": properties,
                    "required": sorted(field_names),
                }
            }
        },
        "required": True,
    }


class FileUploadOpenAPIMiddleware(BaseMiddleware):
    """Patches OpenAPI responses to use multipart/form-data for file upload endpoints."""

    def __init__(self) -> None:
        super().__init__(endpoints=["/openapi.json"])

    def after(self, response: Response) -> Response:
        """Patch OpenAPI spec with multipart/form-data for file upload endpoints."""
        if not FILE_UPLOAD_ENDPOINTS:
            return response

        try:
            spec = orjson.loads(response.description)
        except orjson.JSONDecodeError as ex:
            logger.warning("OpenAPI document is not JSON, left unpatched", icon=LogIcon.INTROSPECTION, error=str(ex))
            return response

        paths = spec.get("paths", {})
        for endpoint, field_names in FILE_UPLOAD_ENDPOINTS.items():
            if endpoint in paths:
                for method in paths[endpoint]:
                    paths[endpoint][method]["requestBody"] = multipart_request_body(field_names)

        response.description = orjson.dumps(spec).decode()
        return response
