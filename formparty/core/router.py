"""Router with automatic upload parsing, error mapping and response handling."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Annotated, Any, get_args, get_origin

import orjson
from multipart import MultipartError
from pydantic import BaseModel
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod

from formparty.core.logger import LogIcon, logger
from formparty.core.settings import settings as st
from formparty.formdata.errors import FormPartyError
from formparty.formdata.handler import UploadHandler
from formparty.models.formdata import UploadLimits, UploadResult

# Endpoint path -> multipart file field names, read by the OpenAPI middleware
FILE_UPLOAD_ENDPOINTS: dict[str, frozenset[str]] = {}

upload_handler = UploadHandler(spool_limit=st.SPOOL_LIMIT)


def parse_endpoint_signature(sig: inspect.Signature) -> dict[str, str]:
    """Map UploadResult parameters to the multipart field they are read from.

    ``file: UploadResult`` reads field ``file``;
    ``doc: Annotated[UploadResult, "upload-file"]`` reads field ``upload-file``.
    """
    upload_params: dict[str, str] = {}

    for name, param in sig.parameters.items():
        annotation = param.annotation

        match annotation:
            case _ if annotation is UploadResult:
                upload_params[name] = name
            case _ if get_origin(annotation) is Annotated:
                base, *metadata = get_args(annotation)
                if base is UploadResult:
                    field_names = [item for item in metadata if isinstance(item, str)]
                    upload_params[name] = field_names[0] if field_names else name

    return upload_params


def error_response(ex: FormPartyError | MultipartError) -> Response:
    """Translate formparty and parser errors into JSON responses."""
    match ex:
        case FormPartyError():
            status_code, error = ex.status_code, ex.error
        case _:
            status_code, error = status_codes.HTTP_400_BAD_REQUEST, "malformed_multipart"

    logger.warning("Upload refused", icon=LogIcon.FORBIDDEN, error=error, status=status_code)
    return Response(
        status_code=status_code,
        headers={"content-type": "application/json"},
        description=orjson.dumps({"error": error, "detail": str(ex)}).decode(),
    )


def parse_request_uploads(
    upload_params: dict[str, str],
    request: Request,
    kwargs: dict[str, Any],
) -> Response | None:
    """Parse the body once and inject one UploadResult per upload parameter."""
    limits = UploadLimits(max_bytes=st.MAX_UPLOAD_BYTES)
    try:
        uploads = upload_handler.handle_many(limits, request, upload_params.values())
    except (FormPartyError, MultipartError) as ex:
        return error_response(ex)

    for param_name, field_name in upload_params.items():
        kwargs[param_name] = uploads[field_name]

    return None


def parse_response(result: Any) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case BaseModel():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=result.model_dump_json(indent=4),
            )
        case dict():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=orjson.dumps(result).decode(),
            )
        case _:
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={},
                description=str(result),
            )


HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
    HttpMethod.HEAD,
    HttpMethod.OPTIONS,
    HttpMethod.TRACE,
    HttpMethod.CONNECT,
)


def _create_method_wrapper(original_method: Callable, router_prefix: str = "") -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        endpoint = args[0] if args else kwargs.get("endpoint", "")
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            sig = inspect.signature(handler)
            upload_params = parse_endpoint_signature(sig)
            has_request_param = "request" in sig.parameters

            if upload_params:
                full_path = f"{router_prefix}{endpoint}".replace("//", "/")
                FILE_UPLOAD_ENDPOINTS[full_path] = frozenset(upload_params.values())

            @wraps(handler)
            async def wrapped_handler(request: Request, **h_kwargs):
                if upload_params and (error := parse_request_uploads(upload_params, request, h_kwargs)):
                    return error

                # Pass request to handler only if it declared it
                if has_request_param:
                    h_kwargs["request"] = request

                try:
                    result = await handler(**h_kwargs)
                except FormPartyError as ex:
                    return error_response(ex)
                finally:
                    for param_name in upload_params:
                        h_kwargs[param_name].close()

                return parse_response(result)

            # Build signature: always include request for Robyn injection
            new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
            for name, param in sig.parameters.items():
                if name == "request" or name in upload_params:
                    continue
                new_params.append(param)

            wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
            return decorator(wrapped_handler)

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """Enhanced SubRouter with automatic upload parsing and response handling."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._prefix = kwargs.get("prefix", "")
        self._wrap_methods()

    def _wrap_methods(self) -> None:
        """Wrap HTTP methods with parsing logic."""
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            if hasattr(self, method_name):
                original_method = getattr(self, method_name)
                wrapped_method = _create_method_wrapper(original_method, self._prefix)
                setattr(self, method_name, wrapped_method)
