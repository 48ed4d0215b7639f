"""Router with automatic form injection and response handling."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

import orjson
from pydantic import BaseModel
from robyn import Request, Response, SubRouter
from robyn.robyn import HttpMethod

from safehttp.core.logger import LogIcon, logger
from safehttp.models.core import BodyType, FileHeader
from safehttp.models.form import Form, MultipartForm
from safehttp.models.status import StatusCode

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def parse_endpoint_signature(sig: inspect.Signature) -> dict[str, BodyType]:
    """Find the handler parameters that expect a parsed form."""
    parsed: dict[str, BodyType] = {}

    for name, param in sig.parameters.items():
        match param.annotation:
            case type() as annotation if issubclass(annotation, MultipartForm):
                parsed[name] = BodyType.MULTIPART
            case type() as annotation if issubclass(annotation, Form):
                parsed[name] = BodyType.FORM

    return parsed


def _body_values(request: Request) -> dict[str, list[str]]:
    form_data = getattr(request, "form_data", None) or {}
    return {key: [value] for key, value in form_data.items()}


def form_from_request(request: Request) -> Form:
    """Build a Form from the body of POST, PUT and PATCH requests, from the URL query otherwise."""
    if str(request.method).upper() in BODY_METHODS:
        return Form(_body_values(request))
    return Form(request.query_params.to_dict())


def multipart_form_from_request(request: Request) -> MultipartForm | Response:
    """Build a MultipartForm from the body form values and uploaded files.

    Robyn keys ``request.files`` by the uploaded filename, not by the form field
    name, so the file headers are grouped by filename.
    """
    method = str(request.method).upper()
    if method not in BODY_METHODS:
        logger.warning("Multipart form on non-body method", icon=LogIcon.FORBIDDEN, method=method)
        return error_response(StatusCode.BAD_REQUEST, f"multipart form not allowed on {method} requests")

    files: dict[str, list[FileHeader]] = {}
    for filename, data in (getattr(request, "files", None) or {}).items():
        files.setdefault(filename, []).append(FileHeader.from_upload(filename, data))

    if files:
        logger.info(f"Received {len(files)} file part(s)", icon=LogIcon.UPLOAD)
    return MultipartForm(_body_values(request), files)


def parse_request_forms(
    form_params: dict[str, BodyType],
    request: Request,
    kwargs: dict[str, Any],
) -> Response | None:
    """Inject parsed forms into handler kwargs."""
    for param_name, body_type in form_params.items():
        match body_type:
            case BodyType.MULTIPART:
                form = multipart_form_from_request(request)
                if isinstance(form, Response):
                    return form
                kwargs[param_name] = form
            case BodyType.FORM:
                kwargs[param_name] = form_from_request(request)
    return None


def error_response(status: StatusCode, message: str) -> Response:
    """JSON error response carrying the status phrase and a message."""
    return Response(
        status_code=int(status),
        headers={"content-type": "application/json"},
        description=orjson.dumps({"error": status.phrase, "detail": message}).decode(),
    )


def parse_response(result: Any, status: StatusCode = StatusCode.OK) -> Response:
    """Convert handler result to Response. A ``(body, StatusCode)`` tuple sets the status."""
    match result:
        case Response():
            return result
        case (body, StatusCode() as code):
            return parse_response(body, code)
        case BaseModel():
            return Response(
                status_code=int(status),
                headers={"content-type": "application/json"},
                description=result.model_dump_json(indent=4),
            )
        case dict():
            return Response(
                status_code=int(status),
                headers={"content-type": "application/json"},
                description=orjson.dumps(result).decode(),
            )
        case _:
            return Response(
                status_code=int(status),
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


def _create_method_wrapper(original_method: Callable) -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            sig = inspect.signature(handler)
            form_params = parse_endpoint_signature(sig)
            has_request_param = "request" in sig.parameters

            @wraps(handler)
            async def wrapped_handler(request: Request, **h_kwargs):
                if form_params and (error := parse_request_forms(form_params, request, h_kwargs)):
                    return error

                # Pass request to handler only if it declared it
                if has_request_param:
                    h_kwargs["request"] = request

                result = await handler(**h_kwargs)
                return parse_response(result)

            # Build signature: always include request for Robyn injection
            new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
            for name, param in sig.parameters.items():
                if name == "request" or name in form_params:
                    continue
                new_params.append(param)

            wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
            return decorator(wrapped_handler)

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """Enhanced SubRouter with form injection and response handling."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._wrap_methods()

    def _wrap_methods(self) -> None:
        """Wrap HTTP methods with parsing logic."""
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            if hasattr(self, method_name):
                original_method = getattr(self, method_name)
                setattr(self, method_name, _create_method_wrapper(original_method))
