"""Request dispatch wrapper.

``handler(...)`` turns a business function into a serverless handler:

    @handler(body_schema=CreateUserInput, allowed_methods=["POST"])
    async def create_user(request, event, context):
        return json_response({"name": request.body.name}, status_code=201)

Per invocation the wrapper checks the method, emits the event, runs the
pre-request hook, validates query and body, calls the business function
and logs the response. Any exception on the way becomes an error response,
so the handler never raises to the platform.
"""

import functools
import inspect
import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping

from pydantic import TypeAdapter, ValidationError

from simple_msf.runtime.errors import (
    RequestValidationError,
    is_msf_error,
    validation_errors,
)
from simple_msf.runtime.observers import ErrorLogger, EventLogger, Observers, ResponseLogger
from simple_msf.runtime.responses import error_response, method_not_allowed

Event = Mapping[str, Any]
Response = Mapping[str, Any]

INVALID_JSON_BODY_MESSAGE = "Invalid JSON body."
BAD_REQUEST_MESSAGE = "Bad request."
INTERNAL_ERROR_MESSAGE = "Internal server error."


@dataclass(frozen=True)
class Request:
    """Validated query and body handed to the business function."""

    query: Any = None
    body: Any = None


Execute = Callable[[Request, Event, Any], Response | Awaitable[Response]]
PreRequestHook = Callable[[Event, Any], Response | None | Awaitable[Response | None]]
ErrorHandler = Callable[[Exception], Response | Awaitable[Response]]
Handler = Callable[[Event, Any], Awaitable[Response]]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _adapter(schema: Any) -> TypeAdapter:
    return schema if isinstance(schema, TypeAdapter) else TypeAdapter(schema)


def parse_json_body(raw: str | bytes | None) -> Any:
    """Parse the raw body. A missing or malformed body is a validation error on ``body``."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ["body"], "msg": INVALID_JSON_BODY_MESSAGE}]
        ) from e


def _validate(adapter: TypeAdapter, value: Any) -> Any:
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        raise RequestValidationError.from_pydantic(e) from e


def default_error_response(error: Exception) -> dict:
    """Map an exception onto a response without leaking unclassified error details."""
    if isinstance(error, RequestValidationError):
        return error_response(400, BAD_REQUEST_MESSAGE, error.errors)
    if isinstance(error, ValidationError):
        return error_response(400, BAD_REQUEST_MESSAGE, validation_errors(error))
    if is_msf_error(error):
        return error_response(error.status_code, error.message, error.errors)
    return error_response(500, INTERNAL_ERROR_MESSAGE)


def handler(
    query_schema: Any = None,
    body_schema: Any = None,
    *,
    allowed_methods: Iterable[str] | None = None,
    pre_request: PreRequestHook | None = None,
    custom_error_handler: ErrorHandler | None = None,
    logging_enabled: bool = True,
    event_logger: EventLogger | None = None,
    response_logger: ResponseLogger | None = None,
    error_logger: ErrorLogger | None = None,
) -> Callable[[Execute], Handler]:
    """Build a decorator that wraps a business function with validation and error mapping.

    Args:
        query_schema: Schema for ``queryStringParameters``.
        body_schema: Schema for the JSON-decoded ``body``.
        allowed_methods: If given, other HTTP methods get a 405 response.
        pre_request: ``(event, context)`` hook. A truthy return value is sent
            as the response and the business function is skipped.
        custom_error_handler: Receives every raised exception and owns the
            resulting response, replacing the default error mapping.
        logging_enabled: Toggle the default JSON log output.
        event_logger, response_logger, error_logger: Custom observers.
    """
    query_adapter = _adapter(query_schema) if query_schema is not None else None
    body_adapter = _adapter(body_schema) if body_schema is not None else None
    allowed = [method.upper() for method in allowed_methods] if allowed_methods is not None else None
    observers = Observers(
        logging_enabled=logging_enabled,
        event_logger=event_logger,
        response_logger=response_logger,
        error_logger=error_logger,
    )

    async def _handle_error(error: Exception) -> Response:
        if custom_error_handler is None:
            observers.error(error)
            return default_error_response(error)
        try:
            return await _maybe_await(custom_error_handler(error))
        except Exception as handler_error:
            observers.error(handler_error)
            return error_response(500, INTERNAL_ERROR_MESSAGE)

    def decorator(execute: Execute) -> Handler:
        @functools.wraps(execute)
        async def wrapped(event: Event, context: Any = None) -> Response:
            try:
                if allowed is not None and str(event.get("httpMethod") or "").upper() not in allowed:
                    return method_not_allowed(allowed)

                observers.event(event)

                if pre_request is not None:
                    early = await _maybe_await(pre_request(event, context))
                    if early:
                        observers.response(early)
                        return early

                query = None
                if query_adapter is not None:
                    query = _validate(query_adapter, event.get("queryStringParameters"))

                body = None
                if body_adapter is not None:
                    body = _validate(body_adapter, parse_json_body(event.get("body")))

                response = await _maybe_await(execute(Request(query=query, body=body), event, context))
                observers.response(response)
                return response
            except Exception as error:
                return await _handle_error(error)

        return wrapped

    return decorator
