"""Builders for the platform response record (``statusCode``, ``headers``, ``body``)."""

import json
from typing import Any, Iterable, Mapping


def json_response(body: Any, status_code: int = 200, headers: Mapping[str, str] | None = None) -> dict:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json", **(headers or {})},
        "body": json.dumps(body, default=str),
    }


def text_response(body: str, status_code: int = 200, headers: Mapping[str, str] | None = None) -> dict:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "text/plain", **(headers or {})},
        "body": body,
    }


def error_response(status_code: int, message: str, errors: list[dict] | None = None) -> dict:
    payload: dict[str, Any] = {"message": message}
    if errors is not None:
        payload["errors"] = errors
    return json_response(payload, status_code=status_code)


def method_not_allowed(allowed_methods: Iterable[str]) -> dict:
    return text_response(
        "Method Not Allowed.",
        status_code=405,
        headers={"Allow": ", ".join(allowed_methods)},
    )
