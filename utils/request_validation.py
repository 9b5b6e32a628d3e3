"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from typing import Iterable, TypeVar

from flask import Request
from pydantic import BaseModel, ValidationError
from werkzeug.exceptions import BadRequest

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=False)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if not data.get(key)]
        if missing:
            raise BadRequest(
                "Missing required fields: {}.".format(
                    ", ".join(sorted(missing))
                )
            )

    return data


def first_error_message(error: ValidationError) -> str:
    """Return the message of the first failing field, without pydantic's prefix."""

    issues = error.errors()
    if not issues:
        return "Invalid request."
    issue = issues[0]
    cause = (issue.get("ctx") or {}).get("error")
    if cause is not None:
        return str(cause)
    location = ".".join(str(part) for part in issue.get("loc", ()))
    message = issue.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def parse_request_body(req: Request, schema: type[SchemaT]) -> SchemaT:
    """Parse the JSON body into ``schema``; the first failure becomes a 400."""

    payload = parse_json_request(req, allow_empty=True)
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise BadRequest(first_error_message(exc)) from exc
