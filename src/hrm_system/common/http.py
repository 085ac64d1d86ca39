from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from flask import jsonify, request

from ..core.exceptions import (
    DomainError,
    DuplicateRecordError,
    ExternalServiceError,
    InvalidTransition,
    NotFoundError,
    PaidRecordImmutable,
    PayrollGenerationInProgress,
    ValidationError,
)
from .optimistic import MutationResult

# Most specific first: the first matching class decides the status code.
ERROR_STATUS = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (DuplicateRecordError, 409),
    (PaidRecordImmutable, 409),
    (InvalidTransition, 409),
    (PayrollGenerationInProgress, 409),
    (ExternalServiceError, 502),
)


def status_for(error: DomainError) -> int:
    for cls, status in ERROR_STATUS:
        if isinstance(error, cls):
            return status
    return 400


def to_json(value: Any) -> Any:
    """Convert models/enums/decimals into JSON-friendly values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def ok(data=None, status: int = 200, message: str | None = None):
    payload: dict = {"success": True, "data": to_json(data)}
    if message:
        payload["message"] = message
    return jsonify(payload), status


def fail(message: str, status: int = 400, **extra):
    payload: dict = {"success": False, "message": message}
    payload.update(to_json(extra))
    return jsonify(payload), status


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def mutation_response(result: MutationResult, message: str):
    """Success carries the committed state; failure carries the re-fetched one."""
    if result.ok:
        return ok(result.value if result.value is not None else result.state, message=message)
    return fail(str(result.error), status_for(result.error), data=result.state)
