"""Canonical error envelope for WBS engine responses.

Standardized structure:
{
  "error": {
    "code": "string",
    "message": "string",
    "http_status": 404,
    "resource_kind": "wbs_project | wbs_task | resource | null",
    "details": {}
  }
}
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, NoReturn, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from wbs_engines.common.errors import DuplicateResource, ProjectLimitReached, WbsError


class ErrorDetail(BaseModel):
    """Canonical error detail structure."""
    code: str
    message: str
    http_status: int
    resource_kind: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorEnvelope(BaseModel):
    """Top-level error envelope returned by all WBS endpoints."""
    error: ErrorDetail


def build_error_envelope(
    code: str,
    message: str,
    status_code: int = 400,
    resource_kind: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> ErrorEnvelope:
    """Construct an ErrorEnvelope (without raising).

    Args mirror error_response; http_status mirrors status_code.
    """
    error_detail = ErrorDetail(
        code=code,
        message=message,
        http_status=status_code,
        resource_kind=resource_kind,
        details=details or {},
    )
    return ErrorEnvelope(error=error_detail)


def error_response(
    code: str,
    message: str,
    status_code: int = 400,
    resource_kind: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> NoReturn:
    """Raise a standardized error response.

    Args:
        code: Machine-readable error code (e.g., "wbs_task.not_found")
        message: Human-readable error message
        status_code: HTTP status code (default 400)
        resource_kind: The resource type (wbs_project, wbs_task, resource)
        details: Additional context dict

    Raises:
        HTTPException with canonical error envelope body
    """
    envelope = build_error_envelope(
        code=code,
        message=message,
        status_code=status_code,
        resource_kind=resource_kind,
        details=details,
    )
    raise HTTPException(status_code=status_code, detail=envelope.model_dump())


async def envelope_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return enveloped HTTPException details as the body itself, not under "detail"."""
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)
    envelope = build_error_envelope(
        code=f"http.{exc.status_code}",
        message=str(exc.detail),
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump(), headers=exc.headers)


def wbs_error_response(exc: WbsError) -> NoReturn:
    """Translate a domain error into the envelope with its HTTP status."""
    if isinstance(exc, KeyError):
        status_code = 404
    elif isinstance(exc, (DuplicateResource, ProjectLimitReached)):
        status_code = 409
    else:
        status_code = 422
    error_response(
        code=exc.code,
        message=str(exc),
        status_code=status_code,
        resource_kind=exc.resource_kind,
    )


@contextmanager
def wbs_errors() -> Iterator[None]:
    """Route helper: domain errors raised inside the block become enveloped HTTP errors."""
    try:
        yield
    except WbsError as exc:
        wbs_error_response(exc)
