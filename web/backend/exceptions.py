#!/usr/bin/env python3
"""
Error handlers for the web application.

Matching errors raised by the service layer are mapped to HTTP status codes
here; routers let them propagate.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.matching.exceptions import (
    BatchTimeoutError,
    InvalidStatusTransitionError,
    JobHasNoRequirementsError,
    JobNotActiveError,
    MatchingError,
    NotFoundError,
    SkillDataUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def status_code_for(exc: MatchingError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (JobNotActiveError, InvalidStatusTransitionError)):
        return 409
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, JobHasNoRequirementsError):
        return 400
    if isinstance(exc, BatchTimeoutError):
        return 504
    if isinstance(exc, SkillDataUnavailableError):
        return 503
    return 500


async def matching_exception_handler(
    request: Request,
    exc: MatchingError
) -> JSONResponse:
    """
    Handle matching engine exceptions.

    Args:
        request: The FastAPI request.
        exc: The matching exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"Matching error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"{exc.__class__.__name__} in {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
