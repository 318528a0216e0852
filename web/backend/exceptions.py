#!/usr/bin/env python3
"""
Error handlers for the web application.

Domain errors live in ``core.errors``; this module maps each class to an HTTP
status and a consistent JSON body.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.errors import (
    ServiceException,
    NotFoundError,
    NotAuthenticatedError,
    NotAuthorizedError,
    InvalidStateError,
    AlreadyRespondedError,
    NoneAvailableError,
    PaymentRequiredError,
    PaymentFailedError,
    ValidationError,
    ConcurrentUpdateError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses resolve through their base.
STATUS_CODES = (
    (NotAuthenticatedError, 401),
    (NotFoundError, 404),
    (NoneAvailableError, 404),
    (NotAuthorizedError, 403),
    (InvalidStateError, 409),
    (AlreadyRespondedError, 409),
    (ConcurrentUpdateError, 409),
    (PaymentRequiredError, 402),
    (PaymentFailedError, 402),
    (ValidationError, 400),
)


def status_code_for(exc: ServiceException) -> int:
    for exc_class, status_code in STATUS_CODES:
        if isinstance(exc, exc_class):
            return status_code
    return 500


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """Handle service layer exceptions."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
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
    """Handle FastAPI HTTP exceptions with consistent format."""
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
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
