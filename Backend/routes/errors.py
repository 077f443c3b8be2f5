"""
Error responses shared by the medical imaging routes.
"""
import traceback
from typing import Any, Dict

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from config.settings import get_settings

LOGGED_VALUE_MAX_CHARS = 200


def summarize_request_body(body: Any) -> Any:
    """
    Copy of a request body that is safe to log: long strings (inline images,
    diagnoses, chat messages) are abbreviated at any nesting depth.
    """
    if isinstance(body, dict):
        return {key: summarize_request_body(value) for key, value in body.items()}
    if isinstance(body, (list, tuple)):
        return [summarize_request_body(value) for value in body]
    if isinstance(body, str) and len(body) > LOGGED_VALUE_MAX_CHARS:
        return f"{body[:LOGGED_VALUE_MAX_CHARS]}... ({len(body)} characters)"
    return body


def validation_error_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def server_error_response(error: Exception, message: str, request_body: Dict[str, Any]) -> JSONResponse:
    """
    Log a failed request and build its 500 response.

    Outside production the response carries the error text and its traceback;
    in production only the generic message is returned and the detail stays in the log.
    """
    settings = get_settings()
    details = f"{type(error).__name__}: {error}"
    full_error = "".join(traceback.format_exception(error))

    logger.opt(exception=error).error(
        f"{message}: {details} | requestBody={summarize_request_body(request_body)}"
    )

    content = {"error": message}
    if not settings.is_production:
        content["details"] = details
        content["fullError"] = full_error

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed JSON bodies with 400 instead of FastAPI's default 422."""
    logger.warning(f"Invalid request body for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())}
    )
