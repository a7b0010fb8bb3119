## erros da aplicação e sanitização de mensagens
import logging
import re

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("errors")

SENSITIVE_PATTERNS = [
    re.compile(r"api_key", re.IGNORECASE),
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"key", re.IGNORECASE),
]


class AppError(Exception):
    status_code = 400

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", context: str = "", status_code: int = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    status_code = 404


class PermissionDeniedError(AppError):
    status_code = 403


class SlotUnavailableError(AppError):
    status_code = 409


class RateLimitError(AppError):
    status_code = 429


def sanitize_error_message(message: str) -> str:
    """Remove termos sensíveis antes de devolver a mensagem ao cliente."""
    sanitized = message or ""
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub("[REDACTED]", sanitized)
    return sanitized


async def app_error_handler(request: Request, exc: AppError):
    logger.error(
        "APP_ERROR code=%s context=%s path=%s message=%s",
        exc.code, exc.context, request.url.path, exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": sanitize_error_message(exc.message)},
    )
