import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


class ClientError(Exception):
    """Erro causado pela requisicao. A mensagem volta ao cliente como esta, com 400."""

    status_code = 400


class AuthError(ClientError):
    pass


class RateLimitError(ClientError):
    pass


class ValidationError(ClientError):
    pass


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Corpo invalido em %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})
