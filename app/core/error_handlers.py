import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import ClientError
from app.schemas.toast import Toast

logger = logging.getLogger(__name__)


def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "toast": Toast(message=exc.message, type="error").model_dump(),
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
