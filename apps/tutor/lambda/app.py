"""Tutor relay backend using FastAPI + Mangum for AWS Lambda."""

import logging
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException

from tutor_relay.config import ConfigResolver
from tutor_relay.errors import FailureKind
from tutor_relay.infra.runtime import ensure_langsmith_configured, flush_langsmith_traces
from tutor_relay.normalizer import Success
from tutor_relay.observability import LoggingRelayObserver
from tutor_relay.orchestration.retry import RetryController
from tutor_relay.providers.gemini_provider import GeminiUpstreamCaller
from tutor_relay.schemas import ErrorResponse, RelayResponse
from tutor_relay.services.relay_service import RelayHandler

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
logging.getLogger("tutor_relay").setLevel(logging.INFO)

app = FastAPI()
router = APIRouter(prefix="/api")


@lru_cache(maxsize=1)
def get_relay_handler() -> RelayHandler:
    observer = LoggingRelayObserver()
    return RelayHandler(
        config_resolver=ConfigResolver(),
        retry_controller=RetryController(caller=GeminiUpstreamCaller(), observer=observer),
        observer=observer,
    )


def _error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        logger.warning("Method not allowed")
    return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Unparseable bodies carry no prompt.
    logger.warning("Request body could not be parsed", extra={"error_count": len(exc.errors())})
    return _error_response(400, FailureKind.INVALID_REQUEST.message)


@router.post(
    "/chat",
    response_model=RelayResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def chat(payload: Any = Body(default=None)) -> JSONResponse:
    """Relay a student's prompt to the upstream model and return its answer."""
    ensure_langsmith_configured()
    try:
        result = await get_relay_handler().handle(payload)
    finally:
        flush_langsmith_traces()

    if isinstance(result, Success):
        return JSONResponse(
            status_code=200,
            content=RelayResponse(response=result.text).model_dump(),
        )
    return _error_response(result.status_code, result.message)


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


app.include_router(router)


handler = Mangum(app)
