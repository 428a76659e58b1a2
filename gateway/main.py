"""Entry point for the file gateway service."""

import os
import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.constants import (
    CODE_INVALID_TICKET,
    CODE_NOT_FOUND,
    CODE_PAYLOAD_TOO_LARGE,
    CODE_STORE_FAILURE
)
from common.logging_config import setup_logging
from gateway import config
from gateway.cleanup_task import TicketSweeper
from gateway.exceptions import (
    GatewayException,
    InvalidTicketError,
    NotFoundError,
    PayloadTooLargeError,
    StoreFailureError
)
from gateway.routes import file_router, public_router, upload_router, user_router
from gateway.service_locator import get_resolver, get_storage_writer, get_ticket_registry
from gateway.storage import ensure_directory
from gateway.tickets import TicketMode

logger = setup_logging('gateway')

app = FastAPI(
    title="File Gateway",
    description="Local-filesystem file provider for document-collaboration clients",
    version="1.0.0"
)

ticket_sweeper = None


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Prepare the storage root and start the ticket sweeper.
    """
    global ticket_sweeper

    logger.info("File gateway starting up...")

    root = ensure_directory(get_resolver().root)
    logger.info(f"Serving files from {root}")
    get_storage_writer().purge_staging()

    if TicketMode.parse(config.TICKET_MODE) != TicketMode.OFF:
        ticket_sweeper = TicketSweeper(get_ticket_registry(), config.TICKET_SWEEP_INTERVAL)
        await ticket_sweeper.start()


@app.on_event("shutdown")
async def shutdown_event():
    """
    Stop background tasks on application shutdown.
    """
    global ticket_sweeper

    logger.info("File gateway shutting down...")

    if ticket_sweeper:
        await ticket_sweeper.stop()
        ticket_sweeper = None


def _error_content(code: int, exc: Exception) -> dict:
    return {"code": code, "message": str(exc)}


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Not found: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=_error_content(CODE_NOT_FOUND, exc)
    )


@app.exception_handler(InvalidTicketError)
async def invalid_ticket_handler(request: Request, exc: InvalidTicketError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Invalid upload ticket: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content=_error_content(CODE_INVALID_TICKET, exc)
    )


@app.exception_handler(PayloadTooLargeError)
async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Payload too large: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        content=_error_content(CODE_PAYLOAD_TOO_LARGE, exc)
    )


@app.exception_handler(StoreFailureError)
async def store_failure_handler(request: Request, exc: StoreFailureError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Store failure: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content(CODE_STORE_FAILURE, exc)
    )


@app.exception_handler(GatewayException)
async def gateway_exception_handler(request: Request, exc: GatewayException):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Gateway exception: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content(CODE_STORE_FAILURE, exc)
    )


# Upload routes first: the bare metadata route would swallow their paths.
app.include_router(upload_router)
app.include_router(file_router)
app.include_router(user_router)
app.include_router(public_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "File Gateway API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Health check endpoint for Docker healthcheck.
    Returns 200 if service is alive.
    """
    return {"status": "healthy", "service": "gateway"}


@app.get("/ready")
async def ready_check():
    """
    Readiness check endpoint.
    Verifies the storage root exists and is writable.
    """
    root = get_resolver().root
    if not root.is_dir():
        storage_status = "error: storage root missing"
    elif not os.access(root, os.W_OK):
        storage_status = "error: storage root not writable"
    else:
        storage_status = "ok"

    ready = storage_status == "ok"
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={
            "ready": ready,
            "storage": storage_status
        }
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "gateway.main:app",
        host=config.GATEWAY_HOST,
        port=config.GATEWAY_PORT
    )


if __name__ == "__main__":
    main()
