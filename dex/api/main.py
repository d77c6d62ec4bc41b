"""FastAPI application for the exchange service.

Note: Authentication is intentionally not implemented here. Holder and
trader identities are taken from the request body; deployments that expose
the service beyond a trusted network must authenticate at the proxy layer.
"""

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dex.api.endpoints import router
from dex.config import ServiceConfig
from dex.errors import DexError, PoolExists, PoolNotFound, ReentrantCall
from dex.events import LoggingNotifier
from dex.log_config import configure_logging
from dex.registry import PoolRegistry
from dex.transfers import AssetBank

logger = structlog.get_logger()

CONFIG = ServiceConfig.from_env()

# HTTP status per error type; everything else is a client error (400)
ERROR_STATUS: dict[type[DexError], int] = {
    PoolNotFound: 404,
    PoolExists: 409,
    ReentrantCall: 409,
}


def error_status(err: DexError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(err, error_type):
            return status
    return 400


def create_app(
    registry: PoolRegistry | None = None,
    bank: AssetBank | None = None,
    config: ServiceConfig = CONFIG,
) -> FastAPI:
    """Build the API application.

    Args:
        registry: Pool registry to serve. If None, an empty registry backed
            by ``bank`` is created.
        bank: Asset bank used for custody and funding. If None, a new empty
            bank is created.
        config: Service settings (request size limit)
    """
    bank = bank if bank is not None else AssetBank()
    if registry is None:
        registry = PoolRegistry(bank.custody_gateway, notifier=LoggingNotifier())

    app = FastAPI(
        title="Constant Product Exchange",
        description="Two-asset constant product pools with a fixed 0.3% fee",
        version="0.1.0",
    )
    app.state.registry = registry
    app.state.bank = bank

    @app.middleware("http")
    async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
        """Reject requests with body larger than the configured limit."""
        content_length = request.headers.get("content-length")
        if content_length and int(content_length) > config.max_request_size:
            return JSONResponse(status_code=413, content={"detail": "Request too large"})
        return await call_next(request)

    @app.exception_handler(DexError)
    async def handle_dex_error(request: Request, err: DexError) -> JSONResponse:
        status = error_status(err)
        logger.info(
            "request_rejected",
            method=request.method,
            path=request.url.path,
            status=status,
            error=err.code,
            detail=str(err),
        )
        return JSONResponse(status_code=status, content={"error": err.code, "detail": str(err)})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, err: Exception) -> JSONResponse:
        logger.exception("unhandled_error", method=request.method, path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "internal_error", "detail": "Internal server error"},
        )

    app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, object]:
        """Health check endpoint."""
        return {"status": "ok", "pools": len(app.state.registry)}

    return app


app = create_app()


def run() -> None:
    """Run the exchange API server.

    Configuration via environment variables:
    - DEX_HOST: Host to bind to (default: 0.0.0.0)
    - DEX_PORT: Port to bind to (default: 8000)
    - DEX_DEBUG: Enable debug/reload mode (default: false)
    - DEX_LOG_LEVEL: Minimum log level (default: INFO)
    - DEX_LOG_JSON: Emit JSON log lines (default: false)
    """
    configure_logging(CONFIG.log_level, json=CONFIG.log_json)
    uvicorn.run(
        "dex.api.main:app",
        host=CONFIG.host,
        port=CONFIG.port,
        reload=CONFIG.debug,
    )


if __name__ == "__main__":
    run()
