"""Global exception handlers for failures that escape the route handlers."""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from campus_market.application.interfaces.catalog_store import StorageFaultError

logger = structlog.get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorageFaultError)
    async def storage_fault_handler(request: Request, exc: StorageFaultError) -> JSONResponse:
        logger.error("request_storage_fault", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "The catalog is temporarily unavailable. Please try again."},
        )
