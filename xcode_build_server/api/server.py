from typing import Optional
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from xcode_build_server import __version__
from xcode_build_server.api.routes import health, resources
from xcode_build_server.api.routes import tools as tool_routes
from xcode_build_server.api.middleware.logging_middleware import LoggingMiddleware
from xcode_build_server.common.config.settings import Settings, get_settings
from xcode_build_server.common.config.logging_config import get_logger
from xcode_build_server.common.exceptions.base_exceptions import (
    XcodeBuildBaseException,
    ValidationException,
    UnknownToolError,
)
from xcode_build_server.common.exceptions.storage_exceptions import ResourceNotFoundError
from xcode_build_server.orchestrator.coordinator import XcodeBuildOrchestrator


logger = get_logger(__name__)


def _status_for(exc: XcodeBuildBaseException) -> int:
    if isinstance(exc, (ResourceNotFoundError, UnknownToolError)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ValidationException):
        return 422
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def _handle_service_error(request: Request, exc: XcodeBuildBaseException) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error(f"Request failed: {exc}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@asynccontextmanager
async def lifespan(app: FastAPI):
    orchestrator: XcodeBuildOrchestrator = app.state.orchestrator
    orchestrator.initialize()
    logger.info("Xcode build API server running")
    logger.info(f"Build logs will be stored in {orchestrator.log_dir}")
    yield
    logger.info("Shutting down Xcode build API server")


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[XcodeBuildOrchestrator] = None,
    title: str = "Xcode Build Server API",
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=title,
        version=__version__,
        description="Runs xcodebuild builds and tests and archives their logs",
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
    )
    app.state.orchestrator = orchestrator or XcodeBuildOrchestrator(settings)

    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(XcodeBuildBaseException, _handle_service_error)

    app.include_router(health.router, prefix="/api/v1", tags=["Health"])
    app.include_router(tool_routes.router, prefix="/api/v1", tags=["Tools"])
    app.include_router(resources.router, prefix="/api/v1", tags=["Resources"])

    logger.info(f"API server configured: {title} v{__version__}")

    return app
