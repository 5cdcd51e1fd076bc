from fastapi import APIRouter, Depends
from datetime import datetime, timezone
import os
import shutil

from xcode_build_server import __version__
from xcode_build_server.api.dependencies.orchestrator import get_orchestrator
from xcode_build_server.api.schemas.response_schemas import HealthResponse
from xcode_build_server.orchestrator.coordinator import XcodeBuildOrchestrator


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    orchestrator: XcodeBuildOrchestrator = Depends(get_orchestrator),
) -> HealthResponse:
    settings = orchestrator.settings
    components = {
        "xcodebuild": "available" if shutil.which(settings.xcodebuild_binary) else "missing",
        "xcrun": "available" if shutil.which(settings.xcrun_binary) else "missing",
        "log_dir": "writable" if os.access(orchestrator.log_dir, os.W_OK) else "unavailable",
    }
    healthy = components["xcodebuild"] == "available" and components["log_dir"] == "writable"

    return HealthResponse(
        status="healthy" if healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        components=components,
    )


@router.get("/live")
async def liveness_check() -> dict:
    return {"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()}
