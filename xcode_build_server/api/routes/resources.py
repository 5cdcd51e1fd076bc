from fastapi import APIRouter, Depends, Query

from xcode_build_server.api.dependencies.orchestrator import get_orchestrator
from xcode_build_server.api.schemas.response_schemas import (
    ResourceListResponse,
    ResourceContents,
    ReadResourceResponse,
)
from xcode_build_server.common.config.constants import LATEST_LOG_MIME_TYPE
from xcode_build_server.orchestrator.coordinator import XcodeBuildOrchestrator


router = APIRouter(prefix="/resources")


@router.get("", response_model=ResourceListResponse)
async def list_resources(
    orchestrator: XcodeBuildOrchestrator = Depends(get_orchestrator),
) -> ResourceListResponse:
    return ResourceListResponse(resources=orchestrator.list_resources())


@router.get("/read", response_model=ReadResourceResponse)
async def read_resource(
    uri: str = Query(..., description="Resource URI, e.g. xcode-build://latest-log"),
    orchestrator: XcodeBuildOrchestrator = Depends(get_orchestrator),
) -> ReadResourceResponse:
    text = orchestrator.read_resource(uri)
    return ReadResourceResponse(
        contents=[ResourceContents(uri=uri, mime_type=LATEST_LOG_MIME_TYPE, text=text)]
    )
