from typing import Dict, Any
from fastapi import APIRouter, Depends

from xcode_build_server.api import tools
from xcode_build_server.api.dependencies.orchestrator import get_orchestrator
from xcode_build_server.api.schemas.request_schemas import ToolCallRequest
from xcode_build_server.api.schemas.response_schemas import ToolCallResponse, ToolListResponse
from xcode_build_server.common.config.constants import ToolName
from xcode_build_server.orchestrator.coordinator import XcodeBuildOrchestrator


router = APIRouter(prefix="/tools")


@router.get("", response_model=ToolListResponse)
async def list_tools() -> ToolListResponse:
    return ToolListResponse(tools=tools.list_tool_definitions())


@router.post("/call", response_model=ToolCallResponse)
async def call_tool(
    body: ToolCallRequest,
    orchestrator: XcodeBuildOrchestrator = Depends(get_orchestrator),
) -> ToolCallResponse:
    result = await tools.call_tool(orchestrator, body.name, body.arguments)
    return ToolCallResponse.from_result(result)


@router.post("/build_project", response_model=ToolCallResponse)
async def build_project(
    arguments: Dict[str, Any],
    orchestrator: XcodeBuildOrchestrator = Depends(get_orchestrator),
) -> ToolCallResponse:
    result = await tools.call_tool(orchestrator, ToolName.BUILD_PROJECT.value, arguments)
    return ToolCallResponse.from_result(result)


@router.post("/run_tests", response_model=ToolCallResponse)
async def run_tests(
    arguments: Dict[str, Any],
    orchestrator: XcodeBuildOrchestrator = Depends(get_orchestrator),
) -> ToolCallResponse:
    result = await tools.call_tool(orchestrator, ToolName.RUN_TESTS.value, arguments)
    return ToolCallResponse.from_result(result)
