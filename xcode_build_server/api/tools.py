from typing import Dict, Any, List, Type

from pydantic import ValidationError

from xcode_build_server.api.schemas.request_schemas import (
    BuildProjectArguments,
    RunTestsArguments,
)
from xcode_build_server.api.schemas.response_schemas import ToolDefinition
from xcode_build_server.common.config.constants import ToolName
from xcode_build_server.common.config.logging_config import get_logger
from xcode_build_server.common.dto.invocation import InvocationRequest, InvocationResult
from xcode_build_server.common.exceptions.base_exceptions import (
    InvalidArgumentsError,
    UnknownToolError,
)
from xcode_build_server.orchestrator.coordinator import XcodeBuildOrchestrator


logger = get_logger(__name__)


TOOL_ARGUMENT_MODELS: Dict[ToolName, Type[BuildProjectArguments]] = {
    ToolName.BUILD_PROJECT: BuildProjectArguments,
    ToolName.RUN_TESTS: RunTestsArguments,
}

TOOL_DESCRIPTIONS: Dict[ToolName, str] = {
    ToolName.BUILD_PROJECT: "Build an Xcode project",
    ToolName.RUN_TESTS: "Run Xcode project tests with optional filtering",
}


def list_tool_definitions() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            name=tool.value,
            description=TOOL_DESCRIPTIONS[tool],
            input_schema=model.model_json_schema(by_alias=True),
        )
        for tool, model in TOOL_ARGUMENT_MODELS.items()
    ]


def parse_tool_arguments(name: str, arguments: Any) -> InvocationRequest:
    try:
        tool = ToolName(name)
    except ValueError:
        raise UnknownToolError(name)

    if not isinstance(arguments, dict):
        raise InvalidArgumentsError(f"Invalid {_label(tool)} arguments provided", tool_name=name)

    try:
        parsed = TOOL_ARGUMENT_MODELS[tool].model_validate(arguments)
        return parsed.to_invocation_request()
    except ValidationError as e:
        raise InvalidArgumentsError(
            f"Invalid {_label(tool)} arguments provided",
            tool_name=name,
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e


async def call_tool(
    orchestrator: XcodeBuildOrchestrator,
    name: str,
    arguments: Any,
) -> InvocationResult:
    request = parse_tool_arguments(name, arguments)
    logger.info(f"Calling tool {name} for scheme {request.scheme}")
    if request.is_test:
        return await orchestrator.run_tests(request)
    return await orchestrator.build_project(request)


def _label(tool: ToolName) -> str:
    return "test" if tool == ToolName.RUN_TESTS else "build"
