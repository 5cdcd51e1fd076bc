from xcode_build_server.api.schemas.request_schemas import (
    BuildProjectArguments,
    RunTestsArguments,
    ToolCallRequest,
)
from xcode_build_server.api.schemas.response_schemas import (
    TextContent,
    ToolCallResponse,
    ToolDefinition,
    ToolListResponse,
    ResourceListResponse,
    ResourceContents,
    ReadResourceResponse,
    HealthResponse,
)

__all__ = [
    "BuildProjectArguments",
    "RunTestsArguments",
    "ToolCallRequest",
    "TextContent",
    "ToolCallResponse",
    "ToolDefinition",
    "ToolListResponse",
    "ResourceListResponse",
    "ResourceContents",
    "ReadResourceResponse",
    "HealthResponse",
]
