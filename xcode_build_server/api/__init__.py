from xcode_build_server.api.server import create_app
from xcode_build_server.api.middleware.logging_middleware import LoggingMiddleware
from xcode_build_server.api.dependencies import get_orchestrator
from xcode_build_server.api.schemas import ToolCallRequest, ToolCallResponse

__all__ = [
    "create_app",
    "LoggingMiddleware",
    "get_orchestrator",
    "ToolCallRequest",
    "ToolCallResponse",
]
