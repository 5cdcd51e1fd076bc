from xcode_build_server.common.config.settings import Settings, Environment, get_settings
from xcode_build_server.common.config.logging_config import (
    setup_logging,
    get_logger,
    get_invocation_logger,
)
from xcode_build_server.common.config.constants import (
    InvocationAction,
    ArtifactKind,
    ToolName,
)

__all__ = [
    "Settings",
    "Environment",
    "get_settings",
    "setup_logging",
    "get_logger",
    "get_invocation_logger",
    "InvocationAction",
    "ArtifactKind",
    "ToolName",
]
