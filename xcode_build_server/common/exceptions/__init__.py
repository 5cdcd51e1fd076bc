from xcode_build_server.common.exceptions.base_exceptions import (
    XcodeBuildBaseException,
    ErrorCode,
    ValidationException,
    InvalidArgumentsError,
    UnknownToolError,
)
from xcode_build_server.common.exceptions.build_exceptions import (
    ToolchainExecutionError,
    CommandFailedError,
    CommandTimeoutError,
    OutputLimitExceededError,
    ResultBundleExtractionError,
)
from xcode_build_server.common.exceptions.storage_exceptions import (
    StorageException,
    ArtifactWriteError,
    LogDirectoryError,
    ResourceNotFoundError,
    LogReadError,
)

__all__ = [
    "XcodeBuildBaseException",
    "ErrorCode",
    "ValidationException",
    "InvalidArgumentsError",
    "UnknownToolError",
    "ToolchainExecutionError",
    "CommandFailedError",
    "CommandTimeoutError",
    "OutputLimitExceededError",
    "ResultBundleExtractionError",
    "StorageException",
    "ArtifactWriteError",
    "LogDirectoryError",
    "ResourceNotFoundError",
    "LogReadError",
]
