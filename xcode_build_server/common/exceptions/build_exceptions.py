from typing import Optional, Dict, Any

from xcode_build_server.common.exceptions.base_exceptions import (
    XcodeBuildBaseException,
    ErrorCode,
)


class ToolchainExecutionError(XcodeBuildBaseException):
    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        stdout: str = "",
        stderr: str = "",
        error_code: ErrorCode = ErrorCode.TOOLCHAIN_FAILED,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        details = details or {}
        if command:
            details["command"] = command[:500]
        super().__init__(message, error_code, details, cause)
        self.command = command
        self.stdout = stdout
        self.stderr = stderr

    @property
    def error_output(self) -> str:
        if self.stderr:
            return f"{self.message}\n{self.stderr}"
        return self.message


class CommandFailedError(ToolchainExecutionError):
    def __init__(
        self,
        command: str,
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(
            message=f"Command failed with exit code {exit_code}: {command}",
            command=command,
            stdout=stdout,
            stderr=stderr,
            error_code=ErrorCode.TOOLCHAIN_COMMAND_FAILED,
            details={"exit_code": exit_code},
        )
        self.exit_code = exit_code


class CommandTimeoutError(ToolchainExecutionError):
    def __init__(
        self,
        command: str,
        timeout_seconds: float,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(
            message=f"Command timed out after {timeout_seconds}s: {command}",
            command=command,
            stdout=stdout,
            stderr=stderr,
            error_code=ErrorCode.TOOLCHAIN_TIMEOUT,
            details={"timeout_seconds": timeout_seconds},
        )
        self.timeout_seconds = timeout_seconds


class OutputLimitExceededError(ToolchainExecutionError):
    def __init__(
        self,
        command: str,
        limit_bytes: int,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(
            message=f"Output exceeded {limit_bytes} bytes: {command}",
            command=command,
            stdout=stdout,
            stderr=stderr,
            error_code=ErrorCode.TOOLCHAIN_OUTPUT_LIMIT,
            details={"limit_bytes": limit_bytes},
        )
        self.limit_bytes = limit_bytes


class ResultBundleExtractionError(XcodeBuildBaseException):
    def __init__(
        self,
        message: str,
        bundle_path: Optional[str] = None,
        artifact_kind: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {}
        if bundle_path:
            details["bundle_path"] = bundle_path
        if artifact_kind:
            details["artifact_kind"] = artifact_kind
        super().__init__(
            message=message,
            error_code=ErrorCode.RESULT_BUNDLE_EXTRACTION_FAILED,
            details=details,
            cause=cause,
        )
        self.bundle_path = bundle_path
        self.artifact_kind = artifact_kind
