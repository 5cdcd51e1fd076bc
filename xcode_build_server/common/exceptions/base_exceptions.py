from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ErrorCode(str, Enum):
    UNKNOWN = "E0000"

    TOOLCHAIN_FAILED = "E1000"
    TOOLCHAIN_COMMAND_FAILED = "E1001"
    TOOLCHAIN_TIMEOUT = "E1002"
    TOOLCHAIN_OUTPUT_LIMIT = "E1003"
    RESULT_BUNDLE_EXTRACTION_FAILED = "E1004"

    STORAGE_ERROR = "E3000"
    STORAGE_WRITE_ERROR = "E3001"
    STORAGE_READ_ERROR = "E3002"
    STORAGE_DIRECTORY_ERROR = "E3003"
    STORAGE_NOT_FOUND = "E3006"

    VALIDATION_ERROR = "E7000"
    INVALID_INPUT = "E7001"
    UNKNOWN_TOOL = "E7003"


class XcodeBuildBaseException(Exception):
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"details={self.details})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "exception_type": self.__class__.__name__,
        }

class ValidationException(XcodeBuildBaseException):
    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if field_name:
            details["field_name"] = field_name
        if field_value is not None:
            details["field_value"] = str(field_value)
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
        self.field_name = field_name
        self.field_value = field_value


class InvalidArgumentsError(ValidationException):
    def __init__(
        self,
        message: str,
        tool_name: Optional[str] = None,
        errors: Optional[list] = None,
    ):
        details: Dict[str, Any] = {}
        if tool_name:
            details["tool_name"] = tool_name
        if errors:
            details["errors"] = errors
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_INPUT,
            details=details,
        )
        self.tool_name = tool_name
        self.errors = errors or []


class UnknownToolError(ValidationException):
    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Unknown tool: {tool_name}",
            field_name="name",
            field_value=tool_name,
            error_code=ErrorCode.UNKNOWN_TOOL,
        )
        self.tool_name = tool_name
