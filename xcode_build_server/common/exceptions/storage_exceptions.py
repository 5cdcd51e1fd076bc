from typing import Optional, Dict, Any

from xcode_build_server.common.exceptions.base_exceptions import (
    XcodeBuildBaseException,
    ErrorCode,
)


class StorageException(XcodeBuildBaseException):
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.STORAGE_ERROR,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, error_code, details, cause)
        self.path = path


class ArtifactWriteError(StorageException):
    def __init__(
        self,
        path: str,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=f"Failed to write artifact {path}: {cause}",
            error_code=ErrorCode.STORAGE_WRITE_ERROR,
            path=path,
            cause=cause,
        )


class LogDirectoryError(StorageException):
    def __init__(
        self,
        path: str,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=f"Failed to create build logs directory {path}: {cause}",
            error_code=ErrorCode.STORAGE_DIRECTORY_ERROR,
            path=path,
            cause=cause,
        )


class ResourceNotFoundError(StorageException):
    def __init__(self, uri: str):
        super().__init__(
            message=f"Unknown resource: {uri}",
            error_code=ErrorCode.STORAGE_NOT_FOUND,
            details={"uri": uri},
        )
        self.uri = uri


class LogReadError(StorageException):
    def __init__(
        self,
        path: str,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=f"Failed to read build log: {cause}",
            error_code=ErrorCode.STORAGE_READ_ERROR,
            path=path,
            cause=cause,
        )
