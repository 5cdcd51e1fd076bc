from xcode_build_server.common.dto.base import BaseDTO, TimestampMixin
from xcode_build_server.common.dto.invocation import (
    InvocationRequest,
    InvocationResult,
    ArtifactOutcome,
    ResourceDescriptor,
)

__all__ = [
    "BaseDTO",
    "TimestampMixin",
    "InvocationRequest",
    "InvocationResult",
    "ArtifactOutcome",
    "ResourceDescriptor",
]
