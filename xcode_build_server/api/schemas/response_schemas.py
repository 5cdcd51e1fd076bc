from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime

from xcode_build_server.common.dto.invocation import InvocationResult, ResourceDescriptor


class TextContent(BaseModel):
    type: str = "text"
    text: str


class ArtifactResponse(BaseModel):
    kind: str
    path: Optional[str] = None
    error: Optional[str] = None


class ToolCallResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent]
    is_error: bool = Field(alias="isError")
    log_path: str = Field(alias="logPath")
    timestamp: str
    duration_seconds: float = Field(alias="durationSeconds")
    artifacts: List[ArtifactResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: InvocationResult) -> "ToolCallResponse":
        return cls(
            content=[TextContent(text=result.output)],
            is_error=not result.success,
            log_path=result.log_path,
            timestamp=result.timestamp,
            duration_seconds=result.duration_seconds,
            artifacts=[
                ArtifactResponse(kind=a.kind.value, path=a.path, error=a.error)
                for a in result.artifacts
            ],
        )


class ToolDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(alias="inputSchema")


class ToolListResponse(BaseModel):
    tools: List[ToolDefinition]


class ResourceListResponse(BaseModel):
    resources: List[ResourceDescriptor]


class ResourceContents(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uri: str
    mime_type: str = Field(alias="mimeType")
    text: str


class ReadResourceResponse(BaseModel):
    contents: List[ResourceContents]


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    components: Dict[str, str] = Field(default_factory=dict)
