from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from xcode_build_server.common.dto.base import BaseDTO
from xcode_build_server.common.config.constants import (
    InvocationAction,
    ArtifactKind,
    LATEST_LOG_URI,
    LATEST_LOG_NAME,
    LATEST_LOG_DESCRIPTION,
    LATEST_LOG_MIME_TYPE,
)


class InvocationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    project_path: str = Field(description="Path to the .xcodeproj or .xcworkspace")
    scheme: str = Field(description="Build or test scheme name")
    configuration: Optional[str] = Field(default=None, description="Build configuration (e.g. Debug, Release)")
    destination: Optional[str] = Field(default=None, description="xcodebuild destination specifier")
    action: InvocationAction = Field(default=InvocationAction.BUILD)
    test_identifier: Optional[str] = Field(default=None)
    skip_tests: List[str] = Field(default_factory=list)
    include_warnings: bool = Field(default=False)

    @field_validator("project_path", "scheme")
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("configuration", "destination", "test_identifier")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @model_validator(mode="after")
    def validate_test_options(self) -> "InvocationRequest":
        if self.action == InvocationAction.BUILD:
            if self.test_identifier or self.skip_tests:
                raise ValueError("test_identifier and skip_tests apply only to test runs")
        return self

    @property
    def is_test(self) -> bool:
        return self.action == InvocationAction.TEST


class ArtifactOutcome(BaseModel):
    kind: ArtifactKind
    path: Optional[str] = None
    error: Optional[str] = None

    @property
    def written(self) -> bool:
        return self.path is not None and self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None


class InvocationResult(BaseDTO):
    # output is returned verbatim
    model_config = ConfigDict(str_strip_whitespace=False)

    success: bool
    output: str
    log_path: str
    action: InvocationAction
    timestamp: str
    duration_seconds: float = Field(default=0.0)
    artifacts: List[ArtifactOutcome] = Field(default_factory=list)

    def get_artifact(self, kind: ArtifactKind) -> Optional[ArtifactOutcome]:
        for artifact in self.artifacts:
            if artifact.kind == kind:
                return artifact
        return None


class ResourceDescriptor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uri: str = Field(default=LATEST_LOG_URI)
    name: str = Field(default=LATEST_LOG_NAME)
    mime_type: str = Field(default=LATEST_LOG_MIME_TYPE, alias="mimeType")
    description: str = Field(default=LATEST_LOG_DESCRIPTION)
