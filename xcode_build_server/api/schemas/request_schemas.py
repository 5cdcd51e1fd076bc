from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, ConfigDict, field_validator

from xcode_build_server.common.config.constants import InvocationAction
from xcode_build_server.common.dto.invocation import InvocationRequest


class BuildProjectArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    project_path: str = Field(
        ...,
        alias="projectPath",
        min_length=1,
        description="Path to the .xcodeproj or .xcworkspace",
    )
    scheme: str = Field(..., min_length=1, description="Build scheme name")
    configuration: Optional[str] = Field(
        None,
        description="Build configuration (e.g., Debug, Release)",
        json_schema_extra={"default": "Debug"},
    )
    destination: Optional[str] = Field(
        None,
        description="Build destination (e.g., 'platform=iOS Simulator,name=iPhone 15 Pro')",
    )
    include_warnings: bool = Field(
        False,
        alias="includeWarnings",
        description="Include warnings in the filtered build output",
    )

    def to_invocation_request(self) -> InvocationRequest:
        return InvocationRequest(
            project_path=self.project_path,
            scheme=self.scheme,
            configuration=self.configuration,
            destination=self.destination,
            action=InvocationAction.BUILD,
            include_warnings=self.include_warnings,
        )


class RunTestsArguments(BuildProjectArguments):
    scheme: str = Field(..., min_length=1, description="Test scheme name")
    test_identifier: Optional[str] = Field(
        None,
        alias="testIdentifier",
        description="Optional specific test to run (e.g., 'MyTests/testExample')",
    )
    skip_tests: List[str] = Field(
        default_factory=list,
        alias="skipTests",
        description="Optional array of test identifiers to skip",
    )

    @field_validator("skip_tests", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def to_invocation_request(self) -> InvocationRequest:
        return InvocationRequest(
            project_path=self.project_path,
            scheme=self.scheme,
            configuration=self.configuration,
            destination=self.destination,
            action=InvocationAction.TEST,
            test_identifier=self.test_identifier,
            skip_tests=self.skip_tests,
            include_warnings=self.include_warnings,
        )


class ToolCallRequest(BaseModel):
    name: str = Field(..., description="Tool name")
    arguments: Dict[str, Any] = Field(default_factory=dict)
