from typing import Optional, List
import shlex

from xcode_build_server.common.config.constants import WORKSPACE_SUFFIX
from xcode_build_server.common.config.settings import Settings, get_settings
from xcode_build_server.common.config.logging_config import get_logger
from xcode_build_server.common.dto.invocation import InvocationRequest
from xcode_build_server.storage.artifact_storage import LogArtifactSet


logger = get_logger(__name__)


class CommandBuilder:
    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def resolve_configuration(self, request: InvocationRequest) -> str:
        return request.configuration or self._settings.default_configuration

    def resolve_destination(self, request: InvocationRequest) -> str:
        return request.destination or self._settings.default_destination

    def build_invocation_command(
        self,
        request: InvocationRequest,
        artifacts: LogArtifactSet,
    ) -> str:
        xcodebuild = self._settings.xcodebuild_binary

        args = [xcodebuild]
        args.extend(self._container_args(request.project_path))
        args.extend([
            "-scheme", request.scheme,
            "-configuration", self.resolve_configuration(request),
            "-destination", self.resolve_destination(request),
            "-resultBundlePath", str(artifacts.result_bundle),
        ])

        if request.is_test:
            args.extend(["-enableCodeCoverage", "YES"])

        args.extend(["-UseModernBuildSystem=YES", "-json"])
        args.extend(self._action_args(request))

        command = (
            f"which {shlex.quote(xcodebuild)} && "
            f"{self._join(args)} 2>&1 | tee {shlex.quote(str(artifacts.raw_log))}"
        )
        logger.debug(f"Composed {request.action.value} command: {command}")
        return command

    def build_result_summary_command(self, bundle_path: str, output_format: str = "json") -> str:
        args = [
            self._settings.xcrun_binary, "xcresulttool", "get",
            "--format", output_format,
            "--path", bundle_path,
        ]
        if self._settings.xcresulttool_legacy:
            args.append("--legacy")
        return self._join(args)

    def build_coverage_command(self, bundle_path: str) -> str:
        return self._join([
            self._settings.xcrun_binary, "xccov", "view", "--report", bundle_path,
        ])

    def _container_args(self, project_path: str) -> List[str]:
        flag = "-workspace" if project_path.rstrip("/").endswith(WORKSPACE_SUFFIX) else "-project"
        return [flag, project_path]

    def _action_args(self, request: InvocationRequest) -> List[str]:
        if not request.is_test:
            return ["clean", "build"]

        args = ["clean", "test"]
        if request.test_identifier:
            args.append(f"-only-testing:{request.test_identifier}")
        for test in request.skip_tests:
            args.append(f"-skip-testing:{test}")
        return args

    @staticmethod
    def _join(args: List[str]) -> str:
        return " ".join(shlex.quote(arg) for arg in args)
