from typing import Optional, List
from pathlib import Path

from xcode_build_server.builder.command_builder import CommandBuilder
from xcode_build_server.builder.output_classifier import OutputClassifier
from xcode_build_server.builder.process_executor import ProcessExecutor
from xcode_build_server.builder.result_bundle import ResultBundleProcessor
from xcode_build_server.common.config.constants import (
    InvocationAction,
    ArtifactKind,
    LATEST_LOG_URI,
)
from xcode_build_server.common.config.settings import Settings, get_settings
from xcode_build_server.common.config.logging_config import get_logger, get_invocation_logger
from xcode_build_server.common.dto.invocation import (
    InvocationRequest,
    InvocationResult,
    ArtifactOutcome,
    ResourceDescriptor,
)
from xcode_build_server.common.exceptions.storage_exceptions import (
    ArtifactWriteError,
    ResourceNotFoundError,
    LogReadError,
)
from xcode_build_server.common.utils.time_utils import TimestampTokenSource, Timer
from xcode_build_server.storage.artifact_storage import ArtifactStorage
from xcode_build_server.storage.latest_result import LatestResultPointer


logger = get_logger(__name__)


def _with_action(request: InvocationRequest, action: InvocationAction) -> InvocationRequest:
    return InvocationRequest.model_validate({**request.model_dump(), "action": action})


class XcodeBuildOrchestrator:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        executor: Optional[ProcessExecutor] = None,
        token_source: Optional[TimestampTokenSource] = None,
    ):
        self._settings = settings or get_settings()
        self._storage = ArtifactStorage(self._settings.get_log_dir())
        self._command_builder = CommandBuilder(self._settings)
        self._executor = executor or ProcessExecutor(
            max_buffer_bytes=self._settings.max_buffer_bytes,
            timeout_seconds=self._settings.process_timeout_seconds,
        )
        self._classifier = OutputClassifier()
        self._bundle_processor = ResultBundleProcessor(
            self._command_builder,
            self._executor,
            self._storage,
            timeout_seconds=self._settings.extraction_timeout_seconds,
        )
        self._tokens = token_source or TimestampTokenSource()
        self._latest = LatestResultPointer()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def log_dir(self) -> Path:
        return self._storage.log_dir

    @property
    def latest_result(self) -> LatestResultPointer:
        return self._latest

    def initialize(self) -> None:
        self._storage.initialize()

    async def build_project(self, request: InvocationRequest) -> InvocationResult:
        if request.action != InvocationAction.BUILD:
            request = _with_action(request, InvocationAction.BUILD)
        return await self._invoke(request)

    async def run_tests(self, request: InvocationRequest) -> InvocationResult:
        if request.action != InvocationAction.TEST:
            request = _with_action(request, InvocationAction.TEST)
        return await self._invoke(request)

    async def invoke(self, request: InvocationRequest) -> InvocationResult:
        if request.is_test:
            return await self.run_tests(request)
        return await self.build_project(request)

    async def _invoke(self, request: InvocationRequest) -> InvocationResult:
        token = self._tokens.next_token()
        artifacts = self._storage.artifact_set(request.project_path, request.action, token)
        log = get_invocation_logger(request.action.value, token, request.scheme)

        self._storage.prepare_reports_dir(artifacts)
        command = self._command_builder.build_invocation_command(request, artifacts)

        timer = Timer().start()
        log.info(f"Starting {request.action.value} of {request.project_path}")
        outcome = await self._executor.execute(command, log_path=artifacts.raw_log)

        if not outcome.success:
            result = InvocationResult(
                success=False,
                output=outcome.error_output or "",
                log_path=str(artifacts.raw_log),
                action=request.action,
                timestamp=token,
                duration_seconds=timer.stop(),
            )
            log.error(f"{request.action.value.capitalize()} failed before completion")
            self._latest.update(artifacts.raw_log)
            return result

        classified = self._classifier.classify(
            outcome.stdout,
            request.action,
            include_warnings=request.include_warnings,
        )
        log.info(f"Output summary: {classified.counts()}")

        success = classified.success
        if request.action == InvocationAction.BUILD:
            output = classified.render()
        else:
            output = outcome.combined_output

        artifact_outcomes: List[ArtifactOutcome] = []
        try:
            self._storage.write_raw_log(artifacts, outcome.combined_output)
            artifact_outcomes.append(
                ArtifactOutcome(kind=ArtifactKind.RAW_LOG, path=str(artifacts.raw_log))
            )
        except ArtifactWriteError as e:
            log.error(f"Failed to write raw log: {e}")
            success = False
            output = f"{output}\n{e.message}" if output else e.message
            artifact_outcomes.append(ArtifactOutcome(kind=ArtifactKind.RAW_LOG, error=e.message))

        artifact_outcomes.append(self._storage.write_structured_log(artifacts, classified.to_json()))
        artifact_outcomes.extend(await self._bundle_processor.process(artifacts))

        result = InvocationResult(
            success=success,
            output=output,
            log_path=str(artifacts.raw_log),
            action=request.action,
            timestamp=token,
            duration_seconds=timer.stop(),
            artifacts=artifact_outcomes,
        )
        log.info(
            f"{request.action.value.capitalize()} finished: success={success} "
            f"in {timer.elapsed_formatted}"
        )
        self._latest.update(artifacts.raw_log)
        return result

    def list_resources(self) -> List[ResourceDescriptor]:
        if not self._latest.is_set():
            return []
        return [ResourceDescriptor()]

    def read_resource(self, uri: str) -> str:
        path = self._latest.current
        if uri != LATEST_LOG_URI or path is None:
            raise ResourceNotFoundError(uri)

        try:
            return self._storage.read_log(path)
        except OSError as e:
            logger.error(f"Failed to read latest build log {path}: {e}")
            raise LogReadError(path=str(path), cause=e) from e
