from typing import Optional, List, Callable, Tuple

from xcode_build_server.builder.command_builder import CommandBuilder
from xcode_build_server.builder.process_executor import ProcessExecutor
from xcode_build_server.common.config.constants import InvocationAction, ArtifactKind
from xcode_build_server.common.config.logging_config import get_logger
from xcode_build_server.common.dto.invocation import ArtifactOutcome
from xcode_build_server.common.exceptions.build_exceptions import ResultBundleExtractionError
from xcode_build_server.storage.artifact_storage import ArtifactStorage, LogArtifactSet


logger = get_logger(__name__)


class ResultBundleProcessor:
    """Best-effort extraction of reports from an .xcresult bundle."""

    def __init__(
        self,
        command_builder: CommandBuilder,
        executor: ProcessExecutor,
        storage: ArtifactStorage,
        timeout_seconds: Optional[float] = None,
    ):
        self._command_builder = command_builder
        self._executor = executor
        self._storage = storage
        self._timeout_seconds = timeout_seconds

    def bundle_exists(self, artifacts: LogArtifactSet) -> bool:
        return artifacts.result_bundle.exists()

    async def process(self, artifacts: LogArtifactSet) -> List[ArtifactOutcome]:
        if not self.bundle_exists(artifacts):
            logger.debug(f"No result bundle at {artifacts.result_bundle}, skipping extraction")
            return []

        outcomes: List[ArtifactOutcome] = []
        for kind, make_command in self._extractions(artifacts.action):
            command = make_command(str(artifacts.result_bundle))
            outcomes.append(await self._extract(artifacts, kind, command))

        written = sum(1 for o in outcomes if o.written)
        logger.info(f"Extracted {written}/{len(outcomes)} result bundle artifacts for {artifacts.token}")
        return outcomes

    def _extractions(
        self,
        action: InvocationAction,
    ) -> List[Tuple[ArtifactKind, Callable[[str], str]]]:
        builder = self._command_builder
        if action == InvocationAction.TEST:
            return [
                (ArtifactKind.TEST_SUMMARY, lambda path: builder.build_result_summary_command(path, "json")),
                (ArtifactKind.COVERAGE, builder.build_coverage_command),
            ]
        return [
            (ArtifactKind.BUILD_REPORT, lambda path: builder.build_result_summary_command(path, "json")),
            (ArtifactKind.BUILD_REPORT_TEXT, lambda path: builder.build_result_summary_command(path, "human-readable")),
        ]

    async def _extract(
        self,
        artifacts: LogArtifactSet,
        kind: ArtifactKind,
        command: str,
    ) -> ArtifactOutcome:
        outcome = await self._executor.execute(command, timeout_seconds=self._timeout_seconds)
        if not outcome.success:
            error = ResultBundleExtractionError(
                message=outcome.error_output or f"Extraction of {kind.value} failed",
                bundle_path=str(artifacts.result_bundle),
                artifact_kind=kind.value,
            )
            logger.error(f"Failed to process result bundle: {error}", extra={"error": error.to_dict()})
            return ArtifactOutcome(kind=kind, error=str(error))

        return self._storage.write_secondary(artifacts, kind, outcome.stdout)
