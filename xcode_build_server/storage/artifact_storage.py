from typing import Dict, Any, List, Union
from dataclasses import dataclass
from pathlib import Path

from xcode_build_server.common.config.constants import (
    InvocationAction,
    ArtifactKind,
    BUILD_REPORTS_DIR,
    TEST_REPORTS_DIR,
    RESULT_BUNDLE_SUFFIX,
)
from xcode_build_server.common.config.logging_config import get_logger
from xcode_build_server.common.dto.invocation import ArtifactOutcome
from xcode_build_server.common.exceptions.storage_exceptions import (
    ArtifactWriteError,
    LogDirectoryError,
)
from xcode_build_server.common.utils.file_utils import (
    ensure_directory,
    write_text_file,
    write_json_file,
)


logger = get_logger(__name__)


_SECONDARY_ARTIFACT_NAMES: Dict[ArtifactKind, str] = {
    ArtifactKind.BUILD_REPORT: "report-{token}.json",
    ArtifactKind.BUILD_REPORT_TEXT: "report-{token}.txt",
    ArtifactKind.TEST_SUMMARY: "test-summary-{token}.json",
    ArtifactKind.COVERAGE: "coverage-{token}.txt",
}


@dataclass(frozen=True)
class LogArtifactSet:
    token: str
    action: InvocationAction
    log_dir: Path
    project_dir: Path

    @classmethod
    def for_invocation(
        cls,
        log_dir: Union[str, Path],
        project_path: str,
        action: InvocationAction,
        token: str,
    ) -> "LogArtifactSet":
        return cls(
            token=token,
            action=action,
            log_dir=Path(log_dir),
            project_dir=Path(project_path).parent,
        )

    @property
    def raw_log(self) -> Path:
        return self.log_dir / f"{self.action.value}-{self.token}.log"

    @property
    def structured_log(self) -> Path:
        return self.raw_log.with_name(self.raw_log.name + ".json")

    @property
    def reports_dir(self) -> Path:
        subdir = TEST_REPORTS_DIR if self.action == InvocationAction.TEST else BUILD_REPORTS_DIR
        return self.project_dir / subdir

    @property
    def result_bundle(self) -> Path:
        return self.reports_dir / f"Reports-{self.token}{RESULT_BUNDLE_SUFFIX}"

    def secondary_path(self, kind: ArtifactKind) -> Path:
        name = _SECONDARY_ARTIFACT_NAMES.get(kind)
        if name is None:
            raise ValueError(f"{kind.value} is not a secondary artifact")
        return self.log_dir / name.format(token=self.token)


class ArtifactStorage:
    def __init__(self, log_dir: Union[str, Path]):
        self._log_dir = Path(log_dir)

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def initialize(self) -> Path:
        try:
            ensure_directory(self._log_dir)
        except OSError as e:
            logger.error(f"Failed to create build logs directory: {e}")
            raise LogDirectoryError(path=str(self._log_dir), cause=e) from e
        logger.info(f"Created build logs directory at {self._log_dir}")
        return self._log_dir

    def artifact_set(
        self,
        project_path: str,
        action: InvocationAction,
        token: str,
    ) -> LogArtifactSet:
        return LogArtifactSet.for_invocation(self._log_dir, project_path, action, token)

    def prepare_reports_dir(self, artifacts: LogArtifactSet) -> bool:
        try:
            ensure_directory(artifacts.reports_dir)
            return True
        except OSError as e:
            label = "test reports" if artifacts.action == InvocationAction.TEST else "build"
            logger.error(f"Failed to prepare {label} directory: {e}")
            return False

    def write_raw_log(self, artifacts: LogArtifactSet, content: str) -> Path:
        try:
            ensure_directory(self._log_dir)
        except OSError as e:
            raise ArtifactWriteError(path=str(artifacts.raw_log), cause=e) from e
        return write_text_file(artifacts.raw_log, content)

    def write_structured_log(
        self,
        artifacts: LogArtifactSet,
        records: List[Any],
    ) -> ArtifactOutcome:
        path = artifacts.structured_log
        try:
            write_json_file(path, records)
        except ArtifactWriteError as e:
            logger.error(f"Failed to write structured log {path}: {e.cause}")
            return ArtifactOutcome(kind=ArtifactKind.STRUCTURED_LOG, error=str(e.cause))
        return ArtifactOutcome(kind=ArtifactKind.STRUCTURED_LOG, path=str(path))

    def write_secondary(
        self,
        artifacts: LogArtifactSet,
        kind: ArtifactKind,
        content: str,
    ) -> ArtifactOutcome:
        path = artifacts.secondary_path(kind)
        try:
            write_text_file(path, content)
        except ArtifactWriteError as e:
            logger.error(f"Failed to write {kind.value} artifact {path}: {e.cause}")
            return ArtifactOutcome(kind=kind, error=str(e.cause))
        logger.debug(f"Wrote {kind.value} artifact to {path}")
        return ArtifactOutcome(kind=kind, path=str(path))

    def read_log(self, path: Union[str, Path]) -> str:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
