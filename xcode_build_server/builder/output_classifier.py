from typing import Optional, Dict, Any, List, Union
from dataclasses import dataclass, field
import json
import re

from xcode_build_server.common.config.constants import (
    InvocationAction,
    BUILD_FAILED_BANNER,
    TEST_FAILED_BANNER,
    BUILD_BANNER_PREFIX,
    XCODEBUILD_PATH_MARKER,
    CANDIDATE_NOTE_MARKER,
    ERROR_LINE_PATTERN,
    DIAGNOSTIC_RECORD_TYPE,
    ERROR_SEVERITY,
    WARNING_SEVERITY,
)
from xcode_build_server.common.config.logging_config import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class RawLine:
    text: str

    def to_json(self) -> Any:
        return self.text

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class StructuredLine:
    record: Dict[str, Any]

    @property
    def record_type(self) -> Optional[str]:
        return self.record.get("type")

    @property
    def severity(self) -> Optional[str]:
        diagnostic = self.record.get("diagnostic")
        if isinstance(diagnostic, dict) and "severity" in diagnostic:
            return diagnostic.get("severity")
        return self.record.get("severity")

    @property
    def is_diagnostic(self) -> bool:
        return self.record_type == DIAGNOSTIC_RECORD_TYPE

    def to_json(self) -> Any:
        return self.record

    def render(self) -> str:
        return json.dumps(self.record, separators=(",", ":"), ensure_ascii=False)


OutputLine = Union[RawLine, StructuredLine]


@dataclass
class ClassifiedOutput:
    lines: List[OutputLine] = field(default_factory=list)
    kept: List[OutputLine] = field(default_factory=list)
    success: bool = True
    filtered: bool = False

    def to_json(self) -> List[Any]:
        return [line.to_json() for line in self.kept]

    def render(self) -> str:
        return "\n".join(line.render() for line in self.kept)

    def counts(self) -> Dict[str, int]:
        structured = [line for line in self.lines if isinstance(line, StructuredLine)]
        diagnostics = [line for line in structured if line.is_diagnostic]
        return {
            "raw": len(self.lines) - len(structured),
            "structured": len(structured),
            "kept": len(self.kept),
            "errors": sum(1 for d in diagnostics if d.severity == ERROR_SEVERITY),
            "warnings": sum(1 for d in diagnostics if d.severity == WARNING_SEVERITY),
        }


class OutputClassifier:
    ERROR_LINE_RE = re.compile(ERROR_LINE_PATTERN)

    def decode_lines(self, stdout: str) -> List[OutputLine]:
        lines: List[OutputLine] = []
        for line in stdout.split("\n"):
            if not line.strip():
                continue
            lines.append(self.decode_line(line))
        return lines

    def decode_line(self, line: str) -> OutputLine:
        try:
            value = json.loads(line)
        except ValueError:
            return RawLine(line)

        if isinstance(value, dict):
            return StructuredLine(value)
        return RawLine(line)

    def is_significant(self, line: OutputLine) -> bool:
        if isinstance(line, RawLine):
            text = line.text
            if text.startswith(XCODEBUILD_PATH_MARKER) or BUILD_BANNER_PREFIX in text:
                return True
            if self.ERROR_LINE_RE.match(text) or CANDIDATE_NOTE_MARKER in text:
                return True
            return False

        return line.is_diagnostic and line.severity == ERROR_SEVERITY

    def filter_build_output(self, lines: List[OutputLine]) -> List[OutputLine]:
        return [line for line in lines if self.is_significant(line)]

    def detect_success(self, stdout: str, action: InvocationAction) -> bool:
        if BUILD_FAILED_BANNER in stdout:
            return False
        if action == InvocationAction.TEST and TEST_FAILED_BANNER in stdout:
            return False
        return True

    def classify(
        self,
        stdout: str,
        action: InvocationAction,
        include_warnings: bool = False,
    ) -> ClassifiedOutput:
        lines = self.decode_lines(stdout)
        apply_filter = action == InvocationAction.BUILD and not include_warnings
        kept = self.filter_build_output(lines) if apply_filter else list(lines)

        result = ClassifiedOutput(
            lines=lines,
            kept=kept,
            success=self.detect_success(stdout, action),
            filtered=apply_filter,
        )
        logger.debug(f"Classified {action.value} output: {result.counts()}")
        return result
