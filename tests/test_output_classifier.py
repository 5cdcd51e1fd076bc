"""Tests for OutputClassifier line decoding, filtering and success detection."""

import json

import pytest

from xcode_build_server.builder.output_classifier import (
    OutputClassifier,
    RawLine,
    StructuredLine,
    ClassifiedOutput,
)
from xcode_build_server.common.config.constants import InvocationAction


ERROR_RECORD = {"type": "diagnostic", "diagnostic": {"severity": "error", "message": "boom"}}
WARNING_RECORD = {"type": "diagnostic", "diagnostic": {"severity": "warning", "message": "meh"}}
INFO_RECORD = {"type": "build-started", "target": "App"}


def _stdout(*lines) -> str:
    return "\n".join(json.dumps(line) if isinstance(line, dict) else line for line in lines)


@pytest.fixture
def classifier() -> OutputClassifier:
    return OutputClassifier()


class TestDecoding:
    def test_plain_text_falls_back_to_raw(self, classifier):
        assert classifier.decode_line("** BUILD SUCCEEDED **") == RawLine("** BUILD SUCCEEDED **")

    def test_json_object_becomes_structured(self, classifier):
        line = classifier.decode_line(json.dumps(INFO_RECORD))
        assert isinstance(line, StructuredLine)
        assert line.record_type == "build-started"

    def test_json_scalars_stay_raw(self, classifier):
        assert isinstance(classifier.decode_line("42"), RawLine)
        assert isinstance(classifier.decode_line("[1, 2]"), RawLine)

    def test_length_matches_non_empty_line_count(self, classifier):
        stdout = "\n".join([
            "/usr/bin/xcodebuild -project App.xcodeproj",
            "",
            json.dumps(INFO_RECORD),
            "   ",
            "{not json",
            json.dumps(ERROR_RECORD),
            "",
        ])
        assert len(classifier.decode_lines(stdout)) == 4

    def test_severity_read_from_nested_or_top_level(self):
        assert StructuredLine(ERROR_RECORD).severity == "error"
        assert StructuredLine({"type": "diagnostic", "severity": "warning"}).severity == "warning"
        assert StructuredLine(INFO_RECORD).severity is None


class TestBuildFilter:
    def test_warning_dropped_error_kept(self, classifier):
        result = classifier.classify(
            _stdout(WARNING_RECORD, ERROR_RECORD, INFO_RECORD), InvocationAction.BUILD,
        )

        assert result.filtered is True
        assert StructuredLine(ERROR_RECORD) in result.kept
        assert StructuredLine(WARNING_RECORD) not in result.kept
        assert StructuredLine(INFO_RECORD) not in result.kept

    def test_significant_raw_lines_kept(self, classifier):
        stdout = _stdout(
            "/usr/bin/xcodebuild -scheme App build",
            "Compiling main.swift",
            "/src/App/main.swift:10:5: error: cannot find 'foo' in scope",
            "/src/App/Other.swift:3:1: note: found this candidate",
            "src/relative.swift:1:1: error: not absolute",
            "** BUILD FAILED **",
        )

        kept = [line.render() for line in classifier.classify(stdout, InvocationAction.BUILD).kept]

        assert kept == [
            "/usr/bin/xcodebuild -scheme App build",
            "/src/App/main.swift:10:5: error: cannot find 'foo' in scope",
            "/src/App/Other.swift:3:1: note: found this candidate",
            "** BUILD FAILED **",
        ]

    def test_include_warnings_keeps_everything(self, classifier):
        stdout = _stdout("Compiling main.swift", WARNING_RECORD, INFO_RECORD)

        result = classifier.classify(stdout, InvocationAction.BUILD, include_warnings=True)

        assert result.filtered is False
        assert result.kept == result.lines
        assert len(result.kept) == 3

    def test_test_runs_are_not_filtered(self, classifier):
        stdout = _stdout("Test Case '-[AppTests testA]' passed", WARNING_RECORD)

        result = classifier.classify(stdout, InvocationAction.TEST)

        assert result.filtered is False
        assert len(result.kept) == 2


class TestSuccessDetection:
    def test_build_failed_banner_forces_failure(self, classifier):
        assert classifier.classify("** BUILD FAILED **", InvocationAction.BUILD).success is False

    def test_test_failed_banner_fails_test_runs(self, classifier):
        assert classifier.classify("** TEST FAILED **", InvocationAction.TEST).success is False

    def test_build_failed_banner_fails_test_runs(self, classifier):
        assert classifier.classify("** BUILD FAILED **", InvocationAction.TEST).success is False

    def test_no_banner_is_success(self, classifier):
        stdout = _stdout(WARNING_RECORD, "** BUILD SUCCEEDED **")
        assert classifier.classify(stdout, InvocationAction.BUILD).success is True

    def test_banner_detected_even_when_line_is_filtered(self, classifier):
        stdout = _stdout(json.dumps({"message": "** BUILD FAILED **"}))
        result = classifier.classify(stdout, InvocationAction.BUILD)
        assert result.kept == []
        assert result.success is False


class TestClassifiedOutput:
    def test_to_json_mixes_strings_and_records(self):
        output = ClassifiedOutput(kept=[RawLine("** BUILD FAILED **"), StructuredLine(ERROR_RECORD)])
        assert output.to_json() == ["** BUILD FAILED **", ERROR_RECORD]

    def test_counts(self, classifier):
        result = classifier.classify(
            _stdout("plain", ERROR_RECORD, WARNING_RECORD, INFO_RECORD), InvocationAction.BUILD,
        )
        assert result.counts() == {
            "raw": 1,
            "structured": 3,
            "kept": 1,
            "errors": 1,
            "warnings": 1,
        }
