"""Tests for XcodeBuildOrchestrator end-to-end flow with a stubbed executor."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from xcode_build_server.builder.process_executor import ExecutionOutcome
from xcode_build_server.common.config.constants import (
    InvocationAction,
    ArtifactKind,
    LATEST_LOG_URI,
)
from xcode_build_server.common.dto.invocation import InvocationRequest
from xcode_build_server.common.exceptions.storage_exceptions import (
    ArtifactWriteError,
    ResourceNotFoundError,
    LogReadError,
)

from tests.conftest import executed_commands


ERROR_LINE = json.dumps({"type": "diagnostic", "diagnostic": {"severity": "error", "message": "x"}})
WARNING_LINE = json.dumps({"type": "diagnostic", "diagnostic": {"severity": "warning", "message": "y"}})


def _build_request(project_path: str, **kwargs) -> InvocationRequest:
    return InvocationRequest(project_path=project_path, scheme="App", **kwargs)


def _test_request(project_path: str, **kwargs) -> InvocationRequest:
    return InvocationRequest(
        project_path=project_path, scheme="AppTests", action=InvocationAction.TEST, **kwargs,
    )


class TestBuildProject:
    @pytest.mark.asyncio
    async def test_successful_build(self, make_orchestrator, project_path):
        stdout = "\n".join([WARNING_LINE, "Compiling", "** BUILD SUCCEEDED **"])
        orchestrator = make_orchestrator(ExecutionOutcome(success=True, stdout=stdout, exit_code=0))

        result = await orchestrator.build_project(_build_request(project_path))

        assert result.success is True
        assert result.output == "** BUILD SUCCEEDED **"
        assert result.action == InvocationAction.BUILD
        log_path = Path(result.log_path)
        assert log_path.name == f"build-{result.timestamp}.log"
        assert log_path.read_text() == stdout
        assert json.loads(Path(f"{log_path}.json").read_text()) == ["** BUILD SUCCEEDED **"]

    @pytest.mark.asyncio
    async def test_failure_banner_overrides_zero_exit(self, make_orchestrator, project_path):
        stdout = "\n".join([ERROR_LINE, "** BUILD FAILED **"])
        orchestrator = make_orchestrator(ExecutionOutcome(success=True, stdout=stdout, exit_code=0))

        result = await orchestrator.build_project(_build_request(project_path))

        assert result.success is False
        lines = result.output.splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["diagnostic"]["severity"] == "error"
        assert lines[1] == "** BUILD FAILED **"

    @pytest.mark.asyncio
    async def test_include_warnings_keeps_all_lines(self, make_orchestrator, project_path):
        stdout = "\n".join([WARNING_LINE, "Compiling"])
        orchestrator = make_orchestrator(ExecutionOutcome(success=True, stdout=stdout))

        result = await orchestrator.build_project(_build_request(project_path, include_warnings=True))

        records = json.loads(Path(f"{result.log_path}.json").read_text())
        assert len(records) == 2
        assert "Compiling" in result.output

    @pytest.mark.asyncio
    async def test_executor_failure_returns_failed_result(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(
            ExecutionOutcome(success=False, error_output="Command failed: which xcodebuild")
        )

        result = await orchestrator.build_project(_build_request(project_path))

        assert result.success is False
        assert result.output == "Command failed: which xcodebuild"
        assert orchestrator.latest_result.current == Path(result.log_path)
        assert result.artifacts == []

    @pytest.mark.asyncio
    async def test_reports_dir_created_before_run(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(ExecutionOutcome(success=True, stdout=""))

        await orchestrator.build_project(_build_request(project_path))

        assert (Path(project_path).parent / "Build").is_dir()

    @pytest.mark.asyncio
    async def test_missing_bundle_skips_extraction(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(ExecutionOutcome(success=True, stdout="** BUILD SUCCEEDED **"))

        result = await orchestrator.build_project(_build_request(project_path))

        assert result.success is True
        assert orchestrator._executor.execute.await_count == 1
        assert {a.kind for a in result.artifacts} == {ArtifactKind.RAW_LOG, ArtifactKind.STRUCTURED_LOG}

    @pytest.mark.asyncio
    async def test_raw_log_write_failure_fails_invocation(self, make_orchestrator, project_path, monkeypatch):
        orchestrator = make_orchestrator(ExecutionOutcome(success=True, stdout="** BUILD SUCCEEDED **"))

        def refuse(artifacts, content):
            raise ArtifactWriteError(path=str(artifacts.raw_log), cause=OSError("disk full"))

        monkeypatch.setattr(orchestrator._storage, "write_raw_log", refuse)

        result = await orchestrator.build_project(_build_request(project_path))

        assert result.success is False
        assert "disk full" in result.output
        assert result.get_artifact(ArtifactKind.RAW_LOG).failed

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(RuntimeError("executor exploded"))

        with pytest.raises(RuntimeError):
            await orchestrator.build_project(_build_request(project_path))

    @pytest.mark.asyncio
    async def test_test_only_options_rejected_for_build(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator()
        request = _test_request(project_path, skip_tests=["AppTests/testSlow"])

        with pytest.raises(ValidationError, match="apply only to test runs"):
            await orchestrator.build_project(request)

        assert orchestrator._executor.execute.await_count == 0
        assert orchestrator.list_resources() == []


class TestRunTests:
    @pytest.mark.asyncio
    async def test_output_is_unfiltered_stdout_and_stderr(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(ExecutionOutcome(
            success=True,
            stdout="Test Suite 'All tests' passed\n** TEST SUCCEEDED **\n",
            stderr="simulator warning\n",
        ))

        result = await orchestrator.run_tests(_test_request(project_path, skip_tests=["A/b", "C/d"]))

        assert result.success is True
        assert result.output == "Test Suite 'All tests' passed\n** TEST SUCCEEDED **\nsimulator warning\n"
        assert Path(result.log_path).name.startswith("test-")
        command = executed_commands(orchestrator._executor)[0]
        assert "-skip-testing:A/b -skip-testing:C/d" in command
        assert (Path(project_path).parent / "TestReports").is_dir()

    @pytest.mark.asyncio
    async def test_test_failure_banner(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(ExecutionOutcome(success=True, stdout="** TEST FAILED **"))

        result = await orchestrator.run_tests(_test_request(project_path))

        assert result.success is False

    @pytest.mark.asyncio
    async def test_bundle_extraction_failure_does_not_change_result(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(
            ExecutionOutcome(success=True, stdout="** TEST SUCCEEDED **"),
            ExecutionOutcome(success=False, error_output="xcresulttool failed"),
            ExecutionOutcome(success=True, stdout="coverage"),
        )
        bundle = (
            Path(project_path).parent / "TestReports"
            / "Reports-2024-03-01T12-30-45-123Z.xcresult"
        )
        bundle.mkdir(parents=True)

        result = await orchestrator.run_tests(_test_request(project_path))

        assert result.success is True
        assert result.get_artifact(ArtifactKind.TEST_SUMMARY).failed
        assert result.get_artifact(ArtifactKind.COVERAGE).written


class TestInvocationTokens:
    @pytest.mark.asyncio
    async def test_rapid_invocations_get_distinct_logs(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(
            ExecutionOutcome(success=True, stdout="first"),
            ExecutionOutcome(success=True, stdout="second"),
        )

        first = await orchestrator.build_project(_build_request(project_path))
        second = await orchestrator.build_project(_build_request(project_path))

        assert first.timestamp != second.timestamp
        assert first.log_path != second.log_path
        assert first.timestamp in first.log_path
        assert Path(first.log_path).read_text() == "first"


class TestReadBack:
    @pytest.mark.asyncio
    async def test_resources_empty_until_first_invocation(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(ExecutionOutcome(success=True, stdout="raw build output"))

        assert orchestrator.list_resources() == []
        with pytest.raises(ResourceNotFoundError):
            orchestrator.read_resource(LATEST_LOG_URI)

        await orchestrator.build_project(_build_request(project_path))

        resources = orchestrator.list_resources()
        assert len(resources) == 1
        assert resources[0].uri == LATEST_LOG_URI
        assert orchestrator.read_resource(LATEST_LOG_URI) == "raw build output"

    @pytest.mark.asyncio
    async def test_latest_pointer_follows_most_recent_attempt(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(
            ExecutionOutcome(success=True, stdout="good build"),
            ExecutionOutcome(success=False, error_output="second attempt failed"),
        )

        first = await orchestrator.build_project(_build_request(project_path))
        second = await orchestrator.run_tests(_test_request(project_path))

        assert first.success is True
        assert orchestrator.latest_result.current == Path(second.log_path)
        assert len(orchestrator.list_resources()) == 1

    @pytest.mark.asyncio
    async def test_unknown_uri(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(ExecutionOutcome(success=True, stdout="x"))
        await orchestrator.build_project(_build_request(project_path))

        with pytest.raises(ResourceNotFoundError):
            orchestrator.read_resource("xcode-build://something-else")

    @pytest.mark.asyncio
    async def test_deleted_log_raises_read_error(self, make_orchestrator, project_path):
        orchestrator = make_orchestrator(ExecutionOutcome(success=True, stdout="x"))
        result = await orchestrator.build_project(_build_request(project_path))
        Path(result.log_path).unlink()

        with pytest.raises(LogReadError):
            orchestrator.read_resource(LATEST_LOG_URI)
