"""Shared pytest fixtures for the xcode build server test suite."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from xcode_build_server.builder.process_executor import ExecutionOutcome, ProcessExecutor
from xcode_build_server.common.config.settings import Settings
from xcode_build_server.common.utils.time_utils import TimestampTokenSource
from xcode_build_server.orchestrator.coordinator import XcodeBuildOrchestrator


FIXED_NOW = datetime(2024, 3, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Paths & settings
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        base_dir=str(tmp_path / "base"),
        log_json=False,
    )


@pytest.fixture
def project_path(tmp_path: Path) -> str:
    project_dir = tmp_path / "App"
    project_dir.mkdir()
    return str(project_dir / "App.xcodeproj")


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def stepping_clock() -> Callable[[], datetime]:
    """Clock that advances one second per call."""
    ticks = {"n": 0}

    def clock() -> datetime:
        ticks["n"] += 1
        return FIXED_NOW + timedelta(seconds=ticks["n"])

    return clock


# ---------------------------------------------------------------------------
# Executor doubles
# ---------------------------------------------------------------------------

def make_executor(*outcomes: ExecutionOutcome) -> MagicMock:
    executor = MagicMock(spec=ProcessExecutor)
    executor.execute = AsyncMock(side_effect=list(outcomes))
    return executor


def executed_commands(executor: MagicMock) -> List[str]:
    return [call.args[0] for call in executor.execute.await_args_list]


@pytest.fixture
def make_orchestrator(settings: Settings, fixed_clock):
    def factory(*outcomes: ExecutionOutcome, executor=None) -> XcodeBuildOrchestrator:
        orchestrator = XcodeBuildOrchestrator(
            settings,
            executor=executor or make_executor(*outcomes),
            token_source=TimestampTokenSource(clock=fixed_clock),
        )
        orchestrator.initialize()
        return orchestrator

    return factory
