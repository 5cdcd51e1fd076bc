from typing import Optional, List, Union
from dataclasses import dataclass
import asyncio
import os
import signal
from pathlib import Path

from xcode_build_server.common.config.constants import MAX_BUFFER_BYTES, READ_CHUNK_BYTES
from xcode_build_server.common.config.logging_config import get_logger
from xcode_build_server.common.exceptions.build_exceptions import (
    ToolchainExecutionError,
    CommandFailedError,
    CommandTimeoutError,
    OutputLimitExceededError,
)
from xcode_build_server.common.exceptions.storage_exceptions import ArtifactWriteError
from xcode_build_server.common.utils.file_utils import write_text_file


logger = get_logger(__name__)


@dataclass
class ProcessOutput:
    stdout: str
    stderr: str
    exit_code: int


@dataclass
class ExecutionOutcome:
    success: bool
    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = None
    error_output: Optional[str] = None

    @property
    def combined_output(self) -> str:
        return self.stdout + self.stderr


class _BufferLimitReached(Exception):
    pass


class _OutputBudget:
    def __init__(self, limit_bytes: int):
        self.limit_bytes = limit_bytes
        self.used_bytes = 0

    def consume(self, size: int) -> None:
        self.used_bytes += size
        if self.used_bytes > self.limit_bytes:
            raise _BufferLimitReached()


class ProcessExecutor:
    def __init__(
        self,
        max_buffer_bytes: int = MAX_BUFFER_BYTES,
        timeout_seconds: Optional[float] = None,
    ):
        self._max_buffer_bytes = max_buffer_bytes
        self._timeout_seconds = timeout_seconds

    async def execute(
        self,
        command: str,
        log_path: Optional[Union[str, Path]] = None,
        timeout_seconds: Optional[float] = None,
    ) -> ExecutionOutcome:
        try:
            output = await self.run(command, timeout_seconds=timeout_seconds)
        except ToolchainExecutionError as e:
            logger.error(f"Toolchain command failed: {e}")
            return self._failed(e.error_output, log_path, e.stdout, e.stderr,
                                getattr(e, "exit_code", None))
        except OSError as e:
            logger.error(f"Failed to start toolchain command: {e}")
            return self._failed(f"Command failed: {command}\n{e}", log_path)

        return ExecutionOutcome(
            success=True,
            stdout=output.stdout,
            stderr=output.stderr,
            exit_code=output.exit_code,
        )

    async def run(
        self,
        command: str,
        timeout_seconds: Optional[float] = None,
    ) -> ProcessOutput:
        timeout = timeout_seconds if timeout_seconds is not None else self._timeout_seconds
        logger.debug(f"Running command: {command}")

        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )

        budget = _OutputBudget(self._max_buffer_bytes)
        stdout_chunks: List[bytes] = []
        stderr_chunks: List[bytes] = []
        readers = [
            asyncio.ensure_future(self._drain(process.stdout, stdout_chunks, budget)),
            asyncio.ensure_future(self._drain(process.stderr, stderr_chunks, budget)),
        ]

        try:
            exit_code = await asyncio.wait_for(self._collect(process, readers), timeout=timeout)
        except asyncio.TimeoutError:
            await self._terminate(process, readers)
            raise CommandTimeoutError(
                command=command,
                timeout_seconds=timeout,
                stdout=self._decode(stdout_chunks),
                stderr=self._decode(stderr_chunks),
            )
        except _BufferLimitReached:
            await self._terminate(process, readers)
            raise OutputLimitExceededError(
                command=command,
                limit_bytes=self._max_buffer_bytes,
                stdout=self._decode(stdout_chunks),
                stderr=self._decode(stderr_chunks),
            )

        stdout = self._decode(stdout_chunks)
        stderr = self._decode(stderr_chunks)

        if exit_code != 0:
            raise CommandFailedError(
                command=command,
                exit_code=exit_code,
                stdout=stdout,
                stderr=stderr,
            )

        return ProcessOutput(stdout=stdout, stderr=stderr, exit_code=exit_code)

    async def _collect(
        self,
        process: asyncio.subprocess.Process,
        readers: List[asyncio.Future],
    ) -> int:
        await asyncio.gather(*readers)
        return await process.wait()

    async def _drain(
        self,
        stream: asyncio.StreamReader,
        chunks: List[bytes],
        budget: _OutputBudget,
    ) -> None:
        while True:
            chunk = await stream.read(READ_CHUNK_BYTES)
            if not chunk:
                break
            budget.consume(len(chunk))
            chunks.append(chunk)

    async def _terminate(
        self,
        process: asyncio.subprocess.Process,
        readers: List[asyncio.Future],
    ) -> None:
        for reader in readers:
            reader.cancel()
        await asyncio.gather(*readers, return_exceptions=True)

        if process.returncode is None:
            try:
                os.killpg(os.getpgid(process.pid), signal.SIGKILL)
            except ProcessLookupError:
                pass
            await process.wait()

    def _failed(
        self,
        error_output: str,
        log_path: Optional[Union[str, Path]],
        stdout: str = "",
        stderr: str = "",
        exit_code: Optional[int] = None,
    ) -> ExecutionOutcome:
        if log_path is not None:
            try:
                write_text_file(log_path, error_output)
            except ArtifactWriteError as e:
                logger.error(f"Failed to record command failure in {log_path}: {e.cause}")

        return ExecutionOutcome(
            success=False,
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
            error_output=error_output,
        )

    @staticmethod
    def _decode(chunks: List[bytes]) -> str:
        return b"".join(chunks).decode("utf-8", errors="replace")
