from xcode_build_server.builder.command_builder import CommandBuilder
from xcode_build_server.builder.process_executor import (
    ProcessExecutor,
    ProcessOutput,
    ExecutionOutcome,
)
from xcode_build_server.builder.output_classifier import (
    OutputClassifier,
    ClassifiedOutput,
    OutputLine,
    RawLine,
    StructuredLine,
)
from xcode_build_server.builder.result_bundle import ResultBundleProcessor

__all__ = [
    "CommandBuilder",
    "ProcessExecutor",
    "ProcessOutput",
    "ExecutionOutcome",
    "OutputClassifier",
    "ClassifiedOutput",
    "OutputLine",
    "RawLine",
    "StructuredLine",
    "ResultBundleProcessor",
]
