from enum import Enum
from typing import Final


class InvocationAction(str, Enum):
    BUILD = "build"
    TEST = "test"


class ArtifactKind(str, Enum):
    RAW_LOG = "raw_log"
    STRUCTURED_LOG = "structured_log"
    BUILD_REPORT = "build_report"
    BUILD_REPORT_TEXT = "build_report_text"
    TEST_SUMMARY = "test_summary"
    COVERAGE = "coverage"


class ToolName(str, Enum):
    BUILD_PROJECT = "build_project"
    RUN_TESTS = "run_tests"


BUILD_FAILED_BANNER: Final[str] = "** BUILD FAILED **"
TEST_FAILED_BANNER: Final[str] = "** TEST FAILED **"
BUILD_BANNER_PREFIX: Final[str] = "** BUILD"

XCODEBUILD_PATH_MARKER: Final[str] = "/usr/bin/xcodebuild"
CANDIDATE_NOTE_MARKER: Final[str] = "note: found this candidate"
ERROR_LINE_PATTERN: Final[str] = r"^/.+:\d+:\d+: error:"

DIAGNOSTIC_RECORD_TYPE: Final[str] = "diagnostic"
ERROR_SEVERITY: Final[str] = "error"
WARNING_SEVERITY: Final[str] = "warning"

DEFAULT_CONFIGURATION: Final[str] = "Debug"
DEFAULT_DESTINATION: Final[str] = "platform=iOS Simulator,name=iPhone 15 Pro"

BUILD_REPORTS_DIR: Final[str] = "Build"
TEST_REPORTS_DIR: Final[str] = "TestReports"
RESULT_BUNDLE_SUFFIX: Final[str] = ".xcresult"
WORKSPACE_SUFFIX: Final[str] = ".xcworkspace"

LATEST_LOG_URI: Final[str] = "xcode-build://latest-log"
LATEST_LOG_NAME: Final[str] = "Latest Xcode Build Log"
LATEST_LOG_DESCRIPTION: Final[str] = "Most recent Xcode build output"
LATEST_LOG_MIME_TYPE: Final[str] = "text/plain"

SERVER_NAME: Final[str] = "xcode-build-server"

MAX_BUFFER_BYTES: Final[int] = 100 * 1024 * 1024
EXTRACTION_TIMEOUT_SECONDS: Final[int] = 300
READ_CHUNK_BYTES: Final[int] = 64 * 1024
