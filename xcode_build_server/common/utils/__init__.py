from xcode_build_server.common.utils.file_utils import (
    ensure_directory,
    write_text_file,
    write_json_file,
)
from xcode_build_server.common.utils.time_utils import (
    utc_now,
    format_duration,
    to_timestamp_token,
    TimestampTokenSource,
    Timer,
)

__all__ = [
    "ensure_directory",
    "write_text_file",
    "write_json_file",
    "utc_now",
    "format_duration",
    "to_timestamp_token",
    "TimestampTokenSource",
    "Timer",
]
