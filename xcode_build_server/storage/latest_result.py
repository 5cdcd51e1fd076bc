from typing import Optional, Union
from pathlib import Path

from xcode_build_server.common.config.logging_config import get_logger


logger = get_logger(__name__)


class LatestResultPointer:
    """Holds the path of the most recently written raw log."""

    def __init__(self):
        self._path: Optional[Path] = None

    def update(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        logger.debug(f"Latest build log is now {self._path}")

    @property
    def current(self) -> Optional[Path]:
        return self._path

    def is_set(self) -> bool:
        return self._path is not None
