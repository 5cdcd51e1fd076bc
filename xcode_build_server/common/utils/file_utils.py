from pathlib import Path
from typing import Any, Union
import json
import os
import shutil
import tempfile

from xcode_build_server.common.exceptions.storage_exceptions import ArtifactWriteError


def ensure_directory(dir_path: Union[str, Path]) -> Path:
    dir_path = Path(dir_path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def write_text_file(
    file_path: Union[str, Path],
    content: str,
    encoding: str = "utf-8",
    atomic: bool = False,
) -> Path:
    file_path = Path(file_path)

    try:
        if not atomic:
            with open(file_path, "w", encoding=encoding) as f:
                f.write(content)
            return file_path

        temp_fd, temp_path = tempfile.mkstemp(
            dir=file_path.parent,
            prefix=f".{file_path.name}.",
            suffix=".tmp"
        )
        try:
            with os.fdopen(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
            shutil.move(temp_path, file_path)
        except Exception:
            os.unlink(temp_path)
            raise
        return file_path
    except OSError as e:
        raise ArtifactWriteError(path=str(file_path), cause=e) from e


def write_json_file(
    file_path: Union[str, Path],
    data: Any,
    indent: int = 2,
) -> Path:
    try:
        content = json.dumps(data, indent=indent, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ArtifactWriteError(path=str(file_path), cause=e) from e
    return write_text_file(file_path, content, atomic=True)
