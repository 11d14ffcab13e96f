# src/stashlog/sinks/file.py
"""File sink: appends rendered text to ``<log_dir>/<subdirectory>/<file_name>.log``.

The target directory is created when the sink is configured, not on every
write. Newly created directories are world-writable (0777) regardless of the
umask. Each write opens the file in append mode and closes it again, so
switching targets never leaves a stale handle behind.
"""

import re
from pathlib import Path
from typing import Any

from stashlog.core.logging import get_logger
from stashlog.sinks.errors import SinkConfigurationError

logger = get_logger(__name__)

DEFAULT_LOG_DIR = "_tmp"
DEFAULT_FILE_NAME = "logger"
LOG_SUFFIX = ".log"
DIR_MODE = 0o777

_DISALLOWED_CHARS = re.compile(r"[^\w./-]")
_REPEATED_SLASHES = re.compile(r"/+")


def _make_directory(directory: Path) -> None:
    """Create ``directory`` and any missing parents with mode ``DIR_MODE``.

    Directories that already exist keep their mode.
    """
    missing = [p for p in (directory, *directory.parents) if not p.exists()]
    directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    # mkdir masks the mode with the process umask; chmod does not
    for created in reversed(missing):
        created.chmod(DIR_MODE)


def sanitize_subdirectory(path: str) -> str:
    """Reduce a subdirectory path to word characters, dots, slashes and hyphens.

    Repeated slashes collapse to one, and leading/trailing slashes are
    trimmed, so the result is always relative.

    >>> sanitize_subdirectory("//app//run 1/$x/")
    'app/run1/x'
    """
    cleaned = _DISALLOWED_CHARS.sub("", path)
    return _REPEATED_SLASHES.sub("/", cleaned).strip("/")


class FileSink:
    """Append rendered log text to a file.

    Configuration options:
        log_dir: Base directory (default ``_tmp``)
        subdirectory: Optional path below ``log_dir``, sanitized
        file_name: File name without the ``.log`` suffix (default ``logger``)

    I/O errors raised while writing propagate to the caller.
    """

    _name = "file"

    def __init__(self) -> None:
        self._log_dir = Path(DEFAULT_LOG_DIR)
        self._subdirectory = ""
        self._file_name = DEFAULT_FILE_NAME

    @property
    def name(self) -> str:
        return self._name

    @property
    def directory(self) -> Path:
        if self._subdirectory:
            return self._log_dir / self._subdirectory
        return self._log_dir

    @property
    def path(self) -> Path:
        return self.directory / f"{self._file_name}{LOG_SUFFIX}"

    def configure(self, options: dict[str, Any]) -> None:
        """Set the target and create its directory.

        Raises:
            SinkConfigurationError: If a target component has the wrong type,
                the file name is empty, or the directory cannot be created
        """
        log_dir = options.get("log_dir", self._log_dir)
        if not isinstance(log_dir, str | Path) or str(log_dir) == "":
            raise SinkConfigurationError(self._name, f"'log_dir' must be a non-empty path, got {log_dir!r}")

        subdirectory = options.get("subdirectory", self._subdirectory)
        if not isinstance(subdirectory, str):
            raise SinkConfigurationError(
                self._name,
                f"'subdirectory' must be a string, got {type(subdirectory).__name__}",
            )

        file_name = options.get("file_name", self._file_name)
        if not isinstance(file_name, str) or file_name == "":
            raise SinkConfigurationError(self._name, f"'file_name' must be a non-empty string, got {file_name!r}")
        if "/" in file_name:
            raise SinkConfigurationError(self._name, f"'file_name' must not contain '/', got {file_name!r}")

        self._log_dir = Path(log_dir)
        self._subdirectory = sanitize_subdirectory(subdirectory)
        self._file_name = file_name

        try:
            _make_directory(self.directory)
        except OSError as e:
            raise SinkConfigurationError(self._name, f"Cannot create directory {self.directory}: {e}") from e

        logger.debug("File sink configured", path=str(self.path))

    def write(self, text: str) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(text)

    def close(self) -> None:
        """No-op: the file is opened and closed per write."""
        pass
