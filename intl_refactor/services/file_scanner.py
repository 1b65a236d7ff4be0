"""Directory walker yielding the source files of a project."""

import os
from pathlib import Path
from typing import List, Sequence, Union

import structlog

from ..errors import RootNotFoundError
from ..extraction.resource_locator import SKIP_DIRS
from ..models.literal import FileError

log = structlog.get_logger()


class FileScanner:
    """
    Collects source files under a root directory.

    Files are returned in sorted order. Tooling and build directories are
    not entered; subdirectories that cannot be listed are recorded in
    `errors` and skipped.
    """

    def __init__(self, root: Union[str, Path], extensions: Sequence[str] = (".dart",)):
        self.root = Path(root)
        self.extensions = tuple(extensions)
        self.errors: List[FileError] = []

    def scan(self) -> List[str]:
        """
        Walk the root directory.

        Returns:
            Sorted list of file paths with a matching extension

        Raises:
            RootNotFoundError: If the root is missing or not a directory
        """
        if not self.root.is_dir():
            raise RootNotFoundError(str(self.root))

        self.errors = []
        files = []
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=self._on_error):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
            for filename in filenames:
                if filename.endswith(self.extensions):
                    files.append(os.path.join(dirpath, filename))
        files.sort()
        log.debug("Scanned directory", root=str(self.root), files=len(files), errors=len(self.errors))
        return files

    def _on_error(self, error: OSError) -> None:
        reason = error.strerror or str(error)
        log.warning("Skipping directory", path=error.filename, reason=reason)
        self.errors.append(FileError(path=str(error.filename), reason=reason))
