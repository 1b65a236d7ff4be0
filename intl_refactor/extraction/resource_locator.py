"""Locates an existing resource file for resolving accessor references."""

import os
import threading
from pathlib import Path
from typing import List, Optional, Sequence

import structlog

from ..models.resource_table import ResourceTable
from .arb_parser import ArbParser

log = structlog.get_logger()

CANDIDATE_PATHS: List[str] = [
    "lib/l10n/app_en.arb",
    "lib/l10n/intl_en.arb",
    "l10n/app_en.arb",
    "assets/l10n/app_en.arb",
    "lib/l10n/app_localizations_en.arb",
]

SKIP_DIRS = frozenset({
    ".git",
    ".hg",
    ".svn",
    ".dart_tool",
    ".idea",
    ".vscode",
    "build",
    ".pub-cache",
    "node_modules",
    "Pods",
    ".gradle",
    "__pycache__",
})


class ResourceLocator:
    """
    Finds and loads the resource file used for reverse lookups.

    Conventional locations are checked first, then the tree under the
    search root is walked in sorted order, so the same tree always yields
    the same file. Missing files and unreadable directories are tolerated.
    """

    def __init__(
        self,
        search_root: Optional[str] = None,
        candidates: Sequence[str] = tuple(CANDIDATE_PATHS),
        extension: str = ".arb",
    ):
        self.search_root = Path(search_root) if search_root else Path.cwd()
        self.candidates = list(candidates)
        self.extension = extension
        self.parser = ArbParser()
        self._lock = threading.Lock()
        self._loaded = False
        self._table: Optional[ResourceTable] = None
        self._path: Optional[Path] = None

    def find(self) -> Optional[Path]:
        """Return the first resource file found, or None."""
        for candidate in self.candidates:
            path = self.search_root / candidate
            if path.is_file():
                return path
        return self._walk()

    def _walk(self) -> Optional[Path]:
        if not self.search_root.is_dir():
            return None
        for dirpath, dirnames, filenames in os.walk(self.search_root, onerror=self._on_walk_error):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
            for filename in sorted(filenames):
                if filename.endswith(self.extension):
                    return Path(dirpath) / filename
        return None

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        log.debug("Skipping unreadable directory", path=error.filename, error=str(error))

    def load(self) -> Optional[ResourceTable]:
        """Load the resource table once; later calls return the cached table."""
        with self._lock:
            if not self._loaded:
                self._table = self._read()
                self._loaded = True
        return self._table

    def _read(self) -> Optional[ResourceTable]:
        path = self.find()
        if path is None:
            log.debug("No resource file found for reverse lookup", root=str(self.search_root))
            return None
        try:
            table = self.parser.parse(str(path))
        except (OSError, ValueError) as e:
            log.warning("Could not read resource file", path=str(path), error=str(e))
            return None
        self._path = path
        return table

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def resolve(self, key: str) -> Optional[str]:
        """Resolve a key back to its stored value."""
        table = self.load()
        if table is None:
            return None
        return table.lookup(key)
