"""Data models for rewrite outcomes and run summaries."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .literal import FileError


@dataclass
class RefactorRecord:
    """Represents the result of rewriting a single file."""

    content: str
    changed: bool
    path: str = ""
    uses_accessor_pattern: bool = True
    replacements: int = 0
    written: bool = False
    error: Optional[str] = None

    @property
    def import_needed(self) -> bool:
        """Check if the accessor import has to be added to this file."""
        return self.changed and self.uses_accessor_pattern

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class MergeReport:
    """Statistics for one resource store merge."""

    added: List[str] = field(default_factory=list)
    reused: Dict[str, str] = field(default_factory=dict)  # value -> existing key
    renamed: Dict[str, str] = field(default_factory=dict)  # requested key -> stored key
    annotated: List[str] = field(default_factory=list)

    @property
    def added_count(self) -> int:
        return len(self.added)

    def stored_key(self, value: str, requested_key: str) -> str:
        """The key a value ended up under after this merge."""
        if value in self.reused:
            return self.reused[value]
        return self.renamed.get(requested_key, requested_key)


@dataclass
class RunSummary:
    """Counts reported at the end of a run."""

    files_scanned: int = 0
    strings_found: int = 0
    files_changed: int = 0
    entries_added: int = 0
    resource_path: Optional[str] = None
    dry_run: bool = False
    skipped: List[FileError] = field(default_factory=list)
    records: List[RefactorRecord] = field(default_factory=list)
    key_map: Dict[str, str] = field(default_factory=dict)

    @property
    def files_skipped(self) -> int:
        return len(self.skipped)
