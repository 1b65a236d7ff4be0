"""Data models for literals found in source files."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True)
class Literal:
    """A candidate translatable string found in a source file."""

    value: str
    source_path: str = ""
    context: str = ""
    line: int = 0  # 1-based
    offset: int = 0  # absolute character offset of the opening quote


@dataclass(frozen=True)
class FileError:
    """A file that was skipped, and why."""

    path: str
    reason: str


@dataclass
class ExtractionResult:
    """
    Literal values per file, in first-occurrence order.

    Values are unique within a file; the same value may appear under
    several files.
    """

    files: Dict[str, List[str]] = field(default_factory=dict)

    def add(self, path: str, values: Iterable[str]) -> None:
        """Record the values found in a file, ignoring same-file duplicates."""
        existing = self.files.setdefault(path, [])
        seen = set(existing)
        for value in values:
            if value not in seen:
                existing.append(value)
                seen.add(value)
        if not existing:
            del self.files[path]

    def merge(self, other: "ExtractionResult") -> "ExtractionResult":
        """Return a new result holding this result's files followed by other's."""
        merged = ExtractionResult()
        for path, values in self.files.items():
            merged.add(path, values)
        for path, values in other.files.items():
            merged.add(path, values)
        return merged

    def unique_values(self) -> List[str]:
        """All values across files, deduplicated, in file then occurrence order."""
        seen = set()
        ordered = []
        for values in self.files.values():
            for value in values:
                if value not in seen:
                    seen.add(value)
                    ordered.append(value)
        return ordered

    def values_for(self, path: str) -> List[str]:
        return list(self.files.get(path, []))

    @property
    def total_strings(self) -> int:
        """Number of (file, value) pairs."""
        return sum(len(values) for values in self.files.values())

    def __len__(self) -> int:
        return len(self.files)

    def __bool__(self) -> bool:
        return bool(self.files)


@dataclass
class ScanResult:
    """Outcome of scanning a directory tree."""

    root: str
    extraction: ExtractionResult
    files_scanned: int = 0
    skipped: List[FileError] = field(default_factory=list)
    literals: Optional[Dict[str, List[Literal]]] = None
