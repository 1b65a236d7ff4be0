"""Persistent ARB resource table with merge, enrichment and cleaning."""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import structlog

from ..errors import ResourceWriteError
from ..extraction.arb_parser import ArbParser
from ..extraction.arb_writer import ArbWriter
from ..models.refactor_result import MergeReport
from ..models.resource_table import ResourceTable
from ..models.resource_value import PlainValue
from .key_generator import KeyFormat, KeyGenerator
from .variants import add_context_notes, enrich_value

log = structlog.get_logger()


class MergeMode(str, Enum):
    """How new entries are reconciled with stored ones."""

    DEDUPE = "dedupe"  # reuse the stored key of an identical value
    VERBATIM = "verbatim"  # always write the caller's key


def has_balanced_braces(text: str) -> bool:
    """Check that ICU placeholder braces open and close in order."""
    depth = 0
    for char in text:
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


class ResourceStore:
    """
    Base-language resource file for one locale (or one feature scope).

    The file is read on every merge so that edits made between runs are
    kept, and written back atomically once per merge.
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        locale: str = "en",
        key_format: Union[KeyFormat, str] = KeyFormat.SNAKE_CASE,
        merge_mode: Union[MergeMode, str] = MergeMode.DEDUPE,
    ):
        self.file_path = Path(file_path)
        self.locale = locale
        self.key_generator = KeyGenerator(key_format)
        self.merge_mode = MergeMode(merge_mode)
        self.parser = ArbParser()
        self.writer = ArbWriter()
        self.table: Optional[ResourceTable] = None

    @staticmethod
    def default_path(output_dir: Union[str, Path], locale: str = "en", scope: Optional[str] = None) -> Path:
        """
        Resource file location inside an output directory.

        Args:
            output_dir: Directory holding the resource files
            locale: Base locale (app_<locale>.arb)
            scope: Feature name for a scoped file (feature_<scope>.arb)
        """
        name = f"feature_{scope}.arb" if scope else f"app_{locale}.arb"
        return Path(output_dir) / name

    def load(self) -> ResourceTable:
        """
        Read the resource file.

        A missing file gives an empty table. A file that cannot be parsed is
        logged and also treated as empty; it is replaced on the next write.
        """
        if not self.file_path.exists():
            self.table = ResourceTable()
            return self.table

        try:
            self.table = self.parser.parse(str(self.file_path))
        except (ValueError, OSError) as e:
            log.warning("Ignoring unreadable resource file", path=str(self.file_path), reason=str(e))
            self.table = ResourceTable()
        return self.table

    def _current(self) -> ResourceTable:
        return self.table if self.table is not None else self.load()

    def find_existing_key(self, value: str) -> Optional[str]:
        """
        Find the key a value is already stored under.

        Matches the plain string, and for plural/gender values the stored
        variant object the value would be turned into.
        """
        table = self._current()
        key = table.key_for_value(value)
        if key is not None:
            return key
        enriched = enrich_value(value)
        if isinstance(enriched, PlainValue):
            return None
        return table.key_for_json(enriched.to_json())

    def merge(self, new_entries: Dict[str, str]) -> MergeReport:
        """
        Merge key/value pairs into the resource file.

        Args:
            new_entries: Mapping of key -> literal value

        Returns:
            MergeReport with added, reused, renamed and annotated keys

        Raises:
            ResourceWriteError: If the directory or file cannot be written
        """
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ResourceWriteError(str(self.file_path), str(e)) from e

        table = self.load()
        entries: Dict[str, Any] = dict(table.entries)
        report = MergeReport()

        for key, value in new_entries.items():
            stored = enrich_value(value).to_json()

            if self.merge_mode is MergeMode.DEDUPE:
                existing_key = self._key_holding(entries, value, stored)
                if existing_key is not None:
                    report.reused[value] = existing_key
                    continue

            if key in entries:
                if entries[key] == stored:
                    report.reused[value] = key
                    continue
                new_key = KeyGenerator.make_key_unique(key, set(entries))
                log.info("Renamed colliding key", key=key, stored_as=new_key, path=str(self.file_path))
                report.renamed[key] = new_key
                key = new_key

            entries[key] = stored
            report.added.append(key)

        entries, report.annotated = add_context_notes(entries)

        self.table = ResourceTable(entries=entries)
        self.writer.write(self.table, str(self.file_path))
        log.info(
            "Resource file updated",
            path=str(self.file_path),
            added=report.added_count,
            reused=len(report.reused),
            annotated=len(report.annotated),
        )
        return report

    def merge_values(self, values: Iterable[str]) -> Tuple[Dict[str, str], MergeReport]:
        """
        Suggest keys for values and merge them.

        Values already stored keep their stored key.

        Returns:
            Tuple of (value -> key as written, MergeReport)
        """
        table = self.load()
        key_map = self.key_generator.assign(
            values,
            existing_keys=set(table.entries),
            resolve_existing=self.find_existing_key,
        )
        return self.merge_key_map(key_map)

    def merge_key_map(self, key_map: Dict[str, str]) -> Tuple[Dict[str, str], MergeReport]:
        """
        Merge a value -> key assignment and return the keys actually stored.

        A value can end up under another key when an equivalent value is
        already stored, or when its key was taken by a different value.
        """
        report = self.merge({key: value for value, key in key_map.items()})
        stored = {value: report.stored_key(value, key) for value, key in key_map.items()}
        return stored, report

    def clean_invalid_entries(self) -> List[str]:
        """
        Remove entries that cannot be used as messages.

        An entry is removed when its key is neither an identifier nor a
        dotted identifier, or one of its strings has unbalanced braces. Its
        "@key" metadata goes with it; "@@" keys are kept.

        Returns:
            The removed keys
        """
        table = self.load()
        removed = [
            key for key in table.message_keys()
            if not KeyGenerator.is_resource_key(key) or not self._is_well_formed(table.entries[key])
        ]
        if not removed:
            return []

        dropped = set(removed) | {f"@{key}" for key in removed}
        entries = {key: value for key, value in table.entries.items() if key not in dropped}
        self.table = ResourceTable(entries=entries)
        self.writer.write(self.table, str(self.file_path))
        log.info("Removed invalid entries", path=str(self.file_path), keys=removed)
        return removed

    @staticmethod
    def _is_well_formed(value: Any) -> bool:
        if isinstance(value, str):
            return has_balanced_braces(value)
        if isinstance(value, dict):
            return all(has_balanced_braces(v) for v in value.values() if isinstance(v, str))
        return True

    @staticmethod
    def _key_holding(entries: Dict[str, Any], value: str, stored: Any) -> Optional[str]:
        for key, existing in entries.items():
            if key.startswith("@"):
                continue
            if existing == value or existing == stored:
                return key
        return None
