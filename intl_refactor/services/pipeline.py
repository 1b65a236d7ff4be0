"""Run-level orchestration: scan, assign keys, update resources, rewrite."""

import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import structlog

from ..config import Config, config as default_config
from ..extraction.arb_writer import write_text_atomic
from ..extraction.context import ExtractionContext
from ..extraction.string_extractor import StringExtractor
from ..generation.key_generator import KeyGenerator
from ..generation.resource_store import ResourceStore
from ..models.literal import ExtractionResult, FileError, Literal, ScanResult
from ..models.refactor_result import RefactorRecord, RunSummary
from ..refactoring.rewriter import Rewriter
from .file_scanner import FileScanner

log = structlog.get_logger()

ProgressCallback = Callable[[int, int, str], None]


def _reason(error: Exception) -> str:
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    return str(error)


class LocalizationPipeline:
    """
    Runs extraction and refactoring over a project tree.

    Phases:
    1. Scan: files are read and extracted concurrently, then joined in
       sorted path order
    2. Assign: keys are generated sequentially over all unique values
    3. Rewrite: files are rewritten concurrently with the fixed key table

    The resource file is written once, between phases 2 and 3. Per-file
    read and write failures are recorded and the batch continues.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        context: Optional[ExtractionContext] = None,
        progress: Optional[ProgressCallback] = None,
        search_root: Optional[str] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Settings for the run (uses the global config if not provided)
            context: Shared patterns and classifier (built from config if not provided)
            progress: Optional callback(done, total, path) called as files complete
            search_root: Where to look for a resource file for reverse lookups
        """
        self.config = config or default_config
        self.context = context or ExtractionContext.create(
            exclude_patterns=self.config.load_exclude_patterns(),
            accessor_class=self.config.accessor_class,
            search_root=search_root,
        )
        self.progress = progress
        self.extractor = StringExtractor(self.context)
        self.rewriter = Rewriter(self.context, import_line=self.config.import_line)

    def _report(self, done: int, total: int, path: str) -> None:
        if self.progress:
            self.progress(done, total, path)

    def resource_store(self, output_path: Optional[str] = None, scope: Optional[str] = None) -> ResourceStore:
        """Resource store for an explicit path, or the configured one."""
        path = Path(output_path) if output_path else self.config.resource_path(scope)
        return ResourceStore(
            path,
            locale=self.config.locale,
            key_format=self.config.key_format,
            merge_mode=self.config.merge_mode,
        )

    # Phase 1

    def _extract_file(self, path: str) -> List[Literal]:
        content = Path(path).read_text(encoding="utf-8")
        return self.extractor.extract_literals(content, source_path=path)

    def scan(self, root: Union[str, Path]) -> ScanResult:
        """
        Extract literals from every source file under root.

        Raises:
            RootNotFoundError: If root does not exist
        """
        scanner = FileScanner(root, self.config.source_extensions)
        paths = scanner.scan()
        skipped = list(scanner.errors)
        found: Dict[str, List[Literal]] = {}

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {executor.submit(self._extract_file, path): path for path in paths}
            for done, future in enumerate(as_completed(futures), start=1):
                path = futures[future]
                try:
                    found[path] = future.result()
                except (OSError, UnicodeDecodeError) as e:
                    log.warning("Skipping file", path=path, reason=_reason(e))
                    skipped.append(FileError(path=path, reason=_reason(e)))
                self._report(done, len(paths), path)

        extraction = ExtractionResult()
        literals = {}
        for path in sorted(found):
            extraction.add(path, [literal.value for literal in found[path]])
            literals[path] = found[path]

        log.info(
            "Scan complete",
            root=str(root),
            files=len(paths),
            strings=len(extraction.unique_values()),
            skipped=len(skipped),
        )
        return ScanResult(
            root=str(root),
            extraction=extraction,
            files_scanned=len(paths),
            skipped=sorted(skipped, key=lambda error: error.path),
            literals=literals,
        )

    # Phase 2

    def assign_keys(self, extraction: ExtractionResult, existing: Optional[ResourceStore] = None) -> Dict[str, str]:
        """
        Assign a key to every unique value.

        Args:
            extraction: Joined scan result
            existing: Resource store whose stored values keep their keys

        Returns:
            Mapping of value -> key
        """
        generator = KeyGenerator(self.config.key_format)
        values = extraction.unique_values()
        if existing is None:
            return generator.assign(values)
        table = existing.load()
        return generator.assign(
            values,
            existing_keys=set(table.entries),
            resolve_existing=existing.find_existing_key,
        )

    # Phase 3

    def _refactor_file(
        self,
        path: str,
        replacements: Dict[str, str],
        dry_run: bool,
        backup: bool,
        preserve_const: bool,
    ) -> RefactorRecord:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return RefactorRecord(content="", changed=False, path=path, error=_reason(e))

        record = self.rewriter.apply(
            content,
            replacements,
            use_accessor_pattern=self.config.use_app_localizations,
            preserve_const=preserve_const,
            dry_run=dry_run,
            path=path,
        )
        if not record.changed or dry_run:
            return record

        try:
            if backup:
                shutil.copy2(path, f"{path}.bak")
            write_text_atomic(Path(path), record.content)
            record.written = True
        except OSError as e:
            record.error = _reason(e)
        return record

    def refactor(
        self,
        extraction: ExtractionResult,
        key_map: Dict[str, str],
        dry_run: bool = False,
        backup: bool = False,
        preserve_const: bool = False,
    ) -> List[RefactorRecord]:
        """
        Rewrite every file that had literals.

        Args:
            extraction: Joined scan result
            key_map: Mapping of value -> key
            dry_run: Compute changes without writing files
            backup: Copy each file to <file>.bak before replacing it
            preserve_const: Keep const modifiers when no accessor is introduced

        Returns:
            One RefactorRecord per file, in path order
        """
        jobs = {
            path: {value: key_map[value] for value in values if value in key_map}
            for path, values in extraction.files.items()
        }
        records: Dict[str, RefactorRecord] = {}

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {
                executor.submit(self._refactor_file, path, replacements, dry_run, backup, preserve_const): path
                for path, replacements in jobs.items()
            }
            for done, future in enumerate(as_completed(futures), start=1):
                path = futures[future]
                record = future.result()
                if record.error:
                    log.warning("Skipping file", path=path, reason=record.error)
                records[path] = record
                self._report(done, len(jobs), path)

        return [records[path] for path in sorted(records)]

    # Workflows

    def generate(
        self,
        root: Union[str, Path],
        output_path: Optional[str] = None,
        scope: Optional[str] = None,
    ) -> RunSummary:
        """Scan a tree and merge its literals into the resource file."""
        scan = self.scan(root)
        store = self.resource_store(output_path, scope)
        key_map, report = store.merge_key_map(self.assign_keys(scan.extraction, store))
        return RunSummary(
            files_scanned=scan.files_scanned,
            strings_found=len(key_map),
            entries_added=report.added_count,
            resource_path=str(store.file_path),
            skipped=scan.skipped,
            key_map=key_map,
        )

    def internationalize(
        self,
        root: Union[str, Path],
        output_path: Optional[str] = None,
        dry_run: bool = False,
        backup: bool = False,
        scope: Optional[str] = None,
        preserve_const: bool = False,
        update_resources: bool = True,
    ) -> RunSummary:
        """
        Full workflow: scan, assign keys, update the resource file, rewrite sources.

        With update_resources off the resource file is only read, so stored
        values keep their keys and new values get fresh ones. In a dry run
        nothing is written; the records hold content previews.
        """
        scan = self.scan(root)
        store = self.resource_store(output_path, scope)
        key_map = self.assign_keys(scan.extraction, store)

        entries_added = 0
        if update_resources and not dry_run:
            key_map, report = store.merge_key_map(key_map)
            entries_added = report.added_count

        records = self.refactor(scan.extraction, key_map, dry_run=dry_run, backup=backup, preserve_const=preserve_const)
        failed = [FileError(path=r.path, reason=r.error) for r in records if r.error]

        summary = RunSummary(
            files_scanned=scan.files_scanned,
            strings_found=len(key_map),
            files_changed=sum(1 for r in records if r.changed and r.success),
            entries_added=entries_added,
            resource_path=str(store.file_path),
            dry_run=dry_run,
            skipped=scan.skipped + failed,
            records=records,
            key_map=key_map,
        )
        log.info(
            "Run complete",
            files_changed=summary.files_changed,
            entries_added=summary.entries_added,
            skipped=summary.files_skipped,
            dry_run=dry_run,
        )
        return summary
