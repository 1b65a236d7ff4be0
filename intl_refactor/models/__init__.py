"""Data models for the extraction and refactoring pipeline."""

from .literal import Literal, FileError, ExtractionResult, ScanResult
from .resource_value import (
    PlainValue,
    PluralValue,
    GenderValue,
    ResourceValue,
    value_from_json,
    source_text,
)
from .resource_table import ResourceTable
from .refactor_result import RefactorRecord, MergeReport, RunSummary

__all__ = [
    "Literal",
    "FileError",
    "ExtractionResult",
    "ScanResult",
    "PlainValue",
    "PluralValue",
    "GenderValue",
    "ResourceValue",
    "value_from_json",
    "source_text",
    "ResourceTable",
    "RefactorRecord",
    "MergeReport",
    "RunSummary",
]
