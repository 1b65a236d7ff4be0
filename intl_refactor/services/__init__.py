"""Orchestration services."""

from .file_scanner import FileScanner
from .pipeline import LocalizationPipeline

__all__ = ["FileScanner", "LocalizationPipeline"]
