"""Configuration management for the extraction and refactoring pipeline."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import structlog
from dotenv import load_dotenv

from .extraction.patterns import DEFAULT_ACCESSOR_CLASS
from .generation.key_generator import KeyFormat
from .generation.resource_store import MergeMode, ResourceStore
from .refactoring.rewriter import DEFAULT_IMPORT_LINE

load_dotenv()

log = structlog.get_logger()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Application configuration."""

    # Key and resource settings
    key_format: str = field(default_factory=lambda: os.getenv("INTL_KEY_FORMAT", "snake_case"))
    output_dir: str = field(default_factory=lambda: os.getenv("INTL_OUTPUT_DIR", "lib/l10n"))
    locale: str = field(default_factory=lambda: os.getenv("INTL_LOCALE", "en"))
    merge_mode: str = field(default_factory=lambda: os.getenv("INTL_MERGE_MODE", "dedupe"))

    # Rewrite settings
    use_app_localizations: bool = field(
        default_factory=lambda: _env_bool("INTL_USE_APP_LOCALIZATIONS", True)
    )
    accessor_class: str = DEFAULT_ACCESSOR_CLASS
    import_line: str = DEFAULT_IMPORT_LINE

    # Scan settings
    max_workers: int = field(default_factory=lambda: int(os.getenv("INTL_MAX_WORKERS", "8")))
    source_extensions: Tuple[str, ...] = (".dart",)

    # JSON array of regex strings replacing the default exclude rules
    exclude_patterns: Optional[str] = field(default_factory=lambda: os.getenv("INTL_EXCLUDE_PATTERNS"))

    def load_exclude_patterns(self) -> Optional[List[str]]:
        """
        Get the user's exclude rules.

        Returns:
            List of regex strings, or None to use the default rules
        """
        if not self.exclude_patterns:
            return None
        try:
            patterns = json.loads(self.exclude_patterns)
        except json.JSONDecodeError as e:
            log.warning("Ignoring malformed INTL_EXCLUDE_PATTERNS", reason=str(e))
            return None
        if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
            log.warning("Ignoring INTL_EXCLUDE_PATTERNS", reason="expected a JSON array of strings")
            return None
        return patterns

    def resource_path(self, scope: Optional[str] = None) -> Path:
        """Resource file for the base locale, or for a feature scope."""
        return ResourceStore.default_path(self.output_dir, self.locale, scope)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        formats = [f.value for f in KeyFormat]
        if self.key_format not in formats:
            errors.append(f"INTL_KEY_FORMAT must be one of {', '.join(formats)}, got {self.key_format!r}")
        modes = [m.value for m in MergeMode]
        if self.merge_mode not in modes:
            errors.append(f"INTL_MERGE_MODE must be one of {', '.join(modes)}, got {self.merge_mode!r}")
        if self.max_workers < 1:
            errors.append("INTL_MAX_WORKERS must be at least 1")
        if not self.locale:
            errors.append("INTL_LOCALE is not set")
        return errors


# Global config instance
config = Config()
