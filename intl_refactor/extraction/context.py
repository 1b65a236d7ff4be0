"""Per-run state shared by extraction calls."""

from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, Iterable, Optional, Tuple

from ..validation.pattern_classifier import PatternClassifier
from .patterns import DEFAULT_ACCESSOR_CLASS, ExtractionPatterns, compile_patterns
from .resource_locator import ResourceLocator


@dataclass
class ExtractionContext:
    """
    Compiled patterns, classifier and resource lookup for one run.

    Created once by the orchestrator and passed to every extraction and
    rewrite call, so patterns are compiled once and nothing is kept in
    module-level state.
    """

    classifier: PatternClassifier
    patterns: ExtractionPatterns
    locator: Optional[ResourceLocator] = None
    accessor_class: str = DEFAULT_ACCESSOR_CLASS
    _classifiers: Dict[Tuple[str, ...], PatternClassifier] = field(default_factory=dict, repr=False)
    _lock: Lock = field(default_factory=Lock, repr=False)

    @classmethod
    def create(
        cls,
        exclude_patterns: Optional[Iterable[str]] = None,
        accessor_class: str = DEFAULT_ACCESSOR_CLASS,
        search_root: Optional[str] = None,
        reverse_lookup: bool = True,
    ) -> "ExtractionContext":
        """
        Build a context for a run.

        Args:
            exclude_patterns: Exclude rules replacing the defaults (None for defaults)
            accessor_class: Class name used in accessor expressions
            search_root: Where to look for an existing resource file
            reverse_lookup: Whether accessor references are resolved back to values
        """
        return cls(
            classifier=PatternClassifier.from_patterns(
                list(exclude_patterns) if exclude_patterns is not None else None
            ),
            patterns=compile_patterns(accessor_class),
            locator=ResourceLocator(search_root) if reverse_lookup else None,
            accessor_class=accessor_class,
        )

    def classifier_for(self, exclude_patterns: Optional[Iterable[str]]) -> PatternClassifier:
        """Get the run classifier, or a cached one for a caller-supplied rule list."""
        if exclude_patterns is None:
            return self.classifier
        key = tuple(exclude_patterns)
        with self._lock:
            if key not in self._classifiers:
                self._classifiers[key] = PatternClassifier.from_patterns(key)
            return self._classifiers[key]
