"""Classifier separating user-facing text from technical string literals."""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Pattern, Tuple

import structlog

from ..errors import InvalidPatternError

log = structlog.get_logger()


# Default exclude rules, grouped the way they are presented to users.
PATTERN_CATEGORIES: Dict[str, List[str]] = {
    "URLs and Web Addresses": [
        r"^https?://",  # URLs with http/https
        r"^www\.",  # Web addresses starting with www
        r"^\w+://\w+",  # URI schemes
    ],
    "File Paths and Assets": [
        r"^assets/",  # Asset paths
        r"^[\w-]+\.(?:png|jpg|jpeg|svg|gif|webp|json|arb|md|txt|ttf|otf|mp3|mp4|pdf|csv|xml|yaml|yml)$",
        r"^[\w\-.]*/[\w/\-.]*$",  # Paths with no spaces
    ],
    "Formatting Codes": [
        r"^<[^>]+>$",  # XML/HTML tags
        r"^#[0-9a-fA-F]{3,8}$",  # Color hex codes
    ],
    "Numbers and IDs": [
        r"^[\d,.]+$",  # Numbers and simple formatted numbers
        r"^\d+\.\d+\.\d+$",  # Version numbers
        r"^\w{8}-\w{4}-\w{4}-\w{4}-\w{12}$",  # UUIDs
    ],
    "Code Elements": [
        r"^[A-Z][a-zA-Z0-9]*\.[A-Za-z0-9]+",  # Class references like Widget.property
        r"^@\w+",  # Annotations
        r"^_\w+$",  # Private variables
    ],
}

DEFAULT_EXCLUDE_PATTERNS: List[str] = [
    pattern for patterns in PATTERN_CATEGORIES.values() for pattern in patterns
]


def compile_pattern(pattern: str) -> Pattern[str]:
    """
    Compile a single exclude pattern.

    Raises:
        InvalidPatternError: If the pattern is not a valid regular expression
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


@dataclass
class Classification:
    """Why a literal was kept or excluded."""

    value: str
    excluded: bool
    reason: Optional[str] = None  # rule pattern or heuristic name


@dataclass
class PatternClassifier:
    """
    Decides whether a string literal is translatable text or noise.

    Exclusion is a logical OR over an ordered list of regular expressions
    plus a fixed set of content heuristics:
    - shorter than 2 characters
    - contains a variable interpolation marker ($name, ${expr})
    - ALL-CAPS constant-like tokens (DEBUG, API_KEY)
    - identifier-shaped tokens with no spaces (userName, user_name)
    - code-like content (=, &&, ||, (), [])
    - import/package references

    A caller-supplied rule list replaces the defaults; use extend() to add
    rules on top of the active ones.
    """

    rules: List[Tuple[str, Pattern[str]]] = field(default_factory=list)
    rejected: List[InvalidPatternError] = field(default_factory=list)

    INTERPOLATION_PATTERN = re.compile(r"(?<!\\)\$(?:\{|[A-Za-z_])")
    CONSTANT_PATTERN = re.compile(r"^[A-Z0-9_]{2,}$")
    IDENTIFIER_PATTERN = re.compile(r"^[a-z_][a-zA-Z0-9_]*$")
    CODE_TOKENS = ("=", "&&", "||", "()", "[]")
    IMPORT_PREFIXES = ("package:", "dart:")
    # Lines on which a literal is never user-facing.
    TECHNICAL_CONTEXT_PATTERN = re.compile(
        r"^\s*(?:import|export|part(?:\s+of)?|library)\b"
        r"|\b(?:debugPrint|print|log|assert)\s*\("
        r"|\b(?:Key|ValueKey|RegExp|Uri\.parse)\s*\("
    )

    @classmethod
    def from_patterns(cls, patterns: Optional[Iterable[str]] = None) -> "PatternClassifier":
        """
        Build a classifier from a list of pattern strings.

        Args:
            patterns: Exclude patterns; None uses the defaults. An invalid
                pattern is rejected on its own and logged, the rest are kept.

        Returns:
            A PatternClassifier with the compiled rules
        """
        classifier = cls()
        classifier.extend(DEFAULT_EXCLUDE_PATTERNS if patterns is None else patterns)
        return classifier

    def extend(self, patterns: Iterable[str]) -> List[InvalidPatternError]:
        """Append rules, skipping duplicates. Returns the patterns that failed to compile."""
        failures = []
        known = {source for source, _ in self.rules}
        for pattern in patterns:
            if pattern in known:
                continue
            try:
                compiled = compile_pattern(pattern)
            except InvalidPatternError as e:
                log.warning("Rejected exclude pattern", pattern=pattern, error=e.reason)
                failures.append(e)
                continue
            self.rules.append((pattern, compiled))
            known.add(pattern)
        self.rejected.extend(failures)
        return failures

    @property
    def patterns(self) -> List[str]:
        return [source for source, _ in self.rules]

    def matching_rule(self, value: str) -> Optional[str]:
        """Return the first exclude rule matching the value, if any."""
        for source, compiled in self.rules:
            if compiled.search(value):
                return source
        return None

    def heuristic_reason(self, value: str) -> Optional[str]:
        """Return the name of the first content heuristic that rejects the value."""
        stripped = value.strip()
        if len(stripped) < 2:
            return "too_short"
        if self.INTERPOLATION_PATTERN.search(value):
            return "interpolation"
        if self.CONSTANT_PATTERN.match(stripped):
            return "constant"
        if self.IDENTIFIER_PATTERN.match(stripped):
            return "identifier"
        if any(token in value for token in self.CODE_TOKENS):
            return "code_expression"
        if any(prefix in value for prefix in self.IMPORT_PREFIXES):
            return "import_reference"
        return None

    def classify(self, value: str, context: Optional[str] = None) -> Classification:
        """
        Classify a literal value.

        Args:
            value: The unescaped literal text
            context: Optional source line(s) the literal was found on

        Returns:
            Classification with the reason the value was excluded, if it was
        """
        reason = self.heuristic_reason(value)
        if reason is None:
            reason = self.matching_rule(value)
        if reason is None and context and self.TECHNICAL_CONTEXT_PATTERN.search(context):
            reason = "technical_context"
        return Classification(value=value, excluded=reason is not None, reason=reason)

    def is_excluded(self, value: str, context: Optional[str] = None) -> bool:
        """Check if a literal is noise and must not be extracted."""
        return self.classify(value, context).excluded

    def is_translatable(self, value: str, context: Optional[str] = None) -> bool:
        return not self.is_excluded(value, context)
