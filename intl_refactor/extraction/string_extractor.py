"""Extraction of translatable string literals from UI source files."""

from bisect import bisect_right
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

import structlog

from ..models.literal import Literal
from ..validation.pattern_classifier import PatternClassifier
from .context import ExtractionContext
from .patterns import RICH_TEXT_WINDOW, ignored_line_indexes, unescape_literal

log = structlog.get_logger()


class _SourceText:
    """Line bookkeeping for one file's text."""

    def __init__(self, content: str):
        self.content = content
        self.lines = content.split("\n")
        self.line_starts = [0]
        for line in self.lines[:-1]:
            self.line_starts.append(self.line_starts[-1] + len(line) + 1)

    def line_index(self, offset: int) -> int:
        """0-based line number for an absolute character offset."""
        return bisect_right(self.line_starts, offset) - 1

    def window(self, index: int) -> str:
        """The line before, the line itself and the line after."""
        start = max(index - 1, 0)
        return "\n".join(self.lines[start:index + 2])


class StringExtractor:
    """
    Finds user-facing string literals in one file's text.

    Several independent matchers run over the raw text:
    1. literal arguments of display constructors (Text('...'), MyText('...'))
    2. string values of named UI parameters (title: '...', hintText: '...')
    3. child literals of interactive controls (ElevatedButton(child: Text('...')))
    4. accessor references (AppLocalizations.of(context).key), resolved back
       to their stored value through an existing resource file

    Candidates on lines covered by an ignore directive or by a rich-text
    builder are dropped, and every literal nested in a rich-text builder is
    removed from the result even if it also matched elsewhere.
    """

    def __init__(self, context: Optional[ExtractionContext] = None):
        self.context = context or ExtractionContext.create()

    def extract(
        self,
        content: str,
        exclude_patterns: Optional[Iterable[str]] = None,
        source_path: str = "",
    ) -> List[str]:
        """
        Extract unique translatable values in order of first occurrence.

        Args:
            content: Full file text
            exclude_patterns: Exclude rules replacing the run's rules for this call
            source_path: File the text came from (for diagnostics)

        Returns:
            List of unique string values
        """
        return [
            literal.value
            for literal in self.extract_literals(content, exclude_patterns, source_path)
        ]

    def extract_literals(
        self,
        content: str,
        exclude_patterns: Optional[Iterable[str]] = None,
        source_path: str = "",
    ) -> List[Literal]:
        """
        Extract the first occurrence of each translatable value with its position.

        Args:
            content: Full file text
            exclude_patterns: Exclude rules replacing the run's rules for this call
            source_path: File the text came from

        Returns:
            List of Literal records ordered by offset
        """
        source = _SourceText(content)
        classifier = self.context.classifier_for(exclude_patterns)
        ignored_lines = ignored_line_indexes(source.lines)
        rich_lines, rich_values = self._rich_text_regions(source)
        blocked_lines = ignored_lines | rich_lines

        candidates: List[Tuple[int, str]] = []
        candidates.extend(self._match_literals(source, classifier, blocked_lines))
        candidates.extend(self._match_accessor_references(source, blocked_lines))
        candidates.sort(key=lambda item: item[0])

        literals = []
        seen: Set[str] = set()
        for offset, value in candidates:
            if value in seen or value in rich_values:
                continue
            seen.add(value)
            index = source.line_index(offset)
            literals.append(
                Literal(
                    value=value,
                    source_path=source_path,
                    context=source.window(index),
                    line=index + 1,
                    offset=offset,
                )
            )
        return literals

    def extract_file(self, file_path: str, exclude_patterns: Optional[Iterable[str]] = None) -> List[str]:
        """
        Read a file and extract its values.

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        content = Path(file_path).read_text(encoding="utf-8")
        return self.extract(content, exclude_patterns, source_path=file_path)

    def _rich_text_regions(self, source: _SourceText) -> Tuple[Set[int], Set[str]]:
        """Lines touched by rich-text builders, and the literals nested inside them."""
        lines: Set[int] = set()
        values: Set[str] = set()
        patterns = self.context.patterns
        for marker in patterns.rich_text_marker.finditer(source.content):
            start = marker.start()
            end = min(start + RICH_TEXT_WINDOW, len(source.content))
            lines.update(range(source.line_index(start), source.line_index(max(end - 1, start)) + 1))
            region = source.content[start:end]
            for match in patterns.any_literal.finditer(region):
                values.add(unescape_literal(match.group("body")))
        return lines, values

    def _match_literals(
        self,
        source: _SourceText,
        classifier: PatternClassifier,
        blocked_lines: Set[int],
    ) -> List[Tuple[int, str]]:
        patterns = self.context.patterns
        found = []
        for pattern in (patterns.display_call, patterns.named_parameter, patterns.control_child):
            for match in pattern.finditer(source.content):
                offset = match.start("quote")
                index = source.line_index(offset)
                if index in blocked_lines:
                    continue
                value = unescape_literal(match.group("body"))
                if classifier.is_excluded(value, source.lines[index]):
                    continue
                found.append((offset, value))
        return found

    def _match_accessor_references(
        self,
        source: _SourceText,
        blocked_lines: Set[int],
    ) -> List[Tuple[int, str]]:
        locator = self.context.locator
        if locator is None:
            return []
        found = []
        for match in self.context.patterns.accessor_reference.finditer(source.content):
            if source.line_index(match.start()) in blocked_lines:
                continue
            key = match.group("key")
            value = locator.resolve(key)
            if value is None:
                log.debug("Unresolved accessor reference", key=key)
                continue
            found.append((match.start(), value))
        return found
