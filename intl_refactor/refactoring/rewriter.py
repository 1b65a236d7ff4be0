"""Replacement of string literals with localization accessor expressions."""

from bisect import bisect_right
from typing import Dict, Match, Optional

import structlog

from ..extraction.context import ExtractionContext
from ..extraction.patterns import ignored_line_indexes, unescape_literal
from ..generation.key_generator import KeyGenerator
from ..models.refactor_result import RefactorRecord

log = structlog.get_logger()

DEFAULT_IMPORT_LINE = "import 'package:flutter_gen/gen_l10n/app_localizations.dart';"


class Rewriter:
    """
    Rewrites display-constructor calls to use generated keys.

    Only literals inside a display-constructor call window are touched, so
    the same text in comments or unrelated strings is left alone. Each
    window gets at most one substitution per pass. Windows starting on a
    line covered by an ignore directive are left as they are.
    """

    def __init__(
        self,
        context: Optional[ExtractionContext] = None,
        import_line: str = DEFAULT_IMPORT_LINE,
    ):
        self.context = context or ExtractionContext.create(reverse_lookup=False)
        self.import_line = import_line

    @property
    def accessor_class(self) -> str:
        return self.context.accessor_class

    def accessor_expression(self, key: str, null_assertion: bool = False) -> str:
        """Build `Accessor.of(context).key`, with `!` when requested."""
        bang = "!" if null_assertion else ""
        return f"{self.accessor_class}.of(context){bang}.{KeyGenerator.to_valid_key(key)}"

    @staticmethod
    def reference_expression(key: str) -> str:
        """Build the call-style reference used without the accessor pattern."""
        return f'tr("{key}")'

    def uses_null_assertion(self, content: str) -> bool:
        """Check if a file already uses the `Accessor.of(context)!.` form."""
        return f"{self.accessor_class}.of(context)!." in content

    def rewrite(
        self,
        content: str,
        replacements: Dict[str, str],
        use_accessor_pattern: bool = True,
        preserve_const: bool = False,
        path: str = "",
    ) -> RefactorRecord:
        """
        Replace known literals in one file's text.

        Args:
            content: Full file text
            replacements: Mapping of literal value -> key
            use_accessor_pattern: Use accessor expressions instead of tr("key")
            preserve_const: Keep a leading const when no accessor is introduced
            path: File the text came from

        Returns:
            RefactorRecord with the new content and whether anything changed
        """
        null_assertion = use_accessor_pattern and self.uses_null_assertion(content)
        literal_pattern = self.context.patterns.any_literal
        count = 0
        lines = content.split("\n")
        ignored = ignored_line_indexes(lines)
        line_starts = [0]
        for line in lines[:-1]:
            line_starts.append(line_starts[-1] + len(line) + 1)

        def substitute(match: Match) -> str:
            nonlocal count
            if ignored and bisect_right(line_starts, match.start("widget")) - 1 in ignored:
                return match.group(0)
            args = match.group("args")
            for value, key in replacements.items():
                for token in literal_pattern.finditer(args):
                    if unescape_literal(token.group("body")) != value:
                        continue
                    if use_accessor_pattern:
                        expression = self.accessor_expression(key, null_assertion)
                    else:
                        expression = self.reference_expression(key)
                    count += 1
                    keep_const = match.group("const") and preserve_const and not use_accessor_pattern
                    new_args = args[:token.start()] + expression + args[token.end():]
                    return f"{match.group('const') if keep_const else ''}{match.group('widget')}({new_args})"
            return match.group(0)

        if replacements:
            new_content = self.context.patterns.rewrite_window.sub(substitute, content)
        else:
            new_content = content

        return RefactorRecord(
            content=new_content,
            changed=count > 0,
            path=path,
            uses_accessor_pattern=use_accessor_pattern,
            replacements=count,
        )

    def ensure_import(self, content: str) -> str:
        """
        Add the import line if it is not present yet.

        It goes right after the last import, or at the top of the file
        followed by a blank line when there are no imports.
        """
        if self.import_line in content:
            return content

        last_import = None
        for last_import in self.context.patterns.import_line.finditer(content):
            pass

        if last_import is None:
            return f"{self.import_line}\n\n{content}"
        end = last_import.end()
        return f"{content[:end]}\n{self.import_line}{content[end:]}"

    def apply(
        self,
        content: str,
        replacements: Dict[str, str],
        use_accessor_pattern: bool = True,
        preserve_const: bool = False,
        dry_run: bool = False,
        path: str = "",
    ) -> RefactorRecord:
        """
        Rewrite a file's text and add the import when it is needed.

        The import is only added for changed files using the accessor
        pattern, and never in a dry run; the returned content is then a
        preview of the replacements alone.
        """
        record = self.rewrite(content, replacements, use_accessor_pattern, preserve_const, path)
        if record.import_needed and not dry_run:
            record.content = self.ensure_import(record.content)
        if record.changed:
            log.debug("Rewrote literals", path=path, replacements=record.replacements, dry_run=dry_run)
        return record
