"""
Source patterns shared by extraction and rewriting.

Matching works on raw text with regular expressions, one pattern per call or
parameter shape, instead of parsing the source language. This keeps the
matchers small and independent; the price is that unusual formatting (string
concatenation, raw or triple-quoted strings, deeply nested arguments) can
cause missed or extra matches. Those are accepted as heuristic limits.
"""

import re
from dataclasses import dataclass
from typing import List, Pattern, Set, Tuple

DISPLAY_CONSTRUCTORS: Tuple[str, ...] = ("Text", "MyText", "CustomText", "Label", "LocalizedText")

NAMED_PARAMETERS: Tuple[str, ...] = (
    "title",
    "label",
    "labelText",
    "hint",
    "hintText",
    "placeholder",
    "tooltip",
    "description",
    "message",
    "content",
    "header",
    "subtitle",
    "caption",
    "helperText",
    "errorText",
    "semanticLabel",
    "semanticsLabel",
    "text",
)

INTERACTIVE_CONTROLS: Tuple[str, ...] = (
    "ElevatedButton",
    "TextButton",
    "OutlinedButton",
    "FilledButton",
    "IconButton",
    "FloatingActionButton",
    "ListTile",
    "PopupMenuItem",
    "DropdownMenuItem",
    "BottomNavigationBarItem",
    "NavigationDestination",
    "Tab",
    "Chip",
)

CHILD_PARAMETERS: Tuple[str, ...] = ("child", "title", "label", "text")

IGNORE_DIRECTIVE = "// i18n-ignore"
RICH_TEXT_WINDOW = 300

DEFAULT_ACCESSOR_CLASS = "AppLocalizations"

# A single- or double-quoted literal on one line; group "body" is the raw text.
QUOTED = r"(?P<quote>['\"])(?P<body>(?:\\.|(?!(?P=quote))[^\\\n])*)(?P=quote)"

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    "'": "'",
    '"': '"',
    "$": "$",
}
_ESCAPE_PATTERN = re.compile(r"\\(.)", re.S)


def unescape_literal(body: str) -> str:
    """Turn the raw text between quotes into the string value."""
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), body)


def escape_literal(value: str, quote: str) -> str:
    """Inverse of unescape_literal for the given quote character."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
        .replace("$", "\\$")
    )
    return escaped.replace(quote, "\\" + quote)


def ignored_line_indexes(lines: List[str]) -> Set[int]:
    """0-based lines suppressed by an ignore directive: its own line and the next."""
    ignored: Set[int] = set()
    for index, line in enumerate(lines):
        if IGNORE_DIRECTIVE in line:
            ignored.add(index)
            ignored.add(index + 1)
    return ignored


def _alternation(names: Tuple[str, ...]) -> str:
    return "|".join(re.escape(name) for name in names)


@dataclass(frozen=True)
class ExtractionPatterns:
    """Compiled patterns for one accessor configuration."""

    display_call: Pattern[str]
    named_parameter: Pattern[str]
    control_child: Pattern[str]
    accessor_reference: Pattern[str]
    rich_text_marker: Pattern[str]
    any_literal: Pattern[str]
    rewrite_window: Pattern[str]
    import_line: Pattern[str]


def compile_patterns(accessor_class: str = DEFAULT_ACCESSOR_CLASS) -> ExtractionPatterns:
    """Compile every source pattern once for a run."""
    display = _alternation(DISPLAY_CONSTRUCTORS)
    controls = _alternation(INTERACTIVE_CONTROLS)
    accessor = re.escape(accessor_class)
    return ExtractionPatterns(
        display_call=re.compile(
            rf"\b(?:{display})\s*(?:<[^>]*>)?\s*\(\s*{QUOTED}"
        ),
        named_parameter=re.compile(
            rf"\b(?:{_alternation(NAMED_PARAMETERS)})\s*:\s*{QUOTED}"
        ),
        # One level of nested parentheses is allowed before the child argument.
        control_child=re.compile(
            rf"\b(?:{controls})\s*\((?:[^()]|\([^()]*\))*?"
            rf"\b(?:{_alternation(CHILD_PARAMETERS)})\s*:\s*"
            rf"(?:const\s+)?(?:(?:{display})\s*\(\s*)?{QUOTED}"
        ),
        accessor_reference=re.compile(
            rf"\b{accessor}\.of\(\s*context\s*\)!?\.(?P<key>[A-Za-z_]\w*)"
        ),
        rich_text_marker=re.compile(r"\bRichText\s*\(\s*text\s*:\s*(?:const\s+)?TextSpan\s*\("),
        any_literal=re.compile(QUOTED),
        rewrite_window=re.compile(
            rf"(?P<const>\bconst\s+)?(?P<widget>\b(?:{display})\s*(?:<[^>]*>)?)\s*\("
            r"(?P<args>(?:'(?:\\.|[^'\\\n])*'|\"(?:\\.|[^\"\\\n])*\"|[^)'\"])*)\)"
        ),
        import_line=re.compile(r"^[ \t]*import\s+['\"][^'\"\n]*['\"][^;\n]*;", re.M),
    )
