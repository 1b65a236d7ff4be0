"""Plural/gender detection and context notes for resource entries."""

import re
from typing import Any, Dict, List, Tuple

from ..models.resource_value import GenderValue, PlainValue, PluralValue, ResourceValue

PLURAL_MARKER = "(s)"
COUNT_PLACEHOLDER = "{count}"

# "3 files", "12 messages"
NUMBERED_PLURAL_PATTERN = re.compile(r"\b\d+\s+\w+s\b")
# A count followed by a plural-looking word ("{count} items", "3 files").
SINGULARIZE_PATTERN = re.compile(r"(\{count\}|\b\d+)(\s+)(\w*?[^\Ws])s\b")
# A count followed by a word that does not end in "s" ("{count} item").
PLURALIZE_PATTERN = re.compile(r"(\{count\}|\b\d+)(\s+)(\w*[^\Ws])\b")
BARE_INTEGER_PATTERN = re.compile(r"(?<![\w.{])\d+(?![\w}]|\.\d)")

SUBJECT_PRONOUN_PATTERN = re.compile(r"\b(he|she|they)\b", re.I)
POSSESSIVE_PRONOUN_PATTERN = re.compile(r"\b(his|her|their)\b", re.I)

SUBJECT_FORMS = {"male": "he", "female": "she", "other": "they"}
POSSESSIVE_FORMS = {"male": "his", "female": "her", "other": "their"}

AMBIGUOUS_WORDS = frozenset({"ok", "yes", "no", "cancel", "submit", "save", "edit", "delete"})
CONTEXT_NOTE = 'Please provide context for "{key}" (e.g., button label, dialog action, etc.)'


def has_plural_trigger(value: str) -> bool:
    """Check for "(s)", a {count} placeholder, or an explicit "<number> <word>s"."""
    return (
        PLURAL_MARKER in value
        or COUNT_PLACEHOLDER in value
        or bool(NUMBERED_PLURAL_PATTERN.search(value))
    )


def has_gender_trigger(value: str) -> bool:
    """Check for third-person subject or possessive pronouns."""
    return bool(SUBJECT_PRONOUN_PATTERN.search(value) or POSSESSIVE_PRONOUN_PATTERN.search(value))


def _normalize_count(text: str) -> str:
    return BARE_INTEGER_PATTERN.sub(COUNT_PLACEHOLDER, text)


def to_plural(value: str) -> PluralValue:
    """
    Split a message into singular and plural forms.

    "(s)" is dropped for the singular and expanded to "s" for the plural;
    otherwise the word following the count is toggled. Integer runs become
    the {count} placeholder in both forms.
    """
    if PLURAL_MARKER in value:
        one = value.replace(PLURAL_MARKER, "")
        other = value.replace(PLURAL_MARKER, "s")
    else:
        one = SINGULARIZE_PATTERN.sub(r"\1\2\3", value, count=1)
        other = PLURALIZE_PATTERN.sub(r"\1\2\3s", value, count=1)
    return PluralValue(one=_normalize_count(one), other=_normalize_count(other))


def _match_case(replacement: str, original: str) -> str:
    if original.isupper() and len(original) > 1:
        return replacement.upper()
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def _with_pronouns(value: str, form: str) -> str:
    text = SUBJECT_PRONOUN_PATTERN.sub(
        lambda m: _match_case(SUBJECT_FORMS[form], m.group(1)), value
    )
    return POSSESSIVE_PRONOUN_PATTERN.sub(
        lambda m: _match_case(POSSESSIVE_FORMS[form], m.group(1)), text
    )


def to_gender(value: str) -> GenderValue:
    """Create male/female/neutral forms by substituting subject and possessive pronouns."""
    return GenderValue(
        male=_with_pronouns(value, "male"),
        female=_with_pronouns(value, "female"),
        other=_with_pronouns(value, "other"),
    )


def enrich_value(value: str) -> ResourceValue:
    """
    Turn a literal into the value stored in the resource file.

    Plural triggers take priority over gender triggers; anything else is
    stored as a plain string.
    """
    if has_plural_trigger(value):
        return to_plural(value)
    if has_gender_trigger(value):
        return to_gender(value)
    return PlainValue(value)


def is_ambiguous(key: str, value: Any) -> bool:
    """Check if a key or its plain value is a short context-free action word."""
    if key.lower() in AMBIGUOUS_WORDS:
        return True
    return isinstance(value, str) and value.strip().lower() in AMBIGUOUS_WORDS


def add_context_notes(entries: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Add "@key" descriptions for ambiguous entries.

    Existing metadata is kept as is; notes are placed right after their entry.

    Returns:
        Tuple of (updated entries, keys that received a new note)
    """
    updated: Dict[str, Any] = {}
    annotated = []
    for key, value in entries.items():
        if key in updated:
            continue
        updated[key] = value
        if key.startswith("@"):
            continue
        meta_key = f"@{key}"
        if meta_key in entries:
            updated[meta_key] = entries[meta_key]
            continue
        if is_ambiguous(key, value):
            updated[meta_key] = {"description": CONTEXT_NOTE.format(key=key)}
            annotated.append(key)
    return updated, annotated
