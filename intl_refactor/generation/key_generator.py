"""Consistent key generation for resource entries and code references."""

import re
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Set, Union


class KeyFormat(str, Enum):
    """Key naming convention."""

    SNAKE_CASE = "snake_case"
    CAMEL_CASE = "camelCase"
    DOT_CASE = "dot.case"


EMPTY_KEY = "emptyString"
NUMERIC_PREFIX = "text"

WORD_PATTERN = re.compile(r"[a-z0-9]+")
VALID_KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
RESOURCE_KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z0-9_]+)*$")


class KeyGenerator:
    """
    Derives identifiers from literal values.

    The same generator is used for resource generation and code rewriting so
    both sides agree on every key within a run.
    """

    def __init__(self, key_format: Union[KeyFormat, str] = KeyFormat.SNAKE_CASE):
        self.key_format = KeyFormat(key_format)

    @staticmethod
    def words(value: str) -> list:
        """Lower-cased alphanumeric runs; everything else separates words."""
        return WORD_PATTERN.findall(value.lower())

    @classmethod
    def generate_key(cls, value: str, key_format: Union[KeyFormat, str] = KeyFormat.CAMEL_CASE) -> str:
        """
        Generate a key from a string value.

        Args:
            value: The literal text
            key_format: Naming convention to join words with

        Returns:
            The key, never truncated
        """
        words = cls.words(value)
        if not words:
            return EMPTY_KEY

        if words[0][0].isdigit():
            words[0] = NUMERIC_PREFIX + words[0]

        key_format = KeyFormat(key_format)
        if key_format is KeyFormat.SNAKE_CASE:
            return "_".join(words)
        if key_format is KeyFormat.DOT_CASE:
            return ".".join(words)
        return words[0] + "".join(word[0].upper() + word[1:] for word in words[1:])

    @staticmethod
    def is_valid_key(key: str) -> bool:
        """Check if a key is usable as an accessor member name."""
        return bool(VALID_KEY_PATTERN.match(key))

    @staticmethod
    def is_resource_key(key: str) -> bool:
        """Check if a key can be stored, which also allows dot.case keys."""
        return bool(RESOURCE_KEY_PATTERN.match(key))

    @classmethod
    def to_valid_key(cls, key: str) -> str:
        """Rebuild an invalid key (e.g. dot.case) as a camelCase identifier."""
        if cls.is_valid_key(key):
            return key
        words = re.findall(r"[A-Za-z0-9]+", key)
        if not words:
            return EMPTY_KEY
        words = [words[0][0].lower() + words[0][1:]] + words[1:]
        if words[0][0].isdigit():
            words[0] = NUMERIC_PREFIX + words[0]
        return words[0] + "".join(word[0].upper() + word[1:] for word in words[1:])

    @staticmethod
    def make_key_unique(base_key: str, existing_keys: Set[str]) -> str:
        """Append _1, _2, ... until the key is not in existing_keys."""
        key = base_key
        suffix = 1
        while key in existing_keys:
            key = f"{base_key}_{suffix}"
            suffix += 1
        return key

    def unique_key(self, value: str, existing_keys: Set[str]) -> str:
        """Generate a key for value in this generator's format that is not yet taken."""
        return self.make_key_unique(self.generate_key(value, self.key_format), existing_keys)

    def assign(
        self,
        values: Iterable[str],
        existing_keys: Optional[Set[str]] = None,
        resolve_existing: Optional[Callable[[str], Optional[str]]] = None,
    ) -> Dict[str, str]:
        """
        Assign a key to every value of a batch.

        Runs sequentially: each suffix depends on the keys assigned before it.

        Args:
            values: Literal values in batch order (duplicates are ignored)
            existing_keys: Keys already present in the resource table
            resolve_existing: Returns the stored key for a value that is
                already in the resource table, so re-runs keep their keys

        Returns:
            Mapping of value -> key
        """
        taken = set(existing_keys or ())
        assigned: Dict[str, str] = {}
        for value in values:
            if value in assigned:
                continue
            stored = resolve_existing(value) if resolve_existing else None
            if stored is not None:
                assigned[value] = stored
                continue
            key = self.unique_key(value, taken)
            taken.add(key)
            assigned[value] = key
        return assigned
