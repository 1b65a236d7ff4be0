"""Data model for an ARB resource table."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .resource_value import ResourceValue, value_from_json, source_text


@dataclass
class ResourceTable:
    """
    Represents the contents of one resource file.

    Entries keep their file order. Keys starting with "@" are metadata
    ("@key" descriptions, "@@locale") and are passed through untouched.
    """

    entries: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def is_metadata_key(key: str) -> bool:
        return key.startswith("@")

    def message_keys(self) -> List[str]:
        """Keys of translatable messages, excluding metadata."""
        return [key for key in self.entries if not self.is_metadata_key(key)]

    def messages(self) -> Dict[str, ResourceValue]:
        """Get all message entries as typed values (key -> value)."""
        result = {}
        for key in self.message_keys():
            value = value_from_json(self.entries[key])
            if value is not None:
                result[key] = value
        return result

    def key_for_value(self, text: str) -> Optional[str]:
        """Find the key an identical plain string value is stored under."""
        for key in self.message_keys():
            if self.entries[key] == text:
                return key
        return None

    def key_for_json(self, data: Any) -> Optional[str]:
        """Find the key whose stored JSON value equals data."""
        for key in self.message_keys():
            if self.entries[key] == data:
                return key
        return None

    def lookup(self, key: str) -> Optional[str]:
        """Get the source text stored under a key."""
        value = value_from_json(self.entries.get(key))
        if value is None:
            return None
        return source_text(value)

    def value_to_key(self) -> Dict[str, str]:
        """Reverse map of plain string values to the first key holding them."""
        result: Dict[str, str] = {}
        for key in self.message_keys():
            value = self.entries[key]
            if isinstance(value, str) and value not in result:
                result[value] = key
        return result

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.message_keys())
