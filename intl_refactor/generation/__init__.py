"""Key generation and resource file maintenance."""

from .key_generator import KeyFormat, KeyGenerator
from .resource_store import MergeMode, ResourceStore
from .variants import add_context_notes, enrich_value

__all__ = ["KeyFormat", "KeyGenerator", "MergeMode", "ResourceStore", "add_context_notes", "enrich_value"]
