"""String extraction and resource file handling modules."""

from .arb_parser import ArbParser
from .arb_writer import ArbWriter
from .context import ExtractionContext
from .resource_locator import ResourceLocator
from .string_extractor import StringExtractor

__all__ = ["ArbParser", "ArbWriter", "ExtractionContext", "ResourceLocator", "StringExtractor"]
