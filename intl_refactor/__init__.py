"""Extraction of UI strings from Flutter sources and refactoring to localization keys."""

__version__ = "0.1.0"
