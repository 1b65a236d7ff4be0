"""Source rewriting."""

from .rewriter import DEFAULT_IMPORT_LINE, Rewriter

__all__ = ["DEFAULT_IMPORT_LINE", "Rewriter"]
