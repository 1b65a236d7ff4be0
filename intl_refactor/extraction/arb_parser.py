"""Parser for ARB resource files (JSON key/value bundles)."""

import json
from pathlib import Path
from typing import Any, Dict

from ..models.resource_table import ResourceTable


class ArbParser:
    """Parser for .arb files."""

    def parse(self, file_path: str) -> ResourceTable:
        """
        Parse an .arb file and return a structured representation.

        Args:
            file_path: Path to the .arb file

        Returns:
            ResourceTable containing all entries in file order

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not valid JSON or not a JSON object
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        return self.parse_string(content)

    def parse_string(self, content: str) -> ResourceTable:
        """
        Parse .arb content from a string.

        Args:
            content: JSON string content

        Returns:
            ResourceTable object
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid ARB content: {e}") from e
        return self._parse_data(data)

    def _parse_data(self, data: Any) -> ResourceTable:
        """Parse the JSON data structure into our model."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object at top level, got {type(data).__name__}")

        entries: Dict[str, Any] = {}
        for key, value in data.items():
            entries[str(key)] = value
        return ResourceTable(entries=entries)
