"""Writer for ARB resource files."""

import json
import os
import tempfile
from pathlib import Path

from ..errors import ResourceWriteError
from ..models.resource_table import ResourceTable


def write_text_atomic(path: Path, content: str) -> None:
    """
    Replace a file's content without exposing a partially written file.

    The content is written to a temporary file in the same directory and
    moved over the target.

    Raises:
        ResourceWriteError: If the temporary file cannot be written or moved
    """
    fd = None
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            fd = None
            f.write(content)
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode & 0o777)
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        raise ResourceWriteError(str(path), str(e)) from e
    finally:
        if fd is not None:
            os.close(fd)
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)


class ArbWriter:
    """Writer for .arb files."""

    def write(self, table: ResourceTable, output_path: str) -> None:
        """
        Write a ResourceTable to disk.

        Args:
            table: The ResourceTable to write
            output_path: Path to write the file to
        """
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ResourceWriteError(str(path), str(e)) from e

        write_text_atomic(path, self.to_string(table) + "\n")

    def to_string(self, table: ResourceTable) -> str:
        """
        Convert a ResourceTable to a JSON string.

        Entries keep their insertion order so merges only append.
        """
        return json.dumps(table.entries, indent=2, ensure_ascii=False)
