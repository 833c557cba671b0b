"""
Snapshot file I/O for note_db.json.

File format:
- JSON: {"items": [Note...], "selected": int}
- Created from the seed collection on first open
- Written whole on every save (temp file + atomic replace)
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

from core.models import collection_from_dict, collection_to_dict
from core.seed import default_collection
from core.selection import SelectionList

CORRUPT_SUFFIX = ".corrupt"


class SnapshotCorruptError(ValueError):
    """Snapshot file exists but does not hold a valid collection."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Snapshot {path} is corrupt: {reason}")
        self.path = path
        self.reason = reason


class SaveError(IOError):
    """Writing the snapshot failed; the in-memory collection is intact."""


class SnapshotFile:
    """Handles note_db.json I/O."""

    def __init__(self, path: Path,
                 seed: Callable[[], SelectionList] = default_collection):
        """
        Args:
            path: Snapshot file path
            seed: Factory for the collection written when no file exists
        """
        self.path = Path(path)
        self._seed = seed

    def exists(self) -> bool:
        return self.path.exists()

    def open(self) -> SelectionList:
        """
        Load the collection, seeding the file first if it does not exist.

        Returns:
            Loaded collection

        Raises:
            OSError: If the directory or seed file cannot be created, or the
                file cannot be read
            SnapshotCorruptError: If the file content is not a valid snapshot
        """
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write(self._seed())

        return self.load()

    def load(self) -> SelectionList:
        """
        Read and deserialize the snapshot.

        Raises:
            OSError: If the file cannot be read
            SnapshotCorruptError: If the file content is not a valid snapshot
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except UnicodeDecodeError as e:
            raise SnapshotCorruptError(self.path, f"not UTF-8 text ({e})") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SnapshotCorruptError(self.path, f"invalid JSON ({e})") from e

        try:
            return collection_from_dict(data)
        except ValueError as e:
            raise SnapshotCorruptError(self.path, str(e)) from e

    def save(self, notes: SelectionList):
        """
        Overwrite the snapshot with the full collection.

        Args:
            notes: Collection to save

        Raises:
            SaveError: If the write fails (the old file is left in place)
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write(notes)
        except OSError as e:
            raise SaveError(f"Failed to save notes to {self.path}: {e}") from e

    def reset(self) -> SelectionList:
        """
        Replace a corrupt snapshot with the seed collection.

        The old file is kept next to it with a ".corrupt" suffix.

        Returns:
            The freshly seeded collection

        Raises:
            OSError: If the old file cannot be moved or the seed written
        """
        if self.path.exists():
            os.replace(self.path, self.backup_path())
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._write(self._seed())
        return self.load()

    def backup_path(self) -> Path:
        return self.path.with_name(self.path.name + CORRUPT_SUFFIX)

    def _write(self, notes: SelectionList):
        """Serialize to a temp file in the same directory, then swap it in."""
        data = collection_to_dict(notes)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        tmp_path: Optional[Path] = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
            tmp_path = None
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
