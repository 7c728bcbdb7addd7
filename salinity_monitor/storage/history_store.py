"""
Bounded JSON-array history files

Each store holds at most `max_entries` records. Appending loads the current
array, adds the new records at the end, drops the oldest records beyond
the bound and replaces the whole file in one step (temporary file in the
same directory, then os.replace), so readers never see a partial write.

Only one writer may hold a store at a time; overlapping runs would race on
the load-modify-replace cycle.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from ..exceptions import PersistenceError
from ..models.readings import Alert, EnvironmentalReading
from ..utils.logger import get_logger

logger = get_logger(__name__)

MAX_HISTORY = 500


class BoundedJsonStore:
    """
    Append-only JSON array file truncated to the most recent entries

    Args:
        path: Path of the JSON file
        max_entries: Maximum number of entries retained
    """

    def __init__(self, path: Union[str, Path], max_entries: int = MAX_HISTORY):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.path = Path(path)
        self.max_entries = max_entries

    def _to_record(self, entry: Any) -> Dict[str, Any]:
        if isinstance(entry, dict):
            return entry
        raise TypeError(f"Cannot store {type(entry).__name__} in {self.path}")

    def load(self) -> List[Dict[str, Any]]:
        """
        Load the persisted entries (empty if the file does not exist)

        Raises:
            PersistenceError: If the file exists but is not a JSON array
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read {self.path}", original_error=e) from e

        if not isinstance(data, list):
            raise PersistenceError(f"{self.path} does not contain a JSON array")
        return data

    def _write(self, entries: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent),
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def append(self, entries: Sequence[Any]) -> int:
        """
        Append entries, keep the most recent `max_entries` and persist

        Args:
            entries: New entries, in arrival order

        Returns:
            Number of entries persisted in the file after the append

        Raises:
            PersistenceError: If the file cannot be read or replaced
        """
        new_records = [self._to_record(entry) for entry in entries]
        combined = self.load() + new_records
        retained = combined[-self.max_entries:]

        try:
            self._write(retained)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Could not write {self.path}", original_error=e) from e

        dropped = len(combined) - len(retained)
        logger.debug(
            f"Appended {len(new_records)} entries to {self.path} "
            f"({len(retained)} retained, {dropped} evicted)"
        )
        return len(retained)


class ReadingHistoryStore(BoundedJsonStore):
    """Bounded history of environmental readings"""

    def _to_record(self, entry: Any) -> Dict[str, Any]:
        if isinstance(entry, EnvironmentalReading):
            return entry.to_file_record()
        return super()._to_record(entry)


class AlertHistoryStore(BoundedJsonStore):
    """Bounded history of dispatched alerts"""

    def _to_record(self, entry: Any) -> Dict[str, Any]:
        if isinstance(entry, Alert):
            return entry.to_record()
        return super()._to_record(entry)
