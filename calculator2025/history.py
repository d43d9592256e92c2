"""
history.py
Bounded log of completed operations, persisted as one tab-separated record
per line (oldest first):

    left<TAB>op<TAB>right<TAB>result[<TAB>iso-timestamp]
"""

import contextlib
import logging
import math
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .config import HISTORY_LIMIT
from .core import HistoryParseError, Operator, format_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """One completed binary operation."""
    left: float
    operator: Operator
    right: float
    result: float
    timestamp: Optional[datetime] = None

    @property
    def expression(self) -> str:
        return f"{format_number(self.left)} {self.operator.symbol} {format_number(self.right)}"

    def __str__(self) -> str:
        return f"{self.expression} = {format_number(self.result)}"

    def to_record(self) -> str:
        fields = [repr(self.left), self.operator.value, repr(self.right), repr(self.result)]
        if self.timestamp is not None:
            fields.append(self.timestamp.isoformat())
        return "\t".join(fields)

    @classmethod
    def from_record(cls, line: str) -> "HistoryEntry":
        fields = line.rstrip("\r\n").split("\t")
        if len(fields) not in (4, 5):
            raise HistoryParseError(f"Expected 4 or 5 fields, got {len(fields)}")
        try:
            left, right, result = float(fields[0]), float(fields[2]), float(fields[3])
            op = Operator(fields[1])
            timestamp = datetime.fromisoformat(fields[4]) if len(fields) == 5 else None
        except ValueError as e:
            raise HistoryParseError(str(e)) from e
        if not all(math.isfinite(v) for v in (left, right, result)):
            raise HistoryParseError("Non-finite number in record")
        return cls(left, op, right, result, timestamp)


class HistoryStore:
    """
    Keeps the newest `capacity` entries. Every mutation rewrites the whole
    file; `path=None` keeps the history in memory only.
    """

    def __init__(self, path: Union[str, Path, None] = None, capacity: int = HISTORY_LIMIT):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.path = Path(path) if path is not None else None
        self.capacity = capacity
        self._entries: List[HistoryEntry] = []  # oldest first

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> Tuple[HistoryEntry, ...]:
        """Most recent first."""
        return tuple(reversed(self._entries))

    def load(self) -> Tuple[HistoryEntry, ...]:
        self._entries = []
        if self.path is None:
            return self.entries()
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                lines = fh.readlines()
        except FileNotFoundError:
            logger.info("No history file at %s; starting empty", self.path)
            return self.entries()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read history file %s: %s", self.path, e)
            return self.entries()

        loaded = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                loaded.append(HistoryEntry.from_record(line))
            except HistoryParseError as e:
                logger.warning(
                    "Corrupt history record at %s:%d (%s); discarding it and %d later line(s)",
                    self.path, lineno, e, len(lines) - lineno,
                )
                break
        self._entries = loaded[-self.capacity:]
        logger.info("Loaded %d history entries from %s", len(self._entries), self.path)
        return self.entries()

    def append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)
        if len(self._entries) > self.capacity:
            del self._entries[:len(self._entries) - self.capacity]
        self.save()

    def clear(self) -> None:
        self._entries = []
        self.save()

    def save(self) -> None:
        if self.path is None:
            return
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8", newline="\n") as fh:
                for entry in self._entries:
                    fh.write(entry.to_record() + "\n")
            os.replace(tmp, self.path)
        except OSError:
            logger.exception("Failed to write history file %s", self.path)
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
