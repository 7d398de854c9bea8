"""Structured logging of session activity for narrative and debugging."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Optional, TextIO


@dataclass
class LogEntry:
    """A single log entry."""

    day: int
    phase: str
    category: str
    message: str
    data: dict = field(default_factory=dict)


class SimLogger:
    """Categorised logging with verbosity control, flushed once per half-turn."""

    PHASE = "PHASE"
    ACTION = "ACTION"
    POPULATION = "POPULATION"
    FACTION = "FACTION"
    BLESSING = "BLESSING"
    PACK = "PACK"
    NARRATIVE = "NARRATIVE"
    SAVE = "SAVE"

    _VERBOSITY_MAP = {
        PHASE: 0,
        POPULATION: 0,
        FACTION: 1,
        ACTION: 1,
        BLESSING: 1,
        PACK: 2,
        NARRATIVE: 2,
        SAVE: 3,
    }

    def __init__(
        self,
        verbosity: int = 1,
        log_file: Optional[str] = None,
        stdout: bool = True,
    ) -> None:
        """
        verbosity levels:
            0 = phase changes and population
            1 = + actions, factions, blessings
            2 = + pack and narrative flavour
            3 = everything (debug, saves)
        """
        self.verbosity = verbosity
        self._buffer: list[LogEntry] = []
        self._all_entries: list[LogEntry] = []
        self._file: Optional[TextIO] = None
        self._stdout = stdout

        if log_file:
            os.makedirs(os.path.dirname(log_file) if os.path.dirname(log_file) else ".", exist_ok=True)
            self._file = open(log_file, "w", encoding="utf-8")

    @property
    def entries(self) -> list[LogEntry]:
        return self._all_entries + self._buffer

    def log(
        self,
        category: str,
        message: str,
        day: int = 0,
        phase: str = "",
        **data,
    ) -> None:
        self._buffer.append(LogEntry(day=day, phase=phase, category=category, message=message, data=data))

    def flush(self) -> None:
        """Write buffered entries that pass the verbosity filter."""
        for entry in self._buffer:
            if self._VERBOSITY_MAP.get(entry.category, 1) <= self.verbosity:
                line = f"[Day {entry.day:>3} {entry.phase:<5}] [{entry.category:<10}] {entry.message}"
                if self._stdout:
                    print(line)
                if self._file:
                    self._file.write(line + "\n")

        self._all_entries.extend(self._buffer)
        self._buffer.clear()

        if self._file:
            self._file.flush()

    def get_narrative(self, day: int) -> str:
        """Human-readable account of one day."""
        day_entries = [e for e in self.entries if e.day == day]
        if not day_entries:
            return f"Day {day}: Nothing notable happened."

        lines = [f"=== Day {day} ==="]
        for entry in day_entries:
            lines.append(f"  [{entry.phase}] [{entry.category}] {entry.message}")
        return "\n".join(lines)

    def export_json(self, filepath: str) -> None:
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)
        data = [
            {
                "day": e.day,
                "phase": e.phase,
                "category": e.category,
                "message": e.message,
                "data": e.data,
            }
            for e in self.entries
        ]
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None
