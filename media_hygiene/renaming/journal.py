"""
Append-only journal of rename operations.

One JSON object per line:
    {"time": ..., "action": "renamed", "src": "<original>", "dst": "<new>"}
    {"time": ..., "action": "renamed", "src": ..., "dst": ..., "dry_run": true}
    {"time": ..., "action": "skipped", "src": "<path>", "reason": "<text>"}
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List

from ..exceptions import NoLogFoundError
from ..models import RenameRecord, SkipNotice

RENAMED = "renamed"
SKIPPED = "skipped"


class OperationLog:
    def __init__(self, path: Path):
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def clear(self):
        """Truncates the journal, creating it if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("", encoding="utf-8")

    def append_rename(self, record: RenameRecord, dry_run: bool = False):
        entry = {"action": RENAMED, "src": str(record.original), "dst": str(record.new)}
        if dry_run:
            entry["dry_run"] = True
        self._append(entry)

    def append_skip(self, notice: SkipNotice):
        self._append({"action": SKIPPED, "src": str(notice.path), "reason": notice.reason})

    def read_renames(self) -> List[RenameRecord]:
        """Returns journalled renames in chronological order, minus dry-run plans."""
        if not self.exists():
            raise NoLogFoundError(f"No log file found at {self.path}. Cannot undo.")

        records = []
        with self.path.open("r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except ValueError:
                    logging.warning(f"Ignoring malformed journal line {lineno} in {self.path}")
                    continue
                if entry.get("dry_run"):
                    continue
                if entry.get("action") == RENAMED and entry.get("src") and entry.get("dst"):
                    records.append(RenameRecord(Path(entry["src"]), Path(entry["dst"])))
        return records

    def rewrite(self, records: List[RenameRecord]):
        """Replaces the journal contents with `records` (chronological order)."""
        self.clear()
        for record in records:
            self.append_rename(record)

    def _append(self, entry: dict):
        entry = {"time": datetime.now().isoformat(timespec="seconds"), **entry}
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")
