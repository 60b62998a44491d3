"""
List of corrupt files written by the verifier and read by backsync.

One JSON object per line:
    {"time": ..., "reason": "corrupt" | "crc_mismatch", "path": "<file>"}
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List

from ..exceptions import NoLogFoundError
from ..models import CorruptEntry

CORRUPT = "corrupt"
CRC_MISMATCH = "crc_mismatch"


class CorruptFileList:
    def __init__(self, path: Path):
        self.path = path

    def clear(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("", encoding="utf-8")

    def append(self, entry: CorruptEntry):
        line = {
            "time": datetime.now().isoformat(timespec="seconds"),
            "reason": entry.reason,
            "path": str(entry.path),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(line, ensure_ascii=False) + "\n")

    def read(self) -> List[CorruptEntry]:
        if not self.path.is_file():
            raise NoLogFoundError(f"No corrupt file list found at {self.path}. Run verify first.")

        entries = []
        with self.path.open("r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    entries.append(CorruptEntry(Path(data["path"]), data.get("reason", CORRUPT)))
                except (ValueError, KeyError):
                    logging.warning(f"Ignoring malformed line {lineno} in {self.path}")
        return entries
