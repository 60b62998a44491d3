import shutil
import logging
from pathlib import Path
from typing import Optional

from ..models import RestoreSummary
from ..verification.corrupt_list import CorruptFileList


class BackupRestorer:
    """
    Copies corrupt files back from a known-good backup tree.

    A file at <primary_dir>/<rel> is restored from <backup_dir>/<rel>.
    Both decode failures and CRC mismatches are restored.
    Run verify again afterwards to confirm the restored files.
    """

    def __init__(self, corrupt_list: CorruptFileList):
        self.corrupt_list = corrupt_list

    def restore(self, primary_dir: Path, backup_dir: Path, dry_run: bool = False) -> RestoreSummary:
        entries = self.corrupt_list.read()
        summary = RestoreSummary(dry_run=dry_run)

        if dry_run:
            logging.info("Running in dry-run mode. No files will be restored")

        for entry in reversed(entries):
            backup = self._backup_path(entry.path, primary_dir, backup_dir)
            if backup is None or not backup.exists():
                logging.warning(f"Warning: File {backup or entry.path} does not exist. Skipping.")
                summary.missing += 1
                continue

            if not dry_run:
                try:
                    entry.path.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(str(backup), str(entry.path))
                except OSError as e:
                    logging.error(f"Failed to restore {backup} -> {entry.path}: {e}")
                    summary.failed += 1
                    continue

            prefix = "[DRY RUN] " if dry_run else ""
            logging.info(f"{prefix}Restored: {backup} -> {entry.path}")
            summary.restored += 1

        return summary

    def _backup_path(self, path: Path, primary_dir: Path, backup_dir: Path) -> Optional[Path]:
        try:
            rel = path.relative_to(primary_dir)
        except ValueError:
            logging.warning(f"{path} is not inside {primary_dir}")
            return None
        return backup_dir / rel
