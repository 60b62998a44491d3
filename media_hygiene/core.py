import logging
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .exceptions import FileOperationError
from .metadata.extract import MetadataExtractor, MetadataReader
from .models import RenameSummary, RestoreSummary, UndoSummary, VerifySummary
from .renaming.engine import RenameEngine
from .renaming.journal import OperationLog
from .renaming.undo import UndoFacility
from .restore.backsync import BackupRestorer
from .scanning.filesystem import MediaScanner
from .verification.corrupt_list import CorruptFileList
from .verification.integrity import CorruptionChecker, MediaIntegrityChecker
from .verification.verifier import IntegrityVerifier
from . import config


class MediaHygieneApp:
    """
    Entry point for the three pipelines: rename (with undo), verify, backsync.

    External capabilities (metadata reader, corruption checker) default to
    the production adapters and can be swapped for fakes.
    """

    def __init__(self,
                 rename_log: Path = Path(config.RENAME_LOG),
                 corrupt_list: Path = Path(config.CORRUPT_FILES_LOG),
                 reader: Optional[MetadataReader] = None,
                 checker: Optional[CorruptionChecker] = None):
        self.rename_log = OperationLog(rename_log)
        self.corrupt_list = CorruptFileList(corrupt_list)
        self.reader = reader if reader is not None else MetadataExtractor()
        self.checker = checker if checker is not None else MediaIntegrityChecker()

    def rename(self,
               root: Path,
               dry_run: bool = False,
               rename_stranded_videos: bool = False,
               progress: bool = False) -> RenameSummary:
        """
        1. Clear the journal
        2. Scan & Group
        3. Rename each group after its capture time
        """
        self.rename_log.clear()
        summary = RenameSummary(dry_run=dry_run)

        logging.info(f"Scanning {root} (DryRun={dry_run})...")
        groups = MediaScanner().scan(root)
        summary.groups = len(groups)

        engine = RenameEngine(
            self.reader,
            self.rename_log,
            dry_run=dry_run,
            rename_stranded_videos=rename_stranded_videos,
        )
        for group in tqdm(groups, desc="Renaming", unit="group", disable=not progress):
            try:
                records = engine.process(group)
            except (FileOperationError, OSError) as e:
                # Renames already done for this group stay journalled
                logging.error(f"Failed to rename group {group.directory / group.base_name}: {e}")
                summary.failed += 1
                continue
            summary.renamed += len(records)

        summary.skipped = engine.skipped
        logging.info(
            f"Renaming completed. Renamed {summary.renamed}, skipped {summary.skipped}, "
            f"failed groups {summary.failed}."
        )
        return summary

    def undo(self) -> UndoSummary:
        return UndoFacility(self.rename_log).undo()

    def verify(self, root: Path, verify_checksums: bool = True, progress: bool = False) -> VerifySummary:
        verifier = IntegrityVerifier(self.checker, self.corrupt_list)
        return verifier.run(root, verify_checksums=verify_checksums, progress=progress)

    def backsync(self, primary_dir: Path, backup_dir: Path, dry_run: bool = False) -> RestoreSummary:
        return BackupRestorer(self.corrupt_list).restore(primary_dir, backup_dir, dry_run=dry_run)
