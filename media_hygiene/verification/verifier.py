import logging
from pathlib import Path
from typing import Optional, Set

from tqdm import tqdm

from .. import config
from ..models import CorruptEntry, VerifySummary
from ..scanning.filesystem import iter_files
from .checksum import compute_crc32, read_checksum, write_checksum
from .corrupt_list import CORRUPT, CRC_MISMATCH, CorruptFileList
from .integrity import CorruptionChecker


class IntegrityVerifier:
    """
    Checks every image and video under a root.

    Files with a checksum sidecar are re-hashed and compared to it.
    Files without one are decoded/probed; healthy ones get a new sidecar,
    damaged ones go to the corrupt file list.
    """

    def __init__(self,
                 checker: CorruptionChecker,
                 corrupt_list: CorruptFileList,
                 extensions: Optional[Set[str]] = None):
        self.checker = checker
        self.corrupt_list = corrupt_list
        self.extensions = extensions or (config.VERIFY_IMAGE_EXTS | config.VERIFY_VIDEO_EXTS)

    def run(self, root: Path, verify_checksums: bool = True, progress: bool = False) -> VerifySummary:
        self.corrupt_list.clear()
        summary = VerifySummary()

        logging.info(f"Checking image and video files in {root} for corruption...")
        files = sorted(iter_files(root, self.extensions), key=str)

        current_dir = None
        for path in tqdm(files, desc="Verifying", unit="file", disable=not progress):
            if path.parent != current_dir:
                current_dir = path.parent
                logging.info(f"Verifying directory: {current_dir}")

            summary.checked += 1
            try:
                self._check(path, verify_checksums, summary)
            except OSError as e:
                logging.error(f"Cannot read {path}: {e}")
                self._record(CorruptEntry(path, CORRUPT), summary)

        if summary.has_corrupt:
            logging.warning(f"Corrupt files found. Check {self.corrupt_list.path} for details.")
        else:
            logging.info("No corrupt files found.")
        return summary

    def _check(self, path: Path, verify_checksums: bool, summary: VerifySummary):
        stored = read_checksum(path)
        if stored is not None:
            if not verify_checksums:
                return
            if compute_crc32(path) != stored:
                logging.warning(f"CRC mismatch: {path}")
                self._record(CorruptEntry(path, CRC_MISMATCH), summary)
            else:
                summary.verified += 1
                logging.debug(f"CRC match: {path}")
            return

        if self.checker.is_corrupt(path):
            logging.warning(f"Corrupt file: {path}")
            self._record(CorruptEntry(path, CORRUPT), summary)
            return

        sidecar = write_checksum(path, compute_crc32(path))
        summary.created += 1
        logging.debug(f"Created crc file: {sidecar}")

    def _record(self, entry: CorruptEntry, summary: VerifySummary):
        summary.corrupt.append(entry)
        self.corrupt_list.append(entry)
