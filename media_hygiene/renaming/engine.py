import logging
from pathlib import Path
from typing import List, Optional, Set

from ..exceptions import FileOperationError, MetadataExtractionError
from ..metadata.extract import MetadataReader
from ..models import FileGroup, MediaFile, RenameRecord, SkipNotice
from .collision import is_canonical, resolve_collision
from .journal import OperationLog


class RenameEngine:
    """
    Renames each group after the capture time of its primary file.

    - Image primary: 'DateTimeOriginal'. Video primary: creation time.
    - Sidecars take the primary's capture time with their own extension,
      each going through its own collision resolution.
    - No capture time: nothing in the group is renamed and a skip notice
      is journalled.
    - Files already named after their capture time are left alone, so a
      second run over a renamed tree changes nothing.
    """

    def __init__(self,
                 reader: MetadataReader,
                 log: OperationLog,
                 dry_run: bool = False,
                 rename_stranded_videos: bool = False):
        self.reader = reader
        self.log = log
        self.dry_run = dry_run
        self.rename_stranded_videos = rename_stranded_videos
        self.skipped = 0
        # Dry runs: planned targets never appear on disk, planned sources never leave it
        self._claimed: Set[Path] = set()
        self._vacated: Set[Path] = set()

    def process(self, group: FileGroup) -> List[RenameRecord]:
        primary = group.primary
        if primary is None:
            for media in group.unmatched:
                logging.debug(f"No primary file for {media.path}, leaving it untouched.")
            return []

        try:
            capture_time = self._capture_time(primary)
        except MetadataExtractionError as e:
            return self._skip_group(group, str(e))

        records = []
        for media in [primary] + group.sidecars:
            record = self._rename(media, capture_time)
            if record:
                records.append(record)
        return records

    def _capture_time(self, media: MediaFile) -> str:
        if media.kind == 'image':
            capture_time = self.reader.get_original_capture_time(media.path)
        else:
            capture_time = self.reader.get_creation_time(media.path)
        if not capture_time:
            raise MetadataExtractionError("no valid date found")
        return capture_time

    def _skip_group(self, group: FileGroup, reason: str) -> List[RenameRecord]:
        primary = group.primary
        self._skip(primary.path, reason)

        records = []
        for sidecar in group.sidecars:
            if primary.kind == 'image' and sidecar.kind == 'video' and self.rename_stranded_videos:
                records.extend(self._rename_stranded(sidecar))
            else:
                self._skip(sidecar.path, f"sidecar of {primary.path.name}, which was not renamed")
        return records

    def _rename_stranded(self, video: MediaFile) -> List[RenameRecord]:
        """Renames a video sidecar of a skipped image on its own creation time."""
        try:
            capture_time = self._capture_time(video)
        except MetadataExtractionError as e:
            self._skip(video.path, str(e))
            return []
        record = self._rename(video, capture_time)
        return [record] if record else []

    def _rename(self, media: MediaFile, capture_time: str) -> Optional[RenameRecord]:
        if is_canonical(media.base_name, capture_time):
            logging.debug(f"Already named after its capture time: {media.path}")
            return None

        new_name = resolve_collision(media.directory, capture_time, media.suffix,
                                     self._claimed, self._vacated)
        record = RenameRecord(media.path, media.directory / new_name)

        if self.dry_run:
            self._claimed.add(record.new)
            self._vacated.add(record.original)
        else:
            try:
                media.path.rename(record.new)
            except OSError as e:
                raise FileOperationError(f"Failed to rename {media.path} -> {record.new}: {e}") from e

        self.log.append_rename(record, dry_run=self.dry_run)
        prefix = "[DRY RUN] " if self.dry_run else ""
        logging.info(f"{prefix}Renamed: {record.original} -> {record.new}")
        return record

    def _skip(self, path: Path, reason: str):
        self.skipped += 1
        self.log.append_skip(SkipNotice(path, reason))
        logging.info(f"Skipping: {path} ({reason})")
