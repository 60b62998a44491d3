from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

@dataclass
class MediaFile:
    """
    Represents a media file found during a scan.
    """
    path: Path
    directory: Path
    base_name: str          # filename without final extension
    extension: str          # lower-cased, no dot
    suffix: str             # on-disk suffix, original case, with dot
    kind: str               # image/video/sidecar
    role: str = 'unmatched' # primary/sidecar/unmatched

    @classmethod
    def from_path(cls, path: Path, kind: str) -> "MediaFile":
        return cls(
            path=path,
            directory=path.parent,
            base_name=path.stem,
            extension=path.suffix[1:].lower(),
            suffix=path.suffix,
            kind=kind,
        )


@dataclass
class FileGroup:
    """
    Files sharing (directory, base name). At most one primary.
    """
    directory: Path
    base_name: str
    primary: Optional[MediaFile] = None
    sidecars: List[MediaFile] = field(default_factory=list)
    unmatched: List[MediaFile] = field(default_factory=list)

    @property
    def files(self) -> List[MediaFile]:
        members = [self.primary] if self.primary else []
        return members + self.sidecars + self.unmatched


@dataclass(frozen=True)
class RenameRecord:
    original: Path
    new: Path


@dataclass(frozen=True)
class SkipNotice:
    path: Path
    reason: str


@dataclass(frozen=True)
class CorruptEntry:
    path: Path
    reason: str             # corrupt/crc_mismatch


@dataclass
class RenameSummary:
    groups: int = 0
    renamed: int = 0
    skipped: int = 0
    failed: int = 0
    dry_run: bool = False


@dataclass
class UndoSummary:
    reverted: int = 0
    stale: int = 0


@dataclass
class VerifySummary:
    checked: int = 0
    verified: int = 0       # checksum matched
    created: int = 0        # new checksum sidecar written
    corrupt: List[CorruptEntry] = field(default_factory=list)

    @property
    def has_corrupt(self) -> bool:
        return bool(self.corrupt)


@dataclass
class RestoreSummary:
    restored: int = 0
    missing: int = 0
    failed: int = 0
    dry_run: bool = False
