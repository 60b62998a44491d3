import pytest
from pathlib import Path
from typing import List, Optional, Set

from media_hygiene.core import MediaHygieneApp
from media_hygiene.renaming.journal import OperationLog


class FakeMetadataReader:
    """
    In-memory stand-in for MetadataExtractor.

    A test file's content *is* its capture time ("2024-03-01_120000"),
    so the answer follows the file across renames. Empty content means
    the metadata field is missing.
    """

    def __init__(self):
        self.image_calls: List[Path] = []
        self.video_calls: List[Path] = []

    def get_original_capture_time(self, path: Path) -> Optional[str]:
        self.image_calls.append(path)
        return path.read_text().strip() or None

    def get_creation_time(self, path: Path) -> Optional[str]:
        self.video_calls.append(path)
        return path.read_text().strip() or None


class FakeCorruptionChecker:
    """Reports files whose name is in `corrupt_names` as corrupt."""

    def __init__(self, corrupt_names: Optional[Set[str]] = None):
        self.corrupt_names = corrupt_names or set()
        self.checked: List[Path] = []

    def is_corrupt(self, path: Path) -> bool:
        self.checked.append(path)
        return path.name in self.corrupt_names


@pytest.fixture
def reader():
    return FakeMetadataReader()

@pytest.fixture
def checker():
    return FakeCorruptionChecker()

@pytest.fixture
def library(tmp_path):
    """Empty media directory, kept apart from the journals in tmp_path."""
    root = tmp_path / "library"
    root.mkdir()
    return root

@pytest.fixture
def oplog(tmp_path):
    return OperationLog(tmp_path / "rename_log.jsonl")

@pytest.fixture
def app(tmp_path, reader, checker):
    return MediaHygieneApp(
        rename_log=tmp_path / "rename_log.jsonl",
        corrupt_list=tmp_path / "corrupt_files.jsonl",
        reader=reader,
        checker=checker,
    )
