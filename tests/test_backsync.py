import pytest
from pathlib import Path
from media_hygiene.exceptions import NoLogFoundError
from media_hygiene.models import CorruptEntry
from media_hygiene.restore.backsync import BackupRestorer
from media_hygiene.verification.corrupt_list import CorruptFileList

@pytest.fixture
def trees(tmp_path):
    primary = tmp_path / "primary"
    backup = tmp_path / "backup"
    (primary / "2023").mkdir(parents=True)
    (backup / "2023").mkdir(parents=True)
    return primary, backup

@pytest.fixture
def corrupt_list(tmp_path):
    cl = CorruptFileList(tmp_path / "corrupt_files.jsonl")
    cl.clear()
    return cl

def test_restore_copies_from_backup(trees, corrupt_list):
    primary, backup = trees
    (primary / "2023" / "a.jpg").write_bytes(b"broken")
    (backup / "2023" / "a.jpg").write_bytes(b"good")
    corrupt_list.append(CorruptEntry(primary / "2023" / "a.jpg", "corrupt"))

    summary = BackupRestorer(corrupt_list).restore(primary, backup)

    assert (primary / "2023" / "a.jpg").read_bytes() == b"good"
    assert summary.restored == 1 and summary.missing == 0

def test_restore_includes_checksum_mismatches(trees, corrupt_list):
    primary, backup = trees
    (primary / "b.mov").write_bytes(b"rotten")
    (backup / "b.mov").write_bytes(b"good")
    corrupt_list.append(CorruptEntry(primary / "b.mov", "crc_mismatch"))

    BackupRestorer(corrupt_list).restore(primary, backup)

    assert (primary / "b.mov").read_bytes() == b"good"

def test_dry_run_leaves_primary(trees, corrupt_list, caplog):
    caplog.set_level("INFO")
    primary, backup = trees
    (primary / "a.jpg").write_bytes(b"broken")
    (backup / "a.jpg").write_bytes(b"good")
    corrupt_list.append(CorruptEntry(primary / "a.jpg", "corrupt"))

    summary = BackupRestorer(corrupt_list).restore(primary, backup, dry_run=True)

    assert (primary / "a.jpg").read_bytes() == b"broken"
    assert summary.dry_run and summary.restored == 1
    assert "[DRY RUN] Restored:" in caplog.text

def test_missing_backup_is_skipped(trees, corrupt_list, caplog):
    primary, backup = trees
    (primary / "a.jpg").write_bytes(b"broken")
    (primary / "c.jpg").write_bytes(b"broken")
    (backup / "c.jpg").write_bytes(b"good")
    corrupt_list.append(CorruptEntry(primary / "a.jpg", "corrupt"))
    corrupt_list.append(CorruptEntry(primary / "c.jpg", "corrupt"))

    summary = BackupRestorer(corrupt_list).restore(primary, backup)

    assert summary.missing == 1 and summary.restored == 1
    assert (primary / "c.jpg").read_bytes() == b"good"
    assert "does not exist" in caplog.text

def test_path_outside_primary_is_skipped(trees, corrupt_list, tmp_path):
    primary, backup = trees
    elsewhere = tmp_path / "elsewhere.jpg"
    elsewhere.write_bytes(b"broken")
    corrupt_list.append(CorruptEntry(elsewhere, "corrupt"))

    summary = BackupRestorer(corrupt_list).restore(primary, backup)

    assert summary.missing == 1
    assert elsewhere.read_bytes() == b"broken"

def test_missing_corrupt_list(tmp_path, trees):
    primary, backup = trees
    restorer = BackupRestorer(CorruptFileList(tmp_path / "nope.jsonl"))

    with pytest.raises(NoLogFoundError):
        restorer.restore(primary, backup)

def test_verify_then_backsync(app, trees, checker):
    primary, backup = trees
    (primary / "2023" / "a.jpg").write_bytes(b"broken")
    (backup / "2023" / "a.jpg").write_bytes(b"good")
    checker.corrupt_names.add("a.jpg")

    app.verify(primary)
    summary = app.backsync(primary, backup)

    assert summary.restored == 1
    assert (primary / "2023" / "a.jpg").read_bytes() == b"good"
