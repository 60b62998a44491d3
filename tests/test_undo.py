import json
import pytest
from pathlib import Path
from media_hygiene.exceptions import NoLogFoundError
from media_hygiene.models import RenameRecord, SkipNotice
from media_hygiene.renaming.journal import OperationLog
from media_hygiene.renaming.undo import UndoFacility

def media(path: Path, capture_time: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(capture_time)
    return path

def test_journal_round_trip(oplog, tmp_path):
    oplog.clear()
    rec = RenameRecord(tmp_path / "IMG_0001.jpg", tmp_path / "2024-03-01_120000.jpg")
    oplog.append_skip(SkipNotice(tmp_path / "IMG_0002.jpg", "no valid date found"))
    oplog.append_rename(rec)

    assert oplog.read_renames() == [rec]

def test_journal_handles_arrow_in_paths(oplog, tmp_path):
    oplog.clear()
    rec = RenameRecord(tmp_path / "a -> b.jpg", tmp_path / "2024-03-01_120000.jpg")
    oplog.append_rename(rec)

    assert oplog.read_renames() == [rec]

def test_journal_ignores_malformed_lines(oplog, tmp_path, caplog):
    oplog.clear()
    rec = RenameRecord(tmp_path / "x.jpg", tmp_path / "y.jpg")
    oplog.append_rename(rec)
    with oplog.path.open("a", encoding="utf-8") as f:
        f.write("Renamed: legacy -> line\n")

    assert oplog.read_renames() == [rec]
    assert "malformed" in caplog.text

def test_journal_lines_are_json(oplog, tmp_path):
    oplog.clear()
    oplog.append_rename(RenameRecord(tmp_path / "x.jpg", tmp_path / "y.jpg"))

    entry = json.loads(oplog.path.read_text(encoding="utf-8"))
    assert entry["action"] == "renamed"
    assert "time" in entry

def test_undo_without_log(oplog):
    with pytest.raises(NoLogFoundError):
        UndoFacility(oplog).undo()

def test_undo_restores_run(app, library):
    media(library / "2024-03-01_120000.jpg")
    media(library / "IMG_0001.jpg", "2024-03-01_120000")
    media(library / "IMG_0001.AAE")
    media(library / "sub" / "clip.mov", "2023-07-04_091500")
    before = sorted(p.relative_to(library) for p in library.rglob("*"))

    app.rename(library)
    assert sorted(p.relative_to(library) for p in library.rglob("*")) != before

    summary = app.undo()

    assert sorted(p.relative_to(library) for p in library.rglob("*")) == before
    assert (library / "IMG_0001.jpg").read_text() == "2024-03-01_120000"
    assert summary.reverted == 3 and summary.stale == 0
    assert app.rename_log.path.read_text(encoding="utf-8") == ""

def test_undo_replays_in_reverse(oplog, tmp_path):
    # a -> b, then c -> a: only last-first replay restores both
    media(tmp_path / "b", "was a")
    media(tmp_path / "a", "was c")
    oplog.clear()
    oplog.append_rename(RenameRecord(tmp_path / "a", tmp_path / "b"))
    oplog.append_rename(RenameRecord(tmp_path / "c", tmp_path / "a"))

    UndoFacility(oplog).undo()

    assert (tmp_path / "a").read_text() == "was a"
    assert (tmp_path / "c").read_text() == "was c"
    assert not (tmp_path / "b").exists()

def test_undo_skips_stale_entries(oplog, tmp_path, caplog):
    media(tmp_path / "new1.jpg")
    oplog.clear()
    ok = RenameRecord(tmp_path / "old1.jpg", tmp_path / "new1.jpg")
    stale = RenameRecord(tmp_path / "old2.jpg", tmp_path / "new2.jpg")
    oplog.append_rename(ok)
    oplog.append_rename(stale)

    summary = UndoFacility(oplog).undo()

    assert (tmp_path / "old1.jpg").exists()
    assert summary.reverted == 1 and summary.stale == 1
    assert "does not exist" in caplog.text
    # Only the failed record is kept for a later retry
    assert oplog.read_renames() == [stale]

def test_undo_does_not_overwrite_original(oplog, tmp_path):
    media(tmp_path / "new.jpg", "renamed")
    media(tmp_path / "old.jpg", "someone else")
    oplog.clear()
    oplog.append_rename(RenameRecord(tmp_path / "old.jpg", tmp_path / "new.jpg"))

    summary = UndoFacility(oplog).undo()

    assert summary.stale == 1
    assert (tmp_path / "old.jpg").read_text() == "someone else"
    assert (tmp_path / "new.jpg").read_text() == "renamed"

def test_undo_after_dry_run_changes_nothing(app, library, caplog):
    media(library / "clip.mov", "2023-07-04_091500")
    app.rename(library, dry_run=True)

    summary = app.undo()

    assert (library / "clip.mov").exists()
    assert summary.reverted == 0 and summary.stale == 0
    assert "does not exist" not in caplog.text

def test_dry_run_entries_are_marked(oplog, tmp_path):
    oplog.clear()
    oplog.append_rename(RenameRecord(tmp_path / "x.jpg", tmp_path / "y.jpg"), dry_run=True)
    real = RenameRecord(tmp_path / "a.jpg", tmp_path / "b.jpg")
    oplog.append_rename(real)

    entries = [json.loads(line) for line in oplog.path.read_text(encoding="utf-8").splitlines()]
    assert entries[0]["dry_run"] is True
    assert "dry_run" not in entries[1]
    assert oplog.read_renames() == [real]
