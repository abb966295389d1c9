"""Tests for backup snapshots."""
import pytest
from datetime import datetime
from business_logic.backup import create_backup, list_backups, snapshot_name
from errors import StoreIOError


@pytest.fixture
def data_files(tmp_path):
    """Create a minimal data directory with tasks, schedule and stats."""
    data = tmp_path / "data"
    stats = data / "stats"
    stats.mkdir(parents=True)
    (data / "tasks.json").write_text("[]\n")
    (data / "schedule.json").write_text('{"name": "S", "hours": []}\n')
    (stats / "2024-01-01.json").write_text('{"date": "2024-01-01"}\n')
    return data


def _backup(data, now):
    return create_backup(
        data / "tasks.json", data / "schedule.json", data / "stats", data / "backups", now=now
    )


class TestCreateBackup:
    """Test snapshot creation."""

    def test_snapshot_name_format(self):
        assert snapshot_name(datetime(2024, 1, 2, 3, 4, 5)) == "data_20240102_030405"

    def test_copies_files_and_stats_tree(self, data_files):
        snapshot = _backup(data_files, datetime(2024, 1, 2, 3, 4, 5))
        assert snapshot == data_files / "backups" / "data_20240102_030405"
        assert (snapshot / "tasks.json").read_text() == "[]\n"
        assert (snapshot / "schedule.json").exists()
        assert (snapshot / "stats" / "2024-01-01.json").exists()

    def test_old_snapshots_are_kept(self, data_files):
        _backup(data_files, datetime(2024, 1, 1, 0, 0, 0))
        _backup(data_files, datetime(2024, 1, 2, 0, 0, 0))
        assert len(list((data_files / "backups").iterdir())) == 2

    def test_same_second_snapshot_overwrites(self, data_files):
        now = datetime(2024, 1, 1, 0, 0, 0)
        _backup(data_files, now)
        (data_files / "tasks.json").write_text('[{"id": "x"}]\n')
        snapshot = _backup(data_files, now)
        assert (snapshot / "tasks.json").read_text() == '[{"id": "x"}]\n'

    def test_missing_source_raises_and_leaves_partial_snapshot(self, data_files):
        (data_files / "schedule.json").unlink()
        with pytest.raises(StoreIOError):
            _backup(data_files, datetime(2024, 1, 1, 0, 0, 0))
        snapshot = data_files / "backups" / "data_20240101_000000"
        assert (snapshot / "tasks.json").exists()
        assert not (snapshot / "stats").exists()


class TestListBackups:
    """Test snapshot listing."""

    def test_no_backups_dir(self, tmp_path):
        assert list_backups(tmp_path / "nope") == []

    def test_newest_first_and_ignores_other_entries(self, data_files):
        _backup(data_files, datetime(2024, 1, 1, 0, 0, 0))
        _backup(data_files, datetime(2024, 3, 1, 0, 0, 0))
        (data_files / "backups" / "data_notes").mkdir()
        (data_files / "backups" / "README").write_text("hi")
        names = [p.name for p in list_backups(data_files / "backups")]
        assert names == ["data_20240301_000000", "data_20240101_000000"]
