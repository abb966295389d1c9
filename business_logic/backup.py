"""Timestamped snapshots of the data files."""
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from errors import StoreIOError

logger = logging.getLogger(__name__)

SNAPSHOT_PREFIX = "data_"
SNAPSHOT_TIME_FORMAT = "%Y%m%d_%H%M%S"


def snapshot_name(now: datetime) -> str:
    """Directory name for a snapshot taken at now (data_YYYYMMDD_HHMMSS)."""
    return f"{SNAPSHOT_PREFIX}{now.strftime(SNAPSHOT_TIME_FORMAT)}"


def _is_snapshot_dir(p: Path) -> bool:
    if not p.is_dir() or not p.name.startswith(SNAPSHOT_PREFIX):
        return False
    try:
        datetime.strptime(p.name[len(SNAPSHOT_PREFIX):], SNAPSHOT_TIME_FORMAT)
    except ValueError:
        return False
    return True


def create_backup(
    tasks_file: Path,
    schedule_file: Path,
    stats_dir: Path,
    backups_dir: Path,
    now: Optional[datetime] = None,
) -> Path:
    """
    Copy the tasks file, schedule file and stats directory into a new snapshot.

    The snapshot lands in backups_dir/data_<YYYYMMDD_HHMMSS>/. Two snapshots
    taken within the same second share a directory and the later one
    overwrites the earlier. Old snapshots are never pruned.

    Args:
        tasks_file: Path to tasks.json
        schedule_file: Path to schedule.json
        stats_dir: Path to the stats directory
        backups_dir: Directory holding all snapshots
        now: Snapshot time (defaults to the current time)

    Returns:
        Path of the snapshot directory

    Raises:
        StoreIOError: If any directory or copy operation fails. Files copied
            before the failure are left in place.
    """
    now = now or datetime.now()
    snapshot = backups_dir / snapshot_name(now)

    try:
        snapshot.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StoreIOError(f"Failed to create backup directory {snapshot}: {e}") from e

    for label, src in (("tasks", tasks_file), ("schedule", schedule_file)):
        try:
            shutil.copy2(src, snapshot / src.name)
        except OSError as e:
            logger.warning("Backup of %s failed src=%s err=%s", label, src, e)
            raise StoreIOError(f"Failed to backup {label}: {e}") from e

    try:
        shutil.copytree(stats_dir, snapshot / stats_dir.name, dirs_exist_ok=True)
    except OSError as e:
        logger.warning("Backup of stats failed src=%s err=%s", stats_dir, e)
        raise StoreIOError(f"Failed to backup stats: {e}") from e

    logger.info("Backup written to %s", snapshot)
    return snapshot


def list_backups(backups_dir: Path) -> List[Path]:
    """Return snapshot directories, newest first."""
    if not backups_dir.exists():
        return []
    return sorted((p for p in backups_dir.iterdir() if _is_snapshot_dir(p)), reverse=True)
