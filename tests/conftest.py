"""Pytest configuration and shared fixtures."""
import logging
import pytest
from datetime import datetime
from file_store import FileStore
from models import Score, Task, TaskStatus


@pytest.fixture
def data_dir(tmp_path):
    """Fixture providing an empty data directory path."""
    return tmp_path / "data"


@pytest.fixture
def store(data_dir):
    """Fixture providing a FileStore on a temporary data directory."""
    return FileStore(data_dir)


@pytest.fixture
def sample_tasks():
    """Fixture providing tasks spread over two days and several statuses."""
    return [
        Task("Write report", id="task_a", score=Score(5, 1, 3),
             created_at=datetime(2024, 1, 1, 9, 30), updated_at=datetime(2024, 1, 1, 9, 30),
             canonical_hour="Prime", actual_seconds=1800),
        Task("Lunch walk", id="task_b", score=Score(1, 4, 1), status=TaskStatus.COMPLETED,
             created_at=datetime(2024, 1, 1, 13, 45), updated_at=datetime(2024, 1, 1, 14, 30),
             completed_at=datetime(2024, 1, 1, 14, 30), actual_seconds=2700),
        Task("Read paper", id="task_c", score=Score(2, 2, 5),
             created_at=datetime(2024, 1, 2, 17, 0), updated_at=datetime(2024, 1, 2, 17, 0)),
    ]


@pytest.fixture
def populated_store(store, sample_tasks):
    """Fixture providing a store holding the sample tasks."""
    for task in sample_tasks:
        store.create_task(task)
    return store


@pytest.fixture
def restore_logging():
    """Put back the root handlers replaced by setup_logging."""
    root = logging.getLogger()
    saved = list(root.handlers)
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved:
            handler.close()
    for handler in saved:
        root.addHandler(handler)
