"""Data models for tasks, canonical hours and statistics."""
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Dict, List, Optional, Union

SCORE_MIN = 0
SCORE_MAX = 5

TimeOfDay = Union[datetime, time, str]


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


@dataclass
class Score:
    """Triple-metric score: work, play and learn, each valid in [0, 5].

    Validity is checked with is_valid(), never enforced on construction,
    so out-of-range values can be loaded and reported.
    """
    work: int = 0
    play: int = 0
    learn: int = 0

    def is_valid(self) -> bool:
        """Check that all three components are within range."""
        return all(SCORE_MIN <= v <= SCORE_MAX for v in (self.work, self.play, self.learn))

    def total(self) -> int:
        """Sum of all three components."""
        return self.work + self.play + self.learn

    def average(self) -> float:
        """Average across the three components."""
        return self.total() / 3.0

    def __add__(self, other: 'Score') -> 'Score':
        return Score(
            work=self.work + other.work,
            play=self.play + other.play,
            learn=self.learn + other.learn,
        )

    def floordiv(self, divisor: int) -> 'Score':
        """Componentwise integer division (truncating)."""
        return Score(
            work=self.work // divisor,
            play=self.play // divisor,
            learn=self.learn // divisor,
        )

    def to_dict(self) -> dict:
        return {'work': self.work, 'play': self.play, 'learn': self.learn}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'Score':
        data = data or {}
        return cls(
            work=int(data.get('work', 0)),
            play=int(data.get('play', 0)),
            learn=int(data.get('learn', 0)),
        )


class TaskStatus(Enum):
    """Lifecycle state of a task."""
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PAUSED = "paused"

    def __str__(self) -> str:
        return self.value


def generate_task_id() -> str:
    """Generate a collision-resistant task id."""
    return f"task_{uuid.uuid4().hex}"


@dataclass
class Task:
    """A single activity or work item.

    Time tracking fields:
    - estimated_seconds: User's estimate for task duration in seconds
    - actual_seconds: Accumulated active time in seconds
    - start_time: When the current active interval began (None unless active)

    Every lifecycle method stamps updated_at.
    """
    title: str
    id: str = field(default_factory=generate_task_id)
    description: str = ""
    score: Score = field(default_factory=Score)
    status: TaskStatus = TaskStatus.PENDING
    estimated_seconds: Optional[int] = None
    actual_seconds: int = 0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    scheduled_time: Optional[datetime] = None
    canonical_hour: str = ""
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    notes: str = ""
    reflection: str = ""

    def is_active(self) -> bool:
        return self.status is TaskStatus.ACTIVE

    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    def _fold_running_interval(self, now: datetime):
        """Add the running interval (if any) to actual_seconds and clear start_time."""
        if self.start_time is not None:
            elapsed = now - self.start_time
            self.actual_seconds += max(0, int(elapsed.total_seconds()))
            self.start_time = None

    def start(self, now: Optional[datetime] = None):
        """Begin work on the task. An already active task keeps its running timer."""
        if self.status is TaskStatus.ACTIVE and self.start_time is not None:
            return
        now = now or datetime.now()
        self.start_time = now
        self.status = TaskStatus.ACTIVE
        self.updated_at = now

    def pause(self, now: Optional[datetime] = None):
        """Temporarily stop work. Only an active, timed task can be paused."""
        if self.status is not TaskStatus.ACTIVE or self.start_time is None:
            return
        now = now or datetime.now()
        self._fold_running_interval(now)
        self.status = TaskStatus.PAUSED
        self.updated_at = now

    def resume(self, now: Optional[datetime] = None):
        """Continue work on a paused task."""
        if self.status is not TaskStatus.PAUSED:
            return
        now = now or datetime.now()
        self.start_time = now
        self.status = TaskStatus.ACTIVE
        self.updated_at = now

    def complete(self, now: Optional[datetime] = None):
        """Finish the task, folding any running interval into actual time."""
        now = now or datetime.now()
        self._fold_running_interval(now)
        self.end_time = now
        self.completed_at = now
        self.status = TaskStatus.COMPLETED
        self.updated_at = now

    def cancel(self, now: Optional[datetime] = None):
        """Abandon the task, keeping the time already spent."""
        now = now or datetime.now()
        self._fold_running_interval(now)
        self.end_time = now
        self.status = TaskStatus.CANCELLED
        self.updated_at = now

    def reopen(self, now: Optional[datetime] = None):
        """Put a finished task back to pending."""
        now = now or datetime.now()
        self._fold_running_interval(now)
        self.end_time = None
        self.completed_at = None
        self.status = TaskStatus.PENDING
        self.updated_at = now

    def elapsed_seconds(self, now: Optional[datetime] = None) -> int:
        """Accumulated time plus the running interval, in seconds."""
        if self.start_time is None:
            return self.actual_seconds
        now = now or datetime.now()
        return self.actual_seconds + max(0, int((now - self.start_time).total_seconds()))

    def add_tag(self, tag: str):
        tag = tag.strip()
        if tag and tag not in self.tags:
            self.tags.append(tag)
            self.updated_at = datetime.now()

    def remove_tag(self, tag: str):
        if tag in self.tags:
            self.tags.remove(tag)
            self.updated_at = datetime.now()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'score': self.score.to_dict(),
            'status': self.status.value,
            'estimated_seconds': self.estimated_seconds,
            'actual_seconds': self.actual_seconds,
            'start_time': _format_datetime(self.start_time),
            'end_time': _format_datetime(self.end_time),
            'scheduled_time': _format_datetime(self.scheduled_time),
            'canonical_hour': self.canonical_hour,
            'tags': list(self.tags),
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
            'completed_at': _format_datetime(self.completed_at),
            'notes': self.notes,
            'reflection': self.reflection,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Task':
        """Create from dictionary (JSON deserialization).

        Raises:
            KeyError: If id, title, status or created_at is missing
            ValueError: If a timestamp or status value is malformed
        """
        created_at = datetime.fromisoformat(data['created_at'])
        return cls(
            id=data['id'],
            title=data['title'],
            description=data.get('description', ""),
            score=Score.from_dict(data.get('score')),
            status=TaskStatus(data['status']),
            estimated_seconds=data.get('estimated_seconds'),
            actual_seconds=data.get('actual_seconds', 0),
            start_time=_parse_datetime(data.get('start_time')),
            end_time=_parse_datetime(data.get('end_time')),
            scheduled_time=_parse_datetime(data.get('scheduled_time')),
            canonical_hour=data.get('canonical_hour', ""),
            tags=list(data.get('tags') or []),
            created_at=created_at,
            updated_at=_parse_datetime(data.get('updated_at')) or created_at,
            completed_at=_parse_datetime(data.get('completed_at')),
            notes=data.get('notes', ""),
            reflection=data.get('reflection', ""),
        )


def _minutes_of_day(hhmm: str) -> int:
    """Minutes since midnight for "HH:MM", where "24:00" is the end of the day."""
    hours, sep, minutes = hhmm.partition(":")
    if not (sep and len(hours) == 2 and len(minutes) == 2 and hours.isdigit() and minutes.isdigit()):
        raise ValueError(f"Invalid time of day: {hhmm!r}")
    total = int(hours) * 60 + int(minutes)
    if int(minutes) > 59 or total > 24 * 60:
        raise ValueError(f"Invalid time of day: {hhmm!r}")
    return total


def _time_of_day(t: TimeOfDay) -> str:
    """Reduce a datetime, time or "HH:MM" string to its "HH:MM" form."""
    if isinstance(t, str):
        return t
    return t.strftime("%H:%M")


@dataclass
class CanonicalHour:
    """A named time-of-day block [start_time, end_time) with a suggested score.

    Times are "HH:MM" wall-clock strings, not tied to any date. Zero-padded
    strings compare in chronological order, so comparisons are done on them
    directly.
    """
    name: str
    start_time: str
    end_time: str
    default_score: Score = field(default_factory=Score)
    description: str = ""
    purpose: str = ""

    @property
    def duration_seconds(self) -> int:
        return (_minutes_of_day(self.end_time) - _minutes_of_day(self.start_time)) * 60

    def is_active(self, t: TimeOfDay) -> bool:
        """Check whether the time-of-day of t falls within this block."""
        time_str = _time_of_day(t)
        return self.start_time <= time_str < self.end_time

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'duration_seconds': self.duration_seconds,
            'description': self.description,
            'purpose': self.purpose,
            'default_score': self.default_score.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'CanonicalHour':
        for key in ('start_time', 'end_time'):
            _minutes_of_day(data[key])
        return cls(
            name=data['name'],
            start_time=data['start_time'],
            end_time=data['end_time'],
            default_score=Score.from_dict(data.get('default_score')),
            description=data.get('description', ""),
            purpose=data.get('purpose', ""),
        )


@dataclass
class Schedule:
    """An ordered collection of canonical hours.

    Blocks may overlap or leave gaps; lookups return the first match.
    """
    name: str
    hours: List[CanonicalHour] = field(default_factory=list)

    def get_current_hour(self, t: TimeOfDay) -> Optional[CanonicalHour]:
        """Return the first block active at t, or None."""
        for hour in self.hours:
            if hour.is_active(t):
                return hour
        return None

    def get_hour_by_name(self, name: str) -> Optional[CanonicalHour]:
        for hour in self.hours:
            if hour.name == name:
                return hour
        return None

    def to_dict(self) -> dict:
        return {'name': self.name, 'hours': [h.to_dict() for h in self.hours]}

    @classmethod
    def from_dict(cls, data: dict) -> 'Schedule':
        return cls(
            name=data['name'],
            hours=[CanonicalHour.from_dict(h) for h in data.get('hours') or []],
        )


def default_schedule() -> Schedule:
    """Return the standard canonical hours schedule."""
    return Schedule(
        name="Traditional Canonical Hours",
        hours=[
            CanonicalHour("Matins", "06:00", "07:30", Score(4, 1, 3),
                          "Deep work, planning, and preparation",
                          "High-focus work when mind is fresh"),
            CanonicalHour("Lauds", "07:30", "09:00", Score(3, 1, 2),
                          "Administrative tasks and organization",
                          "Handle communications and planning"),
            CanonicalHour("Prime", "09:00", "12:00", Score(5, 1, 3),
                          "Primary work blocks and major tasks",
                          "Core productive work period"),
            CanonicalHour("Terce", "12:00", "13:30", Score(3, 2, 2),
                          "Meetings, collaboration, and communication",
                          "Social and collaborative work"),
            CanonicalHour("Sext", "13:30", "15:00", Score(1, 4, 1),
                          "Lunch, recovery, and personal time",
                          "Rest and recharge"),
            CanonicalHour("None", "15:00", "16:30", Score(3, 3, 4),
                          "Creative work and experimentation",
                          "Innovation and creative problem-solving"),
            CanonicalHour("Vespers", "16:30", "18:00", Score(2, 2, 5),
                          "Learning, documentation, and skill development",
                          "Knowledge acquisition and sharing"),
            CanonicalHour("Compline", "18:00", "20:00", Score(2, 3, 3),
                          "Planning, reflection, and personal projects",
                          "Review and prepare for tomorrow"),
        ],
    )


@dataclass
class DailyStats:
    """Aggregated statistics for one calendar date."""
    date: date
    total_tasks: int = 0
    completed_tasks: int = 0
    total_score: Score = field(default_factory=Score)
    average_score: Score = field(default_factory=Score)
    time_spent_seconds: int = 0
    hourly_breakdown: Dict[str, Score] = field(default_factory=dict)

    @classmethod
    def empty(cls, day: date) -> 'DailyStats':
        """Zero-valued record for a day with no stored stats."""
        return cls(date=day, hourly_breakdown={})

    def completion_rate(self) -> float:
        """Percentage of tasks completed (0.0 when there are no tasks)."""
        if self.total_tasks == 0:
            return 0.0
        return self.completed_tasks / self.total_tasks * 100.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'date': self.date.isoformat(),
            'total_tasks': self.total_tasks,
            'completed_tasks': self.completed_tasks,
            'total_score': self.total_score.to_dict(),
            'average_score': self.average_score.to_dict(),
            'time_spent_seconds': self.time_spent_seconds,
            'hourly_breakdown': {
                name: score.to_dict() for name, score in self.hourly_breakdown.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DailyStats':
        """Create from dictionary (JSON deserialization)."""
        return cls(
            date=date.fromisoformat(data['date']),
            total_tasks=data.get('total_tasks', 0),
            completed_tasks=data.get('completed_tasks', 0),
            total_score=Score.from_dict(data.get('total_score')),
            average_score=Score.from_dict(data.get('average_score')),
            time_spent_seconds=data.get('time_spent_seconds', 0),
            hourly_breakdown={
                name: Score.from_dict(score)
                for name, score in (data.get('hourly_breakdown') or {}).items()
            },
        )


@dataclass
class WeeklyStats:
    """Statistics over a 7-day inclusive window. Derived, never persisted."""
    start_date: date
    end_date: date
    daily_stats: List[DailyStats] = field(default_factory=list)
    weekly_total: Score = field(default_factory=Score)
    weekly_average: Score = field(default_factory=Score)
    total_time_spent_seconds: int = 0

    def completion_rate(self) -> float:
        total = sum(d.total_tasks for d in self.daily_stats)
        if total == 0:
            return 0.0
        return sum(d.completed_tasks for d in self.daily_stats) / total * 100.0
