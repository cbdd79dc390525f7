"""Workout log data models."""

import re
import uuid
from datetime import date as date_cls

from pydantic import BaseModel, Field, field_validator

CURRENT_VERSION = 1

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)


def validate_iso_date(value: str) -> str:
    """Return ``value`` if it is a real calendar date written as YYYY-MM-DD."""
    if not _ISO_DATE.match(value):
        raise ValueError(f"expected a YYYY-MM-DD date, got {value!r}")
    try:
        date_cls.fromisoformat(value)
    except ValueError:
        raise ValueError(f"expected a YYYY-MM-DD date, got {value!r}") from None
    return value


def new_session_id(date: str) -> str:
    return f"session-{date}-{uuid.uuid4().hex[:12]}"


class WorkoutSet(BaseModel):
    """A single set: reps with an optional load in kg."""
    reps: int = Field(ge=0)
    weight: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    @property
    def volume(self) -> float:
        return self.reps * (self.weight or 0)


class Exercise(BaseModel):
    """An exercise performed in a session, matched by exact name."""
    name: str = Field(min_length=1)
    sets: list[WorkoutSet] = []

    @property
    def total_reps(self) -> int:
        return sum(s.reps for s in self.sets)

    @property
    def total_volume(self) -> float:
        return sum(s.volume for s in self.sets)

    @property
    def max_weight(self) -> float:
        return max((s.weight or 0 for s in self.sets), default=0)


class WorkoutSession(BaseModel):
    """The workout record for one calendar date."""
    id: str
    date: str
    exercises: list[Exercise] = []
    notes: str | None = None

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        return validate_iso_date(value)

    def find_exercise(self, name: str) -> Exercise | None:
        return next((e for e in self.exercises if e.name == name), None)


class WorkoutData(BaseModel):
    """Everything the store persists."""
    sessions: list[WorkoutSession] = []
    version: int = CURRENT_VERSION

    def sort_sessions(self) -> None:
        """Sort sessions newest first. Sessions sharing a date keep their order."""
        self.sessions.sort(key=lambda s: s.date, reverse=True)

    def find_by_date(self, date: str) -> WorkoutSession | None:
        return next((s for s in self.sessions if s.date == date), None)


class ExerciseProgress(BaseModel):
    """Per-session series for one exercise, oldest first."""
    exercise_name: str
    dates: list[str] = []
    total_reps: list[int] = []
    total_volume: list[float] = []
    max_weight: list[float] = []


class WorkoutStreak(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0
    total_workouts: int = 0
    workout_days: set[str] = set()


class SessionStats(BaseModel):
    total_exercises: int = 0
    total_sets: int = 0
    total_reps: int = 0
    total_volume: float = 0


class ExerciseComparison(BaseModel):
    """Totals for one exercise in the current session against the previous one."""
    exercise_name: str
    previous: Exercise
    current: Exercise | None = None
    prev_total_reps: int = 0
    prev_total_volume: float = 0
    prev_max_weight: float = 0
    current_total_reps: int = 0
    current_total_volume: float = 0
    current_max_weight: float = 0

    @property
    def reps_diff(self) -> int:
        return self.current_total_reps - self.prev_total_reps

    @property
    def volume_diff(self) -> float:
        return self.current_total_volume - self.prev_total_volume

    @property
    def weight_diff(self) -> float:
        return self.current_max_weight - self.prev_max_weight


class HeatmapDay(BaseModel):
    date: str
    intensity: int = 0
    is_future: bool = False


class ImportResult(BaseModel):
    """Outcome of a text import."""
    success: bool
    message: str
    sessions_imported: int = 0
