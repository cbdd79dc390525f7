"""Read-only analytics over a list of workout sessions."""

from datetime import date as date_cls, timedelta
from typing import Iterable, Sequence

from workoutlog_mcp.workoutlog.models import (
    WorkoutSession, ExerciseProgress, WorkoutStreak, SessionStats,
    ExerciseComparison, Exercise, HeatmapDay,
)

# Minimum total sets for heatmap intensity levels 4, 3 and 2.
INTENSITY_THRESHOLDS = ((20, 4), (15, 3), (10, 2))


def _days_between(later: str, earlier: str) -> int:
    return (date_cls.fromisoformat(later) - date_cls.fromisoformat(earlier)).days


def calculate_streak(
    sessions: Sequence[WorkoutSession],
    today: date_cls | None = None,
) -> WorkoutStreak:
    """Current and longest runs of consecutive workout days.

    The current streak only counts if the latest workout was today or
    yesterday. ``total_workouts`` counts sessions, not distinct days.
    """
    if not sessions:
        return WorkoutStreak()

    workout_days = {s.date for s in sessions}
    sorted_dates = sorted(workout_days, reverse=True)
    today = today or date_cls.today()

    current_streak = 0
    if (today - date_cls.fromisoformat(sorted_dates[0])).days <= 1:
        current_streak = 1
        for prev, curr in zip(sorted_dates, sorted_dates[1:]):
            if _days_between(prev, curr) != 1:
                break
            current_streak += 1

    longest_streak = 0
    run = 1
    for prev, curr in zip(sorted_dates, sorted_dates[1:]):
        if _days_between(prev, curr) == 1:
            run += 1
            longest_streak = max(longest_streak, run)
        else:
            run = 1
    longest_streak = max(longest_streak, run, current_streak)

    return WorkoutStreak(
        current_streak=current_streak,
        longest_streak=longest_streak,
        total_workouts=len(sessions),
        workout_days=workout_days,
    )


def get_exercise_progress(
    sessions: Iterable[WorkoutSession],
    exercise_name: str,
) -> ExerciseProgress:
    """Per-session totals for one exercise, oldest session first."""
    progress = ExerciseProgress(exercise_name=exercise_name)
    relevant = [s for s in sessions if s.find_exercise(exercise_name) is not None]

    for session in sorted(relevant, key=lambda s: s.date):
        exercise = session.find_exercise(exercise_name)
        progress.dates.append(session.date)
        progress.total_reps.append(exercise.total_reps)
        progress.total_volume.append(exercise.total_volume)
        progress.max_weight.append(exercise.max_weight)

    return progress


def get_all_exercises(sessions: Iterable[WorkoutSession]) -> list[str]:
    return sorted({e.name for s in sessions for e in s.exercises})


def get_previous_session(
    sessions: Iterable[WorkoutSession],
    reference_date: str,
) -> WorkoutSession | None:
    """The latest session strictly before ``reference_date``."""
    earlier = [s for s in sessions if s.date < reference_date]
    if not earlier:
        return None
    return sorted(earlier, key=lambda s: s.date, reverse=True)[0]


def get_session_stats(session: WorkoutSession) -> SessionStats:
    return SessionStats(
        total_exercises=len(session.exercises),
        total_sets=sum(len(e.sets) for e in session.exercises),
        total_reps=sum(e.total_reps for e in session.exercises),
        total_volume=sum(e.total_volume for e in session.exercises),
    )


def compare_exercise(
    current: WorkoutSession | None,
    previous: WorkoutSession,
    exercise_name: str,
) -> ExerciseComparison | None:
    """Compare one exercise against the previous session.

    Returns None when the previous session did not include the exercise.
    Current totals are zero when the current session lacks it.
    """
    prev_exercise = previous.find_exercise(exercise_name)
    if prev_exercise is None:
        return None

    curr_exercise: Exercise | None = current.find_exercise(exercise_name) if current else None
    comparison = ExerciseComparison(
        exercise_name=exercise_name,
        previous=prev_exercise,
        current=curr_exercise,
        prev_total_reps=prev_exercise.total_reps,
        prev_total_volume=prev_exercise.total_volume,
        prev_max_weight=prev_exercise.max_weight,
    )
    if curr_exercise is not None:
        comparison.current_total_reps = curr_exercise.total_reps
        comparison.current_total_volume = curr_exercise.total_volume
        comparison.current_max_weight = curr_exercise.max_weight
    return comparison


def compare_with_previous(
    sessions: Sequence[WorkoutSession],
    reference_date: str,
) -> list[ExerciseComparison]:
    previous = get_previous_session(sessions, reference_date)
    if previous is None:
        return []

    current = next((s for s in sessions if s.date == reference_date), None)
    comparisons = []
    for exercise in previous.exercises:
        comparison = compare_exercise(current, previous, exercise.name)
        if comparison is not None:
            comparisons.append(comparison)
    return comparisons


def get_intensity(sessions: Iterable[WorkoutSession], day: str) -> int:
    """Heatmap level 0-4 for ``day``, from the total sets of its first session."""
    session = next((s for s in sessions if s.date == day), None)
    if session is None:
        return 0

    total_sets = get_session_stats(session).total_sets
    for minimum, level in INTENSITY_THRESHOLDS:
        if total_sets >= minimum:
            return level
    return 1


def get_heatmap(
    sessions: Sequence[WorkoutSession],
    today: date_cls | None = None,
    weeks: int = 12,
) -> list[list[HeatmapDay]]:
    """Weeks of days (Sunday first) ending in the week that contains ``today``."""
    today = today or date_cls.today()
    # weekday(): Monday is 0, Sunday is 6
    this_sunday = today - timedelta(days=(today.weekday() + 1) % 7)
    week_start = this_sunday - timedelta(weeks=weeks - 1)

    grid: list[list[HeatmapDay]] = []
    for w in range(weeks):
        row = []
        for d in range(7):
            day = week_start + timedelta(days=w * 7 + d)
            day_str = day.isoformat()
            row.append(HeatmapDay(
                date=day_str,
                intensity=get_intensity(sessions, day_str),
                is_future=day > today,
            ))
        grid.append(row)
    return grid


def get_daily_reps(sessions: Iterable[WorkoutSession], day: str) -> dict[str, int]:
    """Total reps per exercise across every session on ``day``."""
    totals: dict[str, int] = {}
    for session in sessions:
        if session.date != day:
            continue
        for exercise in session.exercises:
            totals[exercise.name] = totals.get(exercise.name, 0) + exercise.total_reps
    return {name: reps for name, reps in sorted(totals.items()) if reps > 0}
