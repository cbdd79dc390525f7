"""Workout log MCP Server."""

import os
import logging
from datetime import date as date_cls
from pathlib import Path

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from workoutlog_mcp.workoutlog import analytics
from workoutlog_mcp.workoutlog.codec import export_as_text, export_filename, import_from_text
from workoutlog_mcp.workoutlog.models import Exercise, WorkoutSession, new_session_id
from workoutlog_mcp.workoutlog.store import JsonFileStore

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = "~/.workoutlog/workout-data.json"

mcp = FastMCP("workoutlog")
store = JsonFileStore(os.environ.get("WORKOUTLOG_DATA_FILE", DEFAULT_DATA_FILE))


def _format_weight(weight: float | None) -> str:
    if not weight:
        return ""
    return f" x {weight:g}kg"


def _format_session(session: WorkoutSession) -> list[str]:
    stats = analytics.get_session_stats(session)
    lines = [f"## {session.date}"]
    if session.notes:
        lines.append(f"Notes: {session.notes}")
    lines.append(
        f"Exercises: {stats.total_exercises} | Sets: {stats.total_sets} | "
        f"Reps: {stats.total_reps} | Volume: {stats.total_volume:.0f} kg"
    )
    for exercise in session.exercises:
        lines.append(f"  {exercise.name}: " + ", ".join(
            f"{s.reps}{_format_weight(s.weight)}" for s in exercise.sets
        ))
    return lines


@mcp.tool()
async def log_workout(date: str, exercises: list[dict], notes: str | None = None) -> str:
    """Save the workout for a date, replacing what was logged for that date before.

    Args:
        date: The workout date as YYYY-MM-DD.
        exercises: Exercises as {"name": str, "sets": [{"reps": int, "weight": float}]}.
            Weight is optional; exercises without sets are skipped.
        notes: Optional free-text notes for the session.
    """
    existing = store.get_session_by_date(date)
    try:
        parsed = [Exercise.model_validate(e) for e in exercises]
        session = WorkoutSession(
            id=existing.id if existing else new_session_id(date),
            date=date,
            exercises=[e for e in parsed if e.sets],
            notes=notes or None,
        )
    except ValidationError as e:
        return f"Invalid workout: {e}"

    store.upsert_session(session)
    return "\n".join(["Saved workout."] + _format_session(session))


@mcp.tool()
async def get_workout(date: str) -> str:
    """Show the workout logged on a date (YYYY-MM-DD)."""
    session = store.get_session_by_date(date)
    if session is None:
        return f"No workout logged on {date}."
    return "\n".join(_format_session(session))


@mcp.tool()
async def delete_workout(date: str) -> str:
    """Delete the workout logged on a date (YYYY-MM-DD)."""
    session = store.get_session_by_date(date)
    if session is None:
        return f"No workout logged on {date}."
    store.delete_session(session.id)
    return f"Deleted workout on {date}."


@mcp.tool()
async def export_workouts(directory: str | None = None) -> str:
    """Export all workouts in the plain-text log format.

    Args:
        directory: Also write the export to workout-log-<today>.txt in this directory.
    """
    text = export_as_text(store.load().sessions)
    if directory is None:
        return text

    target = Path(directory).expanduser() / export_filename()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    logger.info("Exported workouts to %s", target)
    return f"Exported to {target}\n\n{text}"


@mcp.tool()
async def import_workouts(text: str) -> str:
    """Import workouts from the plain-text log format.

    Workouts on a date that already exists are merged: exercises with the
    same name are replaced, other exercises on that date are kept.

    Args:
        text: The log text, with "Date: YYYY-MM-DD" blocks separated by "---".
    """
    if not text.strip():
        return "Please paste some data to import"
    return import_from_text(text, store).message


@mcp.tool()
async def get_streak() -> str:
    """Show the current and longest workout streaks."""
    streak = analytics.calculate_streak(store.load().sessions)
    return (
        f"Current streak: {streak.current_streak} day(s)\n"
        f"Longest streak: {streak.longest_streak} day(s)\n"
        f"Total workouts: {streak.total_workouts}"
    )


@mcp.tool()
async def list_exercises() -> str:
    """List every exercise name found in the workout history."""
    names = analytics.get_all_exercises(store.load().sessions)
    if not names:
        return "No exercises logged yet."
    return "\n".join([f"Found {len(names)} exercises:\n"] + [f"- {n}" for n in names])


@mcp.tool()
async def get_exercise_progress(exercise_name: str) -> str:
    """Show reps, volume and max weight per session for one exercise.

    Args:
        exercise_name: Exact exercise name (see list_exercises).
    """
    progress = analytics.get_exercise_progress(store.load().sessions, exercise_name)
    if not progress.dates:
        return f"No sessions found for {exercise_name}."

    lines = [f"# {exercise_name}"]
    for day, reps, volume, max_weight in zip(
        progress.dates, progress.total_reps, progress.total_volume, progress.max_weight,
    ):
        lines.append(f"- {day}: {reps} reps | volume {volume:.0f} kg | max {max_weight:g} kg")
    return "\n".join(lines)


@mcp.tool()
async def get_daily_reps(date: str | None = None) -> str:
    """Show total reps per exercise for one day.

    Args:
        date: The day as YYYY-MM-DD. Omit for today.
    """
    day = date or date_cls.today().isoformat()
    reps = analytics.get_daily_reps(store.load().sessions, day)
    if not reps:
        return f"No reps logged on {day}."
    return "\n".join([f"Reps on {day}:"] + [f"- {name}: {total}" for name, total in reps.items()])


@mcp.tool()
async def compare_with_previous(date: str) -> str:
    """Compare the workout on a date with the most recent earlier workout.

    Args:
        date: The workout date as YYYY-MM-DD.
    """
    sessions = store.load().sessions
    previous = analytics.get_previous_session(sessions, date)
    if previous is None:
        return "No previous workout found."

    lines = [f"Previous workout: {previous.date}"]
    for c in analytics.compare_with_previous(sessions, date):
        lines.append(
            f"- {c.exercise_name}: reps {c.prev_total_reps} -> {c.current_total_reps} ({c.reps_diff:+d}), "
            f"volume {c.prev_total_volume:.0f} -> {c.current_total_volume:.0f} ({c.volume_diff:+.0f}), "
            f"max {c.prev_max_weight:g} -> {c.current_max_weight:g} ({c.weight_diff:+g})"
        )
    return "\n".join(lines)


@mcp.tool()
async def get_calendar(weeks: int = 12) -> str:
    """Show a workout calendar of the last weeks, one row per week (Sunday first).

    Each day is 0-4 by number of sets (0 = rest, . = future).

    Args:
        weeks: Number of weeks to show (default 12).
    """
    today = date_cls.today()
    grid = analytics.get_heatmap(store.load().sessions, today=today, weeks=weeks)

    lines = []
    for row in grid:
        cells = " ".join("." if d.is_future else str(d.intensity) for d in row)
        lines.append(f"{row[0].date}  {cells}")
    return "\n".join(lines)


def main():
    logging.basicConfig(level=os.environ.get("WORKOUTLOG_LOG_LEVEL", "WARNING").upper())
    mcp.run()


if __name__ == "__main__":
    main()
