"""Plain-text workout log export and import.

The text format is line oriented::

    Workout Log

    Date: 2024-01-15
    Notes: felt strong

    Pushups
    40
    40

    Biceps
    10 x 15kg

    ---

Importing merges into the existing data by date (UPSERT): exercises with the
same name are replaced, other exercises of that day are kept.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date as date_cls
from decimal import Decimal
from enum import Enum
from typing import Iterable

from pydantic import ValidationError

from workoutlog_mcp.workoutlog.exceptions import TextFormatError
from workoutlog_mcp.workoutlog.models import (
    WorkoutSet, Exercise, WorkoutSession, WorkoutData, ImportResult,
    new_session_id, validate_iso_date,
)
from workoutlog_mcp.workoutlog.store import Store

logger = logging.getLogger(__name__)

HEADER = "Workout Log"
SEPARATOR = "---"
DATE_PREFIX = "Date:"
NOTES_PREFIX = "Notes:"

SET_PATTERN = re.compile(r"^(\d+)(?:\s*x\s*([\d.]+)kg)?$", re.ASCII)

IMPORT_ERROR_MESSAGE = "Error parsing import data. Please check the format."


class LineKind(Enum):
    BLANK = "blank"
    SEPARATOR = "separator"
    DATE = "date"
    NOTES = "notes"
    SET = "set"
    NAME = "name"


class ParserState(Enum):
    IDLE = "idle"
    IN_SESSION = "in_session"
    IN_EXERCISE = "in_exercise"


@dataclass
class ParsedSession:
    """A committed block of import text, not yet merged into any data."""
    date: str
    exercises: list[Exercise]
    notes: str | None = None


# --- Export ---

def _format_weight(weight: float) -> str:
    if float(weight).is_integer():
        return str(int(weight))
    # plain decimal, never exponent notation
    return format(Decimal(repr(weight)), "f")


def _format_set(workout_set: WorkoutSet) -> str:
    if workout_set.weight:
        return f"{workout_set.reps} x {_format_weight(workout_set.weight)}kg"
    return str(workout_set.reps)


def export_as_text(sessions: Iterable[WorkoutSession]) -> str:
    """Render sessions in the plain-text log format, in the order given."""
    lines = [HEADER, ""]
    for session in sessions:
        lines.append(f"{DATE_PREFIX} {session.date}")
        if session.notes:
            lines.append(f"{NOTES_PREFIX} {session.notes}")
        lines.append("")

        for exercise in session.exercises:
            lines.append(exercise.name)
            lines.extend(_format_set(s) for s in exercise.sets)
            lines.append("")

        lines.append(SEPARATOR)
        lines.append("")

    return "\n".join(lines) + "\n"


def export_filename(day: date_cls | None = None) -> str:
    day = day or date_cls.today()
    return f"workout-log-{day.isoformat()}.txt"


# --- Parsing ---

def classify_line(line: str) -> LineKind:
    """Classify an already stripped line. Earlier rules win."""
    if not line:
        return LineKind.BLANK
    if line == SEPARATOR:
        return LineKind.SEPARATOR
    if line.startswith(DATE_PREFIX):
        return LineKind.DATE
    if line.startswith(NOTES_PREFIX):
        return LineKind.NOTES
    if SET_PATTERN.match(line):
        return LineKind.SET
    return LineKind.NAME


def parse_set(line: str, line_number: int | None = None) -> WorkoutSet:
    match = SET_PATTERN.match(line)
    if not match:
        raise TextFormatError(f"not a set line: {line!r}", line_number)

    try:
        reps = int(match.group(1))
    except ValueError as e:
        raise TextFormatError(f"invalid reps {match.group(1)[:20]!r}", line_number) from e

    weight = None
    if match.group(2) is not None:
        try:
            weight = float(match.group(2))
        except ValueError as e:
            raise TextFormatError(f"invalid weight {match.group(2)!r}", line_number) from e
    return WorkoutSet(reps=reps, weight=weight)


@dataclass
class TextParser:
    """Single forward scan over import lines.

    Each line kind has its own transition method. Committed blocks collect in
    ``sessions``; a block commits only with a date and at least one exercise.
    """
    current_date: str | None = None
    current_exercises: list[Exercise] = field(default_factory=list)
    current_exercise: Exercise | None = None
    current_notes: str | None = None
    sessions: list[ParsedSession] = field(default_factory=list)
    line_number: int = 0

    @property
    def state(self) -> ParserState:
        if self.current_exercise is not None:
            return ParserState.IN_EXERCISE
        if self.current_date:
            return ParserState.IN_SESSION
        return ParserState.IDLE

    def feed(self, raw_line: str) -> None:
        self.line_number += 1
        line = raw_line.strip()
        kind = classify_line(line)
        handler = getattr(self, f"_on_{kind.value}")
        handler(line)

    def finish(self) -> list[ParsedSession]:
        self._close_exercise()
        self._commit()
        return self.sessions

    def _on_blank(self, line: str) -> None:
        self._close_exercise()

    def _on_separator(self, line: str) -> None:
        self._close_exercise()
        self._commit()
        self._reset_session(None)

    def _on_date(self, line: str) -> None:
        self._close_exercise()
        self._commit()
        self._reset_session(line[len(DATE_PREFIX):].strip())

    def _on_notes(self, line: str) -> None:
        self.current_notes = line[len(NOTES_PREFIX):].strip()

    def _on_set(self, line: str) -> None:
        if self.current_exercise is None:
            logger.debug("Dropping set on line %d with no open exercise", self.line_number)
            return
        self.current_exercise.sets.append(parse_set(line, self.line_number))

    def _on_name(self, line: str) -> None:
        self._close_exercise()
        self.current_exercise = Exercise(name=line, sets=[])

    def _close_exercise(self) -> None:
        if self.current_exercise is not None:
            self.current_exercises.append(self.current_exercise)
            self.current_exercise = None

    def _reset_session(self, new_date: str | None) -> None:
        self.current_date = new_date
        self.current_exercises = []
        self.current_notes = None

    def _commit(self) -> None:
        if not self.current_date or not self.current_exercises:
            return

        try:
            validate_iso_date(self.current_date)
        except ValueError as e:
            raise TextFormatError(str(e), self.line_number) from e

        by_name: dict[str, Exercise] = {}
        for exercise in self.current_exercises:
            by_name[exercise.name] = exercise

        self.sessions.append(ParsedSession(
            date=self.current_date,
            exercises=list(by_name.values()),
            notes=self.current_notes or None,
        ))


def parse_text(text: str) -> list[ParsedSession]:
    """Parse import text into committed session blocks, in input order."""
    parser = TextParser()
    for raw_line in text.split("\n"):
        parser.feed(raw_line)
    return parser.finish()


# --- Merging ---

def merge_sessions(data: WorkoutData, parsed: Iterable[ParsedSession]) -> int:
    """UPSERT parsed blocks into ``data`` by date. Returns the number merged."""
    imported = 0
    for block in parsed:
        existing = data.find_by_date(block.date)
        if existing is not None:
            by_name = {e.name: e for e in existing.exercises}
            for exercise in block.exercises:
                by_name[exercise.name] = exercise
            existing.exercises = list(by_name.values())
            if block.notes:
                existing.notes = block.notes
        else:
            data.sessions.append(WorkoutSession(
                id=new_session_id(block.date),
                date=block.date,
                exercises=block.exercises,
                notes=block.notes,
            ))
        imported += 1

    data.sort_sessions()
    return imported


def import_from_text(text: str, store: Store) -> ImportResult:
    """Parse ``text``, merge it into the store's data and save once.

    Nothing is saved when the text cannot be parsed.
    """
    data = store.load()
    try:
        parsed = parse_text(text)
        imported = merge_sessions(data, parsed)
    except (TextFormatError, ValidationError):
        logger.exception("Error importing workout text")
        return ImportResult(success=False, message=IMPORT_ERROR_MESSAGE, sessions_imported=0)

    store.save(data)
    logger.debug("Imported %d session(s)", imported)
    return ImportResult(
        success=True,
        message=f"Successfully imported {imported} workout session(s)",
        sessions_imported=imported,
    )
