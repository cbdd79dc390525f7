"""Workout data persistence.

A store reads and writes the whole ``WorkoutData`` blob in one round trip.
Reads fail soft to an empty dataset and write failures are logged, so callers
never see storage errors.
"""

import logging
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Protocol

from workoutlog_mcp.workoutlog.exceptions import StorageError
from workoutlog_mcp.workoutlog.models import CURRENT_VERSION, WorkoutData, WorkoutSession

logger = logging.getLogger(__name__)


class Store(Protocol):
    def load(self) -> WorkoutData: ...

    def save(self, data: WorkoutData) -> None: ...


def _empty() -> WorkoutData:
    return WorkoutData(sessions=[], version=CURRENT_VERSION)


def _dump(data: WorkoutData) -> str:
    return data.model_dump_json(exclude_none=True, indent=2)


def _migrate(data: WorkoutData) -> WorkoutData:
    if data.version != CURRENT_VERSION:
        logger.info("Migrating workout data from version %d to %d", data.version, CURRENT_VERSION)
        data.version = CURRENT_VERSION
    return data


class BaseStore:
    """Session-level helpers built on ``load`` and ``save``."""

    def load(self) -> WorkoutData:
        raise NotImplementedError

    def save(self, data: WorkoutData) -> None:
        raise NotImplementedError

    def upsert_session(self, session: WorkoutSession) -> None:
        """Replace the session with the same id, or append it."""
        data = self.load()
        for i, existing in enumerate(data.sessions):
            if existing.id == session.id:
                data.sessions[i] = session
                break
        else:
            data.sessions.append(session)

        data.sort_sessions()
        self.save(data)

    def delete_session(self, session_id: str) -> None:
        data = self.load()
        data.sessions = [s for s in data.sessions if s.id != session_id]
        self.save(data)

    def get_session(self, session_id: str) -> WorkoutSession | None:
        return next((s for s in self.load().sessions if s.id == session_id), None)

    def get_session_by_date(self, date: str) -> WorkoutSession | None:
        return self.load().find_by_date(date)

    def clear(self) -> None:
        self.save(_empty())


class MemoryStore(BaseStore):
    """Keeps the serialized blob in memory. Every ``load`` returns a fresh copy."""

    def __init__(self, data: WorkoutData | None = None):
        self._blob: str | None = _dump(data) if data is not None else None

    def load(self) -> WorkoutData:
        if self._blob is None:
            return _empty()
        return WorkoutData.model_validate_json(self._blob)

    def save(self, data: WorkoutData) -> None:
        self._blob = _dump(data)


class JsonFileStore(BaseStore):
    """Stores the workout data as a single JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def load(self) -> WorkoutData:
        try:
            return _migrate(self._read())
        except StorageError as e:
            logger.error("Error loading workout data: %s", e)
            return _empty()

    def save(self, data: WorkoutData) -> None:
        try:
            self._write(_dump(data))
        except StorageError as e:
            logger.error("Error saving workout data: %s", e)

    def _read(self) -> WorkoutData:
        if not self.path.exists():
            return _empty()
        try:
            raw = self.path.read_text(encoding="utf-8")
            return WorkoutData.model_validate_json(raw)
        except (OSError, ValueError) as e:
            raise StorageError(f"cannot read {self.path}: {e}") from e

    def _write(self, payload: str) -> None:
        temp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                "w", dir=self.path.parent, delete=False, encoding="utf-8", suffix=".tmp",
            ) as tmp:
                temp_path = Path(tmp.name)
                tmp.write(payload)
            temp_path.replace(self.path)
        except OSError as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise StorageError(f"cannot write {self.path}: {e}") from e
        logger.debug("Saved workout data to %s", self.path)
