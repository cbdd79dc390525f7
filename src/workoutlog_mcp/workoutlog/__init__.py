from workoutlog_mcp.workoutlog.models import (
    WorkoutSet, Exercise, WorkoutSession, WorkoutData,
    ExerciseProgress, WorkoutStreak, SessionStats, ExerciseComparison,
    HeatmapDay, ImportResult, CURRENT_VERSION,
)
from workoutlog_mcp.workoutlog.store import Store, BaseStore, MemoryStore, JsonFileStore
from workoutlog_mcp.workoutlog.codec import export_as_text, import_from_text, parse_text
from workoutlog_mcp.workoutlog.exceptions import (
    WorkoutLogError, TextFormatError, StorageError,
)

__all__ = [
    "WorkoutSet", "Exercise", "WorkoutSession", "WorkoutData",
    "ExerciseProgress", "WorkoutStreak", "SessionStats", "ExerciseComparison",
    "HeatmapDay", "ImportResult", "CURRENT_VERSION",
    "Store", "BaseStore", "MemoryStore", "JsonFileStore",
    "export_as_text", "import_from_text", "parse_text",
    "WorkoutLogError", "TextFormatError", "StorageError",
]
