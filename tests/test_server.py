import pytest

from workoutlog_mcp import server
from workoutlog_mcp.workoutlog.store import MemoryStore

EXAMPLE = """Workout Log

Date: 2024-01-15
Notes: easy day

Pushups
40
40

Biceps
10 x 15kg

---

"""


@pytest.fixture
def store(monkeypatch):
    memory = MemoryStore()
    monkeypatch.setattr(server, "store", memory)
    return memory


@pytest.mark.asyncio
async def test_import_and_export(store):
    message = await server.import_workouts(EXAMPLE)
    assert message == "Successfully imported 1 workout session(s)"
    assert await server.export_workouts() == EXAMPLE


@pytest.mark.asyncio
async def test_import_blank_text(store):
    assert await server.import_workouts("   \n") == "Please paste some data to import"
    assert store.load().sessions == []


@pytest.mark.asyncio
async def test_import_bad_text(store):
    message = await server.import_workouts("Date: 2024-01-15\nBench\n5 x 1..2.kg\n")
    assert message.startswith("Error parsing import data")


@pytest.mark.asyncio
async def test_export_to_directory(store, tmp_path):
    await server.import_workouts(EXAMPLE)
    message = await server.export_workouts(str(tmp_path))

    files = list(tmp_path.glob("workout-log-*.txt"))
    assert len(files) == 1
    assert files[0].read_text(encoding="utf-8") == EXAMPLE
    assert message.startswith("Exported to ")


@pytest.mark.asyncio
async def test_log_workout_reuses_session_for_date(store):
    await server.log_workout("2024-01-15", [{"name": "Pushups", "sets": [{"reps": 20}]}])
    first_id = store.get_session_by_date("2024-01-15").id

    result = await server.log_workout(
        "2024-01-15",
        [{"name": "Bench", "sets": [{"reps": 5, "weight": 80}]}, {"name": "Empty", "sets": []}],
        notes="heavy",
    )
    assert result.startswith("Saved workout.")

    sessions = store.load().sessions
    assert len(sessions) == 1
    assert sessions[0].id == first_id
    assert sessions[0].notes == "heavy"
    assert [e.name for e in sessions[0].exercises] == ["Bench"]


@pytest.mark.asyncio
async def test_log_workout_invalid(store):
    result = await server.log_workout("2024-02-31", [{"name": "Pushups", "sets": [{"reps": 20}]}])
    assert result.startswith("Invalid workout")
    assert store.load().sessions == []


@pytest.mark.asyncio
async def test_get_and_delete_workout(store):
    await server.import_workouts(EXAMPLE)

    shown = await server.get_workout("2024-01-15")
    assert "Notes: easy day" in shown
    assert "Exercises: 2 | Sets: 3 | Reps: 90 | Volume: 150 kg" in shown
    assert "Biceps: 10 x 15kg" in shown

    assert await server.get_workout("2024-01-16") == "No workout logged on 2024-01-16."
    assert await server.delete_workout("2024-01-15") == "Deleted workout on 2024-01-15."
    assert store.load().sessions == []


@pytest.mark.asyncio
async def test_analytics_tools(store):
    await server.import_workouts(EXAMPLE + "Date: 2024-01-17\n\nBiceps\n12 x 15kg\n\n---\n")

    assert await server.list_exercises() == "Found 2 exercises:\n\n- Biceps\n- Pushups"

    progress = await server.get_exercise_progress("Biceps")
    assert "- 2024-01-15: 10 reps | volume 150 kg | max 15 kg" in progress
    assert "- 2024-01-17: 12 reps | volume 180 kg | max 15 kg" in progress
    assert await server.get_exercise_progress("Squats") == "No sessions found for Squats."

    comparison = await server.compare_with_previous("2024-01-17")
    assert comparison.startswith("Previous workout: 2024-01-15")
    assert "- Biceps: reps 10 -> 12 (+2)" in comparison
    assert "- Pushups: reps 80 -> 0 (-80)" in comparison
    assert await server.compare_with_previous("2024-01-15") == "No previous workout found."

    assert await server.get_daily_reps("2024-01-15") == "Reps on 2024-01-15:\n- Biceps: 10\n- Pushups: 80"

    streak = await server.get_streak()
    assert "Total workouts: 2" in streak


@pytest.mark.asyncio
async def test_calendar(store):
    calendar = await server.get_calendar(weeks=4)
    rows = calendar.split("\n")
    assert len(rows) == 4
    assert all(len(row.split()) == 8 for row in rows)
