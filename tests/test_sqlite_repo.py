import pytest

from workout_video_factory.domain.models import JobState, WorkoutTiming
from workout_video_factory.infrastructure.storage.sqlite_repo import SQLiteJobRepository

TIMING = WorkoutTiming(work_seconds=40, rest_seconds=20, station_change_seconds=10, total_duration_minutes=20)


def test_create_and_update_job(tmp_path):
    repo = SQLiteJobRepository(tmp_path / "db" / "jobs.db")
    record = repo.create_job("abc123", TIMING, 42)
    assert record.state is JobState.CREATED

    repo.update_status("abc123", JobState.RUNNING, completed=10)
    repo.update_status(
        "abc123",
        JobState.FAILED,
        completed=14,
        error_kind="segment_production_failed",
        error_message="encoder crashed",
    )

    loaded = repo.get_job("abc123")
    assert loaded.state is JobState.FAILED
    assert loaded.timing == TIMING
    assert (loaded.completed, loaded.total_steps) == (14, 42)
    assert loaded.error_kind == "segment_production_failed"
    assert loaded.error_message == "encoder crashed"
    assert loaded.updated_at >= loaded.created_at


def test_list_jobs_newest_first(tmp_path):
    repo = SQLiteJobRepository(tmp_path / "jobs.db")
    repo.create_job("first", TIMING, 42)
    repo.create_job("second", TIMING, 42)
    repo.update_status("second", JobState.COMPLETED, completed=42, artifact="/runs/second/workout.mp4")

    jobs = repo.list_jobs(limit=10)
    assert [j.job_id for j in jobs] == ["second", "first"]
    assert jobs[0].artifact == "/runs/second/workout.mp4"
    assert len(repo.list_jobs(limit=1)) == 1


def test_get_unknown_job_raises(tmp_path):
    repo = SQLiteJobRepository(tmp_path / "jobs.db")
    with pytest.raises(KeyError):
        repo.get_job("nope")
