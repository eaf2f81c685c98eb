from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from workout_video_factory.domain.models import JobRecord, JobState, WorkoutTiming

_COLUMNS = (
    "job_id, state, work_seconds, rest_seconds, station_change_seconds, total_duration_minutes, "
    "total_steps, completed, artifact, error_kind, error_message, created_at, updated_at"
)


class SQLiteJobRepository:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, timeout=10)

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS jobs (
                    job_id TEXT PRIMARY KEY,
                    state TEXT NOT NULL,
                    work_seconds INTEGER NOT NULL,
                    rest_seconds INTEGER NOT NULL,
                    station_change_seconds INTEGER NOT NULL,
                    total_duration_minutes INTEGER NOT NULL,
                    total_steps INTEGER NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    artifact TEXT NOT NULL DEFAULT '',
                    error_kind TEXT NOT NULL DEFAULT '',
                    error_message TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )

    def create_job(self, job_id: str, timing: WorkoutTiming, total_steps: int) -> JobRecord:
        now = datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO jobs ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, 0, '', '', '', ?, ?)
                """,
                (
                    job_id,
                    JobState.CREATED.value,
                    timing.work_seconds,
                    timing.rest_seconds,
                    timing.station_change_seconds,
                    timing.total_duration_minutes,
                    total_steps,
                    now.isoformat(),
                    now.isoformat(),
                ),
            )

        return JobRecord(
            job_id=job_id,
            state=JobState.CREATED,
            timing=timing,
            total_steps=total_steps,
            created_at=now,
            updated_at=now,
        )

    def update_status(
        self,
        job_id: str,
        state: JobState,
        completed: int,
        artifact: str = "",
        error_kind: str = "",
        error_message: str = "",
    ) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE jobs
                SET state = ?, completed = ?, artifact = ?, error_kind = ?, error_message = ?, updated_at = ?
                WHERE job_id = ?
                """,
                (state.value, completed, artifact, error_kind, error_message, now, job_id),
            )

    def get_job(self, job_id: str) -> JobRecord:
        with self._connect() as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM jobs WHERE job_id = ?", (job_id,)).fetchone()

        if not row:
            raise KeyError(f"Job not found: {job_id}")
        return _to_record(row)

    def list_jobs(self, limit: int = 20) -> list[JobRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM jobs ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [_to_record(row) for row in rows]


def _to_record(row) -> JobRecord:
    return JobRecord(
        job_id=row[0],
        state=JobState(row[1]),
        timing=WorkoutTiming(
            work_seconds=row[2],
            rest_seconds=row[3],
            station_change_seconds=row[4],
            total_duration_minutes=row[5],
        ),
        total_steps=row[6],
        completed=row[7],
        artifact=row[8],
        error_kind=row[9],
        error_message=row[10],
        created_at=datetime.fromisoformat(row[11]),
        updated_at=datetime.fromisoformat(row[12]),
    )
