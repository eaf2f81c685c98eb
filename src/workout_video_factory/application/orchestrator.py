from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from threading import Lock

from workout_video_factory.application.job_runner import JobHandle, JobRunner
from workout_video_factory.domain.errors import (
    ExerciseSelectionError,
    InvalidTimingError,
    JobNotFoundError,
    JobNotYetResolvedError,
)
from workout_video_factory.domain.exercise_selection import format_exercise_name
from workout_video_factory.domain.models import JobRecord, WorkoutTiming
from workout_video_factory.domain.plan import count_stations
from workout_video_factory.infrastructure.storage.exercise_library import ExerciseLibrary
from workout_video_factory.infrastructure.storage.sqlite_repo import SQLiteJobRepository
from workout_video_factory.utils.config import Settings
from workout_video_factory.utils.media import find_ffmpeg


class WorkoutOrchestrator:
    """Id-keyed front door over the job runner.

    Every start gets its own job id, progress counter and result slot. Starting
    while other jobs are still running queues the new job on the runner's pool
    instead of replacing anything. Resolved jobs stay in the registry until
    discarded, so an unread failure is never lost.
    """

    def __init__(
        self,
        runner: JobRunner,
        settings: Settings,
        repo: SQLiteJobRepository,
        logger,
        library: ExerciseLibrary | None = None,
    ) -> None:
        self.runner = runner
        self.settings = settings
        self.repo = repo
        self.logger = logger
        self.library = library
        self._jobs: dict[str, JobHandle] = {}
        self._lock = Lock()

    def preflight(
        self,
        timing: WorkoutTiming,
        categories: Sequence[str] | None = None,
        equipment: Sequence[str] | None = None,
    ) -> list[str]:
        errors: list[str] = []
        limits = self.settings.limits
        for name, (low, high) in limits.ranges().items():
            value = getattr(timing, name)
            if not low <= value <= high:
                errors.append(f"{name} must be between {low} and {high} (got {value}).")

        try:
            count_stations(timing, self.settings.app.sets_per_station)
        except InvalidTimingError as exc:
            errors.append(str(exc))

        categories, equipment = self._library_selection(categories, equipment)
        if equipment:
            if self.library is None:
                errors.append("Exercise equipment was requested but no exercise library is configured.")
            else:
                try:
                    grouped = self.library.videos_by_equipment(categories or self.library.categories(), equipment)
                except ExerciseSelectionError as exc:
                    errors.append(str(exc))
                else:
                    if not any(grouped.values()):
                        errors.append(f"No exercise videos found for equipment: {', '.join(equipment)}")

        ffmpeg = self.settings.render.ffmpeg_binary
        if find_ffmpeg(ffmpeg) is None:
            errors.append(f"ffmpeg not found: {ffmpeg}. Install ffmpeg or set FFMPEG_BINARY.")

        font_file = self.settings.render.font_file
        if font_file and not Path(font_file).exists():
            errors.append(f"Font file not found: {font_file}")
        return errors

    def start(
        self,
        timing: WorkoutTiming,
        categories: Sequence[str] | None = None,
        equipment: Sequence[str] | None = None,
    ) -> str:
        exercises = self.select_exercises(timing, categories, equipment)
        handle = self.runner.start(timing, exercises)
        with self._lock:
            self._jobs[handle.job_id] = handle
        return handle.job_id

    def select_exercises(
        self,
        timing: WorkoutTiming,
        categories: Sequence[str] | None = None,
        equipment: Sequence[str] | None = None,
    ) -> list[str]:
        """Exercise names for each station, or an empty list when no equipment is selected."""
        categories, equipment = self._library_selection(categories, equipment)
        if not equipment:
            return []
        if self.library is None:
            raise ExerciseSelectionError("Exercise equipment was requested but no exercise library is configured.")
        stations = count_stations(timing, self.settings.app.sets_per_station)
        videos = self.library.pick(stations, categories, equipment)
        return [format_exercise_name(video) for video in videos]

    def _library_selection(
        self,
        categories: Sequence[str] | None,
        equipment: Sequence[str] | None,
    ) -> tuple[list[str], list[str]]:
        library = self.settings.library
        return list(categories or library.categories), list(equipment or library.equipment)

    def handle(self, job_id: str) -> JobHandle:
        with self._lock:
            handle = self._jobs.get(job_id)
        if handle is None:
            raise JobNotFoundError(job_id)
        return handle

    def progress(self, job_id: str) -> dict:
        return self._progress_payload(self.handle(job_id))

    def _progress_payload(self, handle: JobHandle) -> dict:
        state = handle.state
        snapshot = handle.progress()
        return {
            "job_id": handle.job_id,
            "state": state.value,
            "completed": snapshot.completed,
            "total": snapshot.total,
            "percentage": snapshot.percentage,
        }

    def result(self, job_id: str, wait: bool = False, timeout: float | None = None) -> dict:
        outcome = self.handle(job_id).outcome(wait=wait, timeout=timeout)
        return outcome.as_dict()

    def cancel(self, job_id: str) -> bool:
        cancelled = self.handle(job_id).cancel()
        if cancelled:
            self.logger.info("job.cancel_requested", job_id=job_id)
        return cancelled

    def discard(self, job_id: str) -> None:
        handle = self.handle(job_id)
        if not handle.done():
            raise JobNotYetResolvedError(job_id)
        with self._lock:
            self._jobs.pop(job_id, None)
        self.logger.info("job.discarded", job_id=job_id)

    def jobs(self) -> list[dict]:
        with self._lock:
            handles = list(self._jobs.values())
        return [self._progress_payload(handle) for handle in handles]

    def history(self, limit: int = 20) -> list[JobRecord]:
        return self.repo.list_jobs(limit=limit)

    def shutdown(self, wait: bool = True) -> None:
        self.runner.shutdown(wait=wait)
