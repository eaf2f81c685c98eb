from __future__ import annotations

from threading import Lock

from workout_video_factory.domain.models import ProgressSnapshot


class ProgressTracker:
    """Completed/total segment counter shared between one writer and many readers."""

    def __init__(self, total: int) -> None:
        if total < 1:
            raise ValueError(f"Progress total must be at least 1 (got {total})")
        self._lock = Lock()
        self._completed = 0
        self._total = total
        self._succeeded = False

    def update(self, completed: int, total: int) -> None:
        with self._lock:
            if total != self._total:
                raise ValueError(f"Progress total is fixed at {self._total} (got {total})")
            if completed < self._completed or completed > self._total:
                raise ValueError(
                    f"Progress must move forward within 0..{self._total} "
                    f"(current {self._completed}, got {completed})"
                )
            self._completed = completed

    def mark_succeeded(self) -> None:
        with self._lock:
            self._succeeded = True

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(
                completed=self._completed,
                total=self._total,
                succeeded=self._succeeded,
            )
