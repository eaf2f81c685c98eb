from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .errors import GenerationError


class SegmentKind(StrEnum):
    WORK = "work"
    REST = "rest"


class JobState(StrEnum):
    CREATED = "created"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED, JobState.CANCELLED)


@dataclass(frozen=True, slots=True)
class WorkoutTiming:
    work_seconds: int
    rest_seconds: int
    station_change_seconds: int
    total_duration_minutes: int

    def as_dict(self) -> dict[str, int]:
        return {
            "work_seconds": self.work_seconds,
            "rest_seconds": self.rest_seconds,
            "station_change_seconds": self.station_change_seconds,
            "total_duration_minutes": self.total_duration_minutes,
        }


@dataclass(frozen=True, slots=True)
class Segment:
    index: int
    kind: SegmentKind
    station_index: int
    set_index: int
    duration_sec: int
    is_station_change: bool = False
    exercise: str = ""
    next_exercise: str = ""

    @property
    def label(self) -> str:
        if self.kind is SegmentKind.WORK:
            return "WORK"
        return "NEXT STATION" if self.is_station_change else "REST"


@dataclass(frozen=True, slots=True)
class SegmentPlan:
    timing: WorkoutTiming
    stations: int
    sets_per_station: int
    segments: tuple[Segment, ...]
    exercises: tuple[str, ...] = ()

    @property
    def total_steps(self) -> int:
        return len(self.segments)

    @property
    def total_duration_sec(self) -> int:
        return sum(s.duration_sec for s in self.segments)

    def __iter__(self):
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    completed: int
    total: int
    succeeded: bool = False

    @property
    def percentage(self) -> int:
        if self.succeeded:
            return 100
        pct = (100 * self.completed) // max(self.total, 1)
        return max(0, min(100, pct))


@dataclass(frozen=True, slots=True)
class JobOutcome:
    job_id: str
    state: JobState
    artifact: str | None = None
    error: GenerationError | None = None

    def as_dict(self) -> dict[str, str]:
        if self.error is not None:
            return {
                "job_id": self.job_id,
                "state": self.state.value,
                "error_kind": self.error.kind,
                "message": str(self.error),
            }
        return {
            "job_id": self.job_id,
            "state": self.state.value,
            "artifact_reference": self.artifact or "",
        }


@dataclass(slots=True)
class JobRecord:
    job_id: str
    state: JobState
    timing: WorkoutTiming
    total_steps: int
    completed: int = 0
    artifact: str = ""
    error_kind: str = ""
    error_message: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
