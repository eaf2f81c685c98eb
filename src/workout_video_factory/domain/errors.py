from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Segment


class GenerationError(Exception):
    """Base class for everything a workout generation job can report."""

    kind = "generation_error"


class InvalidTimingError(GenerationError, ValueError):
    kind = "invalid_timing"


class SegmentProductionError(GenerationError):
    kind = "segment_production_failed"

    def __init__(self, segment: Segment, cause: BaseException) -> None:
        self.segment = segment
        self.cause = cause
        super().__init__(
            f"Segment {segment.index + 1} ({segment.label.lower()}, station {segment.station_index + 1}, "
            f"set {segment.set_index + 1}) failed: {cause}"
        )


class AssemblyError(GenerationError):
    kind = "assembly_failed"


class JobNotFoundError(GenerationError, LookupError):
    kind = "job_not_found"

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class JobNotYetResolvedError(GenerationError):
    kind = "job_not_resolved"

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job has not resolved yet: {job_id}")


class JobCancelledError(GenerationError):
    kind = "cancelled"

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job was cancelled: {job_id}")


class ExerciseSelectionError(GenerationError):
    kind = "no_exercises"
