from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from threading import Event, Lock
from uuid import uuid4

from workout_video_factory.application.progress_tracker import ProgressTracker
from workout_video_factory.domain.errors import (
    AssemblyError,
    GenerationError,
    JobCancelledError,
    JobNotYetResolvedError,
    SegmentProductionError,
)
from workout_video_factory.domain.models import JobOutcome, JobState, ProgressSnapshot, SegmentPlan, WorkoutTiming
from workout_video_factory.domain.plan import DEFAULT_SETS_PER_STATION, compute_plan
from workout_video_factory.domain.protocols import SegmentAssembler, SegmentProducer

TerminalListener = Callable[["JobHandle", JobOutcome], None]


class JobHandle:
    """Caller-facing view of one job: live progress plus a result slot written once."""

    def __init__(self, job_id: str, plan: SegmentPlan, on_terminal: TerminalListener | None = None) -> None:
        self.job_id = job_id
        self.plan = plan
        self.tracker = ProgressTracker(total=plan.total_steps)
        self._on_terminal = on_terminal
        self._lock = Lock()
        self._state = JobState.CREATED
        self._cancel_event = Event()
        self._outcome: Future[JobOutcome] = Future()

    @property
    def timing(self) -> WorkoutTiming:
        return self.plan.timing

    @property
    def state(self) -> JobState:
        with self._lock:
            return self._state

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    def progress(self) -> ProgressSnapshot:
        return self.tracker.snapshot()

    def done(self) -> bool:
        return self._outcome.done()

    def cancel(self) -> bool:
        """Request cancellation. Returns False when the job has already resolved."""
        with self._lock:
            if self._state.is_terminal:
                return False
            self._cancel_event.set()
            outcome = None
            if self._state is JobState.CREATED:
                # still queued: resolve here so the worker never begins it
                outcome = self._resolve_locked(JobState.CANCELLED, error=JobCancelledError(self.job_id))
        if outcome is not None:
            self._publish(outcome)
        return True

    def outcome(self, wait: bool = False, timeout: float | None = None) -> JobOutcome:
        if not self._outcome.done() and not wait:
            raise JobNotYetResolvedError(self.job_id)
        try:
            return self._outcome.result(timeout=timeout)
        except FutureTimeoutError as exc:
            raise JobNotYetResolvedError(self.job_id) from exc

    def result(self, wait: bool = False, timeout: float | None = None) -> str:
        outcome = self.outcome(wait=wait, timeout=timeout)
        if outcome.error is not None:
            raise outcome.error
        return outcome.artifact or ""

    def _begin(self) -> bool:
        with self._lock:
            if self._state is not JobState.CREATED:
                return False
            self._state = JobState.RUNNING
            return True

    def _finish(
        self,
        state: JobState,
        artifact: str | None = None,
        error: GenerationError | None = None,
    ) -> bool:
        with self._lock:
            if self._state.is_terminal:
                return False
            outcome = self._resolve_locked(state, artifact=artifact, error=error)
        self._publish(outcome)
        return True

    def _resolve_locked(
        self,
        state: JobState,
        artifact: str | None = None,
        error: GenerationError | None = None,
    ) -> JobOutcome:
        if state is JobState.COMPLETED:
            self.tracker.mark_succeeded()
        self._state = state
        return JobOutcome(job_id=self.job_id, state=state, artifact=artifact, error=error)

    def _publish(self, outcome: JobOutcome) -> None:
        if self._on_terminal is not None:
            self._on_terminal(self, outcome)
        self._outcome.set_result(outcome)


class JobRunner:
    def __init__(
        self,
        producer: SegmentProducer,
        assembler: SegmentAssembler,
        repo,
        logger,
        sets_per_station: int = DEFAULT_SETS_PER_STATION,
        max_concurrent_jobs: int = 1,
    ) -> None:
        self.producer = producer
        self.assembler = assembler
        self.repo = repo
        self.logger = logger
        self.sets_per_station = sets_per_station
        self._pool = ThreadPoolExecutor(
            max_workers=max(1, max_concurrent_jobs),
            thread_name_prefix="workout-job",
        )

    def start(self, timing: WorkoutTiming, exercises: Sequence[str] = ()) -> JobHandle:
        plan = compute_plan(timing, self.sets_per_station, exercises)
        handle = JobHandle(job_id=uuid4().hex[:12], plan=plan, on_terminal=self._on_terminal)

        self.repo.create_job(handle.job_id, timing, plan.total_steps)
        self.logger.info(
            "job.created",
            job_id=handle.job_id,
            stations=plan.stations,
            total_steps=plan.total_steps,
            estimated_duration_sec=plan.total_duration_sec,
            exercises=len(plan.exercises),
        )
        self._pool.submit(self._execute, handle)
        return handle

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait, cancel_futures=False)

    def _execute(self, handle: JobHandle) -> None:
        if not handle._begin():
            return
        self._record(handle, JobState.RUNNING)

        try:
            artifact = self._produce_all(handle)
        except GenerationError as exc:
            handle._finish(JobState.FAILED, error=exc)
            return
        except Exception as exc:
            self.logger.exception("job.crashed", job_id=handle.job_id, error=str(exc))
            handle._finish(JobState.FAILED, error=GenerationError(f"Unexpected failure: {exc}"))
            return

        if artifact is None:
            handle._finish(JobState.CANCELLED, error=JobCancelledError(handle.job_id))
            return
        handle._finish(JobState.COMPLETED, artifact=artifact)

    def _produce_all(self, handle: JobHandle) -> str | None:
        plan = handle.plan
        artifacts: list[str] = []

        for segment in plan:
            if handle.cancel_requested:
                return None
            self.logger.info(
                "segment.started",
                job_id=handle.job_id,
                index=segment.index,
                kind=segment.kind.value,
                station=segment.station_index,
                set=segment.set_index,
            )
            try:
                artifact = self.producer.produce(handle.job_id, segment)
            except Exception as exc:
                self.logger.warning(
                    "segment.failed",
                    job_id=handle.job_id,
                    index=segment.index,
                    error=str(exc),
                )
                raise SegmentProductionError(segment, exc) from exc

            if handle.cancel_requested:
                # the in-flight segment is discarded
                return None
            artifacts.append(artifact)
            handle.tracker.update(len(artifacts), plan.total_steps)
            self.logger.info(
                "segment.completed",
                job_id=handle.job_id,
                index=segment.index,
                completed=len(artifacts),
                total=plan.total_steps,
            )

        try:
            output = self.assembler.assemble(handle.job_id, artifacts)
        except Exception as exc:
            raise AssemblyError(f"Failed to assemble {len(artifacts)} segments: {exc}") from exc
        if handle.cancel_requested:
            # cancelled while assembling; the assembled file is not reported
            self.logger.info("job.assembly_discarded", job_id=handle.job_id, artifact=output)
            return None
        return output

    def _on_terminal(self, handle: JobHandle, outcome: JobOutcome) -> None:
        if outcome.state is JobState.FAILED:
            self.logger.error(
                "job.failed",
                job_id=handle.job_id,
                error_kind=outcome.error.kind if outcome.error else "",
                error=str(outcome.error),
            )
        else:
            self.logger.info("job.resolved", job_id=handle.job_id, state=outcome.state.value)
        self._record(handle, outcome.state, outcome)

    def _record(self, handle: JobHandle, state: JobState, outcome: JobOutcome | None = None) -> None:
        if not state.is_terminal and handle.state.is_terminal:
            return
        snapshot = handle.progress()
        error = outcome.error if outcome is not None else None
        try:
            self.repo.update_status(
                handle.job_id,
                state,
                completed=snapshot.completed,
                artifact=(outcome.artifact or "") if outcome is not None else "",
                error_kind=error.kind if error is not None else "",
                error_message=str(error) if error is not None else "",
            )
        except Exception as exc:
            self.logger.warning("job.history_write_failed", job_id=handle.job_id, error=str(exc))
        self.logger.info("job.status", job_id=handle.job_id, status=state.value)
