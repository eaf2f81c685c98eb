from __future__ import annotations

from workout_video_factory.application.retry_policy import retry
from workout_video_factory.domain.models import Segment
from workout_video_factory.infrastructure.render.ffmpeg_builder import FFmpegCommandBuilder
from workout_video_factory.infrastructure.storage.artifact_store import ArtifactStore
from workout_video_factory.utils.config import ProducerConfig
from workout_video_factory.utils.media import run_command


class FFmpegSegmentProducer:
    """Renders one countdown segment per call into the job's segments directory."""

    def __init__(
        self,
        config: ProducerConfig,
        command_builder: FFmpegCommandBuilder,
        store: ArtifactStore,
        logger,
    ) -> None:
        self.config = config
        self.command_builder = command_builder
        self.store = store
        self.logger = logger

    def produce(self, job_id: str, segment: Segment) -> str:
        if segment.duration_sec <= 0:
            # a zero-length rest has nothing to render
            return ""

        output_path = self.store.segment_path(job_id, segment)
        cmd = self.command_builder.build_segment(segment, output_path)

        def _on_retry(attempt: int, exc: Exception) -> None:
            self.logger.warning(
                "segment.retry",
                job_id=job_id,
                index=segment.index,
                attempt=attempt,
                error=str(exc),
            )

        retry(
            lambda: run_command(cmd, timeout_sec=self.config.command_timeout_sec),
            retries=self.config.max_retries,
            delay_sec=self.config.retry_delay_sec,
            on_retry=_on_retry,
        )
        return str(output_path)
