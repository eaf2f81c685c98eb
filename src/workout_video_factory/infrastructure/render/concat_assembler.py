from __future__ import annotations

from pathlib import Path

from workout_video_factory.infrastructure.render.ffmpeg_builder import FFmpegCommandBuilder
from workout_video_factory.infrastructure.storage.artifact_store import ArtifactStore
from workout_video_factory.utils.media import run_command


class FFmpegConcatAssembler:
    def __init__(
        self,
        command_builder: FFmpegCommandBuilder,
        store: ArtifactStore,
        logger,
        keep_segments: bool = False,
        timeout_sec: float | None = None,
    ) -> None:
        self.command_builder = command_builder
        self.store = store
        self.logger = logger
        self.keep_segments = keep_segments
        self.timeout_sec = timeout_sec

    def assemble(self, job_id: str, artifacts: list[str]) -> str:
        segments = [ref for ref in artifacts if ref]
        if not segments:
            raise ValueError("No rendered segments to assemble")

        list_file = self.store.concat_list_path(job_id)
        write_concat_list(list_file, segments)
        output_path = self.store.output_path(job_id)

        run_command(self.command_builder.build_concat(list_file, output_path), timeout_sec=self.timeout_sec)
        self.store.write_json(
            self.store.metadata_path(job_id),
            {
                "job_id": job_id,
                "output": str(output_path),
                "segment_count": len(segments),
                "segments": segments,
            },
        )
        self.logger.info("job.assembled", job_id=job_id, output=str(output_path), segments=len(segments))

        if not self.keep_segments:
            self.store.remove_segments(job_id)
        return str(output_path)


def write_concat_list(list_file: Path, segments: list[str]) -> None:
    # concat demuxer quoting: a literal ' becomes '\''
    lines = []
    for segment in segments:
        escaped = str(Path(segment).resolve()).replace("'", "'\\''")
        lines.append(f"file '{escaped}'")
    list_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
