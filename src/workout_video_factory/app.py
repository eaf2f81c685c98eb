from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

from workout_video_factory.application.job_runner import JobRunner
from workout_video_factory.application.orchestrator import WorkoutOrchestrator
from workout_video_factory.infrastructure.render.concat_assembler import FFmpegConcatAssembler
from workout_video_factory.infrastructure.render.ffmpeg_builder import FFmpegCommandBuilder
from workout_video_factory.infrastructure.render.segment_producer import FFmpegSegmentProducer
from workout_video_factory.infrastructure.storage.artifact_store import ArtifactStore
from workout_video_factory.infrastructure.storage.exercise_library import ExerciseLibrary
from workout_video_factory.infrastructure.storage.sqlite_repo import SQLiteJobRepository
from workout_video_factory.utils.config import load_settings
from workout_video_factory.utils.logger import configure_logger, get_logger


def default_root_dir() -> Path:
    return Path(__file__).resolve().parents[2]


def build_orchestrator(root_dir: Path) -> WorkoutOrchestrator:
    load_dotenv(root_dir / ".env")
    configure_logger()
    logger = get_logger()
    settings = load_settings(root_dir)

    repo = SQLiteJobRepository(settings.app.runs_dir / "jobs.db")
    store = ArtifactStore(settings.app.runs_dir)
    command_builder = FFmpegCommandBuilder(settings.render)

    producer = FFmpegSegmentProducer(
        config=settings.producer,
        command_builder=command_builder,
        store=store,
        logger=logger,
    )
    assembler = FFmpegConcatAssembler(
        command_builder=command_builder,
        store=store,
        logger=logger,
        keep_segments=settings.app.keep_segments,
        timeout_sec=settings.producer.command_timeout_sec,
    )

    runner = JobRunner(
        producer=producer,
        assembler=assembler,
        repo=repo,
        logger=logger,
        sets_per_station=settings.app.sets_per_station,
        max_concurrent_jobs=settings.app.max_concurrent_jobs,
    )
    library = ExerciseLibrary(settings.library.videos_dir, logger=logger)
    return WorkoutOrchestrator(runner=runner, settings=settings, repo=repo, logger=logger, library=library)
