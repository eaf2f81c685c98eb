from __future__ import annotations

import argparse
import time

from workout_video_factory.app import build_orchestrator, default_root_dir
from workout_video_factory.domain.errors import GenerationError
from workout_video_factory.domain.exercise_selection import format_exercise_name
from workout_video_factory.domain.models import Segment, SegmentKind, WorkoutTiming
from workout_video_factory.domain.plan import compute_plan, count_stations
from workout_video_factory.infrastructure.storage.exercise_library import ExerciseLibrary
from workout_video_factory.utils.config import load_settings
from workout_video_factory.utils.logger import get_logger


def _add_timing_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--work", type=int, required=True, help="Work interval in seconds")
    parser.add_argument("--rest", type=int, required=True, help="Rest between sets in seconds")
    parser.add_argument("--station-change", type=int, required=True, help="Rest between stations in seconds")
    parser.add_argument("--total", type=int, required=True, help="Total workout length in minutes")


def _add_library_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--category", action="append", default=None, help="Exercise category (repeatable)")
    parser.add_argument("--equipment", action="append", default=None, help="Exercise equipment (repeatable)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="workout-video", description="Interval workout video generator")
    sub = parser.add_subparsers(dest="command", required=True)

    plan_cmd = sub.add_parser("plan", help="Show the segment plan for a timing without rendering")
    _add_timing_args(plan_cmd)
    _add_library_args(plan_cmd)
    plan_cmd.add_argument("--segments", action="store_true", help="List every segment")

    gen_cmd = sub.add_parser("generate", help="Render a workout video and follow its progress")
    _add_timing_args(gen_cmd)
    _add_library_args(gen_cmd)
    gen_cmd.add_argument("--skip-preflight", action="store_true", help="Do not check limits and ffmpeg first")

    library_cmd = sub.add_parser("library", help="List exercise categories and equipment")
    library_cmd.add_argument("--category", action="append", default=None, help="Limit equipment to a category")

    history_cmd = sub.add_parser("history", help="List recent jobs")
    history_cmd.add_argument("--limit", type=int, default=20, help="Number of jobs to show (default: 20)")
    return parser


def _timing(args: argparse.Namespace) -> WorkoutTiming:
    return WorkoutTiming(
        work_seconds=args.work,
        rest_seconds=args.rest,
        station_change_seconds=args.station_change,
        total_duration_minutes=args.total,
    )


def _format_duration(total_sec: int) -> str:
    mins = total_sec // 60
    secs = total_sec % 60
    return f"{mins:02d}:{secs:02d}"


def _cmd_plan(args: argparse.Namespace) -> int:
    settings = load_settings(default_root_dir())
    timing = _timing(args)
    exercises: list[str] = []
    if args.equipment or settings.library.equipment:
        library = ExerciseLibrary(settings.library.videos_dir, logger=get_logger())
        stations = count_stations(timing, settings.app.sets_per_station)
        videos = library.pick(
            stations,
            args.category or list(settings.library.categories),
            args.equipment or list(settings.library.equipment),
        )
        exercises = [format_exercise_name(video) for video in videos]
    plan = compute_plan(timing, settings.app.sets_per_station, exercises)
    print(f"Stations: {plan.stations} x {plan.sets_per_station} sets")
    print(f"Segments: {plan.total_steps}")
    print(f"Duration: {_format_duration(plan.total_duration_sec)}")
    if args.segments:
        for segment in plan:
            line = (
                f"  {segment.index + 1:>3} {segment.label:<12} station {segment.station_index + 1} "
                f"set {segment.set_index + 1} {segment.duration_sec}s"
            )
            exercise = _exercise_text(segment)
            if exercise:
                line += f"  {exercise}"
            print(line)
    return 0


def _exercise_text(segment: Segment) -> str:
    if segment.is_station_change:
        return f"next: {segment.next_exercise}" if segment.next_exercise else ""
    return segment.exercise if segment.kind is SegmentKind.WORK else ""


def _cmd_generate(args: argparse.Namespace) -> int:
    orch = build_orchestrator(default_root_dir())
    timing = _timing(args)
    try:
        if not args.skip_preflight:
            errors = orch.preflight(timing, args.category, args.equipment)
            if errors:
                for line in errors:
                    print(f"error: {line}")
                return 2

        job_id = orch.start(timing, args.category, args.equipment)
        print(f"Job started: {job_id}")
        interval = orch.settings.app.poll_interval_sec
        last = -1
        try:
            while True:
                status = orch.progress(job_id)
                if status["percentage"] != last:
                    print(f"[{status['state']}] {status['percentage']}% ({status['completed']}/{status['total']})")
                    last = status["percentage"]
                if status["state"] in ("completed", "failed", "cancelled"):
                    break
                time.sleep(interval)
        except KeyboardInterrupt:
            orch.cancel(job_id)
            print("Cancelling after the current segment...")

        result = orch.result(job_id, wait=True)
        if "artifact_reference" in result:
            print(f"Workout video: {result['artifact_reference']}")
            return 0
        print(f"Job {result['state']}: {result['message']}")
        return 1
    finally:
        orch.shutdown(wait=True)


def _cmd_library(args: argparse.Namespace) -> int:
    settings = load_settings(default_root_dir())
    library = ExerciseLibrary(settings.library.videos_dir, logger=get_logger())
    categories = args.category or library.categories()
    print(f"Categories: {', '.join(categories) or '-'}")
    print(f"Equipment: {', '.join(library.equipment(categories)) or '-'}")
    return 0


def _cmd_history(args: argparse.Namespace) -> int:
    orch = build_orchestrator(default_root_dir())
    try:
        for record in orch.history(limit=max(1, args.limit)):
            line = (
                f"{record.job_id}  {record.state.value:<9}  {record.completed}/{record.total_steps}  "
                f"{record.created_at:%Y-%m-%d %H:%M}"
            )
            if record.artifact:
                line += f"  {record.artifact}"
            if record.error_message:
                line += f"  {record.error_kind}: {record.error_message.splitlines()[0]}"
            print(line)
    finally:
        orch.shutdown(wait=False)
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "plan":
            raise SystemExit(_cmd_plan(args))
        elif args.command == "generate":
            raise SystemExit(_cmd_generate(args))
        elif args.command == "history":
            raise SystemExit(_cmd_history(args))
        elif args.command == "library":
            raise SystemExit(_cmd_library(args))
    except GenerationError as exc:
        print(f"error: {exc}")
        raise SystemExit(2) from exc
    raise SystemExit("unsupported command")


if __name__ == "__main__":
    main()
