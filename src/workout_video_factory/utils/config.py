from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class AppConfig:
    runs_dir: Path
    sets_per_station: int
    max_concurrent_jobs: int
    keep_segments: bool = False
    poll_interval_sec: float = 1.0


@dataclass(slots=True)
class LimitsConfig:
    work_seconds: tuple[int, int] = (10, 300)
    rest_seconds: tuple[int, int] = (0, 120)
    station_change_seconds: tuple[int, int] = (0, 60)
    total_duration_minutes: tuple[int, int] = (5, 180)

    def ranges(self) -> dict[str, tuple[int, int]]:
        return {
            "work_seconds": self.work_seconds,
            "rest_seconds": self.rest_seconds,
            "station_change_seconds": self.station_change_seconds,
            "total_duration_minutes": self.total_duration_minutes,
        }


@dataclass(slots=True)
class RenderConfig:
    ffmpeg_binary: str
    video_width: int
    video_height: int
    fps: int
    video_codec: str
    audio_codec: str
    audio_sample_rate: int
    font_file: str
    font_size: int
    work_color: str = "black"
    rest_color: str = "darkred"
    station_change_color: str = "darkblue"


@dataclass(slots=True)
class ProducerConfig:
    max_retries: int
    retry_delay_sec: float
    command_timeout_sec: float | None = None


@dataclass(slots=True)
class LibraryConfig:
    videos_dir: Path = Path("media/videos")
    categories: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()


@dataclass(slots=True)
class Settings:
    app: AppConfig
    limits: LimitsConfig
    render: RenderConfig
    producer: ProducerConfig
    root_dir: Path
    library: LibraryConfig = field(default_factory=LibraryConfig)


def _range(raw: dict, key: str, default: tuple[int, int]) -> tuple[int, int]:
    value = raw.get(key)
    if value is None:
        return default
    low, high = value
    return int(low), int(high)


def _timeout(value) -> float | None:
    seconds = float(value or 0)
    return seconds if seconds > 0 else None


def load_settings(root_dir: Path) -> Settings:
    config_path = root_dir / "config" / "default.toml"
    with config_path.open("rb") as fh:
        raw = tomllib.load(fh)

    app = raw["app"]
    limits = raw.get("limits", {})
    render = raw["render"]
    producer = raw.get("producer", {})
    library = raw.get("library", {})

    runs_dir = Path(os.getenv("WORKOUT_RUNS_DIR", str(app.get("runs_dir", "runs"))))
    if not runs_dir.is_absolute():
        runs_dir = root_dir / runs_dir

    videos_dir = Path(os.getenv("WORKOUT_VIDEOS_DIR", str(library.get("videos_dir", "media/videos"))))
    if not videos_dir.is_absolute():
        videos_dir = root_dir / videos_dir

    defaults = LimitsConfig()
    return Settings(
        app=AppConfig(
            runs_dir=runs_dir,
            sets_per_station=max(1, int(app.get("sets_per_station", 3))),
            max_concurrent_jobs=max(1, int(app.get("max_concurrent_jobs", 1))),
            keep_segments=bool(app.get("keep_segments", False)),
            poll_interval_sec=float(app.get("poll_interval_sec", 1.0)),
        ),
        limits=LimitsConfig(
            work_seconds=_range(limits, "work_seconds", defaults.work_seconds),
            rest_seconds=_range(limits, "rest_seconds", defaults.rest_seconds),
            station_change_seconds=_range(limits, "station_change_seconds", defaults.station_change_seconds),
            total_duration_minutes=_range(limits, "total_duration_minutes", defaults.total_duration_minutes),
        ),
        render=RenderConfig(
            ffmpeg_binary=os.getenv("FFMPEG_BINARY", str(render.get("ffmpeg_binary", "ffmpeg"))),
            video_width=int(render["video_width"]),
            video_height=int(render["video_height"]),
            fps=int(render["fps"]),
            video_codec=str(render["video_codec"]),
            audio_codec=str(render["audio_codec"]),
            audio_sample_rate=int(render.get("audio_sample_rate", 44100)),
            font_file=os.getenv("WORKOUT_FONT_FILE", str(render.get("font_file", ""))),
            font_size=int(render.get("font_size", 72)),
            work_color=str(render.get("work_color", "black")),
            rest_color=str(render.get("rest_color", "darkred")),
            station_change_color=str(render.get("station_change_color", "darkblue")),
        ),
        producer=ProducerConfig(
            max_retries=max(0, int(producer.get("max_retries", 1))),
            retry_delay_sec=float(producer.get("retry_delay_sec", 1.0)),
            command_timeout_sec=_timeout(producer.get("command_timeout_sec", 0)),
        ),
        root_dir=root_dir,
        library=LibraryConfig(
            videos_dir=videos_dir,
            categories=tuple(str(c) for c in library.get("categories", [])),
            equipment=tuple(str(e) for e in library.get("equipment", [])),
        ),
    )
