from pathlib import Path

from workout_video_factory.utils.config import load_settings

CONFIG = """
[app]
runs_dir = "runs"
sets_per_station = 3
max_concurrent_jobs = 0

[limits]
work_seconds = [15, 200]

[render]
video_width = 1280
video_height = 720
fps = 25
video_codec = "libx264"
audio_codec = "aac"

[producer]
max_retries = 2
command_timeout_sec = 0
"""


def _write(root: Path, text: str = CONFIG) -> None:
    (root / "config").mkdir()
    (root / "config" / "default.toml").write_text(text, encoding="utf-8")


def test_load_settings_applies_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("FFMPEG_BINARY", raising=False)
    monkeypatch.delenv("WORKOUT_FONT_FILE", raising=False)
    monkeypatch.delenv("WORKOUT_RUNS_DIR", raising=False)
    _write(tmp_path)

    settings = load_settings(tmp_path)

    assert settings.app.runs_dir == tmp_path / "runs"
    assert settings.app.max_concurrent_jobs == 1
    assert settings.limits.work_seconds == (15, 200)
    assert settings.limits.rest_seconds == (0, 120)
    assert settings.render.ffmpeg_binary == "ffmpeg"
    assert settings.render.audio_sample_rate == 44100
    assert settings.render.font_file == ""
    assert settings.producer.max_retries == 2
    assert settings.producer.command_timeout_sec is None


def test_environment_overrides(tmp_path, monkeypatch):
    _write(tmp_path)
    monkeypatch.setenv("FFMPEG_BINARY", "/opt/ffmpeg/bin/ffmpeg")
    monkeypatch.setenv("WORKOUT_FONT_FILE", "/fonts/Oswald.ttf")
    monkeypatch.setenv("WORKOUT_RUNS_DIR", str(tmp_path / "elsewhere"))

    settings = load_settings(tmp_path)

    assert settings.render.ffmpeg_binary == "/opt/ffmpeg/bin/ffmpeg"
    assert settings.render.font_file == "/fonts/Oswald.ttf"
    assert settings.app.runs_dir == tmp_path / "elsewhere"


def test_repository_default_config_loads(monkeypatch):
    monkeypatch.delenv("WORKOUT_RUNS_DIR", raising=False)
    root = Path(__file__).resolve().parents[1]
    settings = load_settings(root)
    assert settings.app.sets_per_station == 3
    assert settings.producer.command_timeout_sec == 600


def test_library_section_is_optional_and_configurable(tmp_path, monkeypatch):
    monkeypatch.delenv("WORKOUT_VIDEOS_DIR", raising=False)
    _write(tmp_path)
    settings = load_settings(tmp_path)
    assert settings.library.videos_dir == tmp_path / "media" / "videos"
    assert settings.library.equipment == ()

    other = tmp_path / "other"
    other.mkdir()
    _write(other, CONFIG + '\n[library]\nvideos_dir = "clips"\ncategories = ["strength"]\nequipment = ["kettlebell"]\n')
    settings = load_settings(other)
    assert settings.library.videos_dir == other / "clips"
    assert settings.library.categories == ("strength",)
    assert settings.library.equipment == ("kettlebell",)

    monkeypatch.setenv("WORKOUT_VIDEOS_DIR", str(tmp_path / "shared"))
    assert load_settings(other).library.videos_dir == tmp_path / "shared"
