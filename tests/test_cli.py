import pytest

from workout_video_factory.cli import main


def test_plan_command_prints_station_summary(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["plan", "--work", "40", "--rest", "20", "--station-change", "10", "--total", "20"])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "Stations: 7 x 3 sets" in out
    assert "Segments: 42" in out
    assert "Duration: 19:50" in out


def test_plan_command_lists_segments(capsys):
    with pytest.raises(SystemExit):
        main(["plan", "--work", "40", "--rest", "20", "--station-change", "10", "--total", "6", "--segments"])

    out = capsys.readouterr().out
    assert "NEXT STATION" in out
    assert out.count("WORK") == 6


def test_plan_command_rejects_impossible_timing(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["plan", "--work", "300", "--rest", "120", "--station-change", "60", "--total", "1"])

    assert excinfo.value.code == 2
    assert "No complete station" in capsys.readouterr().out


@pytest.fixture
def videos_dir(tmp_path, monkeypatch):
    folder = tmp_path / "videos" / "strength" / "kettlebell"
    folder.mkdir(parents=True)
    for name in ("kettlebell-swing", "goblet-squat"):
        (folder / f"{name}.mp4").write_bytes(b"")
    monkeypatch.setenv("WORKOUT_VIDEOS_DIR", str(tmp_path / "videos"))
    return tmp_path / "videos"


def test_plan_command_shows_exercise_names(videos_dir, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([
            "plan", "--work", "40", "--rest", "20", "--station-change", "10", "--total", "6",
            "--equipment", "kettlebell", "--segments",
        ])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "Kettlebell swing" in out
    assert "Goblet squat" in out
    assert out.count("next: ") == 1


def test_library_command_lists_categories_and_equipment(videos_dir, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["library"])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "Categories: strength" in out
    assert "Equipment: kettlebell" in out


def test_library_command_reports_missing_directory(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("WORKOUT_VIDEOS_DIR", str(tmp_path / "missing"))
    with pytest.raises(SystemExit) as excinfo:
        main(["library"])

    assert excinfo.value.code == 2
    assert "Videos directory not found" in capsys.readouterr().out
