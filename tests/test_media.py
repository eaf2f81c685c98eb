import sys

import pytest

from workout_video_factory.utils.media import CommandError, find_ffmpeg, run_command


def test_run_command_succeeds_quietly():
    run_command([sys.executable, "-c", "print('ok')"])


def test_run_command_raises_with_stderr_on_failure():
    with pytest.raises(CommandError, match="boom"):
        run_command([sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"])


def test_run_command_times_out():
    with pytest.raises(CommandError, match="timed out"):
        run_command([sys.executable, "-c", "import time; time.sleep(5)"], timeout_sec=0.3)


def test_run_command_reports_missing_binary():
    with pytest.raises(CommandError, match="could not start"):
        run_command(["definitely-not-a-real-binary-xyz"])


def test_find_ffmpeg_accepts_existing_file_and_rejects_unknown():
    assert find_ffmpeg(sys.executable) is not None
    assert find_ffmpeg("definitely-not-a-real-binary-xyz") is None
