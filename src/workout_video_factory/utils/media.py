from __future__ import annotations

import shutil
import subprocess
from pathlib import Path


class CommandError(RuntimeError):
    pass


def run_command(cmd: list[str], timeout_sec: float | None = None) -> None:
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout_sec)
    except subprocess.TimeoutExpired as exc:
        raise CommandError(f"Command timed out after {timeout_sec}s: {' '.join(cmd)}") from exc
    except OSError as exc:
        raise CommandError(f"Command could not start: {' '.join(cmd)}\n{exc}") from exc
    if proc.returncode != 0:
        raise CommandError(f"Command failed: {' '.join(cmd)}\n{proc.stderr}")


def find_ffmpeg(binary: str = "ffmpeg") -> str | None:
    resolved = shutil.which(binary)
    if resolved:
        return resolved
    if Path(binary).is_file():
        return binary
    return None
