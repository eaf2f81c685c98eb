from __future__ import annotations

import json
import shutil
from pathlib import Path

from workout_video_factory.domain.models import Segment


class ArtifactStore:
    def __init__(self, runs_root: Path) -> None:
        self.runs_root = runs_root
        self.runs_root.mkdir(parents=True, exist_ok=True)

    def job_dir(self, job_id: str) -> Path:
        path = self.runs_root / job_id
        path.mkdir(parents=True, exist_ok=True)
        return path

    def segments_dir(self, job_id: str) -> Path:
        path = self.job_dir(job_id) / "segments"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def segment_path(self, job_id: str, segment: Segment) -> Path:
        return self.segments_dir(job_id) / f"{segment.index:04d}_{segment.kind.value}.mp4"

    def concat_list_path(self, job_id: str) -> Path:
        return self.job_dir(job_id) / "segments.txt"

    def output_path(self, job_id: str) -> Path:
        return self.job_dir(job_id) / f"workout_{job_id}.mp4"

    def metadata_path(self, job_id: str) -> Path:
        return self.job_dir(job_id) / "metadata.json"

    def write_json(self, path: Path, payload: dict | list) -> None:
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    def remove_segments(self, job_id: str) -> None:
        shutil.rmtree(self.runs_root / job_id / "segments", ignore_errors=True)
