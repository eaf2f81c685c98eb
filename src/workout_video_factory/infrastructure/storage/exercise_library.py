from __future__ import annotations

import random
from collections.abc import Sequence
from pathlib import Path

from workout_video_factory.domain.errors import ExerciseSelectionError
from workout_video_factory.domain.exercise_selection import select_exercises_evenly

VIDEO_SUFFIX = ".mp4"


class ExerciseLibrary:
    """Exercise clips laid out as <videos_dir>/<category>/<equipment>/<name>.mp4."""

    def __init__(self, videos_dir: Path, logger) -> None:
        self.videos_dir = Path(videos_dir)
        self.logger = logger

    def categories(self) -> list[str]:
        if not self.videos_dir.is_dir():
            raise ExerciseSelectionError(f"Videos directory not found: {self.videos_dir}")
        return sorted(p.name for p in self.videos_dir.iterdir() if p.is_dir())

    def equipment(self, categories: Sequence[str] | None = None) -> list[str]:
        found: set[str] = set()
        for category in categories or self.categories():
            category_dir = self.videos_dir / category
            if not category_dir.is_dir():
                continue
            found.update(p.name for p in category_dir.iterdir() if p.is_dir())
        return sorted(found)

    def videos_by_equipment(self, categories: Sequence[str], equipment: Sequence[str]) -> dict[str, list[Path]]:
        grouped: dict[str, list[Path]] = {}
        for equip in equipment:
            videos: list[Path] = []
            for category in categories:
                equip_dir = self.videos_dir / category / equip
                if not equip_dir.is_dir():
                    continue
                videos.extend(
                    p for p in sorted(equip_dir.iterdir()) if p.is_file() and p.suffix.lower() == VIDEO_SUFFIX
                )
            grouped[equip] = videos
        return grouped

    def pick(
        self,
        count: int,
        categories: Sequence[str] | None = None,
        equipment: Sequence[str] | None = None,
        rng: random.Random | None = None,
    ) -> list[Path]:
        categories = list(categories or self.categories())
        equipment = list(equipment or self.equipment(categories))
        if not equipment:
            raise ExerciseSelectionError(f"No equipment found for categories: {', '.join(categories) or '-'}")

        grouped = self.videos_by_equipment(categories, equipment)
        for equip, videos in grouped.items():
            if not videos:
                self.logger.warning("exercise.no_videos", equipment=equip, categories=categories)

        selected = select_exercises_evenly(grouped, count, rng=rng)
        if not selected:
            raise ExerciseSelectionError(
                f"No exercise videos found for equipment: {', '.join(equipment)}"
            )
        self.logger.info(
            "exercise.selected",
            requested=count,
            selected=len(selected),
            equipment=equipment,
        )
        return selected
