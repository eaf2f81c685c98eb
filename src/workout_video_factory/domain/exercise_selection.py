from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TypeVar

T = TypeVar("T")


def format_exercise_name(video: str | Path) -> str:
    """'kettlebell-swing.mp4' -> 'Kettlebell swing'."""
    name = Path(video).stem.replace("-", " ")
    return name[:1].upper() + name[1:]


def select_exercises_evenly(
    videos_by_equipment: Mapping[str, Sequence[T]],
    count: int,
    rng: random.Random | None = None,
) -> list[T]:
    """Pick up to `count` videos spread evenly over the equipment types.

    Each equipment type gets count // len(equipment) videos; the remainder goes
    one each to the first equipment types in mapping order. Equipment without
    videos is skipped and its share is not handed to anyone else. The result
    is shuffled so stations do not come grouped by equipment.
    """
    rng = rng or random.Random()
    equipment = list(videos_by_equipment)
    if count <= 0 or not equipment:
        return []

    base, extra = divmod(count, len(equipment))
    selected: list[T] = []
    for position, name in enumerate(equipment):
        videos = list(videos_by_equipment[name])
        if not videos:
            continue
        rng.shuffle(videos)
        quota = base + (1 if position < extra else 0)
        selected.extend(videos[:quota])

    rng.shuffle(selected)
    return selected
