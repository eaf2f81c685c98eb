from __future__ import annotations

from collections.abc import Sequence

from .errors import InvalidTimingError
from .models import Segment, SegmentKind, SegmentPlan, WorkoutTiming

DEFAULT_SETS_PER_STATION = 3


def station_cycle_seconds(timing: WorkoutTiming, sets_per_station: int = DEFAULT_SETS_PER_STATION) -> int:
    """Length of one station: every work set, the rests between them and the station change."""
    return (
        timing.work_seconds * sets_per_station
        + timing.rest_seconds * (sets_per_station - 1)
        + timing.station_change_seconds
    )


def count_stations(timing: WorkoutTiming, sets_per_station: int = DEFAULT_SETS_PER_STATION) -> int:
    _validate(timing, sets_per_station)

    cycle = station_cycle_seconds(timing, sets_per_station)
    if cycle <= 0:
        raise InvalidTimingError(f"Station cycle must be longer than 0 seconds (got {cycle})")

    stations = (timing.total_duration_minutes * 60) // cycle
    if stations < 1:
        raise InvalidTimingError(
            f"No complete station fits in {timing.total_duration_minutes} minutes "
            f"(one station takes {cycle} seconds). Reduce work, rest or station change time."
        )
    return stations


def compute_plan(
    timing: WorkoutTiming,
    sets_per_station: int = DEFAULT_SETS_PER_STATION,
    exercises: Sequence[str] = (),
) -> SegmentPlan:
    """Lay out every work and rest segment in render order.

    When exercise names are given, station n performs exercises[n % len(exercises)]
    and each station change announces the exercise of the following station.
    """
    stations = count_stations(timing, sets_per_station)
    names = tuple(exercises)

    def exercise_at(station: int) -> str:
        if not names or station >= stations:
            return ""
        return names[station % len(names)]

    segments: list[Segment] = []
    for station in range(stations):
        for set_idx in range(sets_per_station):
            segments.append(
                Segment(
                    index=len(segments),
                    kind=SegmentKind.WORK,
                    station_index=station,
                    set_index=set_idx,
                    duration_sec=timing.work_seconds,
                    exercise=exercise_at(station),
                )
            )
            last_set = set_idx == sets_per_station - 1
            segments.append(
                Segment(
                    index=len(segments),
                    kind=SegmentKind.REST,
                    station_index=station,
                    set_index=set_idx,
                    duration_sec=timing.station_change_seconds if last_set else timing.rest_seconds,
                    is_station_change=last_set,
                    exercise=exercise_at(station),
                    next_exercise=exercise_at(station + 1) if last_set else "",
                )
            )

    return SegmentPlan(
        timing=timing,
        stations=stations,
        sets_per_station=sets_per_station,
        segments=tuple(segments),
        exercises=names,
    )


def _validate(timing: WorkoutTiming, sets_per_station: int) -> None:
    fields = timing.as_dict()
    for name, value in fields.items():
        # bool is an int subclass; True/False are never a duration
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidTimingError(f"{name} must be an integer (got {value!r})")

    if timing.work_seconds <= 0:
        raise InvalidTimingError(f"work_seconds must be positive (got {timing.work_seconds})")
    if timing.total_duration_minutes <= 0:
        raise InvalidTimingError(
            f"total_duration_minutes must be positive (got {timing.total_duration_minutes})"
        )
    if timing.rest_seconds < 0:
        raise InvalidTimingError(f"rest_seconds must not be negative (got {timing.rest_seconds})")
    if timing.station_change_seconds < 0:
        raise InvalidTimingError(
            f"station_change_seconds must not be negative (got {timing.station_change_seconds})"
        )
    if isinstance(sets_per_station, bool) or not isinstance(sets_per_station, int) or sets_per_station < 1:
        raise InvalidTimingError(f"sets_per_station must be at least 1 (got {sets_per_station!r})")
