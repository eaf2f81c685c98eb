from __future__ import annotations

from pathlib import Path

from workout_video_factory.domain.models import Segment, SegmentKind
from workout_video_factory.utils.config import RenderConfig


class FFmpegCommandBuilder:
    def __init__(self, config: RenderConfig) -> None:
        self.config = config

    def build_segment(self, segment: Segment, output_video: Path) -> list[str]:
        cfg = self.config
        duration = segment.duration_sec
        size = f"{cfg.video_width}x{cfg.video_height}"
        filter_graph = self._build_filter_graph(segment)

        return [
            cfg.ffmpeg_binary,
            "-y",
            "-f",
            "lavfi",
            "-i",
            f"color=c={self.background_color(segment)}:size={size}:duration={duration}:rate={cfg.fps}",
            "-f",
            "lavfi",
            "-i",
            f"anullsrc=channel_layout=stereo:sample_rate={cfg.audio_sample_rate}",
            "-filter_complex",
            filter_graph,
            "-map",
            "[v]",
            "-map",
            "1:a",
            "-t",
            str(duration),
            "-c:v",
            cfg.video_codec,
            "-pix_fmt",
            "yuv420p",
            "-c:a",
            cfg.audio_codec,
            "-ar",
            str(cfg.audio_sample_rate),
            str(output_video),
        ]

    def build_concat(self, list_file: Path, output_video: Path) -> list[str]:
        return [
            self.config.ffmpeg_binary,
            "-y",
            "-f",
            "concat",
            "-safe",
            "0",
            "-i",
            str(list_file),
            "-c",
            "copy",
            "-movflags",
            "+faststart",
            str(output_video),
        ]

    def background_color(self, segment: Segment) -> str:
        if segment.kind is SegmentKind.WORK:
            return self.config.work_color
        if segment.is_station_change:
            return self.config.station_change_color
        return self.config.rest_color

    def _build_filter_graph(self, segment: Segment) -> str:
        size = self.config.font_size
        title = _drawtext(
            segment.label,
            self.config.font_file,
            size,
            y="(h-text_h)/2-120",
        )
        subtitle = _drawtext(
            _position_text(segment),
            self.config.font_file,
            max(12, size // 2),
            y="h-200",
        )
        # %{eif:...} renders the remaining whole seconds of the segment
        countdown = _drawtext(
            f"%{{eif\\:({segment.duration_sec}-t)\\:d\\:2}}",
            self.config.font_file,
            size * 2,
            y="(h-text_h)/2+80",
        )
        filters = [title, subtitle, countdown]
        exercise_line = _exercise_text(segment)
        if exercise_line:
            filters.append(_drawtext(_escape_text(exercise_line), self.config.font_file, size, y="50"))
        return f"[0:v]{','.join(filters)}[v]"


def _position_text(segment: Segment) -> str:
    return f"STATION {segment.station_index + 1} - SET {segment.set_index + 1}"


def _exercise_text(segment: Segment) -> str:
    if segment.kind is SegmentKind.WORK:
        return segment.exercise
    if segment.is_station_change and segment.next_exercise:
        return f"NEXT: {segment.next_exercise}"
    return ""


def _drawtext(text: str, font_file: str, font_size: int, y: str) -> str:
    parts = [f"text='{text}'"]
    if font_file:
        parts.append(f"fontfile='{_escape_path(font_file)}'")
    parts.extend(
        [
            "fontcolor=white",
            f"fontsize={font_size}",
            "x=(w-text_w)/2",
            f"y={y}",
        ]
    )
    return "drawtext=" + ":".join(parts)


def _escape_text(text: str) -> str:
    # a quote would end the option value; colons separate drawtext options
    return text.replace("\\", "\\\\").replace("'", "\u2019").replace(":", "\\:")


def _escape_path(path: str) -> str:
    return path.replace("\\", "/").replace(":", "\\:")
