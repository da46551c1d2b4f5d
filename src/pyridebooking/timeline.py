"""Day timeline rendering."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from .const import DAY_MINUTES
from .exceptions import ValidationError
from .models import Timeline, TimelineSegment, TimeWindow
from .util import format_clock

AVAILABLE_COLOR = "#27AE60"
BLOCKED_COLOR = "#d9534f"
FULLY_AVAILABLE_TEXT = "All times available!"


def render(
    merged_windows: Iterable[TimeWindow],
    day_minutes: int = DAY_MINUTES,
    *,
    day: date | None = None,
) -> Timeline:
    """Lay out merged blocked windows as percentages of the day."""
    if day_minutes <= 0:
        raise ValidationError("day_minutes must be positive.")
    segments: list[TimelineSegment] = []
    for window in merged_windows:
        start = max(0, window.start)
        end = min(day_minutes, window.end)
        if end <= start:
            continue
        segments.append(
            TimelineSegment(
                start=start,
                end=end,
                start_label=format_clock(start),
                end_label=format_clock(end),
                left_percent=start / day_minutes * 100,
                width_percent=(end - start) / day_minutes * 100,
            )
        )
    return Timeline(segments=tuple(segments), day_minutes=day_minutes, day=day)


def _format_percent(value: float) -> str:
    return f"{value:.4f}".rstrip("0").rstrip(".")


def _segment_html(segment: TimelineSegment) -> str:
    return (
        f'<div class="timeline-blocked" style="position: absolute; '
        f"left: {_format_percent(segment.left_percent)}%; "
        f"width: {_format_percent(segment.width_percent)}%; height: 100%; "
        f"background: {BLOCKED_COLOR}; border-radius: 2px; display: flex; "
        "flex-direction: column; align-items: center; justify-content: center; "
        'color: white; font-size: 11px; font-weight: bold; line-height: 1.2;">'
        f"<span>{segment.start_label}</span>"
        '<span style="line-height: 0.2;">-</span>'
        f"<span>{segment.end_label}</span>"
        "</div>"
    )


def to_html(timeline: Timeline) -> str:
    """Return the markup fragment the booking page inserts for a timeline."""
    if timeline.fully_available:
        return (
            f'<p class="timeline-available" style="text-align: center; '
            f'color: {AVAILABLE_COLOR}; font-weight: bold;">{FULLY_AVAILABLE_TEXT}</p>'
        )
    parts = [
        '<div class="timeline" style="position: relative; margin: 20px 0;">',
        '<div style="display: flex; justify-content: space-between; margin-bottom: 5px; '
        'font-size: 11px; color: #666;">',
        f"<span>{format_clock(0)}</span>",
        f"<span>{format_clock(timeline.day_minutes // 2)}</span>",
        f"<span>{format_clock(timeline.day_minutes)}</span>",
        "</div>",
        f'<div class="timeline-bar" style="position: relative; height: 40px; '
        f'background: {AVAILABLE_COLOR}; border-radius: 4px; overflow: visible;">',
    ]
    parts.extend(_segment_html(segment) for segment in timeline.segments)
    parts.append("</div>")
    parts.append("</div>")
    parts.append(
        '<div class="timeline-legend" style="display: flex; gap: 20px; margin-top: 10px; '
        'font-size: 12px; justify-content: center;">'
        f'<div><span style="display: inline-block; width: 15px; height: 15px; '
        f"background: {AVAILABLE_COLOR}; border-radius: 2px; vertical-align: middle; "
        'margin-right: 5px;"></span>Available</div>'
        f'<div><span style="display: inline-block; width: 15px; height: 15px; '
        f"background: {BLOCKED_COLOR}; border-radius: 2px; vertical-align: middle; "
        'margin-right: 5px;"></span>Unavailable</div>'
        "</div>"
    )
    return "".join(parts)
