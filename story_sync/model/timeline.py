from __future__ import annotations

from bisect import bisect_right
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import logging
import math

from .entities import Chapter, ChapterIssue, Coordinate
from .issues import IssueLog


_log = logging.getLogger(__name__)

_KEY_ALIASES: Dict[str, str] = {
    "title": "title",
    "chapter": "title",
    "description": "description",
    "timestamp": "timestamp",
    "time": "timestamp",
    "latitude": "latitude",
    "lat": "latitude",
    "longitude": "longitude",
    "lng": "longitude",
    "lon": "longitude",
    "zoom": "zoom",
    "mediaref": "media_ref",
    "medialink": "media_ref",
    "media": "media_ref",
}


def _normalize_key(key: Any) -> str:
    text = str(key).strip().lower().replace(" ", "").replace("_", "").replace("-", "")
    return _KEY_ALIASES.get(text, text)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def parse_timestamp(value: Any) -> Optional[float]:
    """Parse ``H:MM:SS``, ``MM:SS`` or ``SS`` (or a plain number) into seconds.

    Returns ``None`` for blank, negative or otherwise unparsable input.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        seconds = float(value)
        if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
            return None
        return seconds
    text = _text(value)
    if not text:
        return None
    parts = text.split(":")
    if len(parts) > 3:
        return None
    try:
        numbers = [float(part) for part in parts]
    except ValueError:
        return None
    if any(math.isnan(n) or math.isinf(n) or n < 0 for n in numbers):
        return None
    if any(not n.is_integer() for n in numbers[:-1]):
        return None
    if len(numbers) >= 2 and numbers[-1] >= 60:
        return None
    if len(numbers) == 3 and numbers[1] >= 60:
        return None
    total = 0.0
    for number in numbers:
        total = total * 60 + number
    return total


def parse_coordinate(latitude: Any, longitude: Any) -> Optional[Coordinate]:
    lat_text, lng_text = _text(latitude), _text(longitude)
    if not lat_text or not lng_text:
        return None
    try:
        lat, lng = float(lat_text), float(lng_text)
    except ValueError:
        return None
    if math.isnan(lat) or math.isnan(lng):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return Coordinate(lat, lng)


def parse_zoom(value: Any) -> Optional[int]:
    text = _text(value)
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or not number.is_integer() or number <= 0:
        return None
    return int(number)


class TimelineIndex:
    """Validated chapters with a display view and a time-sorted playback view."""

    def __init__(self, chapters: Sequence[Chapter], issues: Optional[IssueLog] = None) -> None:
        self._chapters: Tuple[Chapter, ...] = tuple(chapters)
        self._playback: Tuple[Chapter, ...] = tuple(
            sorted(
                (c for c in self._chapters if c.has_timestamp and c.has_coordinate),
                key=lambda c: (c.timestamp, c.index),
            )
        )
        self._playback_times: List[float] = [c.timestamp for c in self._playback]  # type: ignore[misc]
        self.issues = issues if issues is not None else IssueLog()

    @classmethod
    def build(cls, records: Iterable[Mapping[str, Any]], default_zoom: int = 15) -> "TimelineIndex":
        issues = IssueLog()
        chapters: List[Chapter] = []
        dropped = 0
        for record in records:
            if not isinstance(record, Mapping):
                dropped += 1
                continue
            fields = {_normalize_key(key): value for key, value in record.items()}
            title = _text(fields.get("title"))
            description = _text(fields.get("description"))
            if not title and not description:
                dropped += 1
                continue
            index = len(chapters)

            raw_time = fields.get("timestamp")
            timestamp = parse_timestamp(raw_time)
            if timestamp is None and _text(raw_time):
                issues.record_issue(
                    ChapterIssue(index, "timestamp", _text(raw_time), "unparsable timestamp")
                )

            raw_lat, raw_lng = fields.get("latitude"), fields.get("longitude")
            coordinate = parse_coordinate(raw_lat, raw_lng)
            if coordinate is None:
                issues.record_issue(
                    ChapterIssue(
                        index,
                        "coordinate",
                        f"{_text(raw_lat)},{_text(raw_lng)}",
                        "missing or invalid coordinate",
                    )
                )

            raw_zoom = fields.get("zoom")
            zoom = parse_zoom(raw_zoom)
            if zoom is None:
                if _text(raw_zoom):
                    issues.record_issue(ChapterIssue(index, "zoom", _text(raw_zoom), "invalid zoom"))
                zoom = default_zoom

            chapters.append(
                Chapter(
                    index=index,
                    title=title,
                    description=description,
                    media_ref=_text(fields.get("media_ref")),
                    timestamp=timestamp,
                    coordinate=coordinate,
                    zoom=zoom,
                )
            )

        timeline = cls(chapters, issues)
        _log.debug(
            "TimelineIndex: built chapters=%s playback=%s dropped=%s issues=%s",
            len(timeline),
            len(timeline.playback),
            dropped,
            len(issues),
        )
        return timeline

    @property
    def chapters(self) -> Tuple[Chapter, ...]:
        return self._chapters

    @property
    def playback(self) -> Tuple[Chapter, ...]:
        return self._playback

    def chapter(self, index: Optional[int]) -> Optional[Chapter]:
        if index is None or index < 0 or index >= len(self._chapters):
            return None
        return self._chapters[index]

    def lookup(self, seconds: float, epsilon: float = 0.1) -> Optional[Chapter]:
        """Greatest playback entry whose timestamp is at most ``seconds + epsilon``."""
        position = bisect_right(self._playback_times, seconds + epsilon)
        if position == 0:
            return None
        return self._playback[position - 1]

    def __len__(self) -> int:
        return len(self._chapters)
