"""Model layer: chapter entities, the timeline index and settings."""

from .entities import (
    Authority,
    Chapter,
    ChapterExtent,
    ChapterIssue,
    Coordinate,
    FocusState,
    PlayerState,
)
from .issues import IssueLog
from .settings import (
    AppSettings,
    MapSettings,
    PlaybackSettings,
    ScrollSettings,
    SettingsManager,
    get_settings_path,
)
from .timeline import TimelineIndex, parse_coordinate, parse_timestamp, parse_zoom

__all__ = [
    "AppSettings",
    "Authority",
    "Chapter",
    "ChapterExtent",
    "ChapterIssue",
    "Coordinate",
    "FocusState",
    "IssueLog",
    "MapSettings",
    "PlaybackSettings",
    "PlayerState",
    "ScrollSettings",
    "SettingsManager",
    "TimelineIndex",
    "get_settings_path",
    "parse_coordinate",
    "parse_timestamp",
    "parse_zoom",
]
