from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Authority(str, Enum):
    SCROLL = "scroll"
    PLAYBACK = "playback"
    CLICK = "click"


class PlayerState(str, Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True)
class Chapter:
    index: int
    title: str = ""
    description: str = ""
    media_ref: str = ""
    timestamp: Optional[float] = None
    coordinate: Optional[Coordinate] = None
    zoom: int = 15

    @property
    def has_timestamp(self) -> bool:
        return self.timestamp is not None

    @property
    def has_coordinate(self) -> bool:
        return self.coordinate is not None


@dataclass(frozen=True)
class ChapterExtent:
    offset_top: float
    height: float

    @property
    def center(self) -> float:
        return self.offset_top + self.height / 2.0


@dataclass(frozen=True)
class FocusState:
    active_index: Optional[int] = None
    authority: Authority = Authority.SCROLL
    playback_is_driving: bool = False


@dataclass
class ChapterIssue:
    index: int
    field: str
    value: str
    note: str
