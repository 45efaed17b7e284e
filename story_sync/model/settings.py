import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Dict

from ..errors import SettingsError


SETTINGS_FILENAME = "story_sync.json"


@dataclass
class PlaybackSettings:
    poll_interval_ms: int = 500
    time_epsilon: float = 0.1
    seek_jump_ms: int = 1500


@dataclass
class ScrollSettings:
    focus_zone_top: float = 0.1
    focus_zone_bottom: float = 0.9


@dataclass
class MapSettings:
    initial_lat: float = 38.89
    initial_lng: float = -77.03
    initial_zoom: int = 14
    chapter_zoom: int = 15
    transition_ms: int = 1000


@dataclass
class AppSettings:
    playback: PlaybackSettings = field(default_factory=PlaybackSettings)
    scroll: ScrollSettings = field(default_factory=ScrollSettings)
    map: MapSettings = field(default_factory=MapSettings)


class SettingsManager:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.settings = AppSettings()
        self.load()

    def load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError):
            return
        self.settings = self._from_dict(data)

    def save(self) -> None:
        try:
            self.path.write_text(json.dumps(self._to_dict(), indent=2))
        except OSError as exc:
            raise SettingsError(f"Unable to write settings to {self.path}: {exc}") from exc

    def reset(self) -> None:
        self.settings = AppSettings()
        self.save()

    def _to_dict(self) -> Dict:
        return asdict(self.settings)

    def _from_dict(self, data: Dict) -> AppSettings:
        def merge(default_cls, section):
            instance = default_cls()
            if not isinstance(section, dict):
                return instance
            types = {item.name: type(getattr(instance, item.name)) for item in fields(instance)}
            for key, value in section.items():
                if key not in types:
                    continue
                # Blank cells in hand-edited option sheets mean "use the default".
                if value is None or (isinstance(value, str) and not value.strip()):
                    continue
                try:
                    setattr(instance, key, types[key](value))
                except (TypeError, ValueError):
                    continue
            return instance

        settings = AppSettings()
        if not isinstance(data, dict):
            return settings
        if "playback" in data:
            settings.playback = merge(PlaybackSettings, data["playback"])
        if "scroll" in data:
            settings.scroll = merge(ScrollSettings, data["scroll"])
        if "map" in data:
            settings.map = merge(MapSettings, data["map"])
        return settings


def get_settings_path(root: Path) -> Path:
    return root / SETTINGS_FILENAME
