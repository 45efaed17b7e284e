from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Tuple
import logging

from PyQt5 import QtCore

from ..adapters.base import MapAdapter, PanelSink, PlayerAdapter, ScrollContainerAdapter
from ..drivers.highlight import HighlightDriver
from ..drivers.viewport import ViewportDriver
from ..model.entities import FocusState, PlayerState
from ..model.settings import AppSettings, SettingsManager, get_settings_path
from ..model.timeline import TimelineIndex
from ..sync.arbiter import FocusArbiter
from ..sync.poller import PlaybackPoller
from ..sync.scroll import ScrollObserver


class StorySession(QtCore.QObject):
    """Owns every sync component for one loaded story and wires them together.

    The session replaces module level player/map/timer globals: construct it
    with the adapters, call ``load`` with raw chapter records, and call
    ``shutdown`` when the story is torn down.
    """

    focusChanged = QtCore.pyqtSignal(object, object)
    # Carries the player error message; an empty string means the player recovered.
    degradedChanged = QtCore.pyqtSignal(str)

    def __init__(
        self,
        map_adapter: MapAdapter,
        scroll_container: ScrollContainerAdapter,
        player: Optional[PlayerAdapter] = None,
        panels: Optional[PanelSink] = None,
        settings: Optional[AppSettings] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._log = logging.getLogger(__name__)
        self.settings = settings or AppSettings()
        self.timeline = TimelineIndex(())
        self.degraded: bool = False
        self._player = player
        self._map = map_adapter
        self._container = scroll_container
        self._connections: List[Tuple[Any, Any]] = []
        self._closed: bool = False

        self.arbiter = FocusArbiter(player, self.settings.playback.time_epsilon, self)
        self.scroll_observer = ScrollObserver(
            scroll_container,
            self.settings.scroll.focus_zone_top,
            self.settings.scroll.focus_zone_bottom,
            self,
        )
        self.viewport = ViewportDriver(map_adapter, self.settings.map, self)
        self.highlight = HighlightDriver(map_adapter, panels, self)
        self.poller: Optional[PlaybackPoller] = None
        if player is not None:
            self.poller = PlaybackPoller(
                player,
                self.settings.playback.poll_interval_ms,
                self.settings.playback.time_epsilon,
                self,
            )

        self._setup_connections()

    @classmethod
    def from_settings_file(
        cls,
        root_path: Path,
        map_adapter: MapAdapter,
        scroll_container: ScrollContainerAdapter,
        player: Optional[PlayerAdapter] = None,
        panels: Optional[PanelSink] = None,
    ) -> "StorySession":
        manager = SettingsManager(get_settings_path(root_path))
        return cls(map_adapter, scroll_container, player, panels, manager.settings)

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------
    def _connect(self, signal: Any, slot: Any) -> None:
        signal.connect(slot)
        self._connections.append((signal, slot))

    def _setup_connections(self) -> None:
        # Drivers first so listeners of the session's own signal see a settled map/panel state.
        self._connect(self.arbiter.focusChanged, self.viewport.on_focus_changed)
        self._connect(self.arbiter.focusChanged, self.highlight.on_focus_changed)
        self._connect(self.arbiter.focusChanged, self.focusChanged)

        self._connect(self._container.scrolled, self.scroll_observer.on_scrolled)
        self._connect(self._container.layoutChanged, self.scroll_observer.on_layout_changed)
        self._connect(self.scroll_observer.scrollFocus, self.arbiter.scroll_focus)

        if self.poller is not None and self._player is not None:
            self._connect(self.poller.activeChanged, self.arbiter.set_playback_driving)
            self._connect(self.poller.playbackAdvance, self.arbiter.playback_advance)
            self._connect(self._player.stateChanged, self.poller.on_player_state)
            self._connect(self._player.seeked, self.poller.on_seek)
            self._connect(self._player.errorOccurred, self.poller.on_player_error)
            self._connect(self._player.errorOccurred, self._on_player_error)
            self._connect(self._player.stateChanged, self._on_player_state)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def state(self) -> FocusState:
        return self.arbiter.state

    def load(self, records: Iterable[Mapping[str, Any]]) -> TimelineIndex:
        if self._closed:
            raise RuntimeError("StorySession has been shut down")
        self.viewport.cancel()
        self.timeline = TimelineIndex.build(records, self.settings.map.chapter_zoom)
        self.arbiter.set_timeline(self.timeline)
        self.viewport.set_timeline(self.timeline)
        self.highlight.set_chapter_count(len(self.timeline))
        self.highlight.apply(None)
        self.scroll_observer.reset()
        if self.poller is not None:
            self.poller.set_timeline(self.timeline)
        self._log.debug(
            "StorySession: loaded chapters=%s playback=%s", len(self.timeline), len(self.timeline.playback)
        )
        self.viewport.reset_view()
        self.scroll_observer.evaluate()
        if self.poller is not None and self.poller.is_active():
            self.poller.sample()
        return self.timeline

    def click(self, index: int) -> None:
        self.arbiter.click_focus(index)

    def map_ready(self) -> None:
        """Called by the map adapter owner once the map can accept camera commands."""
        self.viewport.flush_pending()
        self.highlight.apply(self.arbiter.active_index)

    def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self.poller is not None:
            self.poller.stop()
        self.viewport.cancel()
        for signal, slot in reversed(self._connections):
            try:
                signal.disconnect(slot)
            except TypeError:
                self._log.debug("StorySession: %s already disconnected", slot)
        self._connections.clear()
        self._log.debug("StorySession: shut down")

    # ------------------------------------------------------------------
    # Player failures
    # ------------------------------------------------------------------
    def _on_player_error(self, message: str) -> None:
        if not self.degraded:
            self._log.warning("StorySession: player unavailable (%s), scroll and click focus only", message)
        self.degraded = True
        self.degradedChanged.emit(message)

    def _on_player_state(self, state: str) -> None:
        if state != PlayerState.PLAYING.value or not self.degraded:
            return
        self._log.info("StorySession: player recovered, playback sync resumed")
        self.degraded = False
        self.degradedChanged.emit("")
