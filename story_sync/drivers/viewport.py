from __future__ import annotations

from typing import Optional, Tuple
import logging

from PyQt5 import QtCore

from ..adapters.base import MapAdapter
from ..errors import AdapterNotReady
from ..model.settings import MapSettings
from ..model.timeline import TimelineIndex

CameraTarget = Tuple[float, float, int]


class ViewportDriver(QtCore.QObject):
    """Moves the map camera to the focused chapter, newest target wins."""

    transitionStarted = QtCore.pyqtSignal(object)
    transitionSettled = QtCore.pyqtSignal(object)

    def __init__(
        self,
        map_adapter: MapAdapter,
        settings: Optional[MapSettings] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._log = logging.getLogger(__name__)
        self._map = map_adapter
        self._settings = settings or MapSettings()
        self._timeline = TimelineIndex(())
        self._target: Optional[CameraTarget] = None
        self._target_index: Optional[int] = None
        self._pending: Optional[Tuple[Optional[int], CameraTarget]] = None

        self._settle_timer = QtCore.QTimer(self)
        self._settle_timer.setSingleShot(True)
        self._settle_timer.setInterval(max(0, int(self._settings.transition_ms)))
        self._settle_timer.timeout.connect(self._on_settled)

    def set_timeline(self, timeline: TimelineIndex) -> None:
        self._timeline = timeline

    @property
    def target(self) -> Optional[CameraTarget]:
        return self._target

    def in_flight(self) -> bool:
        return self._settle_timer.isActive()

    def has_pending(self) -> bool:
        return self._pending is not None

    @QtCore.pyqtSlot(object, object)
    def on_focus_changed(self, _previous: Optional[int], new: Optional[int]) -> None:
        chapter = self._timeline.chapter(new)
        if chapter is None or chapter.coordinate is None:
            return
        coordinate = chapter.coordinate
        self._dispatch(chapter.index, (coordinate.lat, coordinate.lng, chapter.zoom))

    def reset_view(self) -> None:
        settings = self._settings
        self._dispatch(None, (settings.initial_lat, settings.initial_lng, settings.initial_zoom))

    def flush_pending(self) -> None:
        if self._pending is None:
            return
        index, target = self._pending
        self._pending = None
        self._dispatch(index, target)

    def cancel(self) -> None:
        self._pending = None
        if self._settle_timer.isActive():
            self._settle_timer.stop()

    def _dispatch(self, index: Optional[int], target: CameraTarget) -> None:
        if not self._map.is_ready():
            self._log.debug("ViewportDriver: map not ready, deferring chapter=%s", index)
            self._pending = (index, target)
            return
        self._pending = None
        if self._settle_timer.isActive():
            self._settle_timer.stop()
            try:
                self._map.stop_transition()
            except AdapterNotReady as exc:
                self._log.warning("ViewportDriver: could not stop transition: %s", exc)
            self._log.debug("ViewportDriver: superseding transition to chapter=%s", self._target_index)
        lat, lng, zoom = target
        try:
            self._map.transition_to(lat, lng, zoom)
        except AdapterNotReady as exc:
            self._log.warning("ViewportDriver: transition rejected, deferring: %s", exc)
            self._pending = (index, target)
            return
        self._target = target
        self._target_index = index
        self._settle_timer.start()
        self.transitionStarted.emit(index)

    def _on_settled(self) -> None:
        self._log.debug("ViewportDriver: settled on chapter=%s", self._target_index)
        self.transitionSettled.emit(self._target_index)
