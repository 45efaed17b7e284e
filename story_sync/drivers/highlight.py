from __future__ import annotations

from typing import Iterable, Mapping, Optional
import logging

from PyQt5 import QtCore

from ..adapters.base import MapAdapter, MarkerHandle, PanelSink


def apply_highlight(
    new_index: Optional[int],
    indices: Iterable[int],
    markers: Mapping[int, MarkerHandle],
    panels: Optional[PanelSink] = None,
) -> None:
    """Activate the marker/panel pair for ``new_index`` and deactivate all others.

    Chapters without a marker still get their panel toggled.
    """
    for index in indices:
        marker = markers.get(index)
        if index == new_index:
            if marker is not None:
                marker.activate()
            if panels is not None:
                panels.activate(index)
        else:
            if marker is not None:
                marker.deactivate()
            if panels is not None:
                panels.deactivate(index)


class HighlightDriver(QtCore.QObject):
    def __init__(
        self,
        map_adapter: MapAdapter,
        panels: Optional[PanelSink] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._log = logging.getLogger(__name__)
        self._map = map_adapter
        self._panels = panels
        self._count = 0

    def set_chapter_count(self, count: int) -> None:
        self._count = max(0, count)

    @QtCore.pyqtSlot(object, object)
    def on_focus_changed(self, _previous: Optional[int], new: Optional[int]) -> None:
        self.apply(new)

    def apply(self, new_index: Optional[int]) -> None:
        indices = set(range(self._count))
        indices.update(self._map.markers.keys())
        apply_highlight(new_index, sorted(indices), self._map.markers, self._panels)
        self._log.debug("HighlightDriver: active chapter=%s", new_index)
