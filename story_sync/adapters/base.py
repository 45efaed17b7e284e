from __future__ import annotations

from typing import List, Mapping, Optional

from PyQt5 import QtCore

from ..model.entities import ChapterExtent


class PlayerAdapter(QtCore.QObject):
    """Video player seen by the poller and the arbiter.

    ``stateChanged`` carries one of ``"playing"``, ``"paused"`` or ``"ended"``.
    ``seeked`` fires for every seek, whether requested through ``seek_to`` or
    made by the user on the player itself.
    """

    stateChanged = QtCore.pyqtSignal(str)
    seeked = QtCore.pyqtSignal(float)
    errorOccurred = QtCore.pyqtSignal(str)

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)

    def is_ready(self) -> bool:
        raise NotImplementedError

    def get_current_time(self) -> float:
        raise NotImplementedError

    def seek_to(self, seconds: float) -> None:
        raise NotImplementedError

    def play(self) -> None:
        raise NotImplementedError


class MarkerHandle:
    index: int

    def activate(self) -> None:
        raise NotImplementedError

    def deactivate(self) -> None:
        raise NotImplementedError


class MapAdapter:
    """Map camera and chapter markers. Chapters with hidden markers are absent from ``markers``."""

    @property
    def markers(self) -> Mapping[int, MarkerHandle]:
        raise NotImplementedError

    def is_ready(self) -> bool:
        raise NotImplementedError

    def transition_to(self, lat: float, lng: float, zoom: int) -> None:
        raise NotImplementedError

    def stop_transition(self) -> None:
        raise NotImplementedError


class PanelSink:
    def activate(self, index: int) -> None:
        raise NotImplementedError

    def deactivate(self, index: int) -> None:
        raise NotImplementedError


class ScrollContainerAdapter(QtCore.QObject):
    scrolled = QtCore.pyqtSignal(float)
    layoutChanged = QtCore.pyqtSignal()

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)

    def scroll_offset(self) -> float:
        raise NotImplementedError

    def visible_height(self) -> float:
        raise NotImplementedError

    def extents(self) -> List[ChapterExtent]:
        raise NotImplementedError
