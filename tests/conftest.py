"""Shared fixtures and fake adapters for story_sync tests."""

import os
from typing import Dict, List, Optional, Tuple

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt5 import QtWidgets

from story_sync.adapters.base import MapAdapter, PanelSink, PlayerAdapter, ScrollContainerAdapter
from story_sync.errors import AdapterNotReady
from story_sync.model.entities import ChapterExtent


class FakePlayer(PlayerAdapter):
    def __init__(self) -> None:
        super().__init__()
        self.ready = True
        self.current_time = 0.0
        self.seeks: List[float] = []
        self.reject_seeks = False

    def is_ready(self) -> bool:
        return self.ready

    def get_current_time(self) -> float:
        return self.current_time

    def seek_to(self, seconds: float) -> None:
        if self.reject_seeks:
            raise AdapterNotReady("player", "seek rejected")
        self.seeks.append(seconds)
        self.current_time = seconds
        self.seeked.emit(float(seconds))

    def play(self) -> None:
        self.stateChanged.emit("playing")


class FakeMarker:
    def __init__(self, index: int) -> None:
        self.index = index
        self.active = False

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False


class FakeMap(MapAdapter):
    def __init__(self, marker_indices=()) -> None:
        self.ready = True
        self.transitions: List[Tuple[float, float, int]] = []
        self.stops = 0
        self._markers: Dict[int, FakeMarker] = {i: FakeMarker(i) for i in marker_indices}

    @property
    def markers(self) -> Dict[int, FakeMarker]:
        return self._markers

    def is_ready(self) -> bool:
        return self.ready

    def transition_to(self, lat: float, lng: float, zoom: int) -> None:
        self.transitions.append((lat, lng, zoom))

    def stop_transition(self) -> None:
        self.stops += 1


class FakePanels(PanelSink):
    def __init__(self) -> None:
        self.active: Dict[int, bool] = {}

    def activate(self, index: int) -> None:
        self.active[index] = True

    def deactivate(self, index: int) -> None:
        self.active[index] = False

    def active_indices(self) -> List[int]:
        return sorted(i for i, on in self.active.items() if on)


class FakeContainer(ScrollContainerAdapter):
    def __init__(self, extents: Optional[List[ChapterExtent]] = None, height: float = 100.0) -> None:
        super().__init__()
        self.offset = 0.0
        self.height = height
        self.table: List[ChapterExtent] = list(extents or [])
        self.measured = 0

    def scroll_offset(self) -> float:
        return self.offset

    def visible_height(self) -> float:
        return self.height

    def extents(self) -> List[ChapterExtent]:
        self.measured += 1
        return list(self.table)

    def scroll_to(self, offset: float) -> None:
        self.offset = offset
        self.scrolled.emit(float(offset))


@pytest.fixture(scope="session")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture()
def player(qapp):
    return FakePlayer()


@pytest.fixture()
def container(qapp):
    # Ten chapters stacked 100px apart in a 100px viewport.
    return FakeContainer([ChapterExtent(i * 100.0, 100.0) for i in range(10)], height=100.0)


@pytest.fixture()
def records():
    return [
        {"title": "Harbour", "timestamp": "", "latitude": "10", "longitude": "10"},
        {"title": "Market", "timestamp": "0:05", "latitude": "20", "longitude": "20", "zoom": "12"},
        {"title": "Bridge", "timestamp": "0:15", "latitude": "30", "longitude": "30"},
    ]
