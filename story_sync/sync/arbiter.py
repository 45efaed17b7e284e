from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import Callable, Deque, Optional, Tuple
import logging

from PyQt5 import QtCore

from ..adapters.base import PlayerAdapter
from ..errors import AdapterNotReady
from ..model.entities import Authority, FocusState
from ..model.timeline import TimelineIndex


class FocusArbiter(QtCore.QObject):
    """Single owner of the session's FocusState.

    Clicks are always honoured. Playback advances are honoured only while
    playback is driving, scroll focus only while it is not. Inputs that arrive
    while a ``focusChanged`` dispatch is running are queued and handled once
    the current dispatch has returned, so no listener sees a half-applied state.
    """

    focusChanged = QtCore.pyqtSignal(object, object)
    playbackDrivingChanged = QtCore.pyqtSignal(bool)

    def __init__(
        self,
        player: Optional[PlayerAdapter] = None,
        epsilon: float = 0.1,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._log = logging.getLogger(__name__)
        self._player = player
        self._epsilon = epsilon
        self._timeline = TimelineIndex(())
        self._state = FocusState()
        # Wrapped so that a held "no chapter" result differs from "no hold".
        self._click_hold: Optional[Tuple[Optional[int]]] = None
        self._pending: Deque[Callable[[], None]] = deque()
        self._dispatching: bool = False

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------
    @property
    def state(self) -> FocusState:
        return self._state

    @property
    def active_index(self) -> Optional[int]:
        return self._state.active_index

    def set_timeline(self, timeline: TimelineIndex) -> None:
        self._submit(lambda: self._handle_timeline(timeline))

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------
    @QtCore.pyqtSlot(int)
    def click_focus(self, index: int) -> None:
        self._submit(lambda: self._handle_click(index))

    @QtCore.pyqtSlot(object)
    def playback_advance(self, index: Optional[int]) -> None:
        self._submit(lambda: self._handle_playback(index))

    @QtCore.pyqtSlot(object)
    def scroll_focus(self, index: Optional[int]) -> None:
        self._submit(lambda: self._handle_scroll(index))

    @QtCore.pyqtSlot(bool)
    def set_playback_driving(self, driving: bool) -> None:
        self._submit(lambda: self._handle_driving(bool(driving)))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _submit(self, handler: Callable[[], None]) -> None:
        self._pending.append(handler)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._pending:
                self._pending.popleft()()
        finally:
            self._dispatching = False
            self._pending.clear()

    def _valid(self, index: Optional[int], source: str) -> bool:
        if index is None or self._timeline.chapter(index) is not None:
            return True
        self._log.warning("FocusArbiter: ignoring %s focus for unknown chapter %s", source, index)
        return False

    def _handle_timeline(self, timeline: TimelineIndex) -> None:
        self._timeline = timeline
        self._click_hold = None
        previous = self._state.active_index
        self._state = replace(self._state, active_index=None)
        if previous is not None:
            self._log.debug("FocusArbiter: timeline replaced, focus %s -> None", previous)
            self.focusChanged.emit(previous, None)

    def _handle_click(self, index: int) -> None:
        if index is None or not self._valid(index, "click"):
            return
        self._click_hold = None
        self._apply(index, Authority.CLICK)
        chapter = self._timeline.chapter(index)
        if chapter is None or chapter.timestamp is None or self._player is None:
            return
        if not self._player.is_ready():
            self._log.debug("FocusArbiter: player not ready, click on %s will not seek", index)
            return
        # The seek's own sample may land on another chapter (untimed-on-map or tied
        # timestamps); hold the click against exactly that result.
        expected = self._timeline.lookup(chapter.timestamp, self._epsilon)
        expected_index = expected.index if expected is not None else None
        if expected_index != index:
            self._click_hold = (expected_index,)
        try:
            self._player.seek_to(chapter.timestamp)
        except AdapterNotReady as exc:
            self._click_hold = None
            self._log.warning("FocusArbiter: seek to %.2fs rejected: %s", chapter.timestamp, exc)

    def _handle_playback(self, index: Optional[int]) -> None:
        if not self._state.playback_is_driving:
            self._log.debug("FocusArbiter: playback advance %s ignored, playback not driving", index)
            return
        if self._click_hold is not None:
            if (index,) == self._click_hold:
                self._log.debug("FocusArbiter: playback advance %s held by click", index)
                return
            self._click_hold = None
        if self._valid(index, "playback"):
            self._apply(index, Authority.PLAYBACK)

    def _handle_scroll(self, index: Optional[int]) -> None:
        if self._state.playback_is_driving:
            return
        if self._valid(index, "scroll"):
            if index != self._state.active_index:
                self._click_hold = None
            self._apply(index, Authority.SCROLL)

    def _handle_driving(self, driving: bool) -> None:
        if self._state.playback_is_driving == driving:
            return
        self._state = replace(self._state, playback_is_driving=driving)
        self._log.debug("FocusArbiter: playback driving=%s", driving)
        self.playbackDrivingChanged.emit(driving)

    def _apply(self, index: Optional[int], authority: Authority) -> None:
        previous = self._state.active_index
        if previous == index:
            if self._state.authority is not authority:
                self._state = replace(self._state, authority=authority)
            return
        self._state = replace(self._state, active_index=index, authority=authority)
        self._log.debug("FocusArbiter: focus %s -> %s (%s)", previous, index, authority.value)
        self.focusChanged.emit(previous, index)
