from __future__ import annotations

from typing import Optional
import logging

from PyQt5 import QtCore

from ..adapters.base import PlayerAdapter
from ..errors import AdapterNotReady
from ..model.entities import PlayerState
from ..model.timeline import TimelineIndex


class PlaybackPoller(QtCore.QObject):
    """Samples the player on a fixed interval while it reports "playing"."""

    playbackAdvance = QtCore.pyqtSignal(object)
    activeChanged = QtCore.pyqtSignal(bool)

    def __init__(
        self,
        player: PlayerAdapter,
        interval_ms: int = 500,
        epsilon: float = 0.1,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._log = logging.getLogger(__name__)
        self._player = player
        self._timeline = TimelineIndex(())
        self._epsilon = epsilon
        self._last_reported: Optional[int] = None

        self._timer = QtCore.QTimer(self)
        self._timer.setTimerType(QtCore.Qt.PreciseTimer)
        self._timer.setInterval(max(1, int(interval_ms)))
        self._timer.timeout.connect(self.sample)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def set_timeline(self, timeline: TimelineIndex) -> None:
        self._timeline = timeline
        self._last_reported = None

    def is_active(self) -> bool:
        return self._timer.isActive()

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def last_reported(self) -> Optional[int]:
        return self._last_reported

    def start(self) -> None:
        if self._timer.isActive():
            return
        self._last_reported = None
        self._timer.start()
        self._log.debug("PlaybackPoller: started interval=%sms", self._timer.interval())
        self.activeChanged.emit(True)
        self.sample()

    def stop(self) -> None:
        if not self._timer.isActive():
            self._last_reported = None
            return
        self._timer.stop()
        self._last_reported = None
        self._log.debug("PlaybackPoller: stopped")
        self.activeChanged.emit(False)

    # ------------------------------------------------------------------
    # Player notifications
    # ------------------------------------------------------------------
    @QtCore.pyqtSlot(str)
    def on_player_state(self, state: str) -> None:
        try:
            parsed = PlayerState(state)
        except ValueError:
            self._log.warning("PlaybackPoller: unknown player state %r treated as paused", state)
            parsed = PlayerState.PAUSED
        if parsed is PlayerState.PLAYING:
            self.start()
        else:
            self.stop()

    @QtCore.pyqtSlot(float)
    def on_seek(self, seconds: float) -> None:
        if not self._timer.isActive():
            return
        self._log.debug("PlaybackPoller: seek to %.2fs, sampling out of band", seconds)
        self.sample()

    @QtCore.pyqtSlot(str)
    def on_player_error(self, message: str) -> None:
        self._log.warning("PlaybackPoller: player error (%s), pausing sync", message)
        self.stop()

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------
    @QtCore.pyqtSlot()
    def sample(self) -> None:
        if not self._player.is_ready():
            self._log.debug("PlaybackPoller: player not ready, skipping sample")
            return
        try:
            seconds = float(self._player.get_current_time())
        except AdapterNotReady as exc:
            self._log.debug("PlaybackPoller: %s", exc)
            return
        chapter = self._timeline.lookup(seconds, self._epsilon)
        resolved = chapter.index if chapter is not None else None
        if resolved == self._last_reported:
            return
        self._last_reported = resolved
        self._log.debug("PlaybackPoller: t=%.2fs -> chapter=%s", seconds, resolved)
        self.playbackAdvance.emit(resolved)
