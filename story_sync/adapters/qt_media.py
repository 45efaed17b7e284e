"""QMediaPlayer-backed PlayerAdapter.

Not re-exported from ``story_sync.adapters`` because QtMultimedia is an
optional part of some PyQt5 builds; import it as
``from story_sync.adapters.qt_media import MediaPlayerAdapter``.
"""

from __future__ import annotations

from typing import Optional
import logging

from PyQt5 import QtCore, QtMultimedia

from ..errors import AdapterNotReady
from ..model.entities import PlayerState
from ..model.settings import PlaybackSettings
from .base import PlayerAdapter

_READY_STATUSES = {
    QtMultimedia.QMediaPlayer.LoadedMedia,
    QtMultimedia.QMediaPlayer.BufferingMedia,
    QtMultimedia.QMediaPlayer.BufferedMedia,
    QtMultimedia.QMediaPlayer.EndOfMedia,
}


def map_player_state(state: int, status: int) -> PlayerState:
    if state == QtMultimedia.QMediaPlayer.PlayingState:
        return PlayerState.PLAYING
    if state == QtMultimedia.QMediaPlayer.StoppedState and status == QtMultimedia.QMediaPlayer.EndOfMedia:
        return PlayerState.ENDED
    return PlayerState.PAUSED


class MediaPlayerAdapter(PlayerAdapter):
    """PlayerAdapter over a QMediaPlayer.

    QMediaPlayer has no seek notification, so a position jump larger than
    ``seek_jump_ms`` beyond what the elapsed wall time explains is reported
    as a user seek.
    """

    def __init__(
        self,
        player: Optional[QtMultimedia.QMediaPlayer] = None,
        seek_jump_ms: int = 1500,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._log = logging.getLogger(__name__)
        self._player = player or QtMultimedia.QMediaPlayer(self)
        self._seek_jump_ms = seek_jump_ms
        self._last_position: int = self._player.position()
        self._clock = QtCore.QElapsedTimer()
        self._clock.start()
        self._last_state: Optional[PlayerState] = None

        self._player.stateChanged.connect(self._on_state_changed)
        self._player.positionChanged.connect(self._on_position_changed)
        self._player.error.connect(self._on_error)

    @classmethod
    def from_settings(
        cls,
        settings: PlaybackSettings,
        player: Optional[QtMultimedia.QMediaPlayer] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> "MediaPlayerAdapter":
        return cls(player, settings.seek_jump_ms, parent)

    @property
    def seek_jump_ms(self) -> int:
        return self._seek_jump_ms

    @property
    def media_player(self) -> QtMultimedia.QMediaPlayer:
        return self._player

    def is_ready(self) -> bool:
        return self._player.mediaStatus() in _READY_STATUSES

    def get_current_time(self) -> float:
        return self._player.position() / 1000.0

    def seek_to(self, seconds: float) -> None:
        if not self._player.isSeekable():
            raise AdapterNotReady("player", "media is not seekable")
        position = max(0, int(round(seconds * 1000)))
        self._player.setPosition(position)
        self._last_position = position
        self._clock.restart()
        self.seeked.emit(position / 1000.0)

    def play(self) -> None:
        if not self.is_ready():
            raise AdapterNotReady("player", "no media loaded")
        self._player.play()

    def _on_state_changed(self, state: int) -> None:
        mapped = map_player_state(state, self._player.mediaStatus())
        if mapped == self._last_state:
            return
        self._last_state = mapped
        self._last_position = self._player.position()
        self._clock.restart()
        self.stateChanged.emit(mapped.value)

    def _on_position_changed(self, position: int) -> None:
        elapsed = self._clock.restart()
        expected = self._last_position
        if self._player.state() == QtMultimedia.QMediaPlayer.PlayingState:
            rate = self._player.playbackRate() or 1.0
            expected += int(elapsed * rate)
        self._last_position = position
        if abs(position - expected) > self._seek_jump_ms:
            self._log.debug("MediaPlayerAdapter: position jump %s -> %s treated as seek", expected, position)
            self.seeked.emit(position / 1000.0)

    def _on_error(self, _error: int) -> None:
        message = self._player.errorString() or "media error"
        self._log.warning("MediaPlayerAdapter: %s", message)
        self.errorOccurred.emit(message)
