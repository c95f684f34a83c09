# src/player/player.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from PySide6.QtCore import QObject, Signal, QUrl
from PySide6.QtMultimedia import QMediaPlayer, QAudioOutput

class PlayerStatus(Enum):
    STOPPED = auto()
    PLAYING = auto()
    PAUSED = auto()

@dataclass
class NowPlaying:
    item_id: str
    title: str
    url: str

class Player(QObject):
    """
    Streams a finished song straight from its audio URL for a quick preview.
    Nothing is written to disk; downloads go through the retriever.
    """
    statusChanged = Signal(object)      # PlayerStatus
    trackChanged = Signal(object)       # NowPlaying | None
    errorOccurred = Signal(str)

    def __init__(self):
        super().__init__()

        self.status = PlayerStatus.STOPPED
        self.track: NowPlaying | None = None

        self.audio = QAudioOutput()
        self.media = QMediaPlayer()
        self.media.setAudioOutput(self.audio)
        self.audio.setVolume(0.7)

        self.media.playbackStateChanged.connect(self._on_state_changed)
        self.media.mediaStatusChanged.connect(self._on_media_status)
        self.media.errorOccurred.connect(self._on_error)

    def _set_status(self, new_status: PlayerStatus) -> None:
        if self.status != new_status:
            self.status = new_status
            self.statusChanged.emit(self.status)

    def _on_state_changed(self, state) -> None:
        if state == QMediaPlayer.PlayingState:
            self._set_status(PlayerStatus.PLAYING)
        elif state == QMediaPlayer.PausedState:
            self._set_status(PlayerStatus.PAUSED)
        else:
            self._set_status(PlayerStatus.STOPPED)

    def _on_media_status(self, status) -> None:
        if status == QMediaPlayer.EndOfMedia:
            self._set_status(PlayerStatus.STOPPED)

    def _on_error(self, _error, message: str = "") -> None:
        self.errorOccurred.emit(message or self.media.errorString())

    def play_url(self, url: str, meta: NowPlaying | None = None) -> None:
        self.track = meta
        self.trackChanged.emit(self.track)
        self.media.setSource(QUrl(url))
        self.media.play()

    def toggle_play_pause(self) -> None:
        if self.media.playbackState() == QMediaPlayer.PlayingState:
            self.media.pause()
        else:
            self.media.play()

    def stop(self) -> None:
        self.media.stop()
        self.track = None
        self.trackChanged.emit(None)
