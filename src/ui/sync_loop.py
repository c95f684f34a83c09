# ui/sync_loop.py
from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer, Signal

from ui.workers.library_sync_worker import LibrarySyncWorker

logger = logging.getLogger(__name__)


class SyncLoop(QObject):
    """
    Explicitly triggered library refresh: initial load, the Refresh button and
    the delayed refresh after a submission. There is no periodic polling.

    Overlapping refreshes are not coordinated; whichever finishes last wins.
    """

    refreshed = Signal(int)           # item count
    failed = Signal(str)              # message
    loading_changed = Signal(bool)

    def __init__(self, repository, parent=None):
        super().__init__(parent)
        self.repository = repository
        self._workers: set[LibrarySyncWorker] = set()
        self._in_flight = 0

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def refresh(self) -> None:
        worker = LibrarySyncWorker(self.repository)
        worker.finished_signal.connect(self._on_fetched)
        self._workers.add(worker)
        worker.finished.connect(lambda w=worker: self._release(w))

        self._set_in_flight(self._in_flight + 1)
        worker.start()

    def refresh_later(self, delay_s: float) -> None:
        QTimer.singleShot(max(0, int(delay_s * 1000)), self.refresh)

    def _on_fetched(self, ok: bool, items, msg: str) -> None:
        self._set_in_flight(self._in_flight - 1)
        if not ok:
            # cached items stay as they were
            logger.warning("Library refresh failed: %s", msg)
            self.failed.emit(msg)
            return
        self.repository.replace(items)
        self.refreshed.emit(len(items))

    def _release(self, worker: LibrarySyncWorker) -> None:
        self._workers.discard(worker)
        worker.deleteLater()

    def _set_in_flight(self, n: int) -> None:
        was_loading = self.loading
        self._in_flight = max(0, n)
        if was_loading != self.loading:
            self.loading_changed.emit(self.loading)
