# ui/workers/library_sync_worker.py
from PySide6.QtCore import QThread, Signal

from core.errors import RefreshTransportError


class LibrarySyncWorker(QThread):
    finished_signal = Signal(bool, object, str)    # ok, list[Item] | None, message

    def __init__(self, repository, parent=None):
        super().__init__(parent)
        self.repository = repository

    def run(self):
        # IMPORTANT: only read here; the repository is replaced on the GUI thread
        try:
            items = self.repository.fetch()
        except RefreshTransportError as e:
            self.finished_signal.emit(False, None, str(e))
            return
        self.finished_signal.emit(True, items, f"Loaded {len(items)} song(s).")
