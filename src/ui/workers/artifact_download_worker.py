# ui/workers/artifact_download_worker.py
from __future__ import annotations

import logging

from PySide6.QtCore import QThread, Signal

from core.models import Item

logger = logging.getLogger(__name__)


class ArtifactDownloadWorker(QThread):
    progress = Signal(int, int, object)            # done, total, RetrievalOutcome
    finished_signal = Signal(bool, object, str)    # ok, BatchRetrievalResult | None, message

    def __init__(self, retriever, items: list[Item], selected_ids: frozenset[str], parent=None):
        super().__init__(parent)
        self.retriever = retriever
        # snapshot: the GUI thread keeps mutating the live selection
        self.items = list(items)
        self.selected_ids = frozenset(selected_ids)

    def run(self):
        try:
            result = self.retriever.retrieve_batch(
                self.items,
                self.selected_ids,
                on_progress=lambda done, total, outcome: self.progress.emit(done, total, outcome),
            )
        except Exception as e:
            logger.exception("Batch download crashed")
            self.finished_signal.emit(False, None, str(e))
            return
        self.finished_signal.emit(True, result, "")


class SingleDownloadWorker(QThread):
    finished_signal = Signal(bool, object, str)    # ok, RetrievalOutcome | None, message

    def __init__(self, retriever, item: Item, parent=None):
        super().__init__(parent)
        self.retriever = retriever
        self.item = item

    def run(self):
        try:
            outcome = self.retriever.retrieve_one(self.item)
        except Exception as e:
            logger.exception("Download of %s crashed", self.item.display_title)
            self.finished_signal.emit(False, None, str(e))
            return
        self.finished_signal.emit(True, outcome, "")
