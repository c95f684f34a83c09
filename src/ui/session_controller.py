# ui/session_controller.py
from __future__ import annotations

import logging
from typing import Iterable

from PySide6.QtCore import QObject, Signal

from core.errors import NoValidJobs
from core.models import GenerationMode, Item, JobSpec
from library.repository import ItemRepository
from library.retriever import ArtifactRetriever
from library.search import filter_items
from library.selection import SelectionSet
from library.submitter import BatchJobSubmitter
from ui.sync_loop import SyncLoop
from ui.workers.artifact_download_worker import ArtifactDownloadWorker, SingleDownloadWorker
from ui.workers.generation_worker import GenerationWorker

logger = logging.getLogger(__name__)


class SessionController(QObject):
    """
    Owns the session state (library cache, selection, search query, mode and
    busy flags) and wires the user actions to the background workers.

    All state lives on the GUI thread. Workers only report results back
    through queued signals, so nothing here is touched concurrently.
    """

    items_changed = Signal()            # library or query changed
    selection_changed = Signal()
    generating_changed = Signal(bool)
    loading_changed = Signal(bool)
    downloading_changed = Signal(bool)
    submitted = Signal(object)          # SubmissionResult
    downloaded = Signal(object)         # BatchRetrievalResult
    download_progress = Signal(int, int)

    def __init__(self, app_state, parent=None):
        super().__init__(parent)
        self.app_state = app_state
        config = app_state.config

        self.repository = ItemRepository(app_state.client)
        self.selection = SelectionSet()
        self.submitter = BatchJobSubmitter(app_state.client)
        self.retriever = ArtifactRetriever(
            app_state.client,
            download_dir=config.download_dir,
            pacing_delay_s=config.pacing_delay_s,
            tag_files=config.tag_downloads,
        )

        self.mode = GenerationMode.SIMPLE
        self.search_query = ""
        self.generating = False
        self.downloading = False

        self.sync = SyncLoop(self.repository, self)
        self.sync.refreshed.connect(lambda _n: self.items_changed.emit())
        self.sync.failed.connect(self._on_refresh_failed)
        self.sync.loading_changed.connect(self.loading_changed.emit)

        self._workers: set = set()

    # ------------------ library ------------------
    @property
    def loading(self) -> bool:
        return self.sync.loading

    def load(self) -> None:
        self.sync.refresh()

    def refresh(self) -> None:
        self.sync.refresh()

    def set_query(self, query: str) -> None:
        self.search_query = query or ""
        self.items_changed.emit()

    def filtered_items(self) -> list[Item]:
        return filter_items(self.repository.items, self.search_query)

    def _on_refresh_failed(self, msg: str) -> None:
        self.app_state.notify(msg or "Failed to load songs.", "error")

    # ------------------ selection ------------------
    def toggle(self, item_id: str) -> None:
        self.selection.toggle(item_id)
        self.selection_changed.emit()

    def select_all(self) -> None:
        self.selection.select_all(self.filtered_items())
        self.selection_changed.emit()

    def clear_selection(self) -> None:
        self.selection.clear()
        self.selection_changed.emit()

    def can_select_all(self) -> bool:
        return len(self.selection) == 0 and any(i.is_retrievable for i in self.filtered_items())

    # ------------------ generation ------------------
    def set_mode(self, mode: GenerationMode) -> None:
        self.mode = GenerationMode(mode)

    def generate(self, jobs: Iterable[JobSpec]) -> bool:
        if self.generating:
            self.app_state.notify("A batch is already being submitted.", "warning")
            return False

        try:
            batch = self.submitter.prepare(jobs, self.mode)
        except NoValidJobs as e:
            self.app_state.notify(str(e), "warning")
            return False

        self._set_generating(True)
        worker = GenerationWorker(self.submitter, batch, self.mode)
        worker.finished_signal.connect(self._on_submitted)
        self._start(worker)
        return True

    def _on_submitted(self, ok: bool, result, msg: str) -> None:
        self._set_generating(False)
        if not ok:
            self.app_state.notify(msg or "Failed to start generating. Please try again.", "error")
            return
        if result.failed:
            logger.warning("%d of %d generation request(s) failed", result.failed, result.attempted)
        self.app_state.notify(f"Started generating {result.attempted} song(s)!", "success")
        self.submitted.emit(result)
        self.sync.refresh_later(self.app_state.config.settle_delay_s)

    def _set_generating(self, value: bool) -> None:
        self.generating = value
        self.generating_changed.emit(value)

    # ------------------ downloads ------------------
    def download_selected(self) -> bool:
        if self.downloading:
            self.app_state.notify("Downloads are already in progress.", "warning")
            return False

        self._set_downloading(True)
        # Whole library, not the filtered view: hidden selected songs still download.
        worker = ArtifactDownloadWorker(self.retriever, list(self.repository.items), self.selection.ids)
        worker.progress.connect(lambda done, total, _o: self.download_progress.emit(done, total))
        worker.finished_signal.connect(self._on_batch_downloaded)
        self._start(worker)
        return True

    def _on_batch_downloaded(self, ok: bool, result, msg: str) -> None:
        self._set_downloading(False)
        if not ok:
            self.app_state.notify(msg or "Download failed. Please try again.", "error")
            return
        self.app_state.notify(f"Downloaded {result.attempted} song(s)!", "success")
        self.downloaded.emit(result)

    def download_one(self, item_id: str) -> bool:
        item = self.repository.get(item_id)
        if item is None:
            return False
        worker = SingleDownloadWorker(self.retriever, item)
        worker.finished_signal.connect(self._on_single_downloaded)
        self._start(worker)
        return True

    def _on_single_downloaded(self, ok: bool, outcome, msg: str) -> None:
        if ok and outcome.ok:
            self.app_state.notify(f"Saved {outcome.path}", "success")
        else:
            self.app_state.notify("Download failed. Please try again.", "error")

    def _set_downloading(self, value: bool) -> None:
        self.downloading = value
        self.downloading_changed.emit(value)

    # ------------------ preview ------------------
    def preview_url(self, item_id: str) -> str | None:
        """Absolute URL to stream for a retrievable item, else None."""
        item = self.repository.get(item_id)
        if item is None or not item.is_retrievable:
            return None
        return self.app_state.client.resolve_url(item.audio_url)

    # ------------------ helpers ------------------
    def _start(self, worker) -> None:
        self._workers.add(worker)
        worker.finished.connect(lambda w=worker: self._release(w))
        worker.start()

    def _release(self, worker) -> None:
        self._workers.discard(worker)
        worker.deleteLater()
