# ui/workers/generation_worker.py
from __future__ import annotations

import logging

from PySide6.QtCore import QThread, Signal

from core.models import GenerationMode, JobSpec

logger = logging.getLogger(__name__)


class GenerationWorker(QThread):
    finished_signal = Signal(bool, object, str)   # ok, SubmissionResult | None, message

    def __init__(self, submitter, jobs: list[JobSpec], mode: GenerationMode, parent=None):
        super().__init__(parent)
        self.submitter = submitter
        self.jobs = list(jobs)
        self.mode = mode

    def run(self):
        # the controller waits for exactly one emit, so every exit path reports
        try:
            result = self.submitter.submit(self.jobs, self.mode)
        except Exception as e:
            logger.exception("Generation batch crashed")
            self.finished_signal.emit(False, None, str(e))
            return
        self.finished_signal.emit(True, result, "")
