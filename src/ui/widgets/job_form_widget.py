# ui/widgets/job_form_widget.py
from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from core.models import GenerationMode, JobSpec


class JobForm(QFrame):
    """One song request. Which fields are visible depends on the mode."""

    removeRequested = Signal(object)   # JobForm

    def __init__(self, index: int, parent=None):
        super().__init__(parent)
        self.setObjectName("JobForm")

        root = QVBoxLayout(self)
        root.setContentsMargins(10, 8, 10, 8)

        header = QHBoxLayout()
        self.lbl = QLabel()
        self.btn_remove = QPushButton("Remove")
        self.btn_remove.clicked.connect(lambda: self.removeRequested.emit(self))
        header.addWidget(self.lbl)
        header.addStretch(1)
        header.addWidget(self.btn_remove)
        root.addLayout(header)

        # simple mode
        self.prompt = QPlainTextEdit()
        self.prompt.setPlaceholderText("Describe your song...")
        self.prompt.setFixedHeight(70)
        root.addWidget(self.prompt)

        # custom mode
        self.lyrics = QPlainTextEdit()
        self.lyrics.setPlaceholderText("Write some lyrics...")
        self.lyrics.setFixedHeight(110)
        self.style = QLineEdit()
        self.style.setPlaceholderText("e.g., pop, rock, jazz")
        self.title = QLineEdit()
        self.title.setPlaceholderText("Song title")
        root.addWidget(self.lyrics)
        root.addWidget(self.style)
        root.addWidget(self.title)

        self.set_index(index)

    def set_index(self, index: int):
        self.lbl.setText(f"Song {index + 1}")

    def set_mode(self, mode: GenerationMode):
        custom = mode is GenerationMode.CUSTOM
        self.prompt.setVisible(not custom)
        self.lyrics.setVisible(custom)
        self.style.setVisible(custom)
        self.title.setVisible(custom)

    def job_spec(self) -> JobSpec:
        return JobSpec(
            title=self.title.text(),
            lyrics=self.lyrics.toPlainText(),
            style=self.style.text(),
            prompt=self.prompt.toPlainText(),
        )


class JobFormList(QWidget):
    """Between one and `max_jobs` job forms."""

    countChanged = Signal(int)

    def __init__(self, max_jobs: int = 10, parent=None):
        super().__init__(parent)
        self.max_jobs = max(1, int(max_jobs))
        self.mode = GenerationMode.SIMPLE
        self._forms: list[JobForm] = []

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self.add_form()

    def count(self) -> int:
        return len(self._forms)

    def can_add(self) -> bool:
        return len(self._forms) < self.max_jobs

    def add_form(self) -> JobForm | None:
        if not self.can_add():
            return None
        form = JobForm(len(self._forms), self)
        form.set_mode(self.mode)
        form.removeRequested.connect(self.remove_form)
        self._forms.append(form)
        self._layout.addWidget(form)
        self._sync()
        return form

    def remove_form(self, form: JobForm) -> bool:
        if len(self._forms) <= 1 or form not in self._forms:
            return False
        self._forms.remove(form)
        self._layout.removeWidget(form)
        form.deleteLater()
        self._sync()
        return True

    def forms(self) -> list[JobForm]:
        return list(self._forms)

    def set_mode(self, mode: GenerationMode):
        self.mode = GenerationMode(mode)
        for form in self._forms:
            form.set_mode(self.mode)

    def set_busy(self, busy: bool):
        for form in self._forms:
            form.setEnabled(not busy)

    def job_specs(self) -> list[JobSpec]:
        return [form.job_spec() for form in self._forms]

    def _sync(self):
        single = len(self._forms) == 1
        for i, form in enumerate(self._forms):
            form.set_index(i)
            form.btn_remove.setVisible(not single)
        self.countChanged.emit(len(self._forms))
