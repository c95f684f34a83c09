from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QLabel, QPushButton, QLineEdit, QHBoxLayout,
    QSplitter, QScrollArea, QButtonGroup, QFileDialog, QToolButton, QStyle,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QShortcut, QKeySequence

from core.models import GenerationMode
from player.player import NowPlaying, PlayerStatus
from ui.session_controller import SessionController
from ui.widgets.item_list_widget import ItemListWidget
from ui.widgets.job_form_widget import JobFormList
from ui.widgets.toast import ToastManager


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("Song Generator")
        self.resize(1200, 720)
        self.app_state = app_state
        self.controller = SessionController(app_state, self)

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        self.toasts = ToastManager(self)
        self.app_state.notification.connect(self._on_notify)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self._build_generator_panel())
        splitter.addWidget(self._build_library_panel())
        splitter.setStretchFactor(0, 2)
        splitter.setStretchFactor(1, 3)
        self.layout.addWidget(splitter)

        # --- Controller signals ---
        self.controller.items_changed.connect(self._update_library_controls)
        self.controller.selection_changed.connect(self._update_library_controls)
        self.controller.generating_changed.connect(self._on_generating_changed)
        self.controller.loading_changed.connect(self._on_loading_changed)
        self.controller.downloading_changed.connect(self._update_library_controls)
        self.controller.download_progress.connect(self._on_download_progress)

        # --- Player ---
        if self.app_state.player:
            self.app_state.player.trackChanged.connect(self._on_player_track_changed)
            self.app_state.player.statusChanged.connect(self._on_player_status_changed)
            self.app_state.player.errorOccurred.connect(
                lambda msg: self.app_state.notify(f"Playback failed: {msg}", "error")
            )
        QShortcut(QKeySequence("Ctrl+R"), self, activated=self.controller.refresh)

        self._update_library_controls()
        self.show_queued_notifications()

        # initial load
        self.controller.load()

    # ------------------ layout ------------------
    def _build_generator_panel(self) -> QWidget:
        panel = QWidget()
        layout = QVBoxLayout(panel)

        title = QLabel("Song Generator")
        title.setObjectName("Title")
        layout.addWidget(title)

        # --- Mode toggle ---
        mode_bar = QHBoxLayout()
        self.btn_simple = QPushButton("Simple")
        self.btn_custom = QPushButton("Custom")
        self.mode_group = QButtonGroup(self)
        for btn, mode in ((self.btn_simple, GenerationMode.SIMPLE), (self.btn_custom, GenerationMode.CUSTOM)):
            btn.setCheckable(True)
            btn.setProperty("mode", mode.value)
            self.mode_group.addButton(btn)
            mode_bar.addWidget(btn)
        self.btn_simple.setChecked(True)
        self.mode_group.buttonClicked.connect(self._on_mode_clicked)
        layout.addLayout(mode_bar)

        # --- Job forms ---
        self.job_forms = JobFormList(max_jobs=self.app_state.config.max_jobs)
        self.job_forms.countChanged.connect(self._update_generate_controls)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.job_forms)
        layout.addWidget(scroll, 1)

        self.btn_add = QPushButton("+ Add Another Song")
        self.btn_add.clicked.connect(self.job_forms.add_form)
        layout.addWidget(self.btn_add)

        self.btn_generate = QPushButton()
        self.btn_generate.setObjectName("Generate")
        self.btn_generate.clicked.connect(self.generate_all)
        layout.addWidget(self.btn_generate)

        self._update_generate_controls()
        return panel

    def _build_library_panel(self) -> QWidget:
        panel = QWidget()
        layout = QVBoxLayout(panel)

        self.search_box = QLineEdit()
        self.search_box.setPlaceholderText("Search songs by title or style... (e.g., chill)")
        self.search_box.textChanged.connect(self.controller.set_query)
        layout.addWidget(self.search_box)

        bar = QHBoxLayout()
        self.lbl_count = QLabel()
        bar.addWidget(self.lbl_count)
        bar.addStretch(1)

        self.btn_download_selected = QPushButton()
        self.btn_download_selected.clicked.connect(self.controller.download_selected)
        self.btn_deselect = QPushButton("Deselect All")
        self.btn_deselect.clicked.connect(self.controller.clear_selection)
        self.btn_select_all = QPushButton("Select All")
        self.btn_select_all.clicked.connect(self.controller.select_all)
        for btn in (self.btn_download_selected, self.btn_deselect, self.btn_select_all):
            bar.addWidget(btn)

        self.btn_folder = QToolButton()
        self.btn_folder.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_DirOpenIcon))
        self.btn_folder.setToolTip("Download folder")
        self.btn_folder.clicked.connect(self.choose_download_dir)
        bar.addWidget(self.btn_folder)

        self.btn_refresh = QToolButton()
        self.btn_refresh.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_BrowserReload))
        self.btn_refresh.setToolTip("Refresh library")
        self.btn_refresh.clicked.connect(self.controller.refresh)
        bar.addWidget(self.btn_refresh)
        layout.addLayout(bar)

        self.item_list = ItemListWidget(self.controller)
        self.item_list.downloadItem.connect(self.controller.download_one)
        self.item_list.playItem.connect(self.play_item)
        layout.addWidget(self.item_list, 1)

        # --- Preview strip ---
        preview = QHBoxLayout()
        self.lbl_now_playing = QLabel("")
        self.btn_play_pause = QToolButton()
        self.btn_play_pause.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_MediaPause))
        self.btn_stop = QToolButton()
        self.btn_stop.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_MediaStop))
        if self.app_state.player:
            self.btn_play_pause.clicked.connect(self.app_state.player.toggle_play_pause)
            self.btn_stop.clicked.connect(self.app_state.player.stop)
        preview.addWidget(self.lbl_now_playing, 1)
        preview.addWidget(self.btn_play_pause)
        preview.addWidget(self.btn_stop)
        layout.addLayout(preview)
        self._on_player_track_changed(None)

        return panel

    # ------------------ generation ------------------
    def _on_mode_clicked(self, btn):
        mode = GenerationMode(btn.property("mode"))
        self.controller.set_mode(mode)
        self.job_forms.set_mode(mode)

    def generate_all(self):
        self.controller.generate(self.job_forms.job_specs())

    def _on_generating_changed(self, busy: bool):
        self.job_forms.set_busy(busy)
        self._update_generate_controls()

    def _update_generate_controls(self, *_):
        busy = self.controller.generating
        n = self.job_forms.count()
        self.btn_generate.setText("Generating..." if busy else f"Generate {n} Song{'s' if n > 1 else ''}")
        self.btn_generate.setEnabled(not busy)
        self.btn_add.setVisible(self.job_forms.can_add())
        self.btn_add.setEnabled(not busy)
        for btn in (self.btn_simple, self.btn_custom):
            btn.setEnabled(not busy)

    # ------------------ library ------------------
    def _update_library_controls(self, *_):
        n_selected = len(self.controller.selection)
        self.lbl_count.setText(f"Your Songs ({len(self.controller.filtered_items())})")

        self.btn_download_selected.setText(f"Download Selected ({n_selected})")
        self.btn_download_selected.setVisible(n_selected > 0)
        self.btn_download_selected.setEnabled(not self.controller.downloading)
        self.btn_deselect.setVisible(n_selected > 0)
        self.btn_select_all.setVisible(self.controller.can_select_all())

    def _on_loading_changed(self, loading: bool):
        self.btn_refresh.setEnabled(not loading)
        if loading:
            self.statusBar().showMessage("Loading songs…")
        else:
            self.statusBar().clearMessage()

    def _on_download_progress(self, done: int, total: int):
        self.statusBar().showMessage(f"Downloading… {done}/{total}", 3000)

    def choose_download_dir(self):
        path = QFileDialog.getExistingDirectory(
            self, "Select Download Folder", self.controller.retriever.download_dir
        )
        if not path:
            return
        # session only; nothing is persisted
        self.controller.retriever.download_dir = path
        self.app_state.notify(f"Downloads will be saved to {path}", "info")

    # ------------------ preview ------------------
    def play_item(self, item_id: str):
        player = self.app_state.player
        if not player:
            self.app_state.notify("Audio preview is not available.", "warning")
            return
        url = self.controller.preview_url(item_id)
        if url is None:
            return
        item = self.controller.repository.get(item_id)
        player.play_url(url, NowPlaying(item_id=item.id, title=item.display_title, url=url))

    def _on_player_track_changed(self, now_playing):
        has_track = now_playing is not None
        self.lbl_now_playing.setText(f"▶ {now_playing.title}" if has_track else "")
        self.btn_play_pause.setVisible(has_track)
        self.btn_stop.setVisible(has_track)

    def _on_player_status_changed(self, status):
        icon = QStyle.StandardPixmap.SP_MediaPause if status == PlayerStatus.PLAYING else QStyle.StandardPixmap.SP_MediaPlay
        self.btn_play_pause.setIcon(self.style().standardIcon(icon))

    # ------------------ notifications ------------------
    def _on_notify(self, n):
        # n is core.state.Notify
        kind = (getattr(n, "notify_type", "info") or "info").lower()
        if kind == "warn":
            kind = "warning"

        msg = getattr(n, "message", "") or ""
        if not msg:
            return

        self.toasts.show_toast(msg, notify_type=kind, timeout_ms=3000)

    def show_queued_notifications(self):
        for n in self.app_state.queued_notifications:
            self._on_notify(n)
        self.app_state.queued_notifications.clear()
