import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

from PySide6.QtCore import QStandardPaths
from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.config import AppConfig
from core.generation_client import GenerationClient
from core.state import AppState, Notify
from player.player import Player
from ui.main_window import MainWindow

logger = logging.getLogger("songgen")

def configure_logging() -> None:
    level = logging.DEBUG if os.getenv("SONGGEN_DEBUG") == "1" else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

def get_download_dir() -> str:
    base = QStandardPaths.writableLocation(QStandardPaths.DownloadLocation)
    if not base:
        base = str(Path.home() / "Downloads")
    return os.path.join(base, "SongGenerator")

def init_app_state() -> AppState:
    config = AppConfig.from_env()
    if not config.download_dir:
        config = replace(config, download_dir=get_download_dir())

    app_state = AppState(config)
    app_state.client = GenerationClient(
        base_url=config.base_url,
        timeout=config.request_timeout_s,
        download_timeout=config.download_timeout_s,
    )
    logger.info("Generation service: %s, downloads: %s", config.base_url, config.download_dir)

    try:
        app_state.player = Player()
    except Exception as e:
        app_state.player = None
        app_state.queued_notifications.append(
            Notify(message=f"Failed to initialize audio player: {e}", notify_type="error")
        )

    return app_state

def main() -> int:
    configure_logging()
    qt_app = QApplication(sys.argv)

    app_state = init_app_state()
    main_window = MainWindow(app_state)
    main_window.show()

    return qt_app.exec()

if __name__ == "__main__":
    raise SystemExit(main())
