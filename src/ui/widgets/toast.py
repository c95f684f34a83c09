from __future__ import annotations

from PySide6.QtCore import Qt, QTimer, QPoint
from PySide6.QtWidgets import QWidget, QFrame, QLabel, QHBoxLayout


def _colors(kind: str) -> tuple[str, str]:
    """
    Returns (bg, border) for a notify_type.
    """
    kind = (kind or "info").lower()
    return {
        "success": ("#052e1a", "#16a34a"),
        "warning": ("#2a1a05", "#f59e0b"),
        "error": ("#2a0a0a", "#ef4444"),
    }.get(kind, ("#0b1222", "#f97316"))


class Toast(QFrame):
    def __init__(self, message: str, kind: str, parent: QWidget):
        super().__init__(parent)
        bg, border = _colors(kind)
        self.setObjectName("Toast")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet(f"""
        QFrame#Toast {{ background: {bg}; border: 1px solid {border}; border-radius: 12px; }}
        QLabel {{ color: #e5e7eb; font-size: 12px; }}
        """)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 10, 12, 10)
        self.label = QLabel(message)
        self.label.setWordWrap(True)
        layout.addWidget(self.label)

    def mousePressEvent(self, event):
        # click to dismiss
        self.parent().dismiss(self)  # type: ignore[attr-defined]


class ToastManager(QWidget):
    """
    Stacks toasts in the top-right corner of the host window, newest on top.
    """
    MARGIN = 14
    SPACING = 8
    MAX_VISIBLE = 5

    def __init__(self, host: QWidget):
        super().__init__(host)
        self.host = host
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        self._toasts: list[Toast] = []
        self.hide()

    def show_toast(self, message: str, notify_type: str = "info", timeout_ms: int = 3000):
        toast = Toast(message, notify_type, self)
        toast.setFixedWidth(min(420, max(260, self.host.width() // 2)))
        self._toasts.insert(0, toast)

        while len(self._toasts) > self.MAX_VISIBLE:
            self._drop(self._toasts[-1])

        self._layout()
        QTimer.singleShot(max(500, int(timeout_ms)), lambda: self.dismiss(toast))

    def dismiss(self, toast: Toast):
        if toast in self._toasts:
            self._drop(toast)
            self._layout()

    def _drop(self, toast: Toast):
        self._toasts.remove(toast)
        toast.hide()
        toast.deleteLater()

    def _layout(self):
        if not self._toasts:
            self.hide()
            return

        # only cover the strip the toasts need so the window stays clickable
        width = max(t.width() for t in self._toasts)
        y = 0
        for t in self._toasts:
            t.adjustSize()
            t.move(QPoint(width - t.width(), y))
            t.show()
            y += t.height() + self.SPACING

        self.setGeometry(self.host.width() - width - self.MARGIN, self.MARGIN, width, y)
        self.raise_()
        self.show()
