# ui/delegates/actions_delegate.py
from __future__ import annotations
from PySide6.QtCore import Qt, QRect, Signal, QEvent
from PySide6.QtGui import QPainter
from PySide6.QtWidgets import QStyledItemDelegate, QStyleOptionButton, QApplication, QStyle

from ui.models.item_table_model import COL_ACTIONS

BTN_W, BTN_H = 90, 26

def _button_rect(rect: QRect) -> QRect:
    return QRect(rect.right() - BTN_W - 8, rect.center().y() - BTN_H // 2, BTN_W, BTN_H)

class ActionsDelegate(QStyledItemDelegate):
    downloadClicked = Signal(str)  # item_id

    def paint(self, painter: QPainter, option, index):
        super().paint(painter, option, index)

        item = index.data(Qt.UserRole)
        # only finished songs with audio get a button
        if item is None or not item.is_retrievable:
            return

        opt = QStyleOptionButton()
        opt.rect = _button_rect(option.rect)
        opt.text = "Download"
        opt.state = QStyle.State_Enabled
        QApplication.style().drawControl(QStyle.CE_PushButton, opt, painter)

    def editorEvent(self, event, model, option, index):
        if index.column() != COL_ACTIONS:
            return False
        if event.type() == QEvent.MouseButtonRelease and event.button() == Qt.LeftButton:
            item = index.data(Qt.UserRole)
            if item is None or not item.is_retrievable:
                return False

            if _button_rect(option.rect).contains(event.position().toPoint()):
                self.downloadClicked.emit(item.id)
                return True
        return False
