# ui/models/item_table_model.py
from __future__ import annotations
from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from PySide6.QtGui import QColor
from core.models import Item

COL_SELECT, COL_TITLE, COL_TAGS, COL_STATUS, COL_CREATED, COL_ACTIONS = range(6)

STATUS_COLORS = {
    "success": "#4ade80",
    "pending": "#facc15",
    "error": "#f87171",
    "neutral": "#9ca3af",
}

def fmt_created(raw: str) -> str:
    # ISO timestamps -> "YYYY-MM-DD HH:MM"; anything else is shown as-is
    if len(raw) >= 16 and raw[4] == "-" and raw[10] in "T ":
        return f"{raw[:10]} {raw[11:16]}"
    return raw

class ItemTableModel(QAbstractTableModel):
    def __init__(self, rows=(), is_selected=None, on_toggle=None):
        super().__init__()
        self._rows: list[Item] = list(rows)
        self._is_selected = is_selected or (lambda _id: False)
        self._on_toggle = on_toggle

    def set_rows(self, rows):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def refresh_selection(self):
        if not self._rows:
            return
        top = self.index(0, COL_SELECT)
        bottom = self.index(len(self._rows) - 1, COL_SELECT)
        self.dataChanged.emit(top, bottom, [Qt.CheckStateRole])

    def rowCount(self, parent=QModelIndex()) -> int:
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        return 6

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role != Qt.DisplayRole or orientation != Qt.Horizontal:
            return None
        return ["", "Title", "Style", "Status", "Created", ""][section]

    def flags(self, index: QModelIndex):
        base = super().flags(index)
        if index.isValid() and index.column() == COL_SELECT and self._rows[index.row()].is_retrievable:
            return base | Qt.ItemIsUserCheckable
        return base

    def data(self, index: QModelIndex, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            if col == COL_TITLE:
                return row.display_title
            if col == COL_TAGS:
                return row.tags
            if col == COL_STATUS:
                return row.raw_status or row.status.value
            if col == COL_CREATED:
                return fmt_created(row.created_at)
            return ""
        if role == Qt.CheckStateRole and col == COL_SELECT and row.is_retrievable:
            return Qt.Checked if self._is_selected(row.id) else Qt.Unchecked
        if role == Qt.ForegroundRole and col == COL_STATUS:
            return QColor(STATUS_COLORS[row.status_category])
        if role == Qt.ToolTipRole and col == COL_TAGS:
            return row.tags or None
        if role == Qt.UserRole:
            return row
        return None

    def setData(self, index: QModelIndex, value, role=Qt.EditRole) -> bool:
        if not index.isValid() or role != Qt.CheckStateRole or index.column() != COL_SELECT:
            return False
        row = self._rows[index.row()]
        if not row.is_retrievable or self._on_toggle is None:
            return False
        self._on_toggle(row.id)
        self.dataChanged.emit(index, index, [Qt.CheckStateRole])
        return True

    def item_at(self, row: int) -> Item | None:
        if row < 0 or row >= len(self._rows):
            return None
        return self._rows[row]

    def row_for_item_id(self, item_id: str) -> int:
        for i, r in enumerate(self._rows):
            if r.id == item_id:
                return i
        return -1
