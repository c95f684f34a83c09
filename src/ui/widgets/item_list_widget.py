# ui/widgets/item_list_widget.py
from __future__ import annotations

from PySide6.QtCore import Signal, Qt
from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableView, QMenu, QHeaderView

from ui.models.item_table_model import (
    ItemTableModel, COL_SELECT, COL_TITLE, COL_TAGS, COL_STATUS, COL_CREATED, COL_ACTIONS,
)
from ui.delegates.actions_delegate import ActionsDelegate


class ItemListWidget(QWidget):
    downloadItem = Signal(str)   # item_id
    playItem = Signal(str)       # item_id

    def __init__(self, controller):
        super().__init__()
        self.controller = controller

        self.table = QTableView()
        self.model = ItemTableModel(
            is_selected=lambda item_id: item_id in controller.selection,
            on_toggle=controller.toggle,
        )
        self.table.setModel(self.model)

        self.table.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableView.SelectionMode.SingleSelection)
        self.table.verticalHeader().setVisible(False)
        self.table.setShowGrid(False)
        self.table.setAlternatingRowColors(True)
        self.table.setObjectName("ItemTable")

        header = self.table.horizontalHeader()
        header.setSectionResizeMode(COL_TITLE, QHeaderView.ResizeMode.Stretch)
        self.table.setColumnWidth(COL_SELECT, 32)
        self.table.setColumnWidth(COL_TAGS, 200)
        self.table.setColumnWidth(COL_STATUS, 90)
        self.table.setColumnWidth(COL_CREATED, 130)
        self.table.setColumnWidth(COL_ACTIONS, 110)
        self.table.verticalHeader().setDefaultSectionSize(30)

        # Download button in the last column
        self.actions = ActionsDelegate(self.table)
        self.actions.downloadClicked.connect(self.downloadItem.emit)
        self.table.setItemDelegateForColumn(COL_ACTIONS, self.actions)

        # Double click -> preview
        self.table.doubleClicked.connect(self._on_double_click)

        self.table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.table.customContextMenuRequested.connect(self._on_context_menu)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.table)

        controller.items_changed.connect(self.refresh)
        controller.selection_changed.connect(self.model.refresh_selection)

    def refresh(self):
        self.model.set_rows(self.controller.filtered_items())

    def visible_count(self) -> int:
        return self.model.rowCount()

    def _on_double_click(self, index):
        if not index.isValid() or index.column() in (COL_SELECT, COL_ACTIONS):
            return
        item = self.model.item_at(index.row())
        if item is not None and item.is_retrievable:
            self.playItem.emit(item.id)

    def _on_context_menu(self, pos):
        idx = self.table.indexAt(pos)
        if not idx.isValid():
            return
        item = self.model.item_at(idx.row())
        if item is None or not item.is_retrievable:
            return

        menu = QMenu(self)
        act_play = menu.addAction("Play preview")
        act_dl = menu.addAction("Download")
        act_sel = menu.addAction("Deselect" if item.id in self.controller.selection else "Select")

        chosen = menu.exec(self.table.viewport().mapToGlobal(pos))
        if chosen == act_play:
            self.playItem.emit(item.id)
        elif chosen == act_dl:
            self.downloadItem.emit(item.id)
        elif chosen == act_sel:
            self.controller.toggle(item.id)
