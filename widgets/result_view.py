from typing import List

from PyQt5.QtCore import QEvent, QSize, Qt
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (QAbstractItemView, QApplication, QHBoxLayout, QLabel,
                             QListWidget, QListWidgetItem, QPushButton, QVBoxLayout,
                             QWidget)

from dataform.grep_models import RenderedLine
from logic.highlight_engine import to_html
from logic.match_engine import format_line_label
from logic.result_view_state import ResultViewState

SELECTED_LINE_STYLE = "background-color: rgba(100, 149, 237, 80);"


class ResultView(QWidget):
    """
    Grep结果视图 - 只负责按 ResultViewState 绘制

    工具栏: 放大/缩小、换行开关、修剪模式、删除选中行
    """

    def __init__(self, lines: List[RenderedLine], parent=None):
        super().__init__(parent)
        self.state = ResultViewState(lines)
        self._setup_ui()
        self._bind_state()
        self._rebuild()

    def _setup_ui(self):
        toolbar = QHBoxLayout()
        zoom_in = QPushButton("Zoom In")
        zoom_in.clicked.connect(self.state.zoom_in)
        zoom_out = QPushButton("Zoom Out")
        zoom_out.clicked.connect(self.state.zoom_out)

        self.wrap_button = QPushButton("Wrap")
        self.wrap_button.setCheckable(True)
        self.wrap_button.setChecked(self.state.wrap_enabled)
        self.wrap_button.toggled.connect(self.state.set_wrap)

        self.trim_button = QPushButton("Trim Mode")
        self.trim_button.setCheckable(True)
        self.trim_button.toggled.connect(self.state.set_trim_mode)

        self.remove_button = QPushButton("Remove Selected")
        self.remove_button.setEnabled(False)
        self.remove_button.clicked.connect(self.state.remove_selected)

        for button in (zoom_in, zoom_out, self.wrap_button, self.trim_button, self.remove_button):
            toolbar.addWidget(button)
        toolbar.addStretch()

        self.list_widget = QListWidget()
        self.list_widget.setSelectionMode(QAbstractItemView.NoSelection)
        self.list_widget.setVerticalScrollMode(QAbstractItemView.ScrollPerPixel)
        self.list_widget.itemClicked.connect(self._on_item_clicked)
        self.list_widget.viewport().installEventFilter(self)

        layout = QVBoxLayout(self)
        layout.addLayout(toolbar)
        layout.addWidget(self.list_widget)

        self.line_font = QFont("Consolas", self.state.font_size)

    def _bind_state(self):
        self.state.lines_changed.connect(self._rebuild)
        self.state.selection_changed.connect(self._update_selection)
        self.state.font_size_changed.connect(self._on_font_size_changed)
        self.state.wrap_changed.connect(self._on_wrap_changed)
        self.state.trim_mode_changed.connect(self.remove_button.setEnabled)

    # ---- 绘制 ----

    def _rebuild(self):
        """按当前行序列重建列表"""
        self.list_widget.clear()
        for line in self.state.lines:
            label = QLabel(self._line_html(line))
            label.setTextFormat(Qt.RichText)
            label.setWordWrap(self.state.wrap_enabled)
            label.setFont(self.line_font)
            label.setAttribute(Qt.WA_TransparentForMouseEvents)
            item = QListWidgetItem()
            self.list_widget.addItem(item)
            self.list_widget.setItemWidget(item, label)
        self._update_selection()
        self._refresh_item_sizes()

    @staticmethod
    def _line_html(line: RenderedLine) -> str:
        gutter = format_line_label(line.line_number).replace(" ", "&nbsp;")
        body = to_html(line)
        return f'<span style="color: gray;">{gutter}</span><span style="white-space: pre-wrap;">{body}</span>'

    def _labels(self):
        for row in range(self.list_widget.count()):
            yield row, self.list_widget.item(row), self.list_widget.itemWidget(self.list_widget.item(row))

    def _update_selection(self):
        for row, _item, label in self._labels():
            selected = row < len(self.state.lines) and self.state.lines[row].selected
            label.setStyleSheet(SELECTED_LINE_STYLE if selected else "")

    def _refresh_item_sizes(self):
        width = self.list_widget.viewport().width()
        for _row, item, label in self._labels():
            if self.state.wrap_enabled:
                item.setSizeHint(QSize(width, label.heightForWidth(width)))
            else:
                item.setSizeHint(label.sizeHint())

    def _on_font_size_changed(self, size: int):
        self.line_font.setPointSize(size)
        for _row, _item, label in self._labels():
            label.setFont(self.line_font)
        self._refresh_item_sizes()

    def _on_wrap_changed(self, enabled: bool):
        policy = Qt.ScrollBarAlwaysOff if enabled else Qt.ScrollBarAsNeeded
        self.list_widget.setHorizontalScrollBarPolicy(policy)
        for _row, _item, label in self._labels():
            label.setWordWrap(enabled)
        self._refresh_item_sizes()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._refresh_item_sizes()

    # ---- 交互 ----

    def _on_item_clicked(self, item: QListWidgetItem):
        shift = bool(QApplication.keyboardModifiers() & Qt.ShiftModifier)
        self.state.click(self.list_widget.row(item), shift=shift)

    def keyPressEvent(self, event):
        """Ctrl+加号/减号缩放，Delete 删除选中行"""
        if event.modifiers() & Qt.ControlModifier and event.key() in (Qt.Key_Plus, Qt.Key_Equal):
            self.state.zoom_in()
        elif event.modifiers() & Qt.ControlModifier and event.key() == Qt.Key_Minus:
            self.state.zoom_out()
        elif event.modifiers() & Qt.ControlModifier and event.key() == Qt.Key_0:
            self.state.reset_zoom()
        elif event.key() == Qt.Key_Delete and self.state.trim_active:
            self.state.remove_selected()
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    def eventFilter(self, obj, event):
        """列表视口上的 Ctrl+滚轮 用于缩放"""
        if (obj == self.list_widget.viewport() and event.type() == QEvent.Wheel
                and event.modifiers() & Qt.ControlModifier):
            if event.angleDelta().y() > 0:
                self.state.zoom_in()
            else:
                self.state.zoom_out()
            return True
        return super().eventFilter(obj, event)
