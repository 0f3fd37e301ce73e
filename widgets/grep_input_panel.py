from typing import List

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtGui import QPalette
from PyQt5.QtWidgets import (QApplication, QComboBox, QFrame, QHBoxLayout, QLabel,
                             QLineEdit, QMenu, QPushButton, QToolButton,
                             QVBoxLayout, QWidget)

from dataform.grep_models import (DARK_PALETTE, LIGHT_PALETTE, NO_COLOR, HighlightSpec,
                                  clean_highlights, clean_terms, palette_color)
from logic.settings_codec import export_settings, import_settings

MAIN_BUTTON_TEXT = "Grep & Highlight"
LOAD_BUTTON_TEXT = "Load"
DELETE_BUTTON_TEXT = "Delete"


def is_dark_theme() -> bool:
    """根据窗口背景亮度判断是否为深色主题"""
    app = QApplication.instance()
    if app is None:
        return False
    return app.palette().color(QPalette.Window).lightness() < 128


class HighlightRow(QWidget):
    """一行高亮配置：关键词输入框 + 颜色按钮 + 删除按钮"""

    edited = pyqtSignal()
    remove_requested = pyqtSignal(object)

    def __init__(self, word: str = "", color: str = NO_COLOR, dark: bool = False):
        super().__init__()
        self.color = color
        self.dark = dark

        self.input = QLineEdit(word)
        self.input.setPlaceholderText("Enter search word")
        self.input.textEdited.connect(lambda _text: self.edited.emit())

        self.color_button = QToolButton()
        self.color_button.setFixedSize(18, 18)
        self.color_button.setPopupMode(QToolButton.InstantPopup)
        self.color_button.setMenu(self._build_color_menu())

        self.remove_button = QToolButton()
        self.remove_button.setText("×")
        self.remove_button.clicked.connect(lambda: self.remove_requested.emit(self))

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.input)
        layout.addWidget(self.color_button)
        layout.addWidget(self.remove_button)
        self._update_color_box()

    def _build_color_menu(self) -> QMenu:
        menu = QMenu(self)
        for color in (DARK_PALETTE if self.dark else LIGHT_PALETTE) + [NO_COLOR]:
            action = menu.addAction(color)
            action.triggered.connect(lambda _checked, c=color: self.set_color(c))
        return menu

    def set_color(self, color: str):
        if color != self.color:
            self.color = color
            self._update_color_box()
            self.edited.emit()

    def _update_color_box(self):
        if self.color.strip().lower() == NO_COLOR:
            self.color_button.setStyleSheet("border: 1px solid #ccc;")
        else:
            self.color_button.setStyleSheet(f"background-color: {self.color}; border: 1px solid #ccc;")
        self.color_button.setToolTip(self.color)

    def spec(self) -> HighlightSpec:
        return HighlightSpec(self.input.text(), self.color)


class GrepInputPanel(QWidget):
    """
    输入面板 - 编辑grep关键词和高亮配置，保存/读取命名配置，导入导出JSON

    面板只通过消息与宿主通信：message_sent 发出，receive_message 接收
    """

    message_sent = pyqtSignal(dict)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.dark = is_dark_theme()
        self.grep_inputs: List[QLineEdit] = []
        self.highlight_rows: List[HighlightRow] = []
        self._setup_ui()
        self.add_grep_input()
        self.add_highlight_row()

    def _setup_ui(self):
        layout = QVBoxLayout(self)

        layout.addWidget(QLabel("<h3>Grep</h3>"))
        self.grep_container = QVBoxLayout()
        layout.addLayout(self.grep_container)
        add_grep = QPushButton("+")
        add_grep.clicked.connect(lambda: self.add_grep_input())
        layout.addWidget(add_grep)

        layout.addWidget(QLabel("<h3>Highlight</h3>"))
        self.highlight_container = QVBoxLayout()
        layout.addLayout(self.highlight_container)
        add_highlight = QPushButton("+")
        add_highlight.clicked.connect(lambda: self.add_highlight_row())
        layout.addWidget(add_highlight)

        self.main_button = QPushButton(MAIN_BUTTON_TEXT)
        self.main_button.setStyleSheet("background-color: #0066CC; color: white;")
        self.main_button.clicked.connect(self.start_grep)
        layout.addWidget(self.main_button)

        layout.addWidget(self._separator())
        layout.addWidget(QLabel("<h3>Setting Save &amp; Load</h3>"))
        self.setting_name = QLineEdit()
        self.setting_name.setPlaceholderText("Setting name")
        layout.addWidget(self.setting_name)
        save_button = QPushButton("Save")
        save_button.clicked.connect(self.save_settings)
        layout.addWidget(save_button)

        self.setting_list = QComboBox()
        layout.addWidget(self.setting_list)
        row = QHBoxLayout()
        self.load_button = QPushButton(LOAD_BUTTON_TEXT)
        self.load_button.clicked.connect(self.load_settings)
        self.delete_button = QPushButton(DELETE_BUTTON_TEXT)
        self.delete_button.clicked.connect(self.delete_setting)
        row.addWidget(self.load_button)
        row.addWidget(self.delete_button)
        layout.addLayout(row)

        layout.addWidget(self._separator())
        layout.addWidget(QLabel("<h3>Import &amp; Export</h3>"))
        self.import_input = QLineEdit()
        self.import_input.setPlaceholderText("Setting as JSON")
        layout.addWidget(self.import_input)
        row = QHBoxLayout()
        import_button = QPushButton("Import")
        import_button.clicked.connect(self.import_settings)
        export_button = QPushButton("Export")
        export_button.clicked.connect(self.export_settings)
        row.addWidget(import_button)
        row.addWidget(export_button)
        layout.addLayout(row)
        layout.addStretch()

    @staticmethod
    def _separator() -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.HLine)
        return line

    # ---- 草稿编辑 ----

    def add_grep_input(self, word: str = "") -> QLineEdit:
        line_edit = QLineEdit(word)
        line_edit.setPlaceholderText("Enter grep word")
        line_edit.textEdited.connect(lambda _text: self.send_current_state())
        self.grep_container.addWidget(line_edit)
        self.grep_inputs.append(line_edit)
        return line_edit

    def add_highlight_row(self, word: str = "", color: str = None) -> HighlightRow:
        if color is None:
            color = palette_color(len(self.highlight_rows), self.dark)
        row = HighlightRow(word, color, self.dark)
        row.edited.connect(self.send_current_state)
        row.remove_requested.connect(self.remove_highlight_row)
        self.highlight_container.addWidget(row)
        self.highlight_rows.append(row)
        return row

    def remove_highlight_row(self, row: HighlightRow):
        if row in self.highlight_rows:
            self.highlight_rows.remove(row)
            row.deleteLater()
            self.send_current_state()

    def set_draft(self, terms: List[str], highlights: List[HighlightSpec]):
        """用给定的关键词和高亮配置重建输入框"""
        for line_edit in self.grep_inputs:
            line_edit.deleteLater()
        self.grep_inputs.clear()
        for row in self.highlight_rows:
            row.deleteLater()
        self.highlight_rows.clear()

        for term in terms:
            self.add_grep_input(term)
        for spec in highlights:
            self.add_highlight_row(spec.word, spec.color)

    def draft(self):
        """当前草稿 (terms, highlights)，空白项已去除"""
        terms = clean_terms(line_edit.text() for line_edit in self.grep_inputs)
        highlights = clean_highlights(row.spec() for row in self.highlight_rows)
        return terms, highlights

    def send_current_state(self):
        terms, highlights = self.draft()
        self.message_sent.emit({
            "command": "saveSettings_current",
            "grepWords": terms,
            "searchWords": [spec.to_dict() for spec in highlights],
            "name": self.setting_name.text() or None,
        })

    # ---- 按钮动作 ----

    def start_grep(self):
        terms, highlights = self.draft()
        self.main_button.setText("Processing...")
        self.message_sent.emit({
            "command": "grep",
            "grepWords": terms,
            "searchWords": [spec.to_dict() for spec in highlights],
        })

    def save_settings(self):
        name = self.setting_name.text()
        if not name:
            return
        terms, highlights = self.draft()
        self.message_sent.emit({
            "command": "saveSettings",
            "name": name,
            "grepWords": terms,
            "searchWords": [spec.to_dict() for spec in highlights],
        })

    def load_settings(self):
        name = self.setting_list.currentText()
        self.load_button.setText("Loading...")
        self.load_button.setEnabled(False)
        self.setting_name.setText(name)
        self.message_sent.emit({"command": "loadSettings", "name": name})

    def delete_setting(self):
        self.delete_button.setText("Deleting...")
        self.message_sent.emit({"command": "deleteSetting", "name": self.setting_list.currentText()})

    def import_settings(self):
        result = import_settings(self.import_input.text())
        if result is None:
            return
        terms, highlights = result
        self.set_draft(terms, highlights)
        self.send_current_state()

    def export_settings(self):
        terms, highlights = self.draft()
        self.import_input.setText(export_settings(terms, highlights))

    # ---- 接收宿主消息 ----

    def receive_message(self, message: dict):
        command = message.get("command")
        if command == "loadSettings":
            self.set_draft(clean_terms(message.get("grepWords")),
                           clean_highlights(message.get("searchWords")))
            if message.get("name"):
                self.setting_name.setText(message["name"])
            self._reset_load_button()
            self.send_current_state()
        elif command == "updateSettingsList":
            current = self.setting_list.currentText()
            self.setting_list.clear()
            self.setting_list.addItems(message.get("settings", []))
            index = self.setting_list.findText(current)
            if index >= 0:
                self.setting_list.setCurrentIndex(index)
            self.delete_button.setText(DELETE_BUTTON_TEXT)
        elif command == "Complete":
            self.delete_button.setText(DELETE_BUTTON_TEXT)
            self.main_button.setText(MAIN_BUTTON_TEXT)
            self._reset_load_button()

    def _reset_load_button(self):
        self.load_button.setText(LOAD_BUTTON_TEXT)
        self.load_button.setEnabled(True)
