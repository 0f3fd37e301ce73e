import logging
import os
from typing import List, Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QDragEnterEvent, QDropEvent, QFont
from PyQt5.QtWidgets import (QAction, QDockWidget, QFileDialog, QLabel, QMainWindow,
                             QMessageBox, QPlainTextEdit, QTabWidget)

from logic.config_store import ConfigStore, LastStateStore, QSettingsBackend
from logic.errors import NoActiveDocumentError
from logic.sync_protocol import GrepHost
from widgets.grep_input_panel import GrepInputPanel
from widgets.result_view import ResultView

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = ('.log', '.txt')
FALLBACK_ENCODINGS = ('utf-8', 'gbk', 'latin-1')


class DocumentEditor(QPlainTextEdit):
    """打开的文档标签页"""

    def __init__(self, file_path: str, text: str):
        super().__init__()
        self.file_path = file_path
        self.setPlainText(text)
        self.setLineWrapMode(QPlainTextEdit.NoWrap)
        self.setFont(QFont("Consolas", 10))

    def snapshot(self) -> List[str]:
        """当前内容的行快照，与编辑器的文本块一一对应"""
        lines = []
        block = self.document().firstBlock()
        while block.isValid():
            lines.append(block.text())
            block = block.next()
        return lines


class QtNotifier:
    """用户提示：普通信息显示在状态栏，错误弹窗"""

    def __init__(self, window: "MainWindow"):
        self.window = window

    def info(self, msg: str):
        self.window.status_label.setText(msg)

    def error(self, msg: str):
        self.window.status_label.setText(f"❌ {msg}")
        QMessageBox.warning(self.window, "Grep", msg)


class MainWindow(QMainWindow):
    def __init__(self, backend: Optional[QSettingsBackend] = None):
        super().__init__()
        self.setWindowTitle("GrepHighlight")
        self.resize(1200, 800)

        self.backend = backend or QSettingsBackend()
        self.active_document: Optional[DocumentEditor] = None

        self.host = GrepHost(
            documents=self,
            notifier=QtNotifier(self),
            config_store=ConfigStore(self.backend),
            last_state=LastStateStore(self.backend),
        )
        self.host.results_ready.connect(self.show_results)

        self._setup_ui()
        self.panel: Optional[GrepInputPanel] = None
        self.create_panel()

        # 启用拖拽功能
        self.setAcceptDrops(True)
        self._bind_ui_actions()

    def _setup_ui(self):
        self.tabs = QTabWidget()
        self.tabs.setTabsClosable(True)
        self.setCentralWidget(self.tabs)

        self.dock = QDockWidget("Grep", self)
        self.dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)
        self.addDockWidget(Qt.LeftDockWidgetArea, self.dock)

        self.status_label = QLabel("Ready")
        self.statusBar().addWidget(self.status_label)

        file_menu = self.menuBar().addMenu("File")
        self.menu_open = QAction("Open...", self)
        self.menu_open.setShortcut("Ctrl+O")
        file_menu.addAction(self.menu_open)

        view_menu = self.menuBar().addMenu("View")
        view_menu.addAction(self.dock.toggleViewAction())
        self.menu_reload_panel = QAction("Reload Grep Panel", self)
        view_menu.addAction(self.menu_reload_panel)

    def _bind_ui_actions(self):
        """绑定UI事件"""
        self.menu_open.triggered.connect(self._import_logs)
        self.menu_reload_panel.triggered.connect(self.create_panel)
        self.tabs.tabCloseRequested.connect(self._close_tab)
        self.tabs.currentChanged.connect(self._on_tab_changed)
        self.dock.visibilityChanged.connect(self.host.set_panel_visible)

    # ---- 输入面板 ----

    def create_panel(self):
        """（重新）创建输入面板，旧面板直接销毁"""
        if self.panel is not None:
            self.host.message_posted.disconnect(self.panel.receive_message)
            self.panel.deleteLater()

        self.panel = GrepInputPanel()
        # 队列连接保证消息逐条处理，避免处理过程中重入
        self.panel.message_sent.connect(self.host.handle_message, Qt.QueuedConnection)
        self.host.message_posted.connect(self.panel.receive_message)
        self.dock.setWidget(self.panel)
        self.host.attach_panel()

    # ---- 文档 ----

    def get_lines(self) -> List[str]:
        """返回当前文档的行快照"""
        if self.active_document is None:
            raise NoActiveDocumentError()
        return self.active_document.snapshot()

    def _on_tab_changed(self, index: int):
        widget = self.tabs.widget(index)
        if isinstance(widget, DocumentEditor):
            self.active_document = widget

    def _close_tab(self, index: int):
        widget = self.tabs.widget(index)
        self.tabs.removeTab(index)
        if widget is self.active_document:
            self.active_document = None
            for i in range(self.tabs.count()):
                if isinstance(self.tabs.widget(i), DocumentEditor):
                    self.active_document = self.tabs.widget(i)
        if widget is not None:
            widget.deleteLater()

    def _import_logs(self):
        """文件导入"""
        files, _ = QFileDialog.getOpenFileNames(
            self, "选择日志文件", "", "Log Files (*.log *.txt);;All Files (*)"
        )
        for filepath in files:
            self.load_file(filepath)

    def load_file(self, filepath: str):
        """读取文件并打开为新标签页"""
        text = self._read_text(filepath)
        if text is None:
            self.status_label.setText(f"❌ 文件加载失败: {os.path.basename(filepath)}")
            return

        editor = DocumentEditor(filepath, text)
        index = self.tabs.addTab(editor, os.path.basename(filepath))
        self.tabs.setCurrentIndex(index)
        self.active_document = editor
        self.status_label.setText(f"✅ 文件加载完成 - {editor.blockCount():,} 行")

    @staticmethod
    def _read_text(filepath: str) -> Optional[str]:
        """按候选编码依次尝试读取"""
        try:
            with open(filepath, 'rb') as f:
                raw = f.read()
        except OSError as e:
            logger.error("cannot read %s: %s", filepath, e)
            return None

        for encoding in FALLBACK_ENCODINGS:
            try:
                return raw.decode(encoding)
            except UnicodeDecodeError:
                continue
        return None

    # ---- 结果 ----

    def show_results(self, lines: list):
        """为一次grep结果打开新的结果标签页"""
        view = ResultView(lines)
        index = self.tabs.addTab(view, "Grep Results")
        self.tabs.setCurrentIndex(index)
        self.status_label.setText(f"✅ 匹配 {len(lines):,} 行")

    # ---- 拖拽 ----

    def dragEnterEvent(self, event: QDragEnterEvent):
        """拖拽进入事件"""
        if event.mimeData().hasUrls():
            for url in event.mimeData().urls():
                if url.isLocalFile() and url.toLocalFile().lower().endswith(SUPPORTED_SUFFIXES):
                    event.acceptProposedAction()
                    return
        event.ignore()

    def dropEvent(self, event: QDropEvent):
        """拖拽放下事件"""
        for url in event.mimeData().urls():
            if url.isLocalFile() and url.toLocalFile().lower().endswith(SUPPORTED_SUFFIXES):
                self.load_file(url.toLocalFile())
        event.acceptProposedAction()
