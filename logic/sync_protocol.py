import logging
from typing import List, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from dataform.grep_models import LastActiveState, clean_highlights, clean_terms
from logic.config_store import ConfigStore, LastStateStore
from logic.errors import GrepError, NoActiveDocumentError
from logic.highlight_engine import HighlightEngine
from logic.match_engine import MatchEngine

logger = logging.getLogger(__name__)


class GrepHost(QObject):
    """
    面板与宿主之间的消息协议（宿主端）

    面板可能随时被销毁重建，草稿状态、配置列表由本对象统一维护。
    所有入站消息逐条处理，处理结束后回发 Complete。
    """

    message_posted = pyqtSignal(dict)     # 发往面板的消息
    results_ready = pyqtSignal(list)      # 渲染完成的结果行 List[RenderedLine]

    def __init__(self, documents, notifier, config_store: ConfigStore,
                 last_state: LastStateStore,
                 match_engine: Optional[MatchEngine] = None,
                 highlight_engine: Optional[HighlightEngine] = None):
        """
        Args:
            documents: 文档提供者，get_lines() 无文档时抛出 NoActiveDocumentError
            notifier: 用户提示，提供 info(msg) / error(msg)
            config_store: 命名配置
            last_state: 最近草稿状态
        """
        super().__init__()
        self.documents = documents
        self.notifier = notifier
        self.config_store = config_store
        self.last_state = last_state
        self.match_engine = match_engine or MatchEngine()
        self.highlight_engine = highlight_engine or HighlightEngine()

        self._handlers = {
            "grep": self._on_grep,
            "saveSettings": self._on_save_settings,
            "loadSettings": self._on_load_settings,
            "deleteSetting": self._on_delete_setting,
            "saveSettings_current": self._on_save_current,
            "Logger": self._on_logger,
        }
        self.config_store.settings_list_changed.connect(self._post_settings_list)

    # ---- 面板生命周期 ----

    def attach_panel(self):
        """面板（重新）创建时：先发送配置列表，再恢复草稿"""
        self.send_settings_list()
        self.restore_state()

    def set_panel_visible(self, visible: bool):
        """面板重新可见时再次同步，隐藏期间状态可能已变化"""
        if not visible:
            return
        self.restore_state()
        self.send_settings_list()

    def restore_state(self):
        state = self.last_state.current()
        if state is not None:
            self._post_draft(state)
            logger.debug("state restored (version %d)", state.version)

    def send_settings_list(self):
        self._post_settings_list(self.config_store.list())

    # ---- 消息分发 ----

    def handle_message(self, message: dict):
        """处理面板发来的一条消息"""
        command = message.get("command")
        logger.debug("received %s", command)
        handler = self._handlers.get(command)
        if handler is None:
            logger.warning("unknown command: %r", command)
            return
        try:
            handler(message)
        except GrepError as e:
            logger.info("%s failed: %s", command, e)
            self.notifier.error(str(e))
        finally:
            self.message_posted.emit({"command": "Complete"})

    def _on_grep(self, message: dict):
        terms = clean_terms(message.get("grepWords"))
        specs = clean_highlights(message.get("searchWords"))

        lines = self.documents.get_lines()
        if lines is None:
            raise NoActiveDocumentError()

        matched = self.match_engine.filter(lines, terms)
        if not matched:
            self.notifier.info("No matches found")
            return
        self.results_ready.emit(self.highlight_engine.render(matched, specs))

    def _on_save_settings(self, message: dict):
        name = message.get("name") or ""
        self.config_store.save(name, message.get("grepWords"), clean_highlights(message.get("searchWords")))
        self.notifier.info(f"Settings '{name}' saved")

    def _on_load_settings(self, message: dict):
        config = self.config_store.load(message.get("name") or "")
        state = self.last_state.replace(config.terms, config.highlights, config.name)
        self._post_draft(state)

    def _on_delete_setting(self, message: dict):
        name = message.get("name") or ""
        self.config_store.delete(name)
        self.notifier.info(f"Settings '{name}' deleted")

    def _on_save_current(self, message: dict):
        self.last_state.replace(
            message.get("grepWords"),
            clean_highlights(message.get("searchWords")),
            message.get("name"),
        )

    def _on_logger(self, message: dict):
        msg = message.get("msg", "")
        logger.info("panel: %s", msg)
        self.notifier.info(f"'{msg}'")

    # ---- 出站消息 ----

    def _post_draft(self, state: LastActiveState):
        self.message_posted.emit({
            "command": "loadSettings",
            "grepWords": list(state.terms),
            "searchWords": [spec.to_dict() for spec in state.highlights],
            "name": state.active_config_name,
        })

    def _post_settings_list(self, names: List[str]):
        self.message_posted.emit({"command": "updateSettingsList", "settings": list(names)})
