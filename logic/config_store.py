import json
import logging
from typing import Any, Dict, List, Optional

from PyQt5.QtCore import QObject, QSettings, pyqtSignal

from dataform.grep_models import (HighlightSpec, LastActiveState, NamedConfig,
                                  clean_highlights, clean_terms)
from logic.errors import ConfigNotFoundError, MissingNameError

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
LAST_STATE_KEY = "lastState"


class QSettingsBackend:
    """
    基于 QSettings 的键值存储，值以JSON字符串保存

    Args:
        path: 指定INI文件路径；为空时使用系统默认位置
    """

    def __init__(self, path: Optional[str] = None,
                 organization: str = "LSBT", application: str = "GrepHighlight"):
        if path:
            self.settings = QSettings(path, QSettings.IniFormat)
        else:
            self.settings = QSettings(organization, application)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self.settings.value(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("ignoring unreadable setting %r: %s", key, e)
            return default

    def set(self, key: str, value: Any):
        self.settings.setValue(key, json.dumps(value, ensure_ascii=False))
        self.settings.sync()


def _specs_to_wire(highlights: List[HighlightSpec]) -> List[dict]:
    return [spec.to_dict() for spec in highlights]


class ConfigStore(QObject):
    """
    命名配置管理 - 保存/读取/删除/列出

    保存与删除后发出 settings_list_changed，携带最新的名称列表
    """

    settings_list_changed = pyqtSignal(list)

    def __init__(self, backend):
        super().__init__()
        self.backend = backend

    def _read_all(self) -> Dict[str, dict]:
        data = self.backend.get(SETTINGS_KEY, {})
        if not isinstance(data, dict):
            logger.warning("stored settings are not a mapping, treating as empty")
            return {}
        return data

    def save(self, name: str, terms: List[str], highlights: List[HighlightSpec]) -> NamedConfig:
        """保存配置，同名覆盖"""
        if not name or not name.strip():
            raise MissingNameError("Setting name is required")

        config = NamedConfig(name, clean_terms(terms), clean_highlights(highlights))
        data = self._read_all()
        data[name] = {"grepWords": config.terms, "searchWords": _specs_to_wire(config.highlights)}
        self.backend.set(SETTINGS_KEY, data)
        logger.info("settings '%s' saved", name)
        self.settings_list_changed.emit(self.list())
        return config

    def load(self, name: str) -> NamedConfig:
        """读取配置，不存在时抛出 ConfigNotFoundError"""
        entry = self._read_all().get(name) if name else None
        config = self._to_config(name, entry)
        if config is None:
            raise ConfigNotFoundError(name)
        return config

    def delete(self, name: str):
        """删除配置，名称不存在时视为成功"""
        if not name or not name.strip():
            raise MissingNameError()

        data = self._read_all()
        if data.pop(name, None) is not None:
            self.backend.set(SETTINGS_KEY, data)
            logger.info("settings '%s' deleted", name)
        self.settings_list_changed.emit(self.list())

    def list(self) -> List[str]:
        """所有配置名称（插入顺序）"""
        return [name for name, entry in self._read_all().items()
                if self._to_config(name, entry) is not None]

    @staticmethod
    def _to_config(name: str, entry) -> Optional[NamedConfig]:
        if not isinstance(entry, dict):
            return None
        terms = entry.get("grepWords", [])
        highlights = entry.get("searchWords", [])
        if not isinstance(terms, list) or not isinstance(highlights, list):
            logger.warning("skipping malformed settings entry '%s'", name)
            return None
        return NamedConfig(name, clean_terms(terms), clean_highlights(highlights))


class LastStateStore:
    """
    最近草稿状态的唯一持有者

    每次 replace 都整体替换并递增版本号；面板重建时读取一次
    """

    def __init__(self, backend):
        self.backend = backend
        self._state: Optional[LastActiveState] = self._restore()

    def _restore(self) -> Optional[LastActiveState]:
        data = self.backend.get(LAST_STATE_KEY)
        if not isinstance(data, dict):
            return None
        terms = data.get("grepWords", [])
        highlights = data.get("searchWords", [])
        if not isinstance(terms, list) or not isinstance(highlights, list):
            return None
        return LastActiveState(
            terms=tuple(clean_terms(terms)),
            highlights=tuple(clean_highlights(highlights)),
            active_config_name=data.get("name") or None,
            version=int(data.get("version") or 0),
        )

    def current(self) -> Optional[LastActiveState]:
        return self._state

    def replace(self, terms: List[str], highlights: List[HighlightSpec],
                active_config_name: Optional[str] = None) -> LastActiveState:
        """整体替换草稿状态"""
        version = self._state.version + 1 if self._state else 1
        self._state = LastActiveState(
            terms=tuple(clean_terms(terms)),
            highlights=tuple(clean_highlights(highlights)),
            active_config_name=active_config_name or None,
            version=version,
        )
        self.backend.set(LAST_STATE_KEY, {
            "grepWords": list(self._state.terms),
            "searchWords": _specs_to_wire(list(self._state.highlights)),
            "name": self._state.active_config_name,
            "version": version,
        })
        logger.debug("last state replaced (version %d)", version)
        return self._state

    def clear(self):
        self._state = None
        self.backend.set(LAST_STATE_KEY, None)
