import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtWidgets import QApplication

from logic.config_store import QSettingsBackend


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def backend(tmp_path):
    return QSettingsBackend(str(tmp_path / "settings.ini"))


class RecordingNotifier:
    def __init__(self):
        self.infos = []
        self.errors = []

    def info(self, msg):
        self.infos.append(msg)

    def error(self, msg):
        self.errors.append(msg)


class StaticDocuments:
    def __init__(self, lines=None):
        self.lines = lines

    def get_lines(self):
        from logic.errors import NoActiveDocumentError
        if self.lines is None:
            raise NoActiveDocumentError()
        return self.lines


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def documents():
    return StaticDocuments(["INFO boot", "ERROR catalog missing", "WARN cat", "DEBUG"])
