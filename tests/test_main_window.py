import pytest

from logic.errors import NoActiveDocumentError
from ui.main_window import DocumentEditor, MainWindow
from widgets.result_view import ResultView


@pytest.fixture
def window(backend):
    window = MainWindow(backend)
    yield window
    window.close()


def test_document_snapshot_and_grep_opens_result_tab(window, tmp_path):
    with pytest.raises(NoActiveDocumentError):
        window.get_lines()

    log = tmp_path / "app.log"
    log.write_text("INFO up\nERROR down\nINFO again\n", encoding="utf-8")
    window.load_file(str(log))
    assert isinstance(window.tabs.currentWidget(), DocumentEditor)
    assert window.get_lines() == ["INFO up", "ERROR down", "INFO again", ""]

    window.host.handle_message({"command": "grep", "grepWords": ["ERROR"],
                                "searchWords": [{"word": "error", "color": "red"}]})
    view = window.tabs.currentWidget()
    assert isinstance(view, ResultView)
    assert [line.line_number for line in view.state.lines] == [2]
    # 结果页成为当前页后仍使用原文档
    assert window.get_lines()[1] == "ERROR down"


def test_recreated_panel_is_restored_from_last_state(window):
    window.host.last_state.replace(["kept"], [])
    old_panel = window.panel
    window.create_panel()
    assert window.panel is not old_panel
    assert window.panel.draft()[0] == ["kept"]


def test_non_utf8_file_is_decoded(window, tmp_path):
    log = tmp_path / "gbk.log"
    log.write_bytes("错误 ERROR".encode("gbk"))
    window.load_file(str(log))
    assert window.get_lines() == ["错误 ERROR"]


def test_snapshot_keeps_control_characters_inside_lines(window):
    editor = DocumentEditor("x.log", "page1\x0cstill line one\nERROR \x85two")
    assert editor.snapshot() == ["page1\x0cstill line one", "ERROR \x85two"]
    assert len(editor.snapshot()) == editor.blockCount()

    window.tabs.addTab(editor, "x.log")
    window.active_document = editor
    window.host.handle_message({"command": "grep", "grepWords": ["ERROR"], "searchWords": []})
    assert [line.line_number for line in window.tabs.currentWidget().state.lines] == [2]


def test_info_goes_to_status_bar(window):
    window.host.handle_message({"command": "Logger", "msg": "hello"})
    assert window.status_label.text() == "'hello'"
