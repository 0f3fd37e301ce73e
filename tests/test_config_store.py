import pytest

from dataform.grep_models import HighlightSpec
from logic.config_store import ConfigStore, LastStateStore, QSettingsBackend
from logic.errors import ConfigNotFoundError, MissingNameError


def test_save_then_load_returns_same_config(backend):
    store = ConfigStore(backend)
    highlights = [HighlightSpec("err", "red"), HighlightSpec("warn", "none")]
    store.save("errors", ["err", "warn"], highlights)
    config = store.load("errors")
    assert config.terms == ["err", "warn"]
    assert config.highlights == highlights


def test_save_overwrites_same_name(backend):
    store = ConfigStore(backend)
    store.save("a", ["x"], [])
    store.save("a", ["y"], [HighlightSpec("y", "lime")])
    assert store.list() == ["a"]
    assert store.load("a").terms == ["y"]


def test_save_without_name_is_rejected(backend):
    store = ConfigStore(backend)
    with pytest.raises(MissingNameError):
        store.save("  ", ["x"], [])
    assert store.list() == []


def test_delete_is_idempotent(backend):
    store = ConfigStore(backend)
    store.delete("nonexistent")
    with pytest.raises(ConfigNotFoundError):
        store.load("nonexistent")
    with pytest.raises(MissingNameError):
        store.delete("")


def test_delete_rejects_blank_name_and_keeps_entries(backend):
    store = ConfigStore(backend)
    store.save("one", ["1"], [])
    with pytest.raises(MissingNameError):
        store.delete("   ")
    assert store.list() == ["one"]


def test_mutations_broadcast_list(backend):
    store = ConfigStore(backend)
    received = []
    store.settings_list_changed.connect(received.append)
    store.save("one", ["1"], [])
    store.save("two", ["2"], [])
    store.delete("one")
    assert received == [["one"], ["one", "two"], ["two"]]


def test_persisted_across_instances(tmp_path):
    path = str(tmp_path / "persist.ini")
    ConfigStore(QSettingsBackend(path)).save("kept", ["a, b"], [HighlightSpec("a", "#ff0000")])
    config = ConfigStore(QSettingsBackend(path)).load("kept")
    assert config.terms == ["a, b"]
    assert config.highlights == [HighlightSpec("a", "#ff0000")]


def test_malformed_entries_are_skipped(backend):
    backend.set("settings", {"bad": "oops", "also_bad": {"grepWords": "x"}, "good": {"grepWords": ["g"]}})
    store = ConfigStore(backend)
    assert store.list() == ["good"]
    with pytest.raises(ConfigNotFoundError):
        store.load("bad")


def test_last_state_is_replaced_and_versioned(backend):
    states = LastStateStore(backend)
    assert states.current() is None
    first = states.replace(["a"], [HighlightSpec("a", "red")])
    second = states.replace(["b"], [], "saved")
    assert first.version == 1
    assert second.version == 2
    assert states.current().terms == ("b",)
    assert states.current().highlights == ()
    assert states.current().active_config_name == "saved"


def test_last_state_survives_restart(backend):
    LastStateStore(backend).replace(["a"], [HighlightSpec("a", "red")], "cfg")
    restored = LastStateStore(backend).current()
    assert restored.terms == ("a",)
    assert restored.highlights == (HighlightSpec("a", "red"),)
    assert restored.active_config_name == "cfg"
    assert restored.version == 1


def test_last_state_clear(backend):
    states = LastStateStore(backend)
    states.replace(["a"], [])
    states.clear()
    assert states.current() is None
    assert LastStateStore(backend).current() is None
