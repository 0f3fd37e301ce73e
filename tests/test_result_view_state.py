from dataform.grep_models import RenderedLine, Segment
from logic.result_view_state import ResultViewState


def make_state(texts=("A", "B", "C", "D")):
    lines = [RenderedLine(i + 1, [Segment(text)]) for i, text in enumerate(texts)]
    return ResultViewState(lines)


def visible(state):
    return [line.text for line in state.lines]


def test_click_then_shift_click_selects_range_and_removes():
    state = make_state()
    state.set_trim_mode(True)
    state.click(1)
    state.click(3, shift=True)
    assert state.selected_indices() == [1, 2, 3]
    assert state.remove_selected() == 3
    assert visible(state) == ["A"]
    assert state.last_clicked is None


def test_descending_shift_range():
    state = make_state()
    state.set_trim_mode(True)
    state.click(3)
    state.click(0, shift=True)
    assert state.selected_indices() == [0, 1, 2, 3]


def test_click_toggles():
    state = make_state()
    state.set_trim_mode(True)
    state.click(2)
    state.click(2)
    assert state.selected_indices() == []


def test_clicks_ignored_outside_trim_mode_and_from_inputs():
    state = make_state()
    state.click(0)
    assert state.selected_indices() == []
    state.set_trim_mode(True)
    state.click(0, from_input=True)
    state.click(99)
    assert state.selected_indices() == []


def test_shift_click_without_anchor_toggles_single_line():
    state = make_state()
    state.set_trim_mode(True)
    state.click(2, shift=True)
    assert state.selected_indices() == [2]


def test_leaving_trim_mode_clears_selection():
    state = make_state()
    modes = []
    state.trim_mode_changed.connect(modes.append)
    state.set_trim_mode(True)
    state.click(0)
    state.click(2, shift=True)
    state.set_trim_mode(False)
    assert state.selected_indices() == []
    assert state.last_clicked is None
    assert modes == [True, False]
    assert visible(state) == ["A", "B", "C", "D"]


def test_zoom_is_clamped():
    state = make_state()
    sizes = []
    state.font_size_changed.connect(sizes.append)
    for _ in range(30):
        state.zoom_in()
    assert state.font_size == ResultViewState.MAX_FONT_SIZE
    for _ in range(30):
        state.zoom_out()
    assert state.font_size == ResultViewState.MIN_FONT_SIZE
    assert sizes[0] == ResultViewState.DEFAULT_FONT_SIZE + ResultViewState.FONT_STEP
    state.reset_zoom()
    assert state.font_size == ResultViewState.DEFAULT_FONT_SIZE


def test_wrap_toggle():
    state = make_state()
    changes = []
    state.wrap_changed.connect(changes.append)
    assert state.wrap_enabled
    state.toggle_wrap()
    state.set_wrap(False)
    assert changes == [False]
