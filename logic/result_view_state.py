from typing import List, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from dataform.grep_models import RenderedLine


class ResultViewState(QObject):
    """
    结果视图状态机 - 管理字体缩放、换行以及修剪模式下的行选择/删除

    两种状态: normal 与 trim-active。界面只负责按状态绘制，不持有行为。
    """

    lines_changed = pyqtSignal()            # 行被删除
    selection_changed = pyqtSignal()        # 选中状态变化
    font_size_changed = pyqtSignal(int)     # 字体大小变化
    wrap_changed = pyqtSignal(bool)         # 换行模式变化
    trim_mode_changed = pyqtSignal(bool)    # 修剪模式开关

    DEFAULT_FONT_SIZE = 14
    FONT_STEP = 2
    MIN_FONT_SIZE = 10
    MAX_FONT_SIZE = 40

    def __init__(self, lines: List[RenderedLine]):
        super().__init__()
        self.lines: List[RenderedLine] = list(lines)
        self.trim_active = False
        self.last_clicked: Optional[int] = None
        self.font_size = self.DEFAULT_FONT_SIZE
        self.wrap_enabled = True

    # ---- 修剪模式 ----

    def set_trim_mode(self, enabled: bool):
        """切换修剪模式，关闭时清除所有选中"""
        if enabled == self.trim_active:
            return
        self.trim_active = enabled
        if not enabled:
            self._clear_selection()
        self.trim_mode_changed.emit(enabled)

    def click(self, index: int, shift: bool = False, from_input: bool = False):
        """
        行点击处理

        Args:
            index: 行在当前可见序列中的索引
            shift: 是否按住Shift（范围选择）
            from_input: 点击目标是否为输入控件（忽略）
        """
        if not self.trim_active or from_input:
            return
        if not (0 <= index < len(self.lines)):
            return

        if shift and self.last_clicked is not None and self.last_clicked < len(self.lines):
            low, high = sorted((self.last_clicked, index))
            for i in range(low, high + 1):
                self.lines[i].selected = True
        else:
            self.lines[index].selected = not self.lines[index].selected

        self.last_clicked = index
        self.selection_changed.emit()

    def remove_selected(self) -> int:
        """删除所有选中行，返回删除的行数"""
        remaining = [line for line in self.lines if not line.selected]
        removed = len(self.lines) - len(remaining)
        self.lines = remaining
        self.last_clicked = None
        if removed:
            self.lines_changed.emit()
        return removed

    def selected_indices(self) -> List[int]:
        return [i for i, line in enumerate(self.lines) if line.selected]

    def _clear_selection(self):
        for line in self.lines:
            line.selected = False
        self.last_clicked = None
        self.selection_changed.emit()

    # ---- 缩放 ----

    def zoom_in(self):
        """放大字体"""
        self._set_font_size(self.font_size + self.FONT_STEP)

    def zoom_out(self):
        """缩小字体"""
        self._set_font_size(self.font_size - self.FONT_STEP)

    def reset_zoom(self):
        """重置字体大小"""
        self._set_font_size(self.DEFAULT_FONT_SIZE)

    def _set_font_size(self, size: int):
        size = max(self.MIN_FONT_SIZE, min(self.MAX_FONT_SIZE, size))
        if size != self.font_size:
            self.font_size = size
            self.font_size_changed.emit(size)

    # ---- 换行 ----

    def toggle_wrap(self):
        """切换文本换行模式"""
        self.set_wrap(not self.wrap_enabled)

    def set_wrap(self, enabled: bool):
        """设置文本换行模式"""
        if self.wrap_enabled != enabled:
            self.wrap_enabled = enabled
            self.wrap_changed.emit(enabled)
