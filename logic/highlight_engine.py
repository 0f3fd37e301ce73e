import html
import re
from typing import List, Optional, Sequence, Tuple, Union

from dataform.grep_models import HighlightSpec, MatchedLine, RenderedLine, Segment, clean_highlights

# 写入 style 属性前的颜色合法字符
_SAFE_COLOR = re.compile(r"^[#A-Za-z0-9(),.%\s-]+$")

Span = Tuple[int, int, str]


class HighlightEngine:
    """
    高亮渲染引擎

    按配置顺序逐个查找关键词（字面量、忽略大小写），先出现在列表中的
    关键词拥有其匹配区间，后续关键词与已占用区间重叠的匹配整体丢弃。
    """

    def render(self, lines: Sequence[Union[MatchedLine, str]],
               specs: Sequence[HighlightSpec]) -> List[RenderedLine]:
        """
        渲染匹配行

        Args:
            lines: 匹配行（MatchedLine 或纯文本，纯文本按顺序编号）
            specs: 高亮配置，顺序即优先级

        Returns:
            每行一个 RenderedLine
        """
        patterns = self._compile(specs)
        rendered = []
        for index, line in enumerate(lines):
            if isinstance(line, MatchedLine):
                line_number, text = line.line_number, line.text
            else:
                line_number, text = index + 1, line
            spans = self.find_spans(text, patterns)
            rendered.append(RenderedLine(line_number, self._split(text, spans)))
        return rendered

    @staticmethod
    def _compile(specs: Sequence[HighlightSpec]) -> List[Tuple["re.Pattern", str]]:
        """编译可见的高亮配置，颜色为 none 或关键词为空的直接跳过"""
        compiled = []
        for spec in clean_highlights(specs):
            if not spec.is_visible:
                continue
            compiled.append((re.compile(re.escape(spec.word), re.IGNORECASE), spec.color))
        return compiled

    @staticmethod
    def find_spans(text: str, patterns: List[Tuple["re.Pattern", str]]) -> List[Span]:
        """计算一行中所有高亮区间 (start, end, color)，按起点排序"""
        owned: List[Span] = []
        for pattern, color in patterns:
            pos = 0
            while pos <= len(text):
                match = pattern.search(text, pos)
                if not match:
                    break
                start, end = match.span()
                if any(start < o_end and o_start < end for o_start, o_end, _ in owned):
                    # 与已有区间重叠，从下一个字符继续找
                    pos = start + 1
                    continue
                owned.append((start, end, color))
                pos = end
        owned.sort(key=lambda span: span[0])
        return owned

    @staticmethod
    def _split(text: str, spans: List[Span]) -> List[Segment]:
        segments = []
        cursor = 0
        for start, end, color in spans:
            if start > cursor:
                segments.append(Segment(text[cursor:start]))
            segments.append(Segment(text[start:end], color))
            cursor = end
        if cursor < len(text) or not segments:
            segments.append(Segment(text[cursor:]))
        return segments


def safe_color(color: Optional[str]) -> Optional[str]:
    """颜色值只允许安全字符，否则视为不着色"""
    if not color or not _SAFE_COLOR.match(color):
        return None
    return color.strip()


def to_html(line: RenderedLine) -> str:
    """把片段转换为HTML，先转义文本再包裹颜色标签"""
    parts = []
    for segment in line.segments:
        escaped = html.escape(segment.text, quote=True)
        color = safe_color(segment.color)
        if color:
            parts.append(f'<span style="background-color: {color}; font-weight: bold;">{escaped}</span>')
        else:
            parts.append(escaped)
    return "".join(parts)
