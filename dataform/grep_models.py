from dataclasses import dataclass, field
from typing import List, Optional

# 高亮颜色中表示"不着色"的哨兵值
NO_COLOR = "none"

# 新增高亮行时按顺序轮换使用的颜色
LIGHT_PALETTE = ["yellow", "lime", "red", "aqua", "blue", "fuchsia", "silver"]
DARK_PALETTE = ["olive", "green", "maroon", "purple", "navy", "teal", "gray"]


def palette_color(index: int, dark: bool = False) -> str:
    """按索引取调色板颜色（循环）"""
    palette = DARK_PALETTE if dark else LIGHT_PALETTE
    return palette[index % len(palette)]


@dataclass
class HighlightSpec:
    """高亮配置 - 关键词与显示颜色"""
    word: str
    color: str = NO_COLOR

    @property
    def is_visible(self) -> bool:
        return bool(self.word) and self.color.strip().lower() not in ("", NO_COLOR)

    def to_dict(self) -> dict:
        return {"word": self.word, "color": self.color}

    @classmethod
    def from_dict(cls, data: dict) -> "HighlightSpec":
        return cls(word=str(data.get("word", "")), color=str(data.get("color", NO_COLOR)))


@dataclass
class MatchedLine:
    """匹配行 - 行号从1开始，文本保持原样"""
    line_number: int
    text: str


@dataclass
class Segment:
    """渲染片段，color 为 None 表示普通文本"""
    text: str
    color: Optional[str] = None


@dataclass
class RenderedLine:
    """带高亮片段的结果行，selected 由结果视图状态机维护"""
    line_number: int
    segments: List[Segment] = field(default_factory=list)
    selected: bool = False

    @property
    def text(self) -> str:
        return "".join(segment.text for segment in self.segments)


@dataclass
class NamedConfig:
    """命名的搜索配置"""
    name: str
    terms: List[str] = field(default_factory=list)
    highlights: List[HighlightSpec] = field(default_factory=list)


@dataclass(frozen=True)
class LastActiveState:
    """最近一次编辑的草稿状态（整体替换，不做合并）"""
    terms: tuple
    highlights: tuple
    active_config_name: Optional[str] = None
    version: int = 0


def clean_terms(terms) -> List[str]:
    """去掉空白的grep关键词"""
    return [term for term in (terms or []) if isinstance(term, str) and term.strip()]


def clean_highlights(highlights) -> List[HighlightSpec]:
    """把消息中的字典或 HighlightSpec 统一转换，丢弃空关键词和无法识别的项"""
    result = []
    for item in highlights or []:
        if isinstance(item, HighlightSpec):
            spec = item
        elif isinstance(item, dict):
            spec = HighlightSpec.from_dict(item)
        else:
            continue
        if spec.word:
            result.append(spec)
    return result
