import json
import logging
from typing import List, Optional, Tuple

from dataform.grep_models import NO_COLOR, HighlightSpec, clean_highlights, clean_terms
from logic.errors import MalformedImportError

logger = logging.getLogger(__name__)


def export_settings(terms: List[str], highlights: List[HighlightSpec]) -> str:
    """导出草稿为JSON，不包含配置名称"""
    payload = {
        "Grep": clean_terms(terms),
        "Highlight": [spec.to_dict() for spec in clean_highlights(highlights)],
    }
    return json.dumps(payload, ensure_ascii=False)


def parse_settings(text: str) -> Tuple[List[str], List[HighlightSpec]]:
    """
    解析导入的JSON

    Raises:
        MalformedImportError: 格式错误或缺少 Grep/Highlight 字段
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise MalformedImportError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedImportError("top level must be an object")
    terms = data.get("Grep")
    highlights = data.get("Highlight")
    if not isinstance(terms, list) or not isinstance(highlights, list):
        raise MalformedImportError("'Grep' and 'Highlight' must be lists")
    if not all(isinstance(term, str) for term in terms):
        raise MalformedImportError("'Grep' entries must be strings")

    specs = []
    for item in highlights:
        if not isinstance(item, dict) or not isinstance(item.get("word"), str):
            raise MalformedImportError("'Highlight' entries need a 'word' string")
        color = item.get("color", NO_COLOR)
        if not isinstance(color, str):
            raise MalformedImportError("'color' must be a string")
        specs.append(HighlightSpec(item["word"], color))
    return terms, specs


def import_settings(text: str) -> Optional[Tuple[List[str], List[HighlightSpec]]]:
    """导入JSON，失败时返回 None 且不修改任何状态"""
    try:
        return parse_settings(text)
    except MalformedImportError as e:
        logger.debug("import ignored: %s", e)
        return None
