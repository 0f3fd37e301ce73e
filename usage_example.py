#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MatchEngine / HighlightEngine 使用示例
展示不依赖界面时如何过滤、渲染和导出配置
"""

from dataform.grep_models import HighlightSpec
from logic.highlight_engine import HighlightEngine, to_html
from logic.match_engine import MatchEngine, format_line_label
from logic.settings_codec import export_settings, import_settings


def example_basic_usage():
    """基本使用示例"""
    print("🔍 基本使用示例")
    print("-" * 40)

    sample_text = """
2024-01-01 10:00:00 INFO 应用程序启动
2024-01-01 10:00:01 DEBUG 初始化配置
2024-01-01 10:00:02 WARNING 配置文件未找到，使用默认配置
2024-01-01 10:00:03 ERROR 数据库连接失败 <db=main>
2024-01-01 10:00:04 INFO 尝试重新连接数据库
2024-01-01 10:00:05 ERROR 连接超时
""".strip()

    terms = ["ERROR", "WARNING"]
    specs = [HighlightSpec("error", "red"), HighlightSpec("warning", "yellow"), HighlightSpec("db", "aqua")]

    matched = MatchEngine(max_workers=2).filter(sample_text.splitlines(), terms)
    rendered = HighlightEngine().render(matched, specs)

    print(f"匹配行数: {len(matched)}")
    for line in rendered:
        print(f"{format_line_label(line.line_number)}{to_html(line)}")


def example_export_import():
    """导出/导入示例"""
    print("\n📦 导出/导入示例")
    print("-" * 40)

    exported = export_settings(["err"], [HighlightSpec("err", "red")])
    print(f"导出: {exported}")
    print(f"导入: {import_settings(exported)}")
    print(f"错误输入: {import_settings('not json')}")


if __name__ == "__main__":
    example_basic_usage()
    example_export_import()
