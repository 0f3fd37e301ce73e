import concurrent.futures
import logging
import time
from functools import partial
from typing import List, Optional, Sequence

import psutil

from dataform.grep_models import MatchedLine, clean_terms

logger = logging.getLogger(__name__)

LINE_NUMBER_WIDTH = 8


def format_line_label(line_number: int) -> str:
    """结果视图左侧的行号标签，右对齐8位"""
    return f"{line_number:>{LINE_NUMBER_WIDTH}}: "


class MatchEngine:
    """
    行过滤引擎 - 任一关键词作为子串出现即命中（区分大小写）

    大文件按块并行扫描，合并后按行号排序，保证输出顺序与原文一致
    """

    MIN_CHUNK_SIZE = 50
    MAX_CHUNK_SIZE = 500
    SMALL_FILE_THRESHOLD = 1000

    def __init__(self, max_workers: Optional[int] = None):
        # 限制最大线程数，避免过度创建线程
        self.max_workers = min(max_workers or psutil.cpu_count() or 1, 8)
        self._last_search_time = 0.0

    def filter(self, snapshot: Sequence[str], terms: List[str]) -> List[MatchedLine]:
        """
        过滤文档快照

        Args:
            snapshot: 文档所有行（按顺序，行号从1开始）
            terms: grep关键词，空白关键词会被丢弃

        Returns:
            命中的行，保持原顺序且不重复
        """
        start_time = time.time()
        keywords = clean_terms(terms)
        if not keywords or not snapshot:
            return []

        total_lines = len(snapshot)
        if total_lines < self.SMALL_FILE_THRESHOLD:
            matched = self._scan_chunk(snapshot, 0, keywords)
        else:
            matched = self._scan_parallel(snapshot, keywords)

        self._last_search_time = time.time() - start_time
        logger.info("grep finished: %d/%d lines matched in %.3fs",
                    len(matched), total_lines, self._last_search_time)
        return matched

    def _scan_parallel(self, snapshot: Sequence[str], keywords: List[str]) -> List[MatchedLine]:
        total_lines = len(snapshot)
        chunk_size = max(
            self.MIN_CHUNK_SIZE,
            min(self.MAX_CHUNK_SIZE, total_lines // (self.max_workers * 2))
        )
        chunks = [(snapshot[i:i + chunk_size], i) for i in range(0, total_lines, chunk_size)]
        logger.debug("split %d lines into %d chunks of %d", total_lines, len(chunks), chunk_size)

        matched: List[MatchedLine] = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            scan = partial(self._scan_chunk, keywords=keywords)
            futures = [executor.submit(scan, lines, start) for lines, start in chunks]
            for future in concurrent.futures.as_completed(futures):
                matched.extend(future.result())

        # 各块完成顺序不定，按行号恢复原顺序
        matched.sort(key=lambda item: item.line_number)
        return matched

    @staticmethod
    def _scan_chunk(lines: Sequence[str], start_index: int, keywords: List[str]) -> List[MatchedLine]:
        """扫描单个文本块"""
        matched = []
        for offset, line in enumerate(lines):
            if any(keyword in line for keyword in keywords):
                matched.append(MatchedLine(start_index + offset + 1, line))
        return matched

    def get_last_search_time(self) -> float:
        """获取最后一次过滤的耗时"""
        return self._last_search_time
