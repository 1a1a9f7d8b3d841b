"""
编号生成器
固定前缀 + 补零数字后缀的单调递增编号（如 BK00001、G0001、PAY00001）
计数器不直接持久化，加载数据后通过扫描已有编号的最大后缀进行对齐
"""
from typing import Iterable, Optional
import logging

logger = logging.getLogger(__name__)


class IdSequence:
    """单调递增编号序列"""

    def __init__(self, prefix: str, width: int, start: int = 1):
        self.prefix = prefix
        self.width = width
        self._next = start

    @property
    def next_value(self) -> int:
        """下一个将要分配的数字"""
        return self._next

    def format(self, value: int) -> str:
        return f"{self.prefix}{value:0{self.width}d}"

    def next_id(self) -> str:
        """分配下一个编号"""
        value = self._next
        self._next += 1
        return self.format(value)

    def parse(self, identifier: str) -> Optional[int]:
        """解析编号的数字后缀，前缀不符或非数字时返回 None"""
        if not identifier or not identifier.startswith(self.prefix):
            return None
        suffix = identifier[len(self.prefix):]
        if not (suffix.isascii() and suffix.isdigit()):
            return None
        return int(suffix)

    def reconcile(self, identifiers: Iterable[str]) -> int:
        """
        根据已存在的编号对齐计数器

        计数器只会前进，不会回退

        Args:
            identifiers: 已存在的编号

        Returns:
            对齐后的下一个数字
        """
        highest = None
        for identifier in identifiers:
            value = self.parse(identifier)
            if value is not None and (highest is None or value > highest):
                highest = value

        if highest is not None and highest >= self._next:
            logger.debug(f"Sequence {self.prefix} advanced from {self._next} to {highest + 1}")
            self._next = highest + 1
        return self._next
