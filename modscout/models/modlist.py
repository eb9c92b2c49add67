"""
模组列表模型
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ParsedModList:
    """
    解析后的模组列表。

    mods 保持文件中的顺序，允许重复。
    """

    format_label: str
    mods: Tuple[str, ...]
    game_version: Optional[str] = None
    loader: Optional[str] = None

    def __len__(self) -> int:
        return len(self.mods)
