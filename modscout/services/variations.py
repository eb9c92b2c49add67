"""
搜索词变体生成

为用户输入的名称/slug 生成多种拼写，以提高搜索命中率。
"""

import re
from typing import List

FILLER_PREFIX = re.compile(r"^(mod-|mod_|the-|the_)", re.IGNORECASE)
FILLER_SUFFIX = re.compile(r"(-mod|_mod|-fabric|-forge|-neoforge|-quilt)$", re.IGNORECASE)
CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")

ABBREVIATIONS = {
    "jei": "just enough items",
    "rei": "roughly enough items",
    "emi": "emi",
    "nei": "not enough items",
    "wthit": "what the hell is that",
}


def generate_search_variations(name: str) -> List[str]:
    """
    生成搜索词变体

    Args:
        name: 用户输入的模组名称或 slug

    Returns:
        去重后的变体列表，第一个元素始终是去掉首尾空白的原始输入
    """
    original = name.strip()
    if not original:
        return []

    candidates = [
        original,
        # "fabric-api" -> "fabric api"
        original.replace("-", " "),
        original.replace("_", " "),
        # "fabric api" -> "fabric-api"
        re.sub(r"\s+", "-", original),
    ]

    cleaned = FILLER_SUFFIX.sub("", FILLER_PREFIX.sub("", original))
    if cleaned != original and len(cleaned) > 2:
        candidates.append(cleaned)

    # "JustEnoughItems" -> "Just Enough Items"
    candidates.append(CAMEL_BOUNDARY.sub(r"\1 \2", original))

    abbreviation = ABBREVIATIONS.get(original.lower())
    if abbreviation:
        candidates.append(abbreviation)

    # dict 保持插入顺序，搜索顺序可复现
    return list(dict.fromkeys(c for c in candidates if c))
