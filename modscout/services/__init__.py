"""
ModScout 服务层

包含业务逻辑服务：搜索词变体、文件选择、单目录解析、批量解析。
"""

from modscout.services.variations import generate_search_variations
from modscout.services.version_matcher import (
    pick_best_file,
    sort_versions,
    extract_available_versions,
    merge_available_versions,
)
from modscout.services.catalog_resolver import CatalogResolver
from modscout.services.batch import BatchImporter, BatchReport

__all__ = [
    "generate_search_variations",
    "pick_best_file",
    "sort_versions",
    "extract_available_versions",
    "merge_available_versions",
    "CatalogResolver",
    "BatchImporter",
    "BatchReport",
]
