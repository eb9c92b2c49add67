"""
解析结果模型

定义单次解析的上下文（ResolveContext）和结果（ResolutionOutcome）。
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from modscout.exceptions import ValidationError
from modscout.models.catalog import NormalizedFile, NormalizedMod


class ResolutionStatus(Enum):
    """解析状态"""

    FOUND = "found"
    VERSION_MISMATCH = "version_mismatch"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class ResolveContext:
    """
    单次解析请求的上下文。

    显式传入协调器，不保存任何全局会话状态。
    """

    game_version: str = ""
    loader: str = ""
    auto_pick: bool = True
    curseforge_api_key: str = ""

    @property
    def has_secondary_credential(self) -> bool:
        return bool(self.curseforge_api_key)

    def with_detected(
        self, game_version: Optional[str] = None, loader: Optional[str] = None
    ) -> "ResolveContext":
        """模组列表中检测到的版本/加载器优先于上下文中的设置"""
        return replace(
            self,
            game_version=game_version or self.game_version,
            loader=(loader or self.loader).lower(),
        )


@dataclass(frozen=True)
class ResolutionOutcome:
    """单个查询的解析结果"""

    query: str
    status: ResolutionStatus
    mod: Optional[NormalizedMod] = None
    file: Optional[NormalizedFile] = None
    available_versions: Tuple[str, ...] = ()
    target_version: str = ""
    message: str = ""

    def __post_init__(self):
        if self.status is ResolutionStatus.FOUND:
            if self.mod is None:
                raise ValidationError("found 结果必须包含模组", context={"query": self.query})
        elif self.status is ResolutionStatus.VERSION_MISMATCH:
            if self.mod is None or self.file is not None:
                raise ValidationError(
                    "version_mismatch 结果必须包含模组且不包含文件",
                    context={"query": self.query},
                )
            if not self.available_versions:
                raise ValidationError(
                    "version_mismatch 结果必须列出可用版本",
                    context={"query": self.query},
                )
        elif self.mod is not None or self.file is not None:
            raise ValidationError(
                f"{self.status.value} 结果不能包含模组或文件",
                context={"query": self.query},
            )

    @property
    def has_file(self) -> bool:
        return self.file is not None

    @classmethod
    def found(
        cls,
        query: str,
        mod: NormalizedMod,
        file: Optional[NormalizedFile] = None,
        target_version: str = "",
        message: str = "",
    ) -> "ResolutionOutcome":
        return cls(
            query=query,
            status=ResolutionStatus.FOUND,
            mod=mod,
            file=file,
            target_version=target_version,
            message=message,
        )

    @classmethod
    def version_mismatch(
        cls,
        query: str,
        mod: NormalizedMod,
        available_versions: Iterable[str],
        target_version: str,
        message: str,
    ) -> "ResolutionOutcome":
        return cls(
            query=query,
            status=ResolutionStatus.VERSION_MISMATCH,
            mod=mod,
            available_versions=tuple(available_versions),
            target_version=target_version,
            message=message,
        )

    @classmethod
    def not_found(cls, query: str, message: str) -> "ResolutionOutcome":
        return cls(query=query, status=ResolutionStatus.NOT_FOUND, message=message)

    @classmethod
    def error(cls, query: str, message: str) -> "ResolutionOutcome":
        return cls(query=query, status=ResolutionStatus.ERROR, message=message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为可 JSON 序列化的字典"""
        data: Dict[str, Any] = {
            "query": self.query,
            "status": self.status.value,
            "targetVersion": self.target_version or None,
            "message": self.message or None,
            "mod": None,
            "file": None,
        }
        if self.mod is not None:
            data["mod"] = self.mod.to_dict()
        if self.file is not None:
            data["file"] = self.file.to_dict()
        if self.available_versions:
            data["availableVersions"] = list(self.available_versions)
        return data
