"""
配置模块

从 TOML / JSON / YAML 文件加载 ModScout 配置。
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import toml
import yaml

from modscout.api.base import DEFAULT_USER_AGENT
from modscout.api.curseforge import CURSEFORGE_BASE_URL
from modscout.api.modrinth import MODRINTH_BASE_URL
from modscout.exceptions import ConfigParseError, ConfigValidationError
from modscout.models import KNOWN_LOADERS, ResolveContext
from modscout.services.batch import DEFAULT_BATCH_DELAY

CURSEFORGE_API_KEY_ENV = "CURSEFORGE_API_KEY"


@dataclass
class ScoutConfig:
    """ModScout 配置"""

    game_version: str = ""
    loader: str = ""
    auto_pick: bool = True
    curseforge_api_key: str = ""
    batch_delay: float = DEFAULT_BATCH_DELAY
    user_agent: str = DEFAULT_USER_AGENT
    modrinth_url: str = MODRINTH_BASE_URL
    curseforge_url: str = CURSEFORGE_BASE_URL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoutConfig":
        """
        从字典创建配置

        Raises:
            ConfigValidationError: 加载器未知或间隔为负数
        """
        curseforge = data.get("curseforge") or {}
        batch = data.get("batch") or {}
        http = data.get("http") or {}

        config = cls(
            game_version=str(data.get("game_version") or ""),
            loader=str(data.get("loader") or "").lower(),
            auto_pick=bool(data.get("auto_pick", True)),
            curseforge_api_key=str(
                curseforge.get("api_key") or os.environ.get(CURSEFORGE_API_KEY_ENV, "")
            ),
            batch_delay=batch.get("delay", DEFAULT_BATCH_DELAY),
            user_agent=http.get("user_agent", DEFAULT_USER_AGENT),
            modrinth_url=http.get("modrinth_url", MODRINTH_BASE_URL),
            curseforge_url=http.get("curseforge_url", CURSEFORGE_BASE_URL),
        )
        config.validate()
        return config

    def validate(self):
        if self.loader and self.loader not in KNOWN_LOADERS:
            raise ConfigValidationError(
                f"未知的加载器: {self.loader}",
                context={"allowed": sorted(KNOWN_LOADERS)},
            )
        if not isinstance(self.batch_delay, (int, float)) or self.batch_delay < 0:
            raise ConfigValidationError(f"batch.delay 必须为非负数: {self.batch_delay}")

    def to_context(
        self,
        game_version: Optional[str] = None,
        loader: Optional[str] = None,
        auto_pick: Optional[bool] = None,
        curseforge_api_key: Optional[str] = None,
    ) -> ResolveContext:
        """生成解析上下文，参数优先于配置文件中的值"""
        return ResolveContext(
            game_version=game_version or self.game_version,
            loader=(loader or self.loader).lower(),
            auto_pick=self.auto_pick if auto_pick is None else auto_pick,
            curseforge_api_key=curseforge_api_key or self.curseforge_api_key,
        )


def load_config_file(config_path: str) -> Dict[str, Any]:
    """加载配置文件"""
    path = Path(config_path)

    if not path.exists():
        raise ConfigParseError(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            return toml.load(config_path)
        elif suffix == ".json":
            return json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(f"配置文件解析失败: {e}", context={"path": config_path})
    raise ConfigParseError(f"不支持的配置文件格式: {suffix}")


def load_config(config_path: Optional[str] = None) -> ScoutConfig:
    """加载配置；未指定文件时使用默认值与环境变量"""
    if config_path is None:
        return ScoutConfig.from_dict({})
    return ScoutConfig.from_dict(load_config_file(config_path))
