"""
运行期配置 - 读取 config/shimgen_runtime.yaml

职责：
- 加载排列容量/分块大小/导出限额等运行参数
- 提供环境变量覆盖机制（SHIMGEN_ 前缀）
- 类型安全的配置访问
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class GeneratorConfig(BaseModel):
    """序列号生成配置"""

    max_seed: int = 999999
    max_space_size: int = 2**53 - 1  # 与浏览器端安全整数上限一致


class ExportConfig(BaseModel):
    """导出配置"""

    chunk_size: int = 100
    font_size_pt: float = 10.0
    line_width_ratio: float = 0.05
    label_gap_mm: float = 1.0
    svg_stroke_width: float = 0.1


class LimitsConfig(BaseModel):
    """默认导出限额"""

    max_items: int = 10000
    max_items_per_document: int = 1000
    max_pages_per_document: int = 100
    max_items_per_archive: int = 1000


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    # 基础路径
    output_dir: Path = Path("output")
    print_spec_path: Path | None = None

    # 各子配置
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "SHIMGEN_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})
        paths = cls._extract(runtime_opts, "paths")

        config = cls(
            generator=GeneratorConfig(**cls._extract(runtime_opts, "generator")),
            export=ExportConfig(**cls._extract(runtime_opts, "export")),
            limits=LimitsConfig(**cls._extract(runtime_opts, "limits")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
            **paths,
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if self.print_spec_path and not self.print_spec_path.is_absolute():
            self.print_spec_path = (base_dir / self.print_spec_path).resolve()


def configure_logging(config: RuntimeConfig | None = None) -> None:
    """按配置初始化根日志"""
    config = config or get_config()
    logging.basicConfig(
        level=getattr(logging, config.logging.log_level.upper(), logging.INFO),
        format=config.logging.log_format,
    )


# 全局配置实例
_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("config/shimgen_runtime.yaml")


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
