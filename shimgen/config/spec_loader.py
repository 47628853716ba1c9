"""
打印规范加载器 - 读取 shimgen/config/print_spec.yaml

职责：
- 解析YAML并提供类型安全访问（纸张尺寸/长度单位/打印默认值）
- 缓存加载结果（避免重复解析）

使用方式：
    spec = SpecLoader.load()
    width, height = spec.get_page_size("a4", "landscape", "mm")
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from ..interfaces import ConfigurationError

DEFAULT_SPEC_PATH = Path(__file__).with_name("print_spec.yaml")


class PaperFormat(BaseModel):
    """标准纸张尺寸（纵向，mm）"""
    width: float
    height: float


class PrintSpec(BaseModel):
    """打印规范（print_spec.yaml 的结构化表示）"""
    schema_version: str

    paper_formats: dict[str, PaperFormat] = Field(default_factory=dict)

    # 每单位对应的mm数
    units: dict[str, float] = Field(default_factory=dict)

    defaults: dict[str, Any] = Field(default_factory=dict)

    # === 便捷访问方法 ===

    def get_paper_format(self, name: str) -> PaperFormat:
        """获取纸张尺寸"""
        key = name.lower()
        if key not in self.paper_formats:
            raise ConfigurationError(f"未知纸张格式: {name}")
        return self.paper_formats[key]

    def mm_per_unit(self, unit: str) -> float:
        """获取单位换算系数（mm/单位）"""
        if unit not in self.units:
            raise ConfigurationError(f"未知长度单位: {unit}")
        return self.units[unit]

    def points_per_unit(self, unit: str) -> float:
        """获取单位换算系数（pt/单位）"""
        return self.mm_per_unit(unit) * 72.0 / 25.4

    def get_page_size(
        self, format_name: str, orientation: str = "portrait", unit: str = "mm"
    ) -> tuple[float, float]:
        """按方向与单位返回页面宽高"""
        paper = self.get_paper_format(format_name)
        factor = self.mm_per_unit(unit)
        width, height = paper.width / factor, paper.height / factor
        if orientation == "landscape":
            width, height = height, width
        return width, height


class SpecLoader:
    """规范加载器（单例模式+缓存）"""

    _instance: SpecLoader | None = None

    def __new__(cls) -> SpecLoader:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    @lru_cache(maxsize=4)
    def load(cls, spec_path: str | Path = DEFAULT_SPEC_PATH) -> PrintSpec:
        """加载并缓存规范"""
        path = Path(spec_path)
        if not path.exists():
            raise FileNotFoundError(f"打印规范文件不存在: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return PrintSpec(**data)

    @classmethod
    def reload(cls, spec_path: str | Path = DEFAULT_SPEC_PATH) -> PrintSpec:
        """强制重新加载（清除缓存）"""
        cls.load.cache_clear()
        return cls.load(spec_path)


# 便捷函数
def load_print_spec(spec_path: str | Path | None = None) -> PrintSpec:
    """加载打印规范"""
    return SpecLoader.load(spec_path or DEFAULT_SPEC_PATH)
