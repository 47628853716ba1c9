"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 排版引擎只通过接口绘制，不直接依赖具体编码器（PDF/SVG/ZIP）
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试（录制渲染器）和替换

使用方式：
    from shimgen.interfaces import IRenderer

    class MyRenderer(IRenderer):
        def draw_polygon(self, points, style) -> None:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import BBox, DrawStyle, ExportJob, Point


# ============================================================================
# 绘制接口
# ============================================================================

class IRenderer(ABC):
    """渲染器接口 - 文档级绘制能力集

    坐标系：用户单位，原点在页面左上角，y向下。
    """

    @abstractmethod
    def begin_page(self) -> None:
        """开始新的一页（首页由实现自动创建）"""
        ...

    @abstractmethod
    def draw_polygon(self, points: Sequence[Point], style: DrawStyle) -> None:
        """绘制闭合多边形"""
        ...

    @abstractmethod
    def draw_rect(self, bbox: BBox, style: DrawStyle) -> None:
        """绘制矩形"""
        ...

    @abstractmethod
    def draw_text(self, x: float, y: float, text: str, style: DrawStyle) -> None:
        """在基线位置 (x, y) 绘制文本"""
        ...

    @abstractmethod
    def finalize_document(self) -> bytes:
        """
        完成文档并返回编码后的字节

        完成后不得再写入，否则抛出 RenderError
        """
        ...


class IArchiveWriter(ABC):
    """归档写入器接口 - 一件一文件的打包能力集"""

    @abstractmethod
    def begin_archive_entry(self, name: str) -> None:
        """开始新的归档条目"""
        ...

    @abstractmethod
    def write(self, data: bytes) -> None:
        """向当前条目追加数据"""
        ...

    @abstractmethod
    def finalize_archive(self) -> bytes:
        """完成归档并返回字节"""
        ...

    @property
    @abstractmethod
    def entry_count(self) -> int:
        """已写入的条目数"""
        ...


class IOutputSink(ABC):
    """输出接收器接口 - 接管已完成文档/归档的所有权"""

    @abstractmethod
    def save(self, filename: str, data: bytes, media_type: str) -> str:
        """
        保存产物

        Args:
            filename: 建议文件名
            data: 文件内容
            media_type: MIME类型

        Returns:
            产物位置（路径或标识）
        """
        ...


# ============================================================================
# 任务管理接口
# ============================================================================

class IJobManager(ABC):
    """任务管理器接口"""

    @abstractmethod
    def create_job(self, job_type: str, **kwargs) -> ExportJob:
        """创建任务"""
        ...

    @abstractmethod
    def get_job(self, job_id: str) -> ExportJob | None:
        """获取任务"""
        ...

    @abstractmethod
    def cancel_job(self, job_id: str) -> bool:
        """取消任务"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class ShimGenError(Exception):
    """基础异常"""
    pass


class ConfigurationError(ShimGenError):
    """配置错误（参数组合非法，如增量与模数不互素）"""
    pass


class CapacityError(ShimGenError):
    """容量错误（排列空间超过安全整数范围）"""
    pass


class SerialNumberError(ShimGenError):
    """序列号格式错误"""
    pass


class LayoutError(ShimGenError):
    """排版错误（页面放不下任何一件）"""
    pass


class RenderError(ShimGenError):
    """绘制错误"""
    pass


class ExportError(ShimGenError):
    """导出错误"""
    pass


class JobConflictError(ShimGenError):
    """任务冲突（已有导出任务在运行）"""
    pass
