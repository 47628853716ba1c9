"""
导出任务模型 - 定义任务状态、限额、打印选项与进度
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from ..config import PrintSpec, RuntimeConfig


class JobStatus(str, Enum):
    """任务状态枚举"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


class JobType(str, Enum):
    """任务类型"""
    DOCUMENTS = "documents"   # 分页PDF文档
    ARCHIVES = "archives"     # 每件一个SVG的ZIP归档


class Margins(BaseModel):
    """页边距（用户单位）"""
    top: float = 15.0
    bottom: float = 15.0
    left: float = 15.0
    right: float = 15.0


class PrintOptions(BaseModel):
    """打印选项"""
    format: str = "a4"
    orientation: Literal["portrait", "landscape"] = "portrait"
    sides: Literal["single", "double"] = "single"
    unit: str = "mm"
    margins: Margins = Field(default_factory=Margins)
    padding: float = Field(10.0, ge=0)
    justification: Literal["left", "center", "right"] = "left"
    cols: int = Field(1, ge=1, description="每页最少列数")
    rows: int = Field(1, ge=1, description="每页最少行数")
    seed_position: Literal["none", "header", "footer"] = "none"
    page_number_position: Literal["none", "header", "footer"] = "none"
    label_position: Literal["none", "top", "bottom"] = "none"
    font_size_pt: float | None = None

    @classmethod
    def from_spec(cls, spec: PrintSpec, **overrides) -> PrintOptions:
        """以打印规范 defaults 为底，overrides 覆盖"""
        values = {**spec.defaults, **overrides}
        return cls(**values)


class DocumentLimits(BaseModel):
    """文档导出限额"""
    max_items: int = Field(10000, ge=1)
    max_items_per_document: int = Field(1000, ge=1)
    max_pages_per_document: int = Field(100, ge=1)

    @classmethod
    def from_config(cls, config: RuntimeConfig) -> DocumentLimits:
        return cls(
            max_items=config.limits.max_items,
            max_items_per_document=config.limits.max_items_per_document,
            max_pages_per_document=config.limits.max_pages_per_document,
        )


class ArchiveLimits(BaseModel):
    """归档导出限额"""
    max_items: int = Field(10000, ge=1)
    max_items_per_archive: int = Field(1000, ge=1)

    @classmethod
    def from_config(cls, config: RuntimeConfig) -> ArchiveLimits:
        return cls(
            max_items=config.limits.max_items,
            max_items_per_archive=config.limits.max_items_per_archive,
        )


class ExportProgress(BaseModel):
    """导出进度"""
    items_done: int = 0
    items_total: int = 0
    page: int | None = None
    pages_total: int | None = None
    document: int = 0
    documents_total: int = 0
    message: str = ""

    @property
    def percent(self) -> float:
        if self.items_total <= 0:
            return 100.0
        return 100.0 * self.items_done / self.items_total

    def as_tuple(self) -> tuple[int, int, int | None, int | None, int, int]:
        """回调参数顺序 (件, 总件, 页, 总页, 文档, 总文档)"""
        return (
            self.items_done,
            self.items_total,
            self.page,
            self.pages_total,
            self.document,
            self.documents_total,
        )


class ExportResult(BaseModel):
    """导出结果（on_finish 的唯一参数）"""
    job_id: str | None = None
    job_type: JobType
    status: JobStatus
    outputs: list[str] = Field(default_factory=list)
    items_exported: int = 0
    progress: ExportProgress = Field(default_factory=ExportProgress)
    flags: list[str] = Field(default_factory=list, description="告警标记")
    errors: list[str] = Field(default_factory=list)


class ExportJob(BaseModel):
    """导出任务实体"""
    job_id: str = Field(..., description="UUID")
    job_type: JobType

    # 状态
    status: JobStatus = JobStatus.QUEUED
    progress: ExportProgress = Field(default_factory=ExportProgress)

    # 产物
    outputs: list[str] = Field(default_factory=list)

    # 结果
    flags: list[str] = Field(default_factory=list, description="告警标记")
    errors: list[str] = Field(default_factory=list, description="错误信息")

    # 时间戳
    created_at: datetime = Field(default_factory=datetime.now)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status in (JobStatus.QUEUED, JobStatus.RUNNING)

    def mark_running(self) -> None:
        """标记为运行中"""
        self.status = JobStatus.RUNNING
        self.started_at = datetime.now()

    def mark_succeeded(self) -> None:
        """标记为成功"""
        self.status = JobStatus.SUCCEEDED
        self.finished_at = datetime.now()

    def mark_failed(self, error: str) -> None:
        """标记为失败"""
        self.status = JobStatus.FAILED
        self.finished_at = datetime.now()
        self.errors.append(error)

    def mark_cancelled(self) -> None:
        """标记为已取消"""
        self.status = JobStatus.CANCELLED
        self.finished_at = datetime.now()

    def add_flag(self, flag: str) -> None:
        """添加告警标记（不中断）"""
        if flag not in self.flags:
            self.flags.append(flag)
