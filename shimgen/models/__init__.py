"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- SerialNumber: 序列号文本编码
- Point/Shim/Slot/Piece/BBox: 组合件几何
- PermutationSpace/GenerationSession: 排列空间与会话配置
- Selection: 有序选择集
- ExportJob/ExportProgress/ExportResult: 导出任务与进度
"""

from .geometry import BBox, DrawStyle, Piece, PieceOptions, Point, Shim, Slot
from .job import (
    ArchiveLimits,
    DocumentLimits,
    ExportJob,
    ExportProgress,
    ExportResult,
    JobStatus,
    JobType,
    Margins,
    PrintOptions,
)
from .selection import Selection, SelectionMode
from .serial import MAX_SHIMS_PER_SLOT, SerialNumber
from .session import GenerationSession, PermutationSpace

__all__ = [
    "SerialNumber",
    "MAX_SHIMS_PER_SLOT",
    "Point",
    "BBox",
    "Shim",
    "Slot",
    "Piece",
    "PieceOptions",
    "DrawStyle",
    "PermutationSpace",
    "GenerationSession",
    "Selection",
    "SelectionMode",
    "ExportJob",
    "ExportProgress",
    "ExportResult",
    "JobStatus",
    "JobType",
    "Margins",
    "PrintOptions",
    "DocumentLimits",
    "ArchiveLimits",
]
