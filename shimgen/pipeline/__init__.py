"""
流水线模块 - 导出任务编排与执行

子模块：
- task: 可恢复步进任务骨架
- document_exporter: 分页PDF导出
- archive_exporter: SVG归档导出
- sinks: 输出接收器
- runner: 同步/协程驱动
- job_manager: 任务管理
"""

from .archive_exporter import ArchiveExporter
from .document_exporter import DocumentExporter
from .job_manager import JobManager, get_job_manager
from .runner import run_async, run_sync
from .sinks import DirectoryOutputSink, MemoryOutputSink
from .task import ExportTask, StepStatus

__all__ = [
    "StepStatus",
    "ExportTask",
    "DocumentExporter",
    "ArchiveExporter",
    "DirectoryOutputSink",
    "MemoryOutputSink",
    "run_sync",
    "run_async",
    "JobManager",
    "get_job_manager",
]
