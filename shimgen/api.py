"""
对外操作 - 序列号/几何/导出的调用入口

使用方式：
    from shimgen.api import create_session, export_documents
    from shimgen.pipeline import DirectoryOutputSink

    session = create_session(x=10, y=4, seed=1234)
    result = export_documents(session, sink=DirectoryOutputSink("output"))

导出入口默认登记到全局任务管理器 get_job_manager()，同一时间至多一个活动导出。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import get_config
from .core.permutation import PermutationEngine, validate_space
from .core.piece_builder import compute_piece
from .models import GenerationSession, PieceOptions
from .pipeline import ArchiveExporter, DocumentExporter, get_job_manager, run_async, run_sync

if TYPE_CHECKING:
    from .interfaces import IOutputSink
    from .models import ArchiveLimits, DocumentLimits, ExportResult, PrintOptions
    from .pipeline import JobManager
    from .pipeline.task import ExportTask, FinishCallback, ProgressCallback

__all__ = [
    "generate_serial_number",
    "compute_piece",
    "create_session",
    "export_documents",
    "export_documents_async",
    "export_archives",
    "export_archives_async",
]


def generate_serial_number(index: int, seed: int, x: int, y: int) -> str:
    """
    排列空间中第 index 件的序列号

    Raises:
        ConfigurationError / CapacityError: 排列空间非法
        IndexError: index 不在 [0, 2·x^y) 内
    """
    config = get_config()
    space = validate_space(
        x,
        y,
        seed,
        max_size=config.generator.max_space_size,
        max_seed=config.generator.max_seed,
    )
    return PermutationEngine(space).serial_number(index)


def create_session(
    x: int,
    y: int,
    seed: int,
    piece_count: int = 0,
    piece_options: PieceOptions | None = None,
) -> GenerationSession:
    """校验排列空间并创建生成会话（默认全选）"""
    config = get_config()
    space = validate_space(
        x,
        y,
        seed,
        max_size=config.generator.max_space_size,
        max_seed=config.generator.max_seed,
    )
    return GenerationSession(
        space=space,
        piece_count=piece_count,
        piece_options=piece_options or PieceOptions(),
    )


def _prepare_task(task: ExportTask, job_manager: JobManager | None) -> ExportTask:
    """登记到任务管理器（默认全局实例），已有活动导出时抛出 JobConflictError"""
    if job_manager is None:
        job_manager = get_job_manager()
    job_manager.start(task)
    return task


def export_documents(
    session: GenerationSession,
    print_options: PrintOptions | None = None,
    limits: DocumentLimits | None = None,
    on_progress: ProgressCallback | None = None,
    on_finish: FinishCallback | None = None,
    *,
    sink: IOutputSink,
    job_manager: JobManager | None = None,
) -> ExportResult:
    """同步导出分页PDF"""
    task = DocumentExporter(session, print_options, limits, sink, on_progress, on_finish)
    return run_sync(_prepare_task(task, job_manager))


async def export_documents_async(
    session: GenerationSession,
    print_options: PrintOptions | None = None,
    limits: DocumentLimits | None = None,
    on_progress: ProgressCallback | None = None,
    on_finish: FinishCallback | None = None,
    *,
    sink: IOutputSink,
    job_manager: JobManager | None = None,
) -> ExportResult:
    """协程导出分页PDF（块间让出事件循环）"""
    task = DocumentExporter(session, print_options, limits, sink, on_progress, on_finish)
    return await run_async(_prepare_task(task, job_manager))


def export_archives(
    session: GenerationSession,
    limits: ArchiveLimits | None = None,
    on_progress: ProgressCallback | None = None,
    on_finish: FinishCallback | None = None,
    *,
    sink: IOutputSink,
    job_manager: JobManager | None = None,
) -> ExportResult:
    """同步导出SVG归档"""
    task = ArchiveExporter(session, limits, sink, on_progress, on_finish)
    return run_sync(_prepare_task(task, job_manager))


async def export_archives_async(
    session: GenerationSession,
    limits: ArchiveLimits | None = None,
    on_progress: ProgressCallback | None = None,
    on_finish: FinishCallback | None = None,
    *,
    sink: IOutputSink,
    job_manager: JobManager | None = None,
) -> ExportResult:
    """协程导出SVG归档"""
    task = ArchiveExporter(session, limits, sink, on_progress, on_finish)
    return await run_async(_prepare_task(task, job_manager))
