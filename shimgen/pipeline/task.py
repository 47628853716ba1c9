"""
可恢复导出任务 - 分块步进的公共骨架

职责：
1. step() 每次最多处理 chunk_size 件，返回 MORE_WORK / DONE
2. 每块结束后（让出控制权前）回调进度
3. 块边界检查取消标记
4. on_finish 恰好调用一次（成功/取消/失败）

测试要点：
- test_step_until_done: 步进直到完成
- test_progress_after_each_chunk: 每块回调进度
- test_cancel_at_chunk_boundary: 块边界取消
- test_finish_called_once: 完成回调仅一次
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from enum import Enum
from typing import TYPE_CHECKING

from ..config import RuntimeConfig, get_config
from ..core.permutation import PermutationEngine
from ..core.piece_builder import compute_piece
from ..models import ExportProgress, ExportResult, JobStatus, JobType

if TYPE_CHECKING:
    from ..interfaces import IOutputSink
    from ..models import ExportJob, GenerationSession, Piece

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, int | None, int | None, int, int], None]
FinishCallback = Callable[[ExportResult], None]


class StepStatus(str, Enum):
    """步进结果"""
    MORE_WORK = "more_work"
    DONE = "done"


class ExportTask(ABC):
    """导出任务基类"""

    job_type: JobType

    def __init__(
        self,
        session: GenerationSession,
        sink: IOutputSink,
        on_progress: ProgressCallback | None = None,
        on_finish: FinishCallback | None = None,
        *,
        chunk_size: int | None = None,
        config: RuntimeConfig | None = None,
    ):
        self.config = config or get_config()
        self.session = session
        self.sink = sink
        self.on_progress = on_progress
        self.on_finish = on_finish
        self.chunk_size = chunk_size or self.config.export.chunk_size
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size 必须 >= 1: {self.chunk_size}")

        self.engine = PermutationEngine(session.space)
        self.progress = ExportProgress()
        self.outputs: list[str] = []
        self.flags: list[str] = []
        self.job: ExportJob | None = None

        self._indices: Iterator[int] | None = None
        self._cancel_requested = False
        self._status = JobStatus.QUEUED
        self._result: ExportResult | None = None

    # === 对外接口 ===

    @property
    def status(self) -> JobStatus:
        return self._status

    @property
    def done(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> ExportResult | None:
        return self._result

    def bind_job(self, job: ExportJob) -> None:
        """绑定任务实体（由 JobManager 调用）"""
        self.job = job
        job.progress = self.progress

    def cancel(self) -> None:
        """请求取消，在下一个块边界生效"""
        if not self.done:
            self._cancel_requested = True

    def step(self) -> StepStatus:
        """处理一块，返回是否还有剩余工作"""
        if self.done:
            return StepStatus.DONE

        try:
            if self._cancel_requested:
                self._finish_cancelled()
                return StepStatus.DONE

            if self._indices is None:
                self._begin()

            processed = 0
            while processed < self.chunk_size:
                if self.progress.items_done >= self.progress.items_total:
                    break
                index = next(self._indices, None)
                if index is None:
                    break
                piece = self._build(index)
                if piece is not None:
                    self._emit(piece)
                processed += 1
            else:
                if self.progress.items_done < self.progress.items_total:
                    self._notify_progress()
                    return StepStatus.MORE_WORK

            self._finish_succeeded()
            return StepStatus.DONE

        except Exception as e:
            if self._result is not None:
                # on_finish 已调用，回调自身的异常原样抛给调用方
                raise
            logger.exception(f"导出失败: {self.session.space.label}")
            self._finish_failed(e)
            raise

    # === 子类实现 ===

    @abstractmethod
    def _prepare(self) -> None:
        """计算总量与布局（首个步进时调用）"""
        ...

    @abstractmethod
    def _emit(self, piece: Piece) -> None:
        """输出单件"""
        ...

    @abstractmethod
    def _close_output(self) -> None:
        """完成并保存进行中的文档/归档"""
        ...

    @abstractmethod
    def _discard_output(self) -> None:
        """丢弃进行中的文档/归档"""
        ...

    # === 内部流程 ===

    def _begin(self) -> None:
        self._status = JobStatus.RUNNING
        if self.job:
            self.job.mark_running()
        self._indices = iter(self.session.selection)
        self._prepare()
        logger.info(
            f"开始导出[{self.job_type.value}] {self.session.space.label}: "
            f"{self.progress.items_total} 件, {self.progress.documents_total} 个文件"
        )

    def _build(self, index: int) -> Piece | None:
        sn = self.engine.serial_number(index)
        piece = compute_piece(sn, self.session.piece_options)
        if piece is None:
            self._add_flag(f"序列号非法:{sn}")
        return piece

    def _save(self, filename: str, data: bytes, media_type: str) -> None:
        """产物所有权移交给输出接收器"""
        location = self.sink.save(filename, data, media_type)
        self.outputs.append(location)
        if self.job:
            self.job.outputs.append(location)
        logger.info(f"已保存 {filename} ({len(data)} 字节)")
        self._notify_progress()

    def _notify_progress(self) -> None:
        if self.on_progress:
            self.on_progress(*self.progress.as_tuple())

    def _add_flag(self, flag: str) -> None:
        if flag not in self.flags:
            self.flags.append(flag)
        if self.job:
            self.job.add_flag(flag)

    def _finish_succeeded(self) -> None:
        self._close_output()
        self._status = JobStatus.SUCCEEDED
        self.progress.message = "完成"
        if self.job:
            self.job.mark_succeeded()
        logger.info(
            f"导出完成[{self.job_type.value}] {self.session.space.label}: "
            f"{self.progress.items_done} 件, {len(self.outputs)} 个文件"
        )
        self._finish()

    def _finish_cancelled(self) -> None:
        self._discard_output()
        self._status = JobStatus.CANCELLED
        self.progress.message = "已取消"
        if self.job:
            self.job.mark_cancelled()
        logger.info(f"导出已取消: {self.session.space.label} ({self.progress.items_done} 件)")
        self._finish()

    def _finish_failed(self, error: Exception) -> None:
        self._discard_output()
        self._status = JobStatus.FAILED
        self.progress.message = f"失败: {error}"
        if self.job:
            self.job.mark_failed(str(error))
        self._finish(errors=[str(error)])

    def _finish(self, errors: list[str] | None = None) -> None:
        self._result = ExportResult(
            job_id=self.job.job_id if self.job else None,
            job_type=self.job_type,
            status=self._status,
            outputs=list(self.outputs),
            items_exported=self.progress.items_done,
            progress=self.progress.model_copy(),
            flags=list(self.flags),
            errors=errors or [],
        )
        if self.on_finish:
            self.on_finish(self._result)
