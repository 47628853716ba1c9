"""
任务管理器 - 任务创建/查询/取消

职责：
1. 创建任务并分配ID
2. 绑定导出器，同一时间至多一个活动导出任务
3. 通过导出器的取消标记取消任务
4. 任务查询

测试要点：
- test_create_job: 创建任务
- test_get_job: 获取任务
- test_start_conflict: 第二个活动任务抛出 JobConflictError
- test_cancel_job: 取消任务
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from ..interfaces import IJobManager, JobConflictError
from ..models import ExportJob, JobStatus, JobType

if TYPE_CHECKING:
    from .task import ExportTask

logger = logging.getLogger(__name__)


class JobManager(IJobManager):
    """任务管理器实现（内存）"""

    def __init__(self):
        self._jobs: dict[str, ExportJob] = {}
        self._tasks: dict[str, ExportTask] = {}

    def create_job(self, job_type: str, **kwargs) -> ExportJob:
        """创建任务"""
        job = ExportJob(job_id=str(uuid.uuid4()), job_type=JobType(job_type), **kwargs)
        self._jobs[job.job_id] = job
        return job

    def get_job(self, job_id: str) -> ExportJob | None:
        """获取任务"""
        return self._jobs.get(job_id)

    def active_job(self) -> ExportJob | None:
        """当前活动的导出任务"""
        for job_id in self._tasks:
            job = self._jobs[job_id]
            if job.is_active:
                return job
        return None

    def start(self, task: ExportTask) -> ExportJob:
        """
        登记导出器并创建对应任务

        Raises:
            JobConflictError: 已有活动导出任务
        """
        active = self.active_job()
        if active is not None:
            raise JobConflictError(
                f"已有导出任务在运行: {active.job_id} ({active.job_type.value})"
            )
        job = self.create_job(task.job_type.value)
        task.bind_job(job)
        self._tasks[job.job_id] = task
        logger.info(f"任务已登记: {job.job_id} ({job.job_type.value})")
        return job

    def cancel_job(self, job_id: str) -> bool:
        """取消任务"""
        job = self.get_job(job_id)
        if not job or not job.is_active:
            return False

        task = self._tasks.get(job_id)
        if task is not None:
            task.cancel()
        # 运行中的任务由导出器在块边界收尾
        if task is None or task.status is not JobStatus.RUNNING:
            job.mark_cancelled()
        logger.info(f"已请求取消任务: {job_id}")
        return True

    def list_jobs(
        self,
        status: JobStatus | None = None,
        limit: int = 100,
    ) -> list[ExportJob]:
        """列出任务"""
        jobs = list(self._jobs.values())

        if status:
            jobs = [j for j in jobs if j.status == status]

        # 按创建时间降序
        jobs.sort(key=lambda j: j.created_at, reverse=True)

        return jobs[:limit]


_job_manager: JobManager | None = None


def get_job_manager() -> JobManager:
    """获取全局任务管理器"""
    global _job_manager
    if _job_manager is None:
        _job_manager = JobManager()
    return _job_manager
