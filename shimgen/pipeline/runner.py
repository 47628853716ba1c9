"""
任务驱动 - 同步/协程两种方式推进 step()

run_async 每块之间 await asyncio.sleep(0)，把控制权交还事件循环。
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from .task import StepStatus

if TYPE_CHECKING:
    from ..models import ExportResult
    from .task import ExportTask


def run_sync(task: ExportTask) -> ExportResult:
    """同步推进直到完成"""
    while task.step() is StepStatus.MORE_WORK:
        pass
    return task.result


async def run_async(task: ExportTask) -> ExportResult:
    """协程推进，块间让出"""
    while task.step() is StepStatus.MORE_WORK:
        await asyncio.sleep(0)
    return task.result
