"""
归档导出器 - 每件一个SVG，按条目上限打包为ZIP

文件名：{x}-{y}-{seed}.zip；多于一个归档时 {x}-{y}-{seed}.{n}.zip
条目名：{序列号}.svg
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..interfaces import IArchiveWriter
from ..models import ArchiveLimits, JobType
from ..render import ZipArchiveWriter, piece_to_svg
from .task import ExportTask

if TYPE_CHECKING:
    from ..config import RuntimeConfig
    from ..interfaces import IOutputSink
    from ..models import GenerationSession, Piece
    from .task import FinishCallback, ProgressCallback

logger = logging.getLogger(__name__)

ZIP_MEDIA_TYPE = "application/zip"

WriterFactory = Callable[[], IArchiveWriter]


class ArchiveExporter(ExportTask):
    """SVG归档导出器"""

    job_type = JobType.ARCHIVES

    def __init__(
        self,
        session: GenerationSession,
        limits: ArchiveLimits | None = None,
        sink: IOutputSink | None = None,
        on_progress: ProgressCallback | None = None,
        on_finish: FinishCallback | None = None,
        *,
        writer_factory: WriterFactory | None = None,
        chunk_size: int | None = None,
        config: RuntimeConfig | None = None,
    ):
        if sink is None:
            raise ValueError("sink 不能为空")
        super().__init__(
            session, sink, on_progress, on_finish, chunk_size=chunk_size, config=config
        )
        self.limits = limits or ArchiveLimits.from_config(self.config)
        self.writer_factory = writer_factory or ZipArchiveWriter
        self.stroke_width = self.config.export.svg_stroke_width
        self._writer: IArchiveWriter | None = None

    def _prepare(self) -> None:
        items_total = min(self.session.selection.count, self.limits.max_items)
        self.progress.items_total = items_total
        self.progress.page = None
        self.progress.pages_total = None
        self.progress.document = 0
        self.progress.documents_total = math.ceil(items_total / self.limits.max_items_per_archive)

    def _emit(self, piece: Piece) -> None:
        if self._writer is None:
            self._open_archive()
        elif self._writer.entry_count >= self.limits.max_items_per_archive:
            self._close_output()
            self._open_archive()

        self._writer.begin_archive_entry(f"{piece.serial_number}.svg")
        self._writer.write(piece_to_svg(piece, self.stroke_width))
        self.progress.items_done += 1

    def _open_archive(self) -> None:
        self._writer = self.writer_factory()
        self.progress.document += 1

    def _archive_name(self) -> str:
        label = self.session.space.label
        if self.progress.documents_total > 1:
            return f"{label}.{self.progress.document}.zip"
        return f"{label}.zip"

    def _close_output(self) -> None:
        if self._writer is None:
            return
        writer, self._writer = self._writer, None
        self._save(self._archive_name(), writer.finalize_archive(), ZIP_MEDIA_TYPE)

    def _discard_output(self) -> None:
        if self._writer is not None:
            logger.debug(f"丢弃未完成归档（第 {self.progress.document} 个）")
        self._writer = None
