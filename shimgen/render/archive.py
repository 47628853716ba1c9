"""
ZIP归档写入器 - 一件一文件的批量打包

依赖：
- zipfile: DEFLATE压缩，内存缓冲
"""

from __future__ import annotations

import io
import zipfile

from ..interfaces import IArchiveWriter, RenderError


class ZipArchiveWriter(IArchiveWriter):
    """ZIP归档写入器实现"""

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self._buffer = io.BytesIO()
        self._zip = zipfile.ZipFile(self._buffer, "w", compression)
        self._current_name: str | None = None
        self._current_data = bytearray()
        self._entries = 0
        self._finalized = False

    def _check_open(self) -> None:
        if self._finalized:
            raise RenderError("归档已完成，不能继续写入")

    def _flush_entry(self) -> None:
        if self._current_name is not None:
            self._zip.writestr(self._current_name, bytes(self._current_data))
            self._entries += 1
        self._current_name = None
        self._current_data = bytearray()

    def begin_archive_entry(self, name: str) -> None:
        self._check_open()
        self._flush_entry()
        self._current_name = name

    def write(self, data: bytes) -> None:
        self._check_open()
        if self._current_name is None:
            raise RenderError("未开始归档条目")
        self._current_data.extend(data)

    @property
    def entry_count(self) -> int:
        return self._entries + (1 if self._current_name is not None else 0)

    def finalize_archive(self) -> bytes:
        self._check_open()
        self._flush_entry()
        self._zip.close()
        self._finalized = True
        return self._buffer.getvalue()
