"""
输出接收器 - 接管导出产物

- DirectoryOutputSink: 写入输出目录，返回文件路径
- MemoryOutputSink: 保存在内存（测试/嵌入调用）
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..interfaces import ExportError, IOutputSink

logger = logging.getLogger(__name__)


class DirectoryOutputSink(IOutputSink):
    """目录输出"""

    def __init__(self, output_dir: Path | str):
        self.output_dir = Path(output_dir)

    def save(self, filename: str, data: bytes, media_type: str) -> str:
        if Path(filename).name != filename:
            raise ExportError(f"文件名不能包含路径: {filename}")
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename
        path.write_bytes(data)
        logger.debug(f"写入 {path} ({media_type})")
        return str(path)


class MemoryOutputSink(IOutputSink):
    """内存输出"""

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.media_types: dict[str, str] = {}

    def save(self, filename: str, data: bytes, media_type: str) -> str:
        self.files[filename] = data
        self.media_types[filename] = media_type
        return filename

    @property
    def filenames(self) -> list[str]:
        return list(self.files)
