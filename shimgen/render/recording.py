"""
录制渲染器 - 记录绘制调用，用于排版引擎的黄金输出测试
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from ..interfaces import IRenderer, RenderError

if TYPE_CHECKING:
    from ..models import BBox, DrawStyle, Point


class RecordingRenderer(IRenderer):
    """把每次绘制调用记录为 (操作, 参数...) 元组"""

    def __init__(self, page_width: float = 0.0, page_height: float = 0.0):
        self.page_width = page_width
        self.page_height = page_height
        self.ops: list[tuple[Any, ...]] = []
        self.page_count = 1
        self.finalized = False

    def _record(self, *op: Any) -> None:
        if self.finalized:
            raise RenderError("文档已完成，不能继续写入")
        self.ops.append(op)

    def begin_page(self) -> None:
        self._record("begin_page")
        self.page_count += 1

    def draw_polygon(self, points: Sequence[Point], style: DrawStyle) -> None:
        self._record("polygon", tuple((p.x, p.y) for p in points))

    def draw_rect(self, bbox: BBox, style: DrawStyle) -> None:
        self._record("rect", (bbox.xmin, bbox.ymin, bbox.xmax, bbox.ymax))

    def draw_text(self, x: float, y: float, text: str, style: DrawStyle) -> None:
        self._record("text", x, y, text)

    def texts(self) -> list[str]:
        return [op[3] for op in self.ops if op[0] == "text"]

    def count(self, name: str) -> int:
        return sum(1 for op in self.ops if op[0] == name)

    def finalize_document(self) -> bytes:
        self._record("finalize")
        self.finalized = True
        return json.dumps({"pages": self.page_count, "ops": self.ops}).encode("utf-8")
