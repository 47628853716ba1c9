"""
PDF渲染器 - 基于 reportlab 画布的多页文档

职责：
1. 用户单位（mm/cm/in/pt，左上角原点）→ PDF点（左下角原点）
2. 绘制多边形/矩形/文本
3. 完成后输出PDF字节

依赖：
- reportlab: PDF画布

测试要点：
- test_pdf_header: 输出以 %PDF 开头
- test_write_after_finalize: 完成后写入抛出 RenderError
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from typing import TYPE_CHECKING

from reportlab.lib import colors
from reportlab.pdfgen import canvas

from ..interfaces import IRenderer, RenderError

if TYPE_CHECKING:
    from ..models import BBox, DrawStyle, Point

PDF_FONT = "Helvetica"


class PdfRenderer(IRenderer):
    """PDF渲染器实现"""

    def __init__(
        self,
        page_width: float,
        page_height: float,
        points_per_unit: float,
        title: str | None = None,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.k = points_per_unit
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(
            self._buffer,
            pagesize=(page_width * points_per_unit, page_height * points_per_unit),
        )
        if title:
            self._canvas.setTitle(title)
        self._finalized = False
        self.page_count = 1

    def _check_open(self) -> None:
        if self._finalized:
            raise RenderError("文档已完成，不能继续写入")

    def _to_pdf(self, x: float, y: float) -> tuple[float, float]:
        return x * self.k, (self.page_height - y) * self.k

    def _apply_style(self, style: DrawStyle) -> bool:
        self._canvas.setLineWidth(style.stroke_width * self.k)
        self._canvas.setStrokeColor(colors.toColor(style.stroke_color))
        if style.fill_color:
            self._canvas.setFillColor(colors.toColor(style.fill_color))
            return True
        return False

    def begin_page(self) -> None:
        self._check_open()
        self._canvas.showPage()
        self.page_count += 1

    def draw_polygon(self, points: Sequence[Point], style: DrawStyle) -> None:
        self._check_open()
        if len(points) < 2:
            return
        fill = self._apply_style(style)
        path = self._canvas.beginPath()
        path.moveTo(*self._to_pdf(points[0].x, points[0].y))
        for p in points[1:]:
            path.lineTo(*self._to_pdf(p.x, p.y))
        path.close()
        self._canvas.drawPath(path, stroke=1, fill=1 if fill else 0)

    def draw_rect(self, bbox: BBox, style: DrawStyle) -> None:
        self._check_open()
        fill = self._apply_style(style)
        x, y = self._to_pdf(bbox.xmin, bbox.ymax)
        self._canvas.rect(x, y, bbox.width * self.k, bbox.height * self.k, stroke=1, fill=1 if fill else 0)

    def draw_text(self, x: float, y: float, text: str, style: DrawStyle) -> None:
        self._check_open()
        self._canvas.setFont(PDF_FONT, style.font_size)
        self._canvas.setFillColor(colors.black)
        self._canvas.drawString(*self._to_pdf(x, y), text)

    def text_width(self, text: str, font_size: float) -> float:
        """文本宽度（用户单位）"""
        return self._canvas.stringWidth(text, PDF_FONT, font_size) / self.k

    def finalize_document(self) -> bytes:
        self._check_open()
        self._canvas.save()
        self._finalized = True
        return self._buffer.getvalue()
