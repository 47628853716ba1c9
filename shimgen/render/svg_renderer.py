"""
SVG渲染器 - 单个组合件的矢量文件

依赖：
- svgwrite: SVG文档构建

每个渲染器对应一个单页SVG文档；viewBox 取组合件边界框，
线条样式为 fill:none / stroke:black。
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import svgwrite

from ..interfaces import IRenderer, RenderError
from ..models import DrawStyle
from .drawing import draw_piece

if TYPE_CHECKING:
    from ..models import BBox, Piece, Point

XML_HEADER = '<?xml version="1.0" encoding="utf-8" ?>\n'


class SvgRenderer(IRenderer):
    """SVG渲染器实现"""

    def __init__(self, view_box: BBox | None = None, stroke_width: float = 0.1):
        extra = {}
        if view_box is not None:
            extra["viewBox"] = (
                f"{view_box.xmin} {view_box.ymin} {view_box.width} {view_box.height}"
            )
        self._dwg = svgwrite.Drawing(**extra)
        self._group = self._dwg.g(fill="none", stroke="black", stroke_width=stroke_width)
        self._dwg.add(self._group)
        self._finalized = False

    def _check_open(self) -> None:
        if self._finalized:
            raise RenderError("SVG已完成，不能继续写入")

    def begin_page(self) -> None:
        raise RenderError("SVG文档只有一页")

    def draw_polygon(self, points: Sequence[Point], style: DrawStyle) -> None:
        self._check_open()
        attrs = {"class_": style.css_class} if style.css_class else {}
        self._group.add(self._dwg.polygon([(p.x, p.y) for p in points], **attrs))

    def draw_rect(self, bbox: BBox, style: DrawStyle) -> None:
        self._check_open()
        attrs = {"class_": style.css_class} if style.css_class else {}
        self._group.add(
            self._dwg.rect(insert=(bbox.xmin, bbox.ymin), size=(bbox.width, bbox.height), **attrs)
        )

    def draw_text(self, x: float, y: float, text: str, style: DrawStyle) -> None:
        self._check_open()
        self._group.add(
            self._dwg.text(text, insert=(x, y), font_size=style.font_size, fill="black", stroke="none")
        )

    def finalize_document(self) -> bytes:
        self._check_open()
        self._finalized = True
        return (XML_HEADER + self._dwg.tostring()).encode("utf-8")


def piece_to_svg(piece: Piece, stroke_width: float = 0.1) -> bytes:
    """组合件 → 独立SVG文件内容"""
    renderer = SvgRenderer(view_box=piece.bbox, stroke_width=stroke_width)
    draw_piece(
        renderer,
        piece,
        style=DrawStyle(stroke_width=stroke_width, css_class="shim"),
        bbox_style=DrawStyle(stroke_width=stroke_width, css_class="bbox"),
    )
    return renderer.finalize_document()
