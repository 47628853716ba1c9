"""
组合件绘制 - 渲染器适配层

把组合件的楔片与边界框按缩放/偏移绘制到任意 IRenderer。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import BBox, DrawStyle, Point

if TYPE_CHECKING:
    from ..interfaces import IRenderer
    from ..models import Piece


def draw_piece(
    renderer: IRenderer,
    piece: Piece,
    scale: float = 1.0,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
    style: DrawStyle | None = None,
    bbox_style: DrawStyle | None = None,
) -> None:
    """绘制组合件（楔片多边形 + 边界框）"""
    style = style or DrawStyle(css_class="shim")
    bbox_style = bbox_style or style.model_copy(update={"css_class": "bbox"})

    for shim in piece.iter_shims():
        points = [Point(x=p.x * scale + offset_x, y=p.y * scale + offset_y) for p in shim.points]
        renderer.draw_polygon(points, style)

    box = piece.bbox
    renderer.draw_rect(
        BBox(
            xmin=box.xmin * scale + offset_x,
            ymin=box.ymin * scale + offset_y,
            xmax=box.xmax * scale + offset_x,
            ymax=box.ymax * scale + offset_y,
        ),
        bbox_style,
    )
