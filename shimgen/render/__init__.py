"""
绘制模块 - 渲染器实现

子模块：
- drawing: 组合件绘制适配层
- pdf_renderer: PDF多页文档（reportlab）
- svg_renderer: 单件SVG（svgwrite）
- recording: 录制渲染器（测试用）
- archive: ZIP归档写入器
"""

from .archive import ZipArchiveWriter
from .drawing import draw_piece
from .pdf_renderer import PdfRenderer
from .recording import RecordingRenderer
from .svg_renderer import SvgRenderer, piece_to_svg

__all__ = [
    "draw_piece",
    "PdfRenderer",
    "SvgRenderer",
    "piece_to_svg",
    "RecordingRenderer",
    "ZipArchiveWriter",
]
