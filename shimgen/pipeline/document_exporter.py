"""
文档导出器 - 组合件按网格排版到多页PDF

职责：
1. 按理论最大组合件尺寸计算统一缩放与行列数
2. 逐件绘制：楔片多边形 + 边界框 + 可选序列号标签
3. 页满换页，文档件数/页数达上限换文档
4. 页眉/页脚：种子标签、页码

文件名：{x}-{y}-{seed}.{首页}-{末页}.pdf

测试要点：
- test_items_per_document_split: 按件数切分文档
- test_max_items_mid_page: 总件数上限在页中截止
- test_file_names: 文件名含页码区间
- test_labels_and_headers: 标签与页眉页脚
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..config import load_print_spec
from ..core.layout import compute_grid, plan_documents
from ..core.piece_builder import max_piece_size
from ..interfaces import IRenderer
from ..models import DocumentLimits, DrawStyle, JobType, PrintOptions
from ..render import PdfRenderer, draw_piece
from .task import ExportTask

if TYPE_CHECKING:
    from ..config import PrintSpec, RuntimeConfig
    from ..core.layout import DocumentPlan, GridLayout
    from ..interfaces import IOutputSink
    from ..models import GenerationSession, Piece
    from .task import FinishCallback, ProgressCallback

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

# Helvetica 数字平均字宽（em）
_AVG_CHAR_WIDTH = 0.556

RendererFactory = Callable[[float, float], IRenderer]


class DocumentExporter(ExportTask):
    """分页PDF导出器"""

    job_type = JobType.DOCUMENTS

    def __init__(
        self,
        session: GenerationSession,
        print_options: PrintOptions | None = None,
        limits: DocumentLimits | None = None,
        sink: IOutputSink | None = None,
        on_progress: ProgressCallback | None = None,
        on_finish: FinishCallback | None = None,
        *,
        renderer_factory: RendererFactory | None = None,
        print_spec: PrintSpec | None = None,
        chunk_size: int | None = None,
        config: RuntimeConfig | None = None,
    ):
        if sink is None:
            raise ValueError("sink 不能为空")
        super().__init__(
            session, sink, on_progress, on_finish, chunk_size=chunk_size, config=config
        )
        self.print_spec = print_spec or load_print_spec(self.config.print_spec_path)
        self.print_options = print_options or PrintOptions.from_spec(self.print_spec)
        self.limits = limits or DocumentLimits.from_config(self.config)
        self.renderer_factory = renderer_factory or self._pdf_renderer

        opts = self.print_options
        self.page_width, self.page_height = self.print_spec.get_page_size(
            opts.format, opts.orientation, opts.unit
        )
        self.points_per_unit = self.print_spec.points_per_unit(opts.unit)
        self.font_size_pt = opts.font_size_pt or self.config.export.font_size_pt

        self.grid: GridLayout | None = None
        self.plan: DocumentPlan | None = None

        self._renderer: IRenderer | None = None
        self._page = 0
        self._first_page = 0
        self._slot_in_page = 0
        self._items_in_document = 0
        self._piece_style = DrawStyle()
        self._text_style = DrawStyle(font_size=self.font_size_pt)

    def _pdf_renderer(self, page_width: float, page_height: float) -> IRenderer:
        return PdfRenderer(
            page_width, page_height, self.points_per_unit, title=self.session.space.label
        )

    # === 规划 ===

    def _prepare(self) -> None:
        opts = self.print_options
        space = self.session.space
        max_width, max_height = max_piece_size(space.x, space.y)
        self.grid = compute_grid(
            self.page_width,
            self.page_height,
            opts.margins,
            opts.padding,
            opts.cols,
            opts.rows,
            max_width,
            max_height,
            justification=opts.justification,
            mirror_even_pages=opts.sides == "double",
        )

        items_total = min(self.session.selection.count, self.limits.max_items)
        self.plan = plan_documents(
            items_total,
            self.grid.per_page,
            self.limits.max_items_per_document,
            self.limits.max_pages_per_document,
        )

        line_width = self.config.export.line_width_ratio * self.grid.scale
        self._piece_style = DrawStyle(stroke_width=line_width, css_class="shim")

        self.progress.items_total = items_total
        self.progress.page = 0
        self.progress.pages_total = self.plan.pages_total
        self.progress.document = 0
        self.progress.documents_total = self.plan.documents_total

        logger.debug(
            f"网格 {self.grid.cols}x{self.grid.rows}, 缩放 {self.grid.scale:.4f}, "
            f"每文档 {self.plan.items_per_document} 件"
        )

    # === 输出 ===

    def _emit(self, piece: Piece) -> None:
        grid = self.grid
        if self._renderer is None:
            self._open_document()
        elif self._items_in_document >= self.plan.items_per_document:
            self._close_output()
            self._open_document()
        elif self._slot_in_page >= grid.per_page:
            self._renderer.begin_page()
            self._start_page()

        col, row = grid.cell_of(self._slot_in_page)
        x, y = grid.cell_origin(col, row, self._page_in_document)
        offset_x = x - piece.bbox.xmin * grid.scale
        offset_y = y - piece.bbox.ymin * grid.scale
        draw_piece(self._renderer, piece, grid.scale, offset_x, offset_y, self._piece_style)
        self._draw_label(piece.serial_number, x, y)

        self._slot_in_page += 1
        self._items_in_document += 1
        self.progress.items_done += 1

    def _open_document(self) -> None:
        self._renderer = self.renderer_factory(self.page_width, self.page_height)
        self._items_in_document = 0
        self.progress.document += 1
        self._first_page = self._page + 1
        self._start_page()

    @property
    def _page_in_document(self) -> int:
        """当前文档内页码"""
        return self._page - self._first_page + 1

    def _start_page(self) -> None:
        self._page += 1
        self._slot_in_page = 0
        self.progress.page = self._page
        self._draw_page_decorations()

    def _close_output(self) -> None:
        if self._renderer is None:
            return
        renderer, self._renderer = self._renderer, None
        filename = f"{self.session.space.label}.{self._first_page}-{self._page}.pdf"
        self._save(filename, renderer.finalize_document(), PDF_MEDIA_TYPE)

    def _discard_output(self) -> None:
        if self._renderer is not None:
            logger.debug(f"丢弃未完成文档（第 {self.progress.document} 个）")
        self._renderer = None

    # === 文本 ===

    @property
    def _font_height(self) -> float:
        """字号换算为用户单位"""
        return self.font_size_pt / self.points_per_unit

    def _text_width(self, text: str) -> float:
        measure = getattr(self._renderer, "text_width", None)
        if measure is not None:
            return measure(text, self.font_size_pt)
        return len(text) * _AVG_CHAR_WIDTH * self._font_height

    def _draw_label(self, text: str, x: float, y: float) -> None:
        position = self.print_options.label_position
        if position == "none":
            return
        if position == "top":
            gap = self.config.export.label_gap_mm / self.print_spec.mm_per_unit(
                self.print_options.unit
            )
            baseline = y - gap
        else:
            baseline = y + self.grid.cell_height + self._font_height
        self._renderer.draw_text(x, baseline, text, self._text_style)

    def _draw_page_decorations(self) -> None:
        opts = self.print_options
        margins = opts.margins
        left, right = self.grid.side_margins(self._page_in_document)

        header_y = margins.top / 2
        footer_y = self.page_height - margins.bottom / 2

        if opts.seed_position != "none":
            y = header_y if opts.seed_position == "header" else footer_y
            self._renderer.draw_text(left, y, self.session.space.label, self._text_style)

        if opts.page_number_position != "none":
            y = header_y if opts.page_number_position == "header" else footer_y
            text = f"{self._page}/{self.plan.pages_total}"
            x = self.page_width - right - self._text_width(text)
            self._renderer.draw_text(x, y, text, self._text_style)
