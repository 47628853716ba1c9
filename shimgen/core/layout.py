"""
网格排版 - 页面内统一缩放的行列布局

缩放策略：
1. 按请求的最少列/行数计算可用宽高（扣除页边距与间距）
2. 以理论最大组合件宽高（而非单件边界框）求统一缩放，取宽、高约束中较紧者
3. 以该缩放重新计算实际可容纳的整数列/行数（可能多于请求值）

文档规划：
- 每文档件数 = min(每文档最大件数, 每文档最大页数 × 每页件数)
- 总文档数/总页数据此预先计算，用于进度回调
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..interfaces import LayoutError
from ..models import Margins

# 浮点误差容差，避免 floor 把恰好放下的列/行数算少
_EPS = 1e-9


@dataclass(frozen=True)
class GridLayout:
    """单页网格布局（用户单位）"""
    page_width: float
    page_height: float
    margins: Margins
    padding: float
    scale: float
    cell_width: float
    cell_height: float
    cols: int
    rows: int
    justification: str = "left"
    mirror_even_pages: bool = False

    @property
    def per_page(self) -> int:
        return self.cols * self.rows

    def side_margins(self, page: int) -> tuple[float, float]:
        """文档内第 page 页的 (左, 右) 边距，双面打印时偶数页互换"""
        if self.mirror_even_pages and page % 2 == 0:
            return self.margins.right, self.margins.left
        return self.margins.left, self.margins.right

    def cell_origin(self, col: int, row: int, page: int = 1) -> tuple[float, float]:
        """文档内第 page 页 (col, row) 单元格左上角坐标"""
        left, _ = self.side_margins(page)
        used = self.cols * self.cell_width + (self.cols - 1) * self.padding
        leftover = max(0.0, self.page_width - self.margins.left - self.margins.right - used)
        if self.justification == "center":
            left += leftover / 2
        elif self.justification == "right":
            left += leftover
        x = left + (self.cell_width + self.padding) * col
        y = self.margins.top + (self.cell_height + self.padding) * row
        return x, y

    def cell_of(self, slot_index: int) -> tuple[int, int]:
        """页内序号 → (col, row)，行优先"""
        return slot_index % self.cols, slot_index // self.cols


def compute_grid(
    page_width: float,
    page_height: float,
    margins: Margins,
    padding: float,
    cols: int,
    rows: int,
    max_width: float,
    max_height: float,
    justification: str = "left",
    mirror_even_pages: bool = False,
) -> GridLayout:
    """
    计算网格缩放与实际行列数

    Raises:
        LayoutError: 页面扣除边距/间距后无可用空间
    """
    if cols < 1 or rows < 1:
        raise LayoutError(f"列/行数必须 >= 1: cols={cols}, rows={rows}")
    if max_width <= 0 or max_height <= 0:
        raise LayoutError(f"组合件尺寸非法: {max_width}x{max_height}")

    inner_width = page_width - margins.left - margins.right
    inner_height = page_height - margins.top - margins.bottom
    avail_width = inner_width - padding * (cols - 1)
    avail_height = inner_height - padding * (rows - 1)
    if avail_width <= 0 or avail_height <= 0:
        raise LayoutError(
            f"页面可用空间不足: {avail_width:.2f}x{avail_height:.2f} "
            f"(cols={cols}, rows={rows})"
        )

    scale = min(avail_width / cols / max_width, avail_height / rows / max_height)
    cell_width = max_width * scale
    cell_height = max_height * scale

    actual_cols = math.floor((inner_width + padding) / (cell_width + padding) + _EPS)
    actual_rows = math.floor((inner_height + padding) / (cell_height + padding) + _EPS)

    return GridLayout(
        page_width=page_width,
        page_height=page_height,
        margins=margins,
        padding=padding,
        scale=scale,
        cell_width=cell_width,
        cell_height=cell_height,
        cols=max(cols, actual_cols),
        rows=max(rows, actual_rows),
        justification=justification,
        mirror_even_pages=mirror_even_pages,
    )


@dataclass(frozen=True)
class DocumentPlan:
    """文档切分规划"""
    items_total: int
    per_page: int
    items_per_document: int
    pages_total: int
    documents_total: int


def plan_documents(
    items_total: int,
    per_page: int,
    max_items_per_document: int,
    max_pages_per_document: int,
) -> DocumentPlan:
    """按限额预先计算每文档件数、总页数与总文档数"""
    if per_page < 1:
        raise LayoutError(f"每页件数必须 >= 1: {per_page}")

    items_per_document = max(1, min(max_items_per_document, max_pages_per_document * per_page))
    if items_total <= 0:
        return DocumentPlan(items_total, per_page, items_per_document, 0, 0)

    full_docs, remainder = divmod(items_total, items_per_document)
    pages_per_full_doc = math.ceil(items_per_document / per_page)
    pages_total = full_docs * pages_per_full_doc + math.ceil(remainder / per_page)
    documents_total = math.ceil(items_total / items_per_document)
    return DocumentPlan(
        items_total=items_total,
        per_page=per_page,
        items_per_document=items_per_document,
        pages_total=pages_total,
        documents_total=documents_total,
    )
