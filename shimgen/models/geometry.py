"""
几何模型 - 楔片/槽位/组合件

坐标单位为楔片底边长度（底边=1），原点在组合件左上角，y向下。
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, Field


class Point(BaseModel):
    """二维点"""
    x: float
    y: float

    model_config = {"frozen": True}


class BBox(BaseModel):
    """边界框"""
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> BBox:
        xs: list[float] = []
        ys: list[float] = []
        for p in points:
            xs.append(p.x)
            ys.append(p.y)
        if not xs:
            return cls(xmin=0.0, ymin=0.0, xmax=0.0, ymax=0.0)
        return cls(xmin=min(xs), ymin=min(ys), xmax=max(xs), ymax=max(ys))

    def contains(self, point: Point, tol: float = 1e-9) -> bool:
        """判断点是否在框内（含边界）"""
        return (
            self.xmin - tol <= point.x <= self.xmax + tol
            and self.ymin - tol <= point.y <= self.ymax + tol
        )


class PieceOptions(BaseModel):
    """组合件形状选项"""
    cropped: bool = False
    trapezoidal: bool = False

    model_config = {"frozen": True}


class Shim(BaseModel):
    """单个楔片（3点三角形或4点梯形）"""
    points: list[Point] = Field(..., min_length=3, max_length=4)


class Slot(BaseModel):
    """槽位 - 同一朝向的一组楔片"""
    shims: list[Shim] = Field(default_factory=list)
    angle_step: int = Field(0, description="槽位起始旋转计数")
    upward: bool = True

    @property
    def direction(self) -> int:
        return 1 if self.upward else -1


class Piece(BaseModel):
    """组合件 - 由序列号计算出的全部槽位及其边界框"""
    serial_number: str
    options: PieceOptions = Field(default_factory=PieceOptions)
    slots: list[Slot] = Field(default_factory=list)
    height: float = 0.0
    bbox: BBox

    @property
    def shim_count(self) -> int:
        return sum(len(slot.shims) for slot in self.slots)

    def iter_shims(self) -> Iterator[Shim]:
        for slot in self.slots:
            yield from slot.shims

    def iter_points(self) -> Iterator[Point]:
        for shim in self.iter_shims():
            yield from shim.points


class DrawStyle(BaseModel):
    """绘制样式"""
    stroke_width: float = 0.1
    stroke_color: str = "black"
    fill_color: str | None = None
    font_size: float = 10.0  # pt
    css_class: str | None = None
