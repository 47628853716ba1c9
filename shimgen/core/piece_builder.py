"""
组合件几何构建器 - 序列号 → 楔片多边形 + 边界框

流程（纯函数，同输入同输出）：
1. 构建楔片：槽位朝向从符号开始交替；槽内楔片绕尖端（梯形为尖端外的虚拟点）
   按固定角步依次旋转，相邻楔片共边；旋转计数跨槽位延续
2. 高度归一化：裁剪模式取各槽最小内高并对齐最内尖端；否则取最大外高并对齐最外边
3. 向下槽位整体下移 height，使尖端与向上槽位对齐
4. 裁剪（仅裁剪模式）：非尖端顶点沿边投影到 y=0 / y=height
5. 槽间负空间：前一槽尾边与本槽首边投影到尖端侧水平线，差值 + NEGATIVE_SPACE
   即为本槽平移量（逐对计算，位置从左向右累加）
6. 边界框：所有顶点的最小/最大值

单位：楔片底边 = 1。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from ..models import BBox, Piece, PieceOptions, Point, SerialNumber, Shim, Slot

logger = logging.getLogger(__name__)

# 楔片侧边与底边之比
SIDE = 64.0

# 梯形楔片顶边与底边之比
TIP = 0.25

# 梯形楔片顶边到消失点的距离：TIP_SIDE/TIP = (TIP_SIDE + SIDE)/1
TIP_SIDE = TIP * SIDE / (1 - TIP)

# 楔片尖角（弧度），弦长 2·sin(angle/2) 等于底边
SHIM_ANGLE_TRIANGULAR = 2 * math.asin(0.5 / SIDE)
SHIM_ANGLE_TRAPEZOIDAL = 2 * math.asin(0.5 / (SIDE + TIP_SIDE))

# 槽间负空间（底边单位）
NEGATIVE_SPACE = 6.0


@dataclass
class _RawSlot:
    """构建过程中的可变槽位"""
    direction: int  # 1 向上，-1 向下
    angle_step: int
    shims: list[list[list[float]]] = field(default_factory=list)

    def iter_points(self):
        for shim in self.shims:
            yield from shim


def rotate(center: list[float], p: list[float], angle: float) -> list[float]:
    """点 p 绕 center 旋转 angle 弧度"""
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    dx, dy = p[0] - center[0], p[1] - center[1]
    return [cos_a * dx - sin_a * dy + center[0], sin_a * dx + cos_a * dy + center[1]]


def project(c: list[float], p: list[float], y: float) -> list[float]:
    """过 c、p 的直线与水平线 y 的交点"""
    return [c[0] + (p[0] - c[0]) / (p[1] - c[1]) * (y - c[1]), y]


def max_piece_size(x: int, y: int) -> tuple[float, float]:
    """理论最大组合件宽高（用于统一排版缩放）"""
    width = math.ceil(y / 2) * x + (NEGATIVE_SPACE + TIP) * (y - 1)
    height = SIDE + TIP
    return width, height


def compute_piece(
    serial_number: str | SerialNumber, options: PieceOptions | None = None
) -> Piece | None:
    """
    由序列号计算组合件

    Args:
        serial_number: 序列号（文本或 SerialNumber）
        options: 形状选项（裁剪/梯形）

    Returns:
        组合件；序列号非法（过短、符号错误、字母越界）时返回 None
    """
    text = str(serial_number)
    if not SerialNumber.is_valid(text):
        logger.debug(f"序列号非法，跳过: {text!r}")
        return None

    options = options or PieceOptions()
    trapezoidal = options.trapezoidal

    slots = _build_slots(text, trapezoidal)
    if options.cropped:
        height = _normalize_cropped(slots, trapezoidal)
    else:
        height = _normalize_uncropped(slots)
    _flip_downward(slots, height)
    if options.cropped:
        _crop(slots, height, trapezoidal)
    _apply_spacing(slots, height, trapezoidal)

    return _to_piece(text, options, slots, height)


def _build_slots(text: str, trapezoidal: bool) -> list[_RawSlot]:
    """1. 逐槽位构建楔片坐标"""
    angle = SHIM_ANGLE_TRAPEZOIDAL if trapezoidal else SHIM_ANGLE_TRIANGULAR
    direction = 1 if text[0] == "+" else -1
    angle_step = 0
    slots: list[_RawSlot] = []

    for letter in text[1:]:
        tip = [0.0, 0.0]
        base = [0.0, SIDE * direction]
        center = [0.0, -TIP_SIDE * direction] if trapezoidal else tip

        slot = _RawSlot(direction=direction, angle_step=angle_step)
        for _ in range(ord(letter) - 64):
            p0 = rotate(center, tip, angle_step * angle)
            p1 = rotate(center, base, angle_step * angle)
            angle_step -= direction
            p2 = rotate(center, base, angle_step * angle)
            if trapezoidal:
                p3 = rotate(center, tip, angle_step * angle)
                slot.shims.append([p0, p1, p2, p3])
            else:
                slot.shims.append([p0, p1, p2])
        slots.append(slot)

        direction = -direction

    return slots


def _normalize_cropped(slots: list[_RawSlot], trapezoidal: bool) -> float:
    """2a. 裁剪模式：高度取各槽最小内高，最内尖端对齐到0"""
    height = math.inf
    for slot in slots:
        d = slot.direction
        max_tip = -math.inf
        min_base = math.inf
        for shim in slot.shims:
            max_tip = max(max_tip, shim[0][1] * d)
            if trapezoidal:
                max_tip = max(max_tip, shim[3][1] * d)
            min_base = min(min_base, shim[1][1] * d, shim[2][1] * d)
        height = min(height, abs(max_tip - min_base))

        for p in slot.iter_points():
            p[1] -= max_tip * d
    return height


def _normalize_uncropped(slots: list[_RawSlot]) -> float:
    """2b. 非裁剪模式：高度取各槽最大外高，最外边对齐到0"""
    height = 0.0
    for slot in slots:
        ys = [p[1] for p in slot.iter_points()]
        min_y, max_y = min(ys), max(ys)
        height = max(height, max_y - min_y)

        offset = min_y if slot.direction > 0 else max_y
        for p in slot.iter_points():
            p[1] -= offset
    return height


def _flip_downward(slots: list[_RawSlot], height: float) -> None:
    """3. 向下槽位下移 height"""
    for slot in slots:
        if slot.direction > 0:
            continue
        for p in slot.iter_points():
            p[1] += height


def _crop(slots: list[_RawSlot], height: float, trapezoidal: bool) -> None:
    """4. 沿边投影裁剪到 [0, height] 带内"""
    for slot in slots:
        y1 = 0.0 if slot.direction > 0 else height
        y2 = height if slot.direction > 0 else 0.0
        cropped = []
        for shim in slot.shims:
            p0 = project(shim[0], shim[1], y1)
            p1 = project(shim[0], shim[1], y2)
            if trapezoidal:
                p2 = project(shim[3], shim[2], y2)
                p3 = project(shim[3], shim[2], y1)
                cropped.append([p0, p1, p2, p3])
            else:
                p2 = project(shim[0], shim[2], y2)
                cropped.append([p0, p1, p2])
        slot.shims = cropped


def _apply_spacing(slots: list[_RawSlot], height: float, trapezoidal: bool) -> None:
    """5. 槽间负空间（逐对计算，平移累加）"""
    for prev, slot in zip(slots, slots[1:]):
        y = 0.0 if slot.direction > 0 else height
        prev_shim = prev.shims[-1]
        prev_p = project(prev_shim[3] if trapezoidal else prev_shim[0], prev_shim[2], y)
        first = slot.shims[0]
        p = project(first[0], first[1], y)
        shift = prev_p[0] - p[0] + NEGATIVE_SPACE
        for q in slot.iter_points():
            q[0] += shift


def _to_piece(
    text: str, options: PieceOptions, raw_slots: list[_RawSlot], height: float
) -> Piece:
    """6. 转换为模型并计算边界框"""
    slots = [
        Slot(
            shims=[Shim(points=[Point(x=p[0], y=p[1]) for p in shim]) for shim in raw.shims],
            angle_step=raw.angle_step,
            upward=raw.direction > 0,
        )
        for raw in raw_slots
    ]
    bbox = BBox.from_points(p for slot in slots for shim in slot.shims for p in shim.points)
    return Piece(serial_number=text, options=options, slots=slots, height=height, bbox=bbox)
