"""
选择集模型 - 有序的索引集合

两种模式：
- ALL_EXCEPT: 选中全部，切换集合中的索引被排除
- ONLY: 只选中切换集合中的索引

遍历顺序统一为索引升序，与底层容器无关。
"""

from __future__ import annotations

from bisect import bisect_left, insort
from collections.abc import Iterable, Iterator
from enum import Enum


class SelectionMode(str, Enum):
    """选择模式"""
    ALL_EXCEPT = "all_except"
    ONLY = "only"


class Selection:
    """组合件选择集"""

    def __init__(
        self,
        total: int,
        mode: SelectionMode = SelectionMode.ALL_EXCEPT,
        toggled: Iterable[int] = (),
    ):
        if total < 0:
            raise ValueError(f"total 不能为负: {total}")
        self.total = total
        self.mode = SelectionMode(mode)
        self._toggled: list[int] = []
        for index in sorted(set(toggled)):
            self._check(index)
            self._toggled.append(index)

    # === 修改 ===

    def toggle(self, index: int) -> bool:
        """切换单个索引，返回切换后的选中状态"""
        self._check(index)
        pos = bisect_left(self._toggled, index)
        if pos < len(self._toggled) and self._toggled[pos] == index:
            del self._toggled[pos]
        else:
            insort(self._toggled, index)
        return self.is_selected(index)

    def select_all(self) -> None:
        self.mode = SelectionMode.ALL_EXCEPT
        self._toggled.clear()

    def deselect_all(self) -> None:
        self.mode = SelectionMode.ONLY
        self._toggled.clear()

    # === 查询 ===

    def is_toggled(self, index: int) -> bool:
        pos = bisect_left(self._toggled, index)
        return pos < len(self._toggled) and self._toggled[pos] == index

    def is_selected(self, index: int) -> bool:
        if not 0 <= index < self.total:
            return False
        toggled = self.is_toggled(index)
        return not toggled if self.mode == SelectionMode.ALL_EXCEPT else toggled

    @property
    def toggled(self) -> tuple[int, ...]:
        return tuple(self._toggled)

    @property
    def count(self) -> int:
        """选中数量"""
        if self.mode == SelectionMode.ALL_EXCEPT:
            return self.total - len(self._toggled)
        return len(self._toggled)

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[int]:
        """按索引升序遍历选中项"""
        if self.mode == SelectionMode.ONLY:
            yield from list(self._toggled)
            return

        excluded = list(self._toggled)
        pos = 0
        for index in range(self.total):
            if pos < len(excluded) and excluded[pos] == index:
                pos += 1
                continue
            yield index

    def __repr__(self) -> str:
        return (
            f"Selection(total={self.total}, mode={self.mode.value}, "
            f"toggled={len(self._toggled)})"
        )

    def _check(self, index: int) -> None:
        if not 0 <= index < self.total:
            raise IndexError(f"索引越界: {index} (total={self.total})")
