"""
生成会话模型 - 一次生成所用的排列空间与选项

取代页面级的全局状态（x/y/seed/选择集），显式传入各引擎。
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from .geometry import PieceOptions
from .selection import Selection


class PermutationSpace(BaseModel):
    """排列空间参数（已校验，见 core.permutation.validate_space）"""
    x: int = Field(..., description="每单元楔片数")
    y: int = Field(..., description="每件槽位数")
    seed: int = Field(..., description="归一化后的种子")
    increment: int = Field(..., description="LCG增量c")

    model_config = {"frozen": True}

    @property
    def half_size(self) -> int:
        """x^y，单一方向的序列号数量"""
        return self.x ** self.y

    @property
    def size(self) -> int:
        """2·x^y，排列空间大小"""
        return 2 * self.x ** self.y

    @property
    def multiplier(self) -> int:
        """LCG乘数 a = 2x+1"""
        return 2 * self.x + 1

    @property
    def label(self) -> str:
        """文件名前缀 x-y-seed"""
        return f"{self.x}-{self.y}-{self.seed}"


class GenerationSession(BaseModel):
    """生成会话"""
    space: PermutationSpace
    piece_count: int = Field(0, ge=0, description="生成件数，0表示整个排列空间")
    piece_options: PieceOptions = Field(default_factory=PieceOptions)
    selection: Selection | None = None

    model_config = {"arbitrary_types_allowed": True}

    @model_validator(mode="after")
    def _fill_defaults(self) -> GenerationSession:
        if self.piece_count == 0 or self.piece_count > self.space.size:
            self.piece_count = self.space.size
        if self.selection is None:
            self.selection = Selection(self.piece_count)
        elif self.selection.total != self.piece_count:
            raise ValueError(
                f"选择集总数 {self.selection.total} 与生成件数 {self.piece_count} 不一致"
            )
        return self
