"""
核心算法模块 - 序列号排列/几何构建/网格排版

子模块：
- permutation: 全周期LCG序列号排列
- piece_builder: 序列号 → 楔片多边形
- layout: 页面网格缩放与文档规划
"""

from .layout import DocumentPlan, GridLayout, compute_grid, plan_documents
from .permutation import (
    MAX_SEED,
    PRIMES,
    PermutationEngine,
    UnicityReport,
    check_unicity,
    decode,
    encode,
    generate_serial_number,
    increment_from_seed,
    lcg_next,
    lcg_previous,
    random_seed,
    validate_space,
)
from .piece_builder import NEGATIVE_SPACE, SIDE, TIP, compute_piece, max_piece_size

__all__ = [
    "MAX_SEED",
    "PRIMES",
    "PermutationEngine",
    "UnicityReport",
    "check_unicity",
    "decode",
    "encode",
    "generate_serial_number",
    "increment_from_seed",
    "lcg_next",
    "lcg_previous",
    "random_seed",
    "validate_space",
    "compute_piece",
    "max_piece_size",
    "SIDE",
    "TIP",
    "NEGATIVE_SPACE",
    "GridLayout",
    "DocumentPlan",
    "compute_grid",
    "plan_documents",
]
