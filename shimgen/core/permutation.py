"""
序列号排列引擎 - 全周期线性同余生成器

职责：
1. 由种子生成LCG增量 c（十个素数按十进制位相乘）
2. 索引 → 伪随机值 r = (a·i + c) mod m，m = 2·x^y，a = 2x+1
3. r ↔ 序列号文本的编码/解码
4. 生成前校验排列空间（容量、增量与模数互素）

全周期条件（Hull–Dobell）：
- c 与 m 互素：x 小于素数表最小值时成立，另在 validate_space 中显式校验
- a-1 = 2x 被 m 的所有素因子整除（m 的素因子为 2 与 x 的素因子）
- m 为4的倍数（x为偶数）时 a-1 也是4的倍数

测试要点：
- test_bijection: 任意 (c,x,y) 下 index → r 为 [0,m) 上的双射
- test_round_trip: 序列号可逆回原索引
- test_capacity: 超出安全整数范围时拒绝
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from math import gcd

from ..interfaces import CapacityError, ConfigurationError, SerialNumberError
from ..models import PermutationSpace, SerialNumber

logger = logging.getLogger(__name__)

MAX_SEED = 999999

# 十个素数，种子的每一位十进制数字选取其中一个
PRIMES: tuple[int, ...] = (53, 59, 61, 67, 71, 73, 79, 83, 89, 97)

MAX_SAFE_INTEGER = 2**53 - 1

# 字母 A..Z 限制每槽位最多26种取值
MAX_X = 26


def normalize_seed(seed: int, max_seed: int = MAX_SEED) -> int:
    """种子按 max_seed+1 取模"""
    return seed % (max_seed + 1)


def random_seed(max_seed: int = MAX_SEED) -> int:
    """随机种子"""
    return random.randint(0, max_seed)


def increment_from_seed(seed: int, max_seed: int = MAX_SEED) -> int:
    """由种子生成LCG增量（种子各位数字选取素数相乘，0对应最小素数）"""
    seed = normalize_seed(seed, max_seed)
    if seed == 0:
        return PRIMES[0]

    c = 1
    while seed > 0:
        c *= PRIMES[seed % 10]
        seed //= 10
    return c


def lcg_next(index: int, c: int, x: int, y: int) -> int:
    """LCG步进 (a·index + c) mod m"""
    m = 2 * x**y
    a = 2 * x + 1
    return (a * index + c) % m


def lcg_previous(r: int, c: int, x: int, y: int) -> int:
    """LCG逆步进，由 r 恢复索引"""
    m = 2 * x**y
    a = 2 * x + 1
    return (pow(a, -1, m) * (r - c)) % m


def decode(r: int, x: int, y: int) -> str:
    """伪随机值 → 序列号文本（低位在前）"""
    half = x**y
    if r < half:
        sign = "-"
    else:
        sign = "+"
        r -= half

    digits = []
    for _ in range(y):
        digits.append(chr(65 + r % x))
        r //= x
    return sign + "".join(digits)


def encode(serial_number: str | SerialNumber, x: int, y: int) -> int:
    """序列号文本 → 伪随机值（decode 的逆运算）"""
    sn = serial_number if isinstance(serial_number, SerialNumber) else SerialNumber.parse(serial_number)
    if sn.slot_count != y:
        raise SerialNumberError(f"序列号槽位数 {sn.slot_count} 与 y={y} 不一致: {sn}")

    r = 0
    for count in reversed(sn.counts):
        digit = count - 1
        if digit >= x:
            raise SerialNumberError(f"序列号字母超出 x={x} 的取值范围: {sn}")
        r = r * x + digit

    if sn.upward:
        r += x**y
    return r


def generate_serial_number(index: int, c: int, x: int, y: int) -> str:
    """生成第 index 件的序列号"""
    return decode(lcg_next(index, c, x, y), x, y)


def validate_space(
    x: int,
    y: int,
    seed: int,
    max_size: int = MAX_SAFE_INTEGER,
    max_seed: int = MAX_SEED,
) -> PermutationSpace:
    """
    校验排列空间参数并返回 PermutationSpace

    Raises:
        ConfigurationError: x/y 越界，或增量与模数不互素
        CapacityError: 2·x^y 超过 max_size
    """
    if not 1 <= x <= MAX_X:
        raise ConfigurationError(f"x 必须在 [1, {MAX_X}] 内: {x}")
    if x >= PRIMES[0]:
        raise ConfigurationError(f"x 必须小于素数表最小值 {PRIMES[0]}: {x}")
    if y < 1:
        raise ConfigurationError(f"y 必须 >= 1: {y}")

    # x^y >= 2^(y·floor(log2 x))，先按位数估算，避免构造超大整数
    if y * (x.bit_length() - 1) > max_size.bit_length():
        raise CapacityError(f"排列空间过大: 2*{x}^{y} 超过 {max_size}")
    size = 2 * x**y
    if size > max_size:
        raise CapacityError(f"排列空间过大: 2*{x}^{y}={size} 超过 {max_size}")

    seed = normalize_seed(seed, max_seed)
    c = increment_from_seed(seed, max_seed)
    if gcd(c, size) != 1:
        raise ConfigurationError(f"增量 c={c} 与模数 m={size} 不互素（seed={seed}, x={x}）")

    return PermutationSpace(x=x, y=y, seed=seed, increment=c)


@dataclass
class UnicityReport:
    """唯一性检查结果"""
    total: int
    size: int
    duplicates: dict[int, list[int]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.duplicates and self.total == self.size


def check_unicity(x: int, y: int, seed: int) -> UnicityReport:
    """穷举检查LCG在整个空间上无重复（仅用于小空间）"""
    c = increment_from_seed(seed)
    size = 2 * x**y
    seen: dict[int, list[int]] = {}
    duplicates: dict[int, list[int]] = {}
    for i in range(size):
        key = lcg_next(i, c, x, y)
        if key in seen:
            seen[key].append(i)
            duplicates[key] = seen[key]
        else:
            seen[key] = [i]
    return UnicityReport(total=len(seen), size=size, duplicates=duplicates)


class PermutationEngine:
    """绑定已校验排列空间的序列号生成器"""

    def __init__(self, space: PermutationSpace):
        self.space = space

    @classmethod
    def create(
        cls, x: int, y: int, seed: int, max_size: int = MAX_SAFE_INTEGER
    ) -> PermutationEngine:
        return cls(validate_space(x, y, seed, max_size=max_size))

    def __len__(self) -> int:
        return self.space.size

    def serial_number(self, index: int) -> str:
        """第 index 件的序列号"""
        if not 0 <= index < self.space.size:
            raise IndexError(f"索引越界: {index} (size={self.space.size})")
        s = self.space
        return generate_serial_number(index, s.increment, s.x, s.y)

    def index_of(self, serial_number: str | SerialNumber) -> int:
        """序列号 → 索引"""
        s = self.space
        return lcg_previous(encode(serial_number, s.x, s.y), s.increment, s.x, s.y)
