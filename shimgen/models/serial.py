"""
序列号模型 - 组合件的文本编码

格式：[+-][A-Z]{y}
- 首字符为方向（+ 向上 / - 向下），决定第一槽位的朝向
- 之后每个字母对应一个槽位的楔片数（A=1 … Z=26）
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from ..interfaces import SerialNumberError

SERIAL_PATTERN = re.compile(r"^[+-][A-Z]+$")

MAX_SHIMS_PER_SLOT = 26


class SerialNumber(BaseModel):
    """序列号（不可变值对象）"""
    sign: str = Field(..., pattern=r"^[+-]$")
    counts: tuple[int, ...] = Field(..., min_length=1)

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, text: str) -> SerialNumber:
        """解析序列号文本，格式不合法时抛出 SerialNumberError"""
        if not isinstance(text, str) or not SERIAL_PATTERN.match(text):
            raise SerialNumberError(f"序列号格式非法: {text!r}")
        return cls(sign=text[0], counts=tuple(ord(ch) - 64 for ch in text[1:]))

    @classmethod
    def is_valid(cls, text: str) -> bool:
        return isinstance(text, str) and bool(SERIAL_PATTERN.match(text))

    @property
    def upward(self) -> bool:
        """第一槽位是否向上"""
        return self.sign == "+"

    @property
    def slot_count(self) -> int:
        return len(self.counts)

    @property
    def text(self) -> str:
        return self.sign + "".join(chr(64 + n) for n in self.counts)

    def __str__(self) -> str:
        return self.text
