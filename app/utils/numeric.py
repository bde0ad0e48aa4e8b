# app/utils/numeric.py
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any


def to_decimal(value: float, scale: int) -> Decimal:
    """
    float -> 定点 Decimal（四舍五入到列精度）。
    先转 str 再构造，避免二进制浮点的尾数（0.1 -> 0.1000000000000000055...）。
    """
    quantum = Decimal(1).scaleb(-scale)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def to_float(value: Any) -> Any:
    """NUMERIC 列读出的 Decimal/字符串 -> float；其它值原样返回。"""
    if isinstance(value, (Decimal, str)):
        return float(value)
    return value
