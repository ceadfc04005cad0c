"""
treeval Arithmetic Domain
Arithmetic operators over lattice values

Numeric model:
- integers are 64-bit two's complement; every result wraps around
- integer division truncates toward zero, modulo takes the dividend's sign,
  and an integer zero divisor yields Undetermined
- floats are IEEE-754 doubles; float division by zero yields +/-inf or NaN
- mixing int and float promotes to float; bools never mix with numbers
- arithmetic results are full-width integers; ++ and -- keep operand width
"""

from __future__ import annotations

import math
from typing import Optional, Union

from treeval.values import (
    UValue,
    IntConst,
    FloatConst,
    UNDETERMINED,
    INT_WIDTH,
    int_const,
    float_const,
)
from treeval.lattice import lift_binary, lift_unary
from treeval.domains.registry import Operator, binary_operator, unary_operator


#==============================================================================
# Numeric Model
#==============================================================================

_INT_BITS = 64
_INT_MASK = (1 << _INT_BITS) - 1
_INT_SIGN = 1 << (_INT_BITS - 1)


def wrap_int(value: int) -> int:
    """Wrap an unbounded int to 64-bit two's complement"""
    value &= _INT_MASK
    return value - (1 << _INT_BITS) if value & _INT_SIGN else value


def trunc_div(a: int, b: int) -> int:
    """Integer division truncating toward zero"""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def trunc_mod(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend"""
    return a - b * trunc_div(a, b)


def get_numeric(v: UValue) -> Optional[Union[int, float]]:
    """Extract a numeric primitive from an int/float constant, or None"""
    if isinstance(v, (IntConst, FloatConst)):
        return v.value
    return None


def _both_int(a: UValue, b: UValue) -> bool:
    return isinstance(a, IntConst) and isinstance(b, IntConst)


def _float_div(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


#==============================================================================
# Arithmetic Operators (core values)
#==============================================================================

def _plus(a: UValue, b: UValue) -> UValue:
    """Addition"""
    if _both_int(a, b):
        return int_const(wrap_int(a.value + b.value))
    x, y = get_numeric(a), get_numeric(b)
    if x is None or y is None:
        return UNDETERMINED
    return float_const(x + y)


def _minus(a: UValue, b: UValue) -> UValue:
    """Subtraction"""
    if _both_int(a, b):
        return int_const(wrap_int(a.value - b.value))
    x, y = get_numeric(a), get_numeric(b)
    if x is None or y is None:
        return UNDETERMINED
    return float_const(x - y)


def _times(a: UValue, b: UValue) -> UValue:
    """Multiplication"""
    if _both_int(a, b):
        return int_const(wrap_int(a.value * b.value))
    x, y = get_numeric(a), get_numeric(b)
    if x is None or y is None:
        return UNDETERMINED
    return float_const(x * y)


def _div(a: UValue, b: UValue) -> UValue:
    """Division"""
    if _both_int(a, b):
        if b.value == 0:
            return UNDETERMINED
        return int_const(wrap_int(trunc_div(a.value, b.value)))
    x, y = get_numeric(a), get_numeric(b)
    if x is None or y is None:
        return UNDETERMINED
    return float_const(_float_div(float(x), float(y)))


def _mod(a: UValue, b: UValue) -> UValue:
    """Remainder"""
    if _both_int(a, b):
        if b.value == 0:
            return UNDETERMINED
        return int_const(wrap_int(trunc_mod(a.value, b.value)))
    x, y = get_numeric(a), get_numeric(b)
    if x is None or y is None:
        return UNDETERMINED
    if y == 0 or math.isinf(x):
        return float_const(math.nan)
    return float_const(math.fmod(x, y))


def _negate(a: UValue) -> UValue:
    """Unary minus"""
    if isinstance(a, IntConst):
        return int_const(wrap_int(-a.value))
    if isinstance(a, FloatConst):
        return float_const(-a.value)
    return UNDETERMINED


def _identity(a: UValue) -> UValue:
    """Unary plus"""
    if isinstance(a, IntConst):
        return int_const(a.value, INT_WIDTH)
    if isinstance(a, FloatConst):
        return a
    return UNDETERMINED


def _inc(a: UValue) -> UValue:
    """Increment"""
    if isinstance(a, IntConst):
        return int_const(wrap_int(a.value + 1), a.width)
    if isinstance(a, FloatConst):
        return float_const(a.value + 1)
    return UNDETERMINED


def _dec(a: UValue) -> UValue:
    """Decrement"""
    if isinstance(a, IntConst):
        return int_const(wrap_int(a.value - 1), a.width)
    if isinstance(a, FloatConst):
        return float_const(a.value - 1)
    return UNDETERMINED


#==============================================================================
# Lifted Operators (public)
#==============================================================================

plus = lift_binary(_plus)
minus = lift_binary(_minus)
times = lift_binary(_times)
div = lift_binary(_div)
mod = lift_binary(_mod)
negate = lift_unary(_negate)
unary_plus = lift_unary(_identity)
inc = lift_unary(_inc)
dec = lift_unary(_dec)


def arith_operators() -> list[Operator]:
    """Operators contributed by the arithmetic domain"""
    return [
        binary_operator("+", plus),
        binary_operator("-", minus),
        binary_operator("*", times),
        binary_operator("/", div),
        binary_operator("%", mod),
        unary_operator("-", negate),
        unary_operator("+", unary_plus),
        unary_operator("++", inc),
        unary_operator("--", dec),
    ]
