"""
treeval Comparison Domain
Equality and ordering operators over lattice values

Two constants of different kinds are never equal, so == and != between
them are definite. Ordering is defined only between numeric constants.
"""

from __future__ import annotations

from treeval.values import (
    UValue,
    IntConst,
    FloatConst,
    UNDETERMINED,
    bool_const,
    is_constant,
)
from treeval.lattice import lift_binary
from treeval.domains.registry import Operator, binary_operator


def _is_numeric(v: UValue) -> bool:
    return isinstance(v, (IntConst, FloatConst))


#==============================================================================
# Equality
#==============================================================================

def constants_equal(a: UValue, b: UValue) -> bool:
    """
    Value equality of two constants.

    Numeric constants compare by numeric value regardless of width or
    int/float kind; every other constant compares structurally.
    """
    if _is_numeric(a) and _is_numeric(b):
        return a.value == b.value
    return a == b


def _value_equals(a: UValue, b: UValue) -> UValue:
    """Equality (==)"""
    if is_constant(a) and is_constant(b):
        return bool_const(constants_equal(a, b))
    return UNDETERMINED


def _value_not_equals(a: UValue, b: UValue) -> UValue:
    """Inequality (!=)"""
    if is_constant(a) and is_constant(b):
        return bool_const(not constants_equal(a, b))
    return UNDETERMINED


#==============================================================================
# Ordering
#==============================================================================

def _greater(a: UValue, b: UValue) -> UValue:
    """Greater than (>)"""
    if _is_numeric(a) and _is_numeric(b):
        return bool_const(a.value > b.value)
    return UNDETERMINED


def _less(a: UValue, b: UValue) -> UValue:
    """Less than (<)"""
    if _is_numeric(a) and _is_numeric(b):
        return bool_const(a.value < b.value)
    return UNDETERMINED


def _greater_or_equals(a: UValue, b: UValue) -> UValue:
    """Greater than or equal (>=)"""
    if _is_numeric(a) and _is_numeric(b):
        return bool_const(a.value >= b.value)
    return UNDETERMINED


def _less_or_equals(a: UValue, b: UValue) -> UValue:
    """Less than or equal (<=)"""
    if _is_numeric(a) and _is_numeric(b):
        return bool_const(a.value <= b.value)
    return UNDETERMINED


value_equals = lift_binary(_value_equals)
value_not_equals = lift_binary(_value_not_equals)
greater = lift_binary(_greater)
less = lift_binary(_less)
greater_or_equals = lift_binary(_greater_or_equals)
less_or_equals = lift_binary(_less_or_equals)


def compare_operators() -> list[Operator]:
    """Operators contributed by the comparison domain"""
    return [
        binary_operator("==", value_equals),
        binary_operator("!=", value_not_equals),
        binary_operator(">", greater),
        binary_operator("<", less),
        binary_operator(">=", greater_or_equals),
        binary_operator("<=", less_or_equals),
    ]
