"""
treeval Logic Domain
Boolean and bitwise operators over lattice values

& | ^ are logical on two bools and bitwise on two ints. && and || are
defined on bools only, but a definite left operand decides them on its own.
"""

from __future__ import annotations

from treeval.values import (
    UValue,
    BoolConst,
    IntConst,
    UNDETERMINED,
    bool_const,
    int_const,
)
from treeval.lattice import lift_binary, lift_unary
from treeval.domains.arith import wrap_int
from treeval.domains.registry import Operator, binary_operator, unary_operator


def _both_bool(a: UValue, b: UValue) -> bool:
    return isinstance(a, BoolConst) and isinstance(b, BoolConst)


def _both_int(a: UValue, b: UValue) -> bool:
    return isinstance(a, IntConst) and isinstance(b, IntConst)


#==============================================================================
# Unary
#==============================================================================

def _not(a: UValue) -> UValue:
    """Logical not (!)"""
    if isinstance(a, BoolConst):
        return bool_const(not a.value)
    return UNDETERMINED


def _bit_not(a: UValue) -> UValue:
    """Bitwise complement (~)"""
    if isinstance(a, IntConst):
        return int_const(wrap_int(~a.value))
    return UNDETERMINED


#==============================================================================
# Binary
#==============================================================================

def _and(a: UValue, b: UValue) -> UValue:
    """And (&)"""
    if _both_bool(a, b):
        return bool_const(a.value and b.value)
    if _both_int(a, b):
        return int_const(wrap_int(a.value & b.value))
    return UNDETERMINED


def _or(a: UValue, b: UValue) -> UValue:
    """Or (|)"""
    if _both_bool(a, b):
        return bool_const(a.value or b.value)
    if _both_int(a, b):
        return int_const(wrap_int(a.value | b.value))
    return UNDETERMINED


def _xor(a: UValue, b: UValue) -> UValue:
    """Exclusive or (^)"""
    if _both_bool(a, b):
        return bool_const(a.value != b.value)
    if _both_int(a, b):
        return int_const(wrap_int(a.value ^ b.value))
    return UNDETERMINED


def _logical_and(a: UValue, b: UValue) -> UValue:
    """Conditional and (&&)"""
    if isinstance(a, BoolConst) and not a.value:
        return a
    if _both_bool(a, b):
        return b
    return UNDETERMINED


def _logical_or(a: UValue, b: UValue) -> UValue:
    """Conditional or (||)"""
    if isinstance(a, BoolConst) and a.value:
        return a
    if _both_bool(a, b):
        return b
    return UNDETERMINED


logical_not = lift_unary(_not)
bitwise_not = lift_unary(_bit_not)
bitwise_and = lift_binary(_and)
bitwise_or = lift_binary(_or)
bitwise_xor = lift_binary(_xor)
logical_and = lift_binary(_logical_and)
logical_or = lift_binary(_logical_or)


def logic_operators() -> list[Operator]:
    """Operators contributed by the logic domain"""
    return [
        unary_operator("!", logical_not),
        unary_operator("~", bitwise_not),
        binary_operator("&", bitwise_and),
        binary_operator("|", bitwise_or),
        binary_operator("^", bitwise_xor),
        binary_operator("&&", logical_and),
        binary_operator("||", logical_or),
    ]
