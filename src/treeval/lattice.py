"""
treeval Lattice Operations
Provenance lifting for operators and the merge (join) of values

Every operator in treeval.domains is written against core values only; the
helpers here lift such a core operator so that Dependent and Variable
operands are unwrapped, the core result computed in source operand order,
and the result re-wrapped with the union of both operands' dependencies.
"""

from __future__ import annotations

from typing import Callable, FrozenSet

from treeval.values import (
    UValue,
    Dependency,
    DependentVal,
    VariableVal,
    dependent_val,
    variable_val,
    phi_val,
    is_dependent,
    is_nothing,
    unwrap,
)


CoreBinary = Callable[[UValue, UValue], UValue]
CoreUnary = Callable[[UValue], UValue]


#==============================================================================
# Dependency Propagation
#==============================================================================

def dependencies_with_self(v: UValue) -> FrozenSet[Dependency]:
    """
    Dependencies a value passes on to anything computed from it.

    A Variable passes on its own dependencies plus itself; a plain Dependent
    passes on its dependencies; anything else passes on nothing.
    """
    if isinstance(v, VariableVal):
        return v.dependencies | {v}
    if isinstance(v, DependentVal):
        return v.dependencies
    return frozenset()


def lift_binary(core_op: CoreBinary) -> CoreBinary:
    """
    Lift a core binary operator over Dependent operands.

    When only the right operand is dependent the computation still runs as
    core_op(left, core(right)), so a / dependent(b) divides a by b rather
    than b by a.
    """
    def lifted(left: UValue, right: UValue) -> UValue:
        if not is_dependent(left) and not is_dependent(right):
            return core_op(left, right)
        result = core_op(unwrap(left), unwrap(right))
        return dependent_val(result, dependencies_with_self(left) | dependencies_with_self(right))

    lifted.__name__ = getattr(core_op, "__name__", "lifted")
    lifted.__doc__ = core_op.__doc__
    return lifted


def lift_unary(core_op: CoreUnary) -> CoreUnary:
    """Lift a core unary operator over a Dependent operand"""
    def lifted(operand: UValue) -> UValue:
        if not is_dependent(operand):
            return core_op(operand)
        return dependent_val(core_op(unwrap(operand)), dependencies_with_self(operand))

    lifted.__name__ = getattr(core_op, "__name__", "lifted")
    lifted.__doc__ = core_op.__doc__
    return lifted


#==============================================================================
# Merge (Join)
#==============================================================================

def _merge_variable(var: VariableVal, other: UValue) -> UValue:
    if isinstance(other, VariableVal):
        if var.variable != other.variable or var.value != other.value:
            return phi_val((var, other))
        return variable_val(var.variable, var.value, var.dependencies | other.dependencies, var.source)
    if isinstance(other, DependentVal):
        if var.value != other.value:
            return phi_val((var, other))
        return variable_val(var.variable, var.value, var.dependencies | other.dependencies, var.source)
    return phi_val((var, other))


def _merge_dependent(dep: DependentVal, other: UValue) -> UValue:
    if isinstance(other, DependentVal):
        if dep.value != other.value:
            return phi_val((dep, other))
        return dependent_val(dep.value, dep.dependencies | other.dependencies)
    return phi_val((dep, other))


def merge(a: UValue, b: UValue) -> UValue:
    """
    Join two values at a control-flow merge point.

    - equal values merge to themselves
    - Nothing is absorbed: the reachable side is returned unchanged
    - a Dependent or Variable absorbs the bare value it wraps
    - Variables of the same declaration with equal wrapped values, and
      Dependents with equal wrapped values, union their dependencies
    - anything else becomes a flattened Phi

    Undetermined is not absorbing; it becomes a Phi member like any value.
    The result does not depend on argument order.
    """
    if a == b:
        return a
    if is_nothing(a):
        return b
    if is_nothing(b):
        return a
    if is_dependent(a) and b == a.value:
        return a
    if is_dependent(b) and a == b.value:
        return b
    if isinstance(a, VariableVal):
        return _merge_variable(a, b)
    if isinstance(b, VariableVal):
        return _merge_variable(b, a)
    if isinstance(a, DependentVal):
        return _merge_dependent(a, b)
    if isinstance(b, DependentVal):
        return _merge_dependent(b, a)
    return phi_val((a, b))
