"""
treeval Value Domain
Implements the UValue lattice variants produced by tree-based evaluation

This module provides frozen dataclasses for immutable lattice values, each
tagged with a class-level 'kind' for exhaustive dispatch, plus constructor
functions that enforce the structural invariants:

- a Dependent never wraps another plain Dependent and never has an empty
  dependency set (it collapses to its wrapped value instead)
- a Variable never lists its own declaration among its dependencies
- a Phi is flattened, deduplicated and has at least two members
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, FrozenSet, Iterable, Optional, TypeAlias, Union

from treeval.declarations import Declaration, EnumConstant
from treeval.errors import ContractViolation, exhaustive
from treeval.tree import is_node, render_node


#==============================================================================
# Constants
#==============================================================================

@dataclass(frozen=True)
class NullConst:
    """The null constant"""
    kind: ClassVar[str] = "null"


@dataclass(frozen=True)
class BoolConst:
    """Boolean constant"""
    kind: ClassVar[str] = "bool"
    value: bool


@dataclass(frozen=True)
class IntConst:
    """Integer constant; width is the storage size in bytes (2 for chars)"""
    kind: ClassVar[str] = "int"
    value: int
    width: int = 8


@dataclass(frozen=True, eq=False)
class FloatConst:
    """
    IEEE-754 double constant.

    Compared as a lattice value rather than a number: every NaN equals every
    other NaN and hashes alike, so merging two NaN results stays idempotent.
    """
    kind: ClassVar[str] = "float"
    value: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FloatConst):
            return NotImplemented
        if math.isnan(self.value) and math.isnan(other.value):
            return True
        return self.value == other.value

    def __hash__(self) -> int:
        if math.isnan(self.value):
            return hash((FloatConst, "NaN"))
        return hash((FloatConst, self.value))


@dataclass(frozen=True)
class EnumEntryConst:
    """Enum entry constant"""
    kind: ClassVar[str] = "enum"
    entry: EnumConstant


@dataclass(frozen=True)
class TypeLiteralConst:
    """Type/class literal constant"""
    kind: ClassVar[str] = "type"
    type_name: str


#==============================================================================
# Dependents
#==============================================================================

@dataclass(frozen=True)
class DependentVal:
    """A value derived from others, with the provenance it was derived from"""
    kind: ClassVar[str] = "dependent"
    value: UValue
    dependencies: FrozenSet[Dependency]


@dataclass(frozen=True)
class VariableVal:
    """
    The value currently bound to a declaration.

    A Variable is itself a dependency: values computed from it record it.
    The source node that produced the binding is kept for reporting but
    takes no part in equality.
    """
    kind: ClassVar[str] = "variable"
    variable: Declaration
    value: UValue
    dependencies: FrozenSet[Dependency] = frozenset()
    source: Optional[Any] = field(default=None, compare=False)


@dataclass(frozen=True)
class ExternalVal:
    """Opaque result of something not evaluated (a call, an unresolved access)"""
    kind: ClassVar[str] = "external"
    reference: Any


#==============================================================================
# Joins and Miscellaneous
#==============================================================================

@dataclass(frozen=True)
class PhiVal:
    """Join of two or more distinct values at a merge point"""
    kind: ClassVar[str] = "phi"
    values: FrozenSet[UValue]


@dataclass(frozen=True)
class NothingVal:
    """Result of a path that cannot produce a value"""
    kind: ClassVar[str] = "nothing"


@dataclass(frozen=True)
class UndeterminedVal:
    """A value the analysis declines to compute"""
    kind: ClassVar[str] = "undetermined"


Constant: TypeAlias = Union[
    NullConst,
    BoolConst,
    IntConst,
    FloatConst,
    EnumEntryConst,
    TypeLiteralConst,
]

Dependency: TypeAlias = Union[VariableVal, ExternalVal]

UValue: TypeAlias = Union[
    NullConst,
    BoolConst,
    IntConst,
    FloatConst,
    EnumEntryConst,
    TypeLiteralConst,
    DependentVal,
    VariableVal,
    ExternalVal,
    PhiVal,
    NothingVal,
    UndeterminedVal,
]

CONSTANT_TYPES = (NullConst, BoolConst, IntConst, FloatConst, EnumEntryConst, TypeLiteralConst)

NOTHING = NothingVal()
UNDETERMINED = UndeterminedVal()
NULL = NullConst()
TRUE = BoolConst(True)
FALSE = BoolConst(False)

CHAR_WIDTH = 2
INT_WIDTH = 8


#==============================================================================
# Type Guards
#==============================================================================

def is_constant(v: UValue) -> bool:
    """Check if value is a fully known constant"""
    return isinstance(v, CONSTANT_TYPES)


def is_dependent(v: UValue) -> bool:
    """Check if value carries provenance (Dependent or Variable)"""
    return isinstance(v, (DependentVal, VariableVal))


def is_variable(v: UValue) -> bool:
    """Check if value is a Variable"""
    return isinstance(v, VariableVal)


def is_external(v: UValue) -> bool:
    """Check if value is an opaque external result"""
    return isinstance(v, ExternalVal)


def is_phi(v: UValue) -> bool:
    """Check if value is a Phi"""
    return isinstance(v, PhiVal)


def is_nothing(v: UValue) -> bool:
    """Check if value is Nothing"""
    return isinstance(v, NothingVal)


def is_undetermined(v: UValue) -> bool:
    """Check if value is Undetermined"""
    return isinstance(v, UndeterminedVal)


def is_reachable(v: UValue) -> bool:
    """A path is reachable unless its value is Nothing"""
    return not is_nothing(v)


def is_dependency(v: Any) -> bool:
    """Check if v may appear in a dependency set"""
    return isinstance(v, (VariableVal, ExternalVal))


#==============================================================================
# Accessors
#==============================================================================

def unwrap(v: UValue) -> UValue:
    """Peel Dependent and Variable wrappers down to the core value"""
    while is_dependent(v):
        v = v.value
    return v


def to_constant(v: UValue) -> Optional[Constant]:
    """Return the constant a value wraps, or None if it is not a constant"""
    core = unwrap(v)
    return core if is_constant(core) else None


def to_variable(v: UValue) -> Optional[VariableVal]:
    """Return the outermost Variable a value is or wraps, if any"""
    while is_dependent(v):
        if is_variable(v):
            return v
        v = v.value
    return None


def dependencies_of(v: UValue) -> FrozenSet[Dependency]:
    """
    Dependencies recorded on a value.

    A Phi reports the union of its members' dependencies; values without
    provenance report an empty set.
    """
    if is_dependent(v):
        return v.dependencies
    if is_phi(v):
        result: FrozenSet[Dependency] = frozenset()
        for member in v.values:
            result = result | dependencies_of(member)
        return result
    return frozenset()


#==============================================================================
# Value Constructors
#==============================================================================

def null_const() -> NullConst:
    return NULL


def bool_const(value: bool) -> BoolConst:
    return TRUE if value else FALSE


def int_const(value: int, width: int = INT_WIDTH) -> IntConst:
    return IntConst(value, width)


def char_const(value: Union[str, int]) -> IntConst:
    """Character constant: a narrow-width integer holding the code point"""
    code = ord(value) if isinstance(value, str) else value
    return IntConst(code, CHAR_WIDTH)


def float_const(value: float) -> FloatConst:
    return FloatConst(float(value))


def enum_const(entry: EnumConstant) -> EnumEntryConst:
    return EnumEntryConst(entry)


def type_const(type_name: str) -> TypeLiteralConst:
    return TypeLiteralConst(type_name)


def external_val(reference: Any) -> ExternalVal:
    return ExternalVal(reference)


def dependent_val(value: UValue, dependencies: Iterable[Dependency]) -> UValue:
    """
    Wrap a value with dependencies.

    Returns the bare value when there are no dependencies, and merges into an
    existing plain Dependent rather than nesting one inside another.
    """
    deps = frozenset(dependencies)
    if not deps:
        return value
    if isinstance(value, DependentVal):
        return DependentVal(value.value, value.dependencies | deps)
    return DependentVal(value, deps)


def _without_variable(
    dependencies: Iterable[Dependency],
    variable: Declaration,
) -> FrozenSet[Dependency]:
    return frozenset(
        d for d in dependencies
        if not (isinstance(d, VariableVal) and d.variable == variable)
    )


def variable_val(
    variable: Declaration,
    value: UValue,
    dependencies: Iterable[Dependency] = (),
    source: Optional[Any] = None,
) -> VariableVal:
    """
    Bind a value to a declaration.

    The declaration itself is filtered out of the new dependency set and out
    of the dependencies of a directly wrapped Dependent or Variable, so that
    x = x + 1 does not make x depend on itself.

    Args:
        variable: Declaration being bound
        value: Value being stored
        dependencies: Extra dependencies of the binding
        source: Node that produced the binding (reporting only)
    """
    deps = _without_variable(dependencies, variable)

    if isinstance(value, VariableVal) and value.variable == variable:
        inner_deps = _without_variable(value.dependencies, variable)
        if deps == value.dependencies and source is None:
            return value
        return VariableVal(variable, value.value, deps | inner_deps,
                           source if source is not None else value.source)

    if isinstance(value, VariableVal):
        inner = variable_val(
            value.variable,
            value.value,
            _without_variable(value.dependencies, variable),
            value.source,
        )
        return VariableVal(variable, inner, deps, source)

    if isinstance(value, DependentVal):
        inner = dependent_val(value.value, _without_variable(value.dependencies, variable))
        return VariableVal(variable, inner, deps, source)

    return VariableVal(variable, value, deps, source)


def phi_val(values: Iterable[UValue]) -> PhiVal:
    """
    Join values into a Phi.

    Members that are themselves Phis are flattened into the result.

    Raises:
        ContractViolation: If fewer than two distinct values remain
    """
    flattened = set()
    for v in values:
        if isinstance(v, PhiVal):
            flattened.update(v.values)
        else:
            flattened.add(v)
    if len(flattened) <= 1:
        raise ContractViolation.phi_arity(flattened)
    return PhiVal(frozenset(flattened))


#==============================================================================
# Formatting
#==============================================================================

def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def _format_dependencies(deps: FrozenSet[Dependency]) -> str:
    return ", ".join(sorted(format_value(d) for d in deps))


def format_value(v: UValue) -> str:
    """Format a value for display and log messages"""
    kind = v.kind

    if kind == "null":
        return "null"
    elif kind == "bool":
        return "true" if v.value else "false"
    elif kind == "int":
        if v.width == CHAR_WIDTH and 0 <= v.value <= 0x10FFFF:
            return repr(chr(v.value))
        return str(v.value)
    elif kind == "float":
        return _format_float(v.value)
    elif kind == "enum":
        return v.entry.qualified_name
    elif kind == "type":
        return f"{v.type_name}.class"
    elif kind == "dependent":
        return f"{format_value(v.value)} (depending on: {_format_dependencies(v.dependencies)})"
    elif kind == "variable":
        inner = format_value(v.value)
        if v.dependencies:
            inner += f" (depending on: {_format_dependencies(v.dependencies)})"
        return f"(var {v.variable.name or '<unnamed>'} = {inner})"
    elif kind == "external":
        ref = render_node(v.reference) if is_node(v.reference) else "???"
        return f"external {ref}"
    elif kind == "phi":
        return "Phi(" + ", ".join(sorted(format_value(m) for m in v.values)) + ")"
    elif kind == "nothing":
        return "Nothing"
    elif kind == "undetermined":
        return "Undetermined"
    else:
        exhaustive(v)
