"""Tests for the value lattice variants and their constructors"""

import math

import pytest

from treeval import (
    NOTHING,
    UNDETERMINED,
    NULL,
    TRUE,
    FALSE,
    ContractViolation,
    DependentVal,
    ErrorCodes,
    IntConst,
    LiteralExpr,
    VariableVal,
    bool_const,
    char_const,
    dependencies_of,
    dependent_val,
    enum_const,
    external_val,
    float_const,
    format_value,
    int_const,
    is_constant,
    is_dependent,
    is_reachable,
    phi_val,
    to_constant,
    to_variable,
    type_const,
    unwrap,
    variable_val,
)


class TestConstants:

    def test_bool_const_returns_singletons(self):
        assert bool_const(True) is TRUE
        assert bool_const(False) is FALSE

    def test_char_is_narrow_int(self):
        assert char_const("a") == IntConst(97, 2)
        assert char_const("a") != int_const(97)

    def test_guards(self):
        assert is_constant(NULL)
        assert is_constant(type_const("Foo"))
        assert not is_constant(UNDETERMINED)
        assert not is_reachable(NOTHING)
        assert is_reachable(UNDETERMINED)


class TestDependent:

    def test_empty_dependencies_collapse(self, arena):
        assert dependent_val(int_const(1), []) == int_const(1)

    def test_nested_dependent_is_flattened(self, arena):
        x = variable_val(arena.declare("x"), int_const(1))
        y = variable_val(arena.declare("y"), int_const(2))
        nested = dependent_val(dependent_val(int_const(3), [x]), [y])
        assert nested == DependentVal(int_const(3), frozenset({x, y}))

    def test_accessors_peel_wrappers(self, arena):
        x = variable_val(arena.declare("x"), int_const(1))
        dep = dependent_val(int_const(3), [x])
        assert unwrap(dep) == int_const(3)
        assert to_constant(dep) == int_const(3)
        assert to_constant(external_val("f()")) is None
        assert to_variable(x) is x
        assert to_variable(dep) is None
        assert is_dependent(dep) and is_dependent(x)


class TestVariable:

    def test_source_does_not_affect_equality(self, arena):
        decl = arena.declare("x")
        a = variable_val(decl, int_const(1), source=LiteralExpr(1))
        b = variable_val(decl, int_const(1), source=LiteralExpr(1))
        assert a == b
        assert hash(a) == hash(b)

    def test_own_declaration_filtered_from_dependencies(self, arena):
        decl = arena.declare("x")
        old = variable_val(decl, int_const(1))
        new = variable_val(decl, int_const(2), [old])
        assert new.dependencies == frozenset()

    def test_own_declaration_filtered_from_wrapped_dependent(self, arena):
        decl = arena.declare("x")
        old = variable_val(decl, int_const(1))
        new = variable_val(decl, dependent_val(int_const(2), [old]))
        assert new.value == int_const(2)
        assert dependencies_of(new) == frozenset()

    def test_other_dependencies_are_kept(self, arena):
        x = variable_val(arena.declare("x"), int_const(1))
        y = variable_val(arena.declare("y"), dependent_val(int_const(2), [x]))
        assert y.value == DependentVal(int_const(2), frozenset({x}))


class TestPhi:

    def test_nested_phi_is_flattened(self):
        inner = phi_val([int_const(2), int_const(3)])
        outer = phi_val([int_const(1), inner])
        assert outer.values == frozenset({int_const(1), int_const(2), int_const(3)})

    def test_single_member_is_contract_violation(self):
        with pytest.raises(ContractViolation) as exc:
            phi_val([int_const(1), int_const(1)])
        assert exc.value.code == ErrorCodes.PHI_ARITY

    def test_contract_violation_is_assertion(self):
        with pytest.raises(AssertionError):
            phi_val([])

    def test_dependencies_are_union_of_members(self, arena):
        x = variable_val(arena.declare("x"), int_const(1))
        y = variable_val(arena.declare("y"), int_const(2))
        phi = phi_val([dependent_val(int_const(3), [x]), dependent_val(int_const(4), [y])])
        assert dependencies_of(phi) == frozenset({x, y})


class TestFormatValue:

    def test_constants(self, arena):
        color_red = arena.enum_constant("RED", "Color")
        assert format_value(int_const(5)) == "5"
        assert format_value(char_const("a")) == "'a'"
        assert format_value(NULL) == "null"
        assert format_value(TRUE) == "true"
        assert format_value(float_const(math.inf)) == "Infinity"
        assert format_value(float_const(math.nan)) == "NaN"
        assert format_value(enum_const(color_red)) == "Color.RED"
        assert format_value(type_const("Foo")) == "Foo.class"

    def test_provenance(self, arena):
        x = variable_val(arena.declare("x"), int_const(5))
        assert format_value(x) == "(var x = 5)"
        assert format_value(dependent_val(int_const(6), [x])) == "6 (depending on: (var x = 5))"

    def test_special_values(self):
        assert format_value(NOTHING) == "Nothing"
        assert format_value(UNDETERMINED) == "Undetermined"
        assert format_value(phi_val([int_const(2), int_const(1)])) == "Phi(1, 2)"
        assert format_value(external_val(LiteralExpr(1))) == "external 1"


class TestFloatEquality:

    def test_nan_equals_nan(self):
        assert float_const(math.nan) == float_const(float("nan"))
        assert hash(float_const(math.nan)) == hash(float_const(-math.nan))
        assert len({float_const(math.nan), float_const(math.inf - math.inf)}) == 1

    def test_numeric_values_compare_by_value(self):
        assert float_const(0.5) == float_const(0.5)
        assert float_const(0.0) == float_const(-0.0)
        assert float_const(1.0) != float_const(math.nan)
        assert float_const(1.0) != int_const(1)
