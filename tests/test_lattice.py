"""Tests for the lattice operators and the merge (join) of values"""

import itertools
import math

import pytest

from treeval import (
    NOTHING,
    UNDETERMINED,
    NULL,
    TRUE,
    FALSE,
    DependentVal,
    ErrorCodes,
    IntConst,
    PhiVal,
    TreevalError,
    create_lattice_registry,
    dependent_val,
    external_val,
    float_const,
    int_const,
    char_const,
    merge,
    phi_val,
    type_const,
    unwrap,
    variable_val,
)
from treeval.domains import OperatorRegistry, define_operator, empty_registry
from treeval.domains.arith import div, dec, inc, minus, mod, negate, plus, times, trunc_div, trunc_mod
from treeval.domains.compare import greater, less, less_or_equals, value_equals, value_not_equals
from treeval.domains.logic import (
    bitwise_and,
    bitwise_not,
    bitwise_xor,
    logical_and,
    logical_not,
    logical_or,
)


INT_MAX = 2**63 - 1
INT_MIN = -(2**63)


class TestArithmetic:

    def test_integer_folding(self):
        assert plus(int_const(2), int_const(3)) == int_const(5)
        assert minus(int_const(2), int_const(3)) == int_const(-1)
        assert times(int_const(4), int_const(3)) == int_const(12)

    def test_overflow_wraps(self):
        assert plus(int_const(INT_MAX), int_const(1)) == int_const(INT_MIN)
        assert negate(int_const(INT_MIN)) == int_const(INT_MIN)

    def test_division_truncates_toward_zero(self):
        assert trunc_div(-7, 2) == -3
        assert trunc_mod(-7, 2) == -1
        assert div(int_const(-7), int_const(2)) == int_const(-3)
        assert mod(int_const(7), int_const(-2)) == int_const(1)

    def test_integer_division_by_zero_is_undetermined(self):
        assert div(int_const(1), int_const(0)) == UNDETERMINED
        assert mod(int_const(1), int_const(0)) == UNDETERMINED

    def test_float_division_by_zero(self):
        assert div(float_const(1.0), int_const(0)) == float_const(math.inf)
        assert div(float_const(-1.0), float_const(0.0)) == float_const(-math.inf)
        assert math.isnan(div(float_const(0.0), float_const(0.0)).value)
        assert math.isnan(mod(float_const(1.0), float_const(0.0)).value)

    def test_mixed_operands_promote_to_float(self):
        assert plus(int_const(1), float_const(0.5)) == float_const(1.5)

    def test_non_numeric_operands_are_undetermined(self):
        assert plus(TRUE, int_const(1)) == UNDETERMINED
        assert plus(NULL, int_const(1)) == UNDETERMINED
        assert plus(external_val("f()"), int_const(1)) == UNDETERMINED

    def test_increment_keeps_width(self):
        assert inc(char_const("a")) == IntConst(98, 2)
        assert dec(int_const(1)) == int_const(0)
        assert plus(char_const("a"), int_const(1)) == int_const(98)


class TestLifting:

    def test_variable_operand_becomes_dependency(self, arena):
        x = variable_val(arena.declare("x"), int_const(5))
        assert plus(x, int_const(1)) == DependentVal(int_const(6), frozenset({x}))

    def test_right_dependent_keeps_operand_order(self, arena):
        x = variable_val(arena.declare("x"), int_const(5))
        result = div(int_const(10), dependent_val(int_const(2), [x]))
        assert result == DependentVal(int_const(5), frozenset({x}))

    def test_both_operands_contribute(self, arena):
        x = variable_val(arena.declare("x"), int_const(5))
        y = variable_val(arena.declare("y"), int_const(2))
        result = minus(x, y)
        assert unwrap(result) == int_const(3)
        assert result.dependencies == frozenset({x, y})

    def test_unary_lifting(self, arena):
        flag = variable_val(arena.declare("flag"), TRUE)
        assert logical_not(flag) == DependentVal(FALSE, frozenset({flag}))


class TestComparison:

    def test_numeric_equality_ignores_kind(self):
        assert value_equals(int_const(1), float_const(1.0)) == TRUE
        assert value_equals(char_const("a"), int_const(97)) == TRUE

    def test_different_kinds_are_definitely_unequal(self):
        assert value_equals(int_const(1), TRUE) == FALSE
        assert value_not_equals(NULL, int_const(0)) == TRUE
        assert value_not_equals(type_const("A"), type_const("B")) == TRUE

    def test_ordering(self):
        assert less(int_const(1), int_const(2)) == TRUE
        assert greater(int_const(1), float_const(0.5)) == TRUE
        assert less_or_equals(int_const(2), int_const(2)) == TRUE
        assert greater(TRUE, FALSE) == UNDETERMINED

    def test_non_constants_are_undetermined(self):
        assert value_equals(external_val("f()"), int_const(1)) == UNDETERMINED


class TestLogic:

    def test_boolean_and_bitwise(self):
        assert bitwise_and(TRUE, FALSE) == FALSE
        assert bitwise_and(int_const(6), int_const(3)) == int_const(2)
        assert bitwise_xor(int_const(5), int_const(1)) == int_const(4)
        assert bitwise_not(int_const(0)) == int_const(-1)
        assert bitwise_and(TRUE, int_const(1)) == UNDETERMINED

    def test_conditional_operators_short_circuit(self):
        assert logical_and(FALSE, UNDETERMINED) == FALSE
        assert logical_or(TRUE, external_val("f()")) == TRUE
        assert logical_and(TRUE, UNDETERMINED) == UNDETERMINED
        assert logical_or(FALSE, TRUE) == TRUE


class TestOperatorRegistry:

    def test_lattice_registry_contents(self):
        registry = create_lattice_registry()
        assert registry.has("binary", "+")
        assert registry.has("unary", "~")
        assert "binary:&&" in registry
        assert set(registry.list_namespace("unary")) == {"-", "+", "!", "~", "++", "--"}

    def test_call(self):
        registry = create_lattice_registry()
        assert registry.call("binary", "*", int_const(6), int_const(7)) == int_const(42)
        with pytest.raises(TypeError):
            registry.call("binary", "*", int_const(6))

    def test_unknown_operator(self):
        registry = create_lattice_registry()
        assert registry.lookup("binary", "**") is None
        with pytest.raises(TreevalError) as exc:
            registry.get("binary", "**")
        assert exc.value.code == ErrorCodes.UNKNOWN_OPERATOR

    def test_duplicate_operator(self):
        registry = OperatorRegistry()
        op = define_operator("binary", "+").arity(2).impl(plus).build()
        registry.register(op)
        with pytest.raises(TreevalError) as exc:
            registry.register(op)
        assert exc.value.code == ErrorCodes.DUPLICATE_OPERATOR

    def test_builder_requires_arity(self):
        with pytest.raises(ValueError):
            define_operator("binary", "+").impl(plus).build()

    def test_empty_registry_and_operator_listing(self):
        registry = empty_registry()
        assert len(registry) == 0
        op = define_operator("unary", "-").arity(1).impl(negate).build()
        registry.register(op)
        assert registry.operators() == [op]
        assert str(op) == "Operator(unary:-/1)"
        assert len(create_lattice_registry().operators()) == len(create_lattice_registry())


@pytest.fixture
def sample(arena):
    """A spread of values covering every merge rule"""
    x = arena.declare("x")
    y = arena.declare("y")
    ext = external_val("f()")
    x1 = variable_val(x, int_const(1))
    x1_dep = variable_val(x, int_const(1), [ext])
    return [
        NOTHING,
        UNDETERMINED,
        NULL,
        TRUE,
        int_const(1),
        int_const(2),
        float_const(1.0),
        ext,
        x1,
        x1_dep,
        variable_val(x, int_const(2)),
        variable_val(y, int_const(1)),
        variable_val(y, x1),
        dependent_val(int_const(1), [ext]),
        dependent_val(int_const(1), [x1]),
        phi_val([int_const(1), int_const(2)]),
        phi_val([int_const(2), int_const(3)]),
    ]


class TestMerge:

    def test_idempotent(self, sample):
        for v in sample:
            assert merge(v, v) == v

    def test_commutative(self, sample):
        for a, b in itertools.product(sample, repeat=2):
            assert merge(a, b) == merge(b, a), (a, b)

    def test_nothing_is_absorbed(self, sample):
        for v in sample:
            assert merge(NOTHING, v) == v
            assert merge(v, NOTHING) == v

    def test_distinct_constants_make_phi(self):
        assert merge(int_const(1), int_const(2)) == PhiVal(frozenset({int_const(1), int_const(2)}))

    def test_undetermined_is_not_absorbing(self):
        result = merge(UNDETERMINED, int_const(1))
        assert result == PhiVal(frozenset({UNDETERMINED, int_const(1)}))

    def test_phi_members_are_flattened(self):
        result = merge(phi_val([int_const(1), int_const(2)]), int_const(3))
        assert result.values == frozenset({int_const(1), int_const(2), int_const(3)})
        assert merge(phi_val([int_const(1), int_const(2)]), int_const(1)) == phi_val([int_const(1), int_const(2)])

    def test_wrapper_absorbs_its_bare_value(self, arena):
        x1 = variable_val(arena.declare("x"), int_const(1))
        assert merge(x1, int_const(1)) == x1
        assert merge(int_const(1), x1) == x1

    def test_same_variable_unions_dependencies(self, arena):
        x = arena.declare("x")
        a = variable_val(arena.declare("a"), int_const(0))
        b = variable_val(arena.declare("b"), int_const(0))
        left = variable_val(x, int_const(1), [a])
        right = variable_val(x, int_const(1), [b])
        assert merge(left, right) == variable_val(x, int_const(1), [a, b])

    def test_dependents_union_dependencies(self, arena):
        a = variable_val(arena.declare("a"), int_const(0))
        b = variable_val(arena.declare("b"), int_const(0))
        result = merge(dependent_val(int_const(1), [a]), dependent_val(int_const(1), [b]))
        assert result == DependentVal(int_const(1), frozenset({a, b}))

    def test_different_variables_make_phi(self, arena):
        x1 = variable_val(arena.declare("x"), int_const(1))
        y1 = variable_val(arena.declare("y"), int_const(1))
        assert merge(x1, y1) == PhiVal(frozenset({x1, y1}))

    def test_nan_results_merge_to_themselves(self):
        nan_a = div(float_const(0.0), float_const(0.0))
        nan_b = mod(float_const(1.0), float_const(0.0))
        assert merge(nan_a, nan_b) == nan_a
