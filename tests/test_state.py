"""Tests for EvaluationState and EvaluationInfo"""

import pytest

from treeval import (
    NOTHING,
    UNDETERMINED,
    EvaluationInfo,
    EvaluationState,
    LiteralExpr,
    PhiVal,
    VariableVal,
    empty_state,
    int_const,
    variable_val,
)


class TestEvaluationState:

    def test_unbound_reads_undetermined(self, arena):
        assert empty_state().lookup(arena.declare("x")) == UNDETERMINED

    def test_assign_returns_new_state(self, arena):
        x = arena.declare("x")
        before = empty_state()
        after = before.assign(x, int_const(1))
        assert x not in before
        assert x in after
        assert len(after) == 1
        assert after.lookup(x) == variable_val(x, int_const(1))

    def test_assign_records_source(self, arena):
        x = arena.declare("x")
        source = LiteralExpr(1)
        value = empty_state().assign(x, int_const(1), source=source).lookup(x)
        assert isinstance(value, VariableVal)
        assert value.source is source

    def test_bindings_is_a_copy(self, arena):
        x = arena.declare("x")
        state = empty_state().assign(x, int_const(1))
        state.bindings.clear()
        assert x in state

    def test_equality(self, arena):
        x = arena.declare("x")
        assert empty_state().assign(x, int_const(1)) == empty_state().assign(x, int_const(1))
        assert empty_state().assign(x, int_const(1)) != empty_state().assign(x, int_const(2))
        with pytest.raises(TypeError):
            hash(empty_state())


class TestStateMerge:

    def test_merge_with_self(self, arena):
        state = empty_state().assign(arena.declare("x"), int_const(1))
        assert state.merge(state) is state

    def test_equal_bindings_survive(self, arena):
        x = arena.declare("x")
        left = empty_state().assign(x, int_const(1))
        right = empty_state().assign(x, int_const(1))
        assert left.merge(right) == left

    def test_conflicting_bindings_make_phi(self, arena):
        x = arena.declare("x")
        left = empty_state().assign(x, int_const(1))
        right = empty_state().assign(x, int_const(2))
        merged = left.merge(right).lookup(x)
        assert merged == PhiVal(frozenset({left.lookup(x), right.lookup(x)}))

    def test_one_sided_binding_joins_undetermined(self, arena):
        x = arena.declare("x")
        y = arena.declare("y")
        left = empty_state().assign(x, int_const(1))
        right = empty_state().assign(y, int_const(2))
        merged = left.merge(right)
        assert set(merged) == {x, y}
        assert merged.lookup(x) == PhiVal(frozenset({left.lookup(x), UNDETERMINED}))


class TestEvaluationInfo:

    def test_unpacks_as_pair(self):
        value, state = EvaluationInfo(int_const(1), empty_state())
        assert value == int_const(1)
        assert state == empty_state()

    def test_reachability(self):
        assert EvaluationInfo(UNDETERMINED, empty_state()).reachable()
        assert not EvaluationInfo(NOTHING, empty_state()).reachable()

    def test_unreachable_side_is_ignored(self, arena):
        x = arena.declare("x")
        live = EvaluationInfo(int_const(1), empty_state().assign(x, int_const(1)))
        dead = EvaluationInfo(NOTHING, empty_state().assign(x, int_const(2)))
        assert live.merge(dead) is live
        assert dead.merge(live) is live

    def test_both_reachable_merge_pointwise(self, arena):
        x = arena.declare("x")
        a = EvaluationInfo(int_const(1), empty_state().assign(x, int_const(1)))
        b = EvaluationInfo(int_const(2), empty_state().assign(x, int_const(2)))
        merged = a.merge(b)
        assert merged.value == PhiVal(frozenset({int_const(1), int_const(2)}))
        assert isinstance(merged.state.lookup(x), PhiVal)

    def test_with_value(self):
        info = EvaluationInfo(int_const(1), empty_state())
        assert info.with_value(int_const(1)) is info
        assert info.with_value(int_const(2)) == EvaluationInfo(int_const(2), info.state)
