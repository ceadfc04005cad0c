"""
treeval Evaluation State
Per-path mapping from declarations to lattice values

This module provides an immutable state class using the dict.copy() pattern:
assign and merge return new EvaluationState instances and leave the receiver
untouched, so one state can seed several independent branch evaluations.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, NamedTuple, Optional

from treeval.declarations import Declaration
from treeval.lattice import merge as merge_values
from treeval.values import (
    UValue,
    UNDETERMINED,
    format_value,
    is_reachable,
    variable_val,
)


#==============================================================================
# Evaluation State
#==============================================================================

class EvaluationState:
    """
    Immutable evaluation state.

    Maps each assigned declaration to the Variable value currently bound to
    it. Unbound declarations read as Undetermined.
    """

    def __init__(self, bindings: Optional[Dict[Declaration, UValue]] = None):
        """
        Create a new evaluation state.

        Args:
            bindings: Initial bindings (optional)
        """
        self._bindings = dict(bindings) if bindings else {}

    @property
    def bindings(self) -> Dict[Declaration, UValue]:
        """Return a copy of the bindings to prevent external mutation."""
        return dict(self._bindings)

    def lookup(self, variable: Declaration) -> UValue:
        """
        Look up the value bound to a declaration.

        Args:
            variable: Declaration to look up

        Returns:
            The bound value, or Undetermined if unbound
        """
        return self._bindings.get(variable, UNDETERMINED)

    def assign(
        self,
        variable: Declaration,
        value: UValue,
        source: Optional[Any] = None,
    ) -> "EvaluationState":
        """
        Bind a value to a declaration.
        Returns a new EvaluationState and leaves this one untouched.

        Args:
            variable: Declaration being assigned
            value: Value being stored
            source: Node the value came from, recorded on the Variable

        Returns:
            New EvaluationState with the binding replaced
        """
        new_bindings = self._bindings.copy()
        new_bindings[variable] = variable_val(variable, value, source=source)
        return EvaluationState(new_bindings)

    def merge(self, other: "EvaluationState") -> "EvaluationState":
        """
        Pointwise merge with another state.

        Every declaration bound in either state is bound in the result to the
        lattice merge of both sides; a missing binding counts as Undetermined.
        """
        if other is self:
            return self
        merged: Dict[Declaration, UValue] = {}
        for variable in self._bindings.keys() | other._bindings.keys():
            merged[variable] = merge_values(self.lookup(variable), other.lookup(variable))
        return EvaluationState(merged)

    def __contains__(self, variable: object) -> bool:
        return variable in self._bindings

    def __iter__(self) -> Iterator[Declaration]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EvaluationState):
            return NotImplemented
        return self._bindings == other._bindings

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        items = ", ".join(
            f"{decl.name}: {format_value(value)}"
            for decl, value in sorted(self._bindings.items(), key=lambda kv: kv[0].id)
        )
        return f"EvaluationState({{{items}}})"


def empty_state() -> EvaluationState:
    """
    Create an empty evaluation state.

    Returns:
        New EvaluationState with no bindings
    """
    return EvaluationState()


#==============================================================================
# Evaluation Info
#==============================================================================

class EvaluationInfo(NamedTuple):
    """Result of evaluating one node: its value and the outgoing state"""
    value: UValue
    state: EvaluationState

    def reachable(self) -> bool:
        """False iff the value is Nothing"""
        return is_reachable(self.value)

    def merge(self, other: "EvaluationInfo") -> "EvaluationInfo":
        """
        Merge the results of two alternative paths.

        An unreachable path is ignored when the other one is reachable;
        otherwise values and states are merged pointwise.
        """
        if not self.reachable() and other.reachable():
            return other
        if not other.reachable() and self.reachable():
            return self
        return EvaluationInfo(
            merge_values(self.value, other.value),
            self.state.merge(other.state),
        )

    def with_value(self, value: UValue) -> "EvaluationInfo":
        """Same state, different value"""
        if value == self.value:
            return self
        return EvaluationInfo(value, self.state)
