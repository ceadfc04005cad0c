"""
treeval Operator Registry
Central registry for lattice operators

Provides Operator and OperatorRegistry classes for registering and looking up
operators by namespace and source symbol (e.g., "binary:+", "unary:!").
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, TYPE_CHECKING
from dataclasses import dataclass

from treeval.errors import TreevalError

if TYPE_CHECKING:
    from treeval.values import UValue


#==============================================================================
# Operator Class
#==============================================================================

@dataclass(frozen=True)
class Operator:
    """
    A lattice operator with its implementation.

    Attributes:
        ns: Namespace for the operator ("binary" or "unary")
        name: Source symbol of the operator (e.g., "+", "<=", "!")
        arity: Number of operands
        impl: Total function from operand values to a value
    """
    ns: str
    name: str
    arity: int
    impl: Callable[..., "UValue"]

    @property
    def qualified_name(self) -> str:
        """Get the fully qualified operator name (ns:name)"""
        return f"{self.ns}:{self.name}"

    def check_arity(self, arg_count: int) -> bool:
        """Check if argument count matches the operator's arity"""
        return self.arity == arg_count

    def __str__(self) -> str:
        return f"Operator({self.qualified_name}/{self.arity})"


#==============================================================================
# Operator Registry
#==============================================================================

class OperatorRegistry:
    """
    Registry for operators with namespaced lookup.

    Operators are registered by qualified name (ns:name) and looked up by the
    standard evaluator extension when it applies an operator symbol.
    """

    def __init__(self) -> None:
        """Create an empty operator registry"""
        self._operators: Dict[str, Operator] = {}

    #---------------------------------------------------------------------------
    # Registration
    #---------------------------------------------------------------------------

    def register(self, operator: Operator) -> "OperatorRegistry":
        """
        Register an operator in the registry.

        Args:
            operator: The operator to register

        Returns:
            self for chaining

        Raises:
            TreevalError: If an operator with the same qualified name already exists
        """
        key = operator.qualified_name
        if key in self._operators:
            raise TreevalError.duplicate_operator(operator.ns, operator.name)
        self._operators[key] = operator
        return self

    def register_all(self, operators: List[Operator]) -> "OperatorRegistry":
        """Register multiple operators at once"""
        for op in operators:
            self.register(op)
        return self

    #---------------------------------------------------------------------------
    # Lookup
    #---------------------------------------------------------------------------

    def lookup(self, ns: str, name: str) -> Optional[Operator]:
        """
        Look up an operator by namespace and name.

        Returns:
            The operator if found, None otherwise
        """
        return self._operators.get(f"{ns}:{name}")

    def get(self, ns: str, name: str) -> Operator:
        """
        Get an operator, raising an error if not found.

        Raises:
            TreevalError: If the operator is not registered
        """
        op = self.lookup(ns, name)
        if op is None:
            raise TreevalError.unknown_operator(ns, name)
        return op

    def has(self, ns: str, name: str) -> bool:
        """Check if an operator is registered"""
        return f"{ns}:{name}" in self._operators

    #---------------------------------------------------------------------------
    # Execution
    #---------------------------------------------------------------------------

    def call(self, ns: str, name: str, *args: "UValue") -> "UValue":
        """
        Execute an operator with the given arguments.

        Raises:
            TreevalError: If the operator is not registered
            TypeError: If argument count doesn't match
        """
        op = self.get(ns, name)

        if not op.check_arity(len(args)):
            raise TypeError(
                f"Arity error: {ns}:{name} expects {op.arity} "
                f"arguments, got {len(args)}"
            )

        return op.impl(*args)

    #---------------------------------------------------------------------------
    # Iteration and Inspection
    #---------------------------------------------------------------------------

    def list_namespace(self, ns: str) -> List[str]:
        """List all operator names in a namespace"""
        prefix = f"{ns}:"
        return [
            key[len(prefix):]
            for key in self._operators
            if key.startswith(prefix)
        ]

    def operators(self) -> List[Operator]:
        """Get all registered operators"""
        return list(self._operators.values())

    def __len__(self) -> int:
        return len(self._operators)

    def __contains__(self, key: str) -> bool:
        return key in self._operators


#==============================================================================
# Operator Builder
#==============================================================================

class OperatorBuilder:
    """
    Builder pattern for constructing operators with a fluent interface.

    Example:
        op = (OperatorBuilder("binary", "+")
              .arity(2)
              .impl(plus)
              .build())
    """

    def __init__(self, ns: str, name: str) -> None:
        self._ns = ns
        self._name = name
        self._arity: Optional[int] = None
        self._impl: Optional[Callable[..., "UValue"]] = None

    def arity(self, count: int) -> "OperatorBuilder":
        """Set the number of operands"""
        self._arity = count
        return self

    def impl(self, fn: Callable[..., "UValue"]) -> "OperatorBuilder":
        """Set the implementation function"""
        self._impl = fn
        return self

    def build(self) -> Operator:
        """
        Build the operator.

        Raises:
            ValueError: If required fields are missing
        """
        if self._arity is None:
            raise ValueError(f"Operator {self._ns}:{self._name} missing arity")
        if self._impl is None:
            raise ValueError(f"Operator {self._ns}:{self._name} missing implementation")

        return Operator(
            ns=self._ns,
            name=self._name,
            arity=self._arity,
            impl=self._impl,
        )


#==============================================================================
# Convenience Functions
#==============================================================================

def empty_registry() -> OperatorRegistry:
    """Create an empty operator registry"""
    return OperatorRegistry()


def define_operator(ns: str, name: str) -> OperatorBuilder:
    """Start building an operator definition"""
    return OperatorBuilder(ns, name)


def binary_operator(name: str, impl: Callable[..., "UValue"]) -> Operator:
    """Shorthand for a two-operand operator in the "binary" namespace"""
    return define_operator("binary", name).arity(2).impl(impl).build()


def unary_operator(name: str, impl: Callable[..., "UValue"]) -> Operator:
    """Shorthand for a one-operand operator in the "unary" namespace"""
    return define_operator("unary", name).arity(1).impl(impl).build()
