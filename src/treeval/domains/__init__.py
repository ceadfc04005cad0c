"""
treeval Operator Domains
Arithmetic, comparison and logic operators over lattice values
"""

from __future__ import annotations

from treeval.domains.registry import (
    Operator,
    OperatorBuilder,
    OperatorRegistry,
    define_operator,
    empty_registry,
)
from treeval.domains.arith import arith_operators
from treeval.domains.compare import compare_operators
from treeval.domains.logic import logic_operators


def create_lattice_registry() -> OperatorRegistry:
    """
    Create the registry of every lattice operator.

    Binary operators live in the "binary" namespace and unary ones in
    "unary", each named by its source symbol.
    """
    registry = OperatorRegistry()
    registry.register_all(arith_operators())
    registry.register_all(compare_operators())
    registry.register_all(logic_operators())
    return registry


__all__ = [
    "Operator",
    "OperatorBuilder",
    "OperatorRegistry",
    "define_operator",
    "empty_registry",
    "create_lattice_registry",
]
