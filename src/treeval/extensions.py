"""
treeval Evaluator Extensions
Per-language operator semantics consulted by the tree-based evaluator

The evaluator handles assignment, + and - itself. Prefix, postfix, qualified
and the remaining binary operators are delegated to the EvaluatorExtension
registered for the node's language. Every hook of the base class answers
(Undetermined, incoming state), so a language with no registered extension
degrades gracefully instead of failing.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from treeval.declarations import Declaration
from treeval.domains import OperatorRegistry, create_lattice_registry
from treeval.errors import TreevalError
from treeval.state import EvaluationInfo, EvaluationState
from treeval.tree import AccessType, BinaryOperator, PostfixOperator, PrefixOperator
from treeval.values import (
    UValue,
    UNDETERMINED,
    is_constant,
    to_variable,
    unwrap,
)

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "generic"


#==============================================================================
# Extension Interface
#==============================================================================

class EvaluatorExtension:
    """
    Operator semantics for one source language.

    Subclasses override the hooks for the operators their language defines;
    the defaults contribute no information. The prefix, postfix and binary
    hooks receive the declaration their operand node resolves to as target,
    or None, so that updating operators know what to re-assign.
    """

    def __init__(self, language: str) -> None:
        self.language = language

    def evaluate_prefix(
        self,
        operator: PrefixOperator,
        operand_value: UValue,
        state: EvaluationState,
        target: Optional[Declaration] = None,
    ) -> EvaluationInfo:
        return EvaluationInfo(UNDETERMINED, state)

    def evaluate_postfix(
        self,
        operator: PostfixOperator,
        operand_value: UValue,
        state: EvaluationState,
        target: Optional[Declaration] = None,
    ) -> EvaluationInfo:
        return EvaluationInfo(UNDETERMINED, state)

    def evaluate_binary(
        self,
        operator: BinaryOperator,
        left_value: UValue,
        right_value: UValue,
        state: EvaluationState,
        target: Optional[Declaration] = None,
    ) -> EvaluationInfo:
        return EvaluationInfo(UNDETERMINED, state)

    def evaluate_qualified(
        self,
        access_type: AccessType,
        receiver_info: EvaluationInfo,
        selector_info: EvaluationInfo,
    ) -> EvaluationInfo:
        return EvaluationInfo(UNDETERMINED, selector_info.state)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.language!r})"


#==============================================================================
# Standard (C-family) Semantics
#==============================================================================

# Compound assignment -> the binary operator it applies
COMPOUND_ASSIGNMENTS: Dict[str, str] = {
    "+=": "+",
    "-=": "-",
    "*=": "*",
    "/=": "/",
    "%=": "%",
    "&=": "&",
    "|=": "|",
    "^=": "^",
}


def _update_target(value: UValue, target: Optional[Declaration]) -> Optional[Declaration]:
    """Declaration an updating operator re-assigns, if it can be named"""
    if target is not None:
        return target
    variable = to_variable(value)
    return variable.variable if variable is not None else None


class StandardExtension(EvaluatorExtension):
    """
    C-family operator semantics backed by the lattice operator registry.

    ++/-- and compound assignments re-assign their target declaration. The
    evaluator resolves the target from the operand node; without one, a
    Variable operand value names the declaration to update. A new value the
    lattice cannot compute is stored as Undetermined, so a stale binding
    never survives the update.
    """

    def __init__(self, language: str, operators: Optional[OperatorRegistry] = None) -> None:
        super().__init__(language)
        self._operators = operators if operators is not None else create_lattice_registry()

    @property
    def operators(self) -> OperatorRegistry:
        return self._operators

    def _step(
        self,
        symbol: str,
        operand_value: UValue,
        state: EvaluationState,
        postfix: bool,
        target: Optional[Declaration],
    ) -> EvaluationInfo:
        updated = self._operators.call("unary", symbol, operand_value)
        value = operand_value if postfix else updated
        variable = _update_target(operand_value, target)
        if variable is None:
            return EvaluationInfo(value, state)
        return EvaluationInfo(value, state.assign(variable, updated))

    def evaluate_prefix(
        self,
        operator: PrefixOperator,
        operand_value: UValue,
        state: EvaluationState,
        target: Optional[Declaration] = None,
    ) -> EvaluationInfo:
        symbol = PrefixOperator(operator).value
        if symbol in ("++", "--"):
            return self._step(symbol, operand_value, state, False, target)
        op = self._operators.lookup("unary", symbol)
        if op is None:
            return super().evaluate_prefix(operator, operand_value, state, target)
        return EvaluationInfo(op.impl(operand_value), state)

    def evaluate_postfix(
        self,
        operator: PostfixOperator,
        operand_value: UValue,
        state: EvaluationState,
        target: Optional[Declaration] = None,
    ) -> EvaluationInfo:
        return self._step(PostfixOperator(operator).value, operand_value, state, True, target)

    def evaluate_binary(
        self,
        operator: BinaryOperator,
        left_value: UValue,
        right_value: UValue,
        state: EvaluationState,
        target: Optional[Declaration] = None,
    ) -> EvaluationInfo:
        symbol = BinaryOperator(operator).value

        if symbol in COMPOUND_ASSIGNMENTS:
            variable = _update_target(left_value, target)
            if variable is None:
                return EvaluationInfo(UNDETERMINED, state)
            result = self._operators.call("binary", COMPOUND_ASSIGNMENTS[symbol], left_value, right_value)
            return EvaluationInfo(UNDETERMINED, state.assign(variable, result))

        op = self._operators.lookup("binary", symbol)
        if op is None:
            return super().evaluate_binary(operator, left_value, right_value, state, target)
        return EvaluationInfo(op.impl(left_value, right_value), state)

    def evaluate_qualified(
        self,
        access_type: AccessType,
        receiver_info: EvaluationInfo,
        selector_info: EvaluationInfo,
    ) -> EvaluationInfo:
        # Color.RED, Integer.MAX_VALUE: the selector alone decides the value
        if is_constant(unwrap(selector_info.value)):
            return selector_info
        return super().evaluate_qualified(access_type, receiver_info, selector_info)


#==============================================================================
# Extension Registry
#==============================================================================

class ExtensionRegistry:
    """
    Registry of evaluator extensions keyed by language tag.

    Each language has at most one extension. Lookups for an unregistered
    language fall back to a base EvaluatorExtension.
    """

    def __init__(self) -> None:
        self._extensions: Dict[str, EvaluatorExtension] = {}

    def register(self, extension: EvaluatorExtension) -> "ExtensionRegistry":
        """
        Register an extension for its language.

        Returns:
            self for chaining

        Raises:
            TreevalError: If the language already has an extension
        """
        if extension.language in self._extensions:
            raise TreevalError.duplicate_extension(extension.language)
        self._extensions[extension.language] = extension
        logger.debug("Registered %r", extension)
        return self

    def register_all(self, extensions: List[EvaluatorExtension]) -> "ExtensionRegistry":
        """Register multiple extensions at once"""
        for ext in extensions:
            self.register(ext)
        return self

    def lookup(self, language: str) -> Optional[EvaluatorExtension]:
        """Extension for a language, or None if none is registered"""
        return self._extensions.get(language)

    def get(self, language: str) -> EvaluatorExtension:
        """Extension for a language, or a no-information fallback"""
        ext = self._extensions.get(language)
        if ext is None:
            logger.debug("No evaluator extension for language %r; using defaults", language)
            return EvaluatorExtension(language)
        return ext

    def languages(self) -> List[str]:
        """Registered language tags, sorted"""
        return sorted(self._extensions)

    def __contains__(self, language: str) -> bool:
        return language in self._extensions

    def __len__(self) -> int:
        return len(self._extensions)


def empty_extension_registry() -> ExtensionRegistry:
    """Create an extension registry with nothing registered"""
    return ExtensionRegistry()


_DEFAULT_REGISTRY = ExtensionRegistry().register(StandardExtension(DEFAULT_LANGUAGE))


def default_extension_registry() -> ExtensionRegistry:
    """
    The process-wide registry, populated at import time.

    Holds StandardExtension for the "generic" language, the default
    language of every node.
    """
    return _DEFAULT_REGISTRY
