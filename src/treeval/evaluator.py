"""
treeval Evaluator
Implements tree-based symbolic evaluation: (node, state) ⇓ (value, state')

This module walks the reference tree directly, threading an EvaluationInfo
through it. Sub-node state updates are visible to later siblings but never to
a parallel branch that starts from the same state. Control-flow joins merge
the branch results with the lattice merge; paths that cannot complete carry
the value Nothing and short-circuit their enclosing expression.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from treeval.declarations import Declaration, EnumConstant
from treeval.domains.arith import plus, minus, wrap_int
from treeval.errors import exhaustive
from treeval.extensions import (
    DEFAULT_LANGUAGE,
    EvaluatorExtension,
    ExtensionRegistry,
    default_extension_registry,
)
from treeval.state import EvaluationInfo, EvaluationState, empty_state
from treeval.tree import (
    BinaryExpr,
    BinaryOperator,
    BlockExpr,
    CallExpr,
    ClassLiteralExpr,
    DeclarationExpr,
    IfExpr,
    LiteralExpr,
    Node,
    PostfixExpr,
    PrefixExpr,
    QualifiedExpr,
    SimpleReferenceExpr,
    is_node,
    resolve_variable,
)
from treeval.values import (
    UValue,
    BoolConst,
    NOTHING,
    NULL,
    UNDETERMINED,
    bool_const,
    char_const,
    enum_const,
    external_val,
    float_const,
    format_value,
    int_const,
    to_constant,
    type_const,
)

logger = logging.getLogger(__name__)


#==============================================================================
# Evaluation Options
#==============================================================================

@dataclass
class EvalOptions:
    """Options for tree-based evaluation"""
    trace: bool = False
    default_language: str = DEFAULT_LANGUAGE


#==============================================================================
# Evaluator Class
#==============================================================================

class TreeBasedEvaluator:
    """
    Symbolic evaluator over the reference tree.

    Evaluation rules, by node kind:
    - literal / classLiteral: the corresponding constant, state unchanged
    - return / break / continue / throw: Nothing, operands not evaluated
    - reference: enum constant, the state's binding, or External if unresolved
    - binary '=': right side first, then bind the resolved left declaration
    - binary op: left, then right under left's state; Nothing short-circuits
    - if: a definite condition selects one branch, otherwise branches merge
    - block: sequential, stopping at the first unreachable expression

    Instances hold only their extension registry and options and may be
    reused across evaluations.
    """

    def __init__(
        self,
        extensions: Optional[ExtensionRegistry] = None,
        options: Optional[EvalOptions] = None,
    ):
        """
        Initialize the evaluator.

        Args:
            extensions: Per-language operator semantics (default registry if None)
            options: Evaluation options (defaults if None)
        """
        self._extensions = extensions if extensions is not None else default_extension_registry()
        self._options = options if options is not None else EvalOptions()

    @property
    def extensions(self) -> ExtensionRegistry:
        """Get the extension registry"""
        return self._extensions

    @property
    def options(self) -> EvalOptions:
        """Get the evaluation options"""
        return self._options

    #---------------------------------------------------------------------------
    # Public Evaluation API
    #---------------------------------------------------------------------------

    def evaluate(self, node: Node, state: Optional[EvaluationState] = None) -> EvaluationInfo:
        """
        Evaluate a node under an incoming state.

        Args:
            node: Node to evaluate
            state: Incoming state (empty if None)

        Returns:
            The node's value and the outgoing state

        Raises:
            ContractViolation: If node is not one of the known node kinds
        """
        return self._eval_node(node, state if state is not None else empty_state())

    def evaluate_value(self, node: Node, state: Optional[EvaluationState] = None) -> UValue:
        """Evaluate a node and return only its value"""
        return self.evaluate(node, state).value

    def analyze(self, body: Node, state: Optional[EvaluationState] = None) -> EvaluationInfo:
        """
        Evaluate a routine body from the caller's starting state.

        The returned state holds the bindings at the end of the body; an
        unreachable value means every path through the body leaves early.
        """
        info = self.evaluate(body, state)
        logger.debug(
            "Analyzed body: %d binding(s), value %s",
            len(info.state),
            format_value(info.value),
        )
        return info

    #---------------------------------------------------------------------------
    # Dispatch
    #---------------------------------------------------------------------------

    def _eval_node(self, node: Node, state: EvaluationState) -> EvaluationInfo:
        if not is_node(node):
            exhaustive(node)

        info = self._dispatch(node, state)
        if self._options.trace:
            logger.debug("%s -> %s", node.kind, format_value(info.value))
        return info

    def _dispatch(self, node: Node, state: EvaluationState) -> EvaluationInfo:
        """Main evaluation dispatch based on node kind"""
        kind = node.kind

        if kind == "literal":
            return EvaluationInfo(self._eval_literal(node), state)
        elif kind == "classLiteral":
            return EvaluationInfo(self._eval_class_literal(node), state)
        elif kind in ("return", "break", "continue", "throw"):
            return EvaluationInfo(NOTHING, state)
        elif kind == "reference":
            return EvaluationInfo(self._eval_reference(node, state), state)
        elif kind == "qualified":
            return self._eval_qualified(node, state)
        elif kind == "call":
            return self._eval_call(node, state)
        elif kind == "binary":
            return self._eval_binary(node, state)
        elif kind == "prefix":
            return self._eval_prefix(node, state)
        elif kind == "postfix":
            return self._eval_postfix(node, state)
        elif kind == "if":
            return self._eval_if(node, state)
        elif kind == "block":
            return self._eval_block(node, state)
        elif kind == "declaration":
            return self._eval_declaration(node, state)
        elif kind == "parenthesized":
            return self._eval_node(node.expression, state)
        elif kind == "opaque":
            return EvaluationInfo(UNDETERMINED, state)
        else:
            exhaustive(node)

    def _extension_for(self, language: Optional[str]) -> EvaluatorExtension:
        return self._extensions.get(language or self._options.default_language)

    #---------------------------------------------------------------------------
    # Leaves
    #---------------------------------------------------------------------------

    def _eval_literal(self, node: LiteralExpr) -> UValue:
        value = node.value

        if value is None:
            return NULL
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return bool_const(value)
        if isinstance(value, int):
            return int_const(wrap_int(value))
        if isinstance(value, float):
            return float_const(value)
        if isinstance(value, str) and node.is_char and len(value) == 1:
            return char_const(value)
        return UNDETERMINED

    def _eval_class_literal(self, node: ClassLiteralExpr) -> UValue:
        if node.type_name is None:
            return UNDETERMINED
        return type_const(node.type_name)

    def _eval_reference(self, node: SimpleReferenceExpr, state: EvaluationState) -> UValue:
        target = node.target
        if isinstance(target, EnumConstant):
            return enum_const(target)
        if isinstance(target, Declaration):
            return state.lookup(target)
        return external_val(node)

    #---------------------------------------------------------------------------
    # Composite Expressions
    #---------------------------------------------------------------------------

    def _eval_qualified(self, node: QualifiedExpr, state: EvaluationState) -> EvaluationInfo:
        receiver_info = self._eval_node(node.receiver, state)
        if not receiver_info.reachable():
            return receiver_info
        selector_info = self._eval_node(node.selector, receiver_info.state)
        extension = self._extension_for(node.language)
        return extension.evaluate_qualified(node.access_type, receiver_info, selector_info)

    def _eval_call(self, node: CallExpr, state: EvaluationState) -> EvaluationInfo:
        current = state
        for arg in node.arguments:
            arg_info = self._eval_node(arg, current)
            if not arg_info.reachable():
                return EvaluationInfo(NOTHING, arg_info.state)
            current = arg_info.state
        return EvaluationInfo(external_val(node), current)

    def _eval_assignment(
        self,
        target: Optional[Declaration],
        rhs: Node,
        state: EvaluationState,
    ) -> EvaluationInfo:
        rhs_info = self._eval_node(rhs, state)
        if not rhs_info.reachable():
            return EvaluationInfo(NOTHING, rhs_info.state)
        new_state = rhs_info.state
        if target is not None:
            new_state = new_state.assign(target, rhs_info.value, source=rhs)
        return EvaluationInfo(UNDETERMINED, new_state)

    def _eval_binary(self, node: BinaryExpr, state: EvaluationState) -> EvaluationInfo:
        """
        Evaluate a binary expression.

        Assignment evaluates its right side first; every other operator
        evaluates left to right and stops after an unreachable left side.
        """
        operator = BinaryOperator(node.operator)

        if operator == BinaryOperator.ASSIGN:
            return self._eval_assignment(resolve_variable(node.left), node.right, state)

        left_info = self._eval_node(node.left, state)
        if not left_info.reachable():
            return EvaluationInfo(NOTHING, left_info.state)
        right_info = self._eval_node(node.right, left_info.state)

        if operator == BinaryOperator.PLUS:
            return EvaluationInfo(plus(left_info.value, right_info.value), right_info.state)
        if operator == BinaryOperator.MINUS:
            return EvaluationInfo(minus(left_info.value, right_info.value), right_info.state)

        extension = self._extension_for(node.language)
        return extension.evaluate_binary(
            operator,
            left_info.value,
            right_info.value,
            right_info.state,
            target=resolve_variable(node.left),
        )

    def _eval_prefix(self, node: PrefixExpr, state: EvaluationState) -> EvaluationInfo:
        operand_info = self._eval_node(node.operand, state)
        if not operand_info.reachable():
            return operand_info
        extension = self._extension_for(node.language)
        return extension.evaluate_prefix(
            node.operator,
            operand_info.value,
            operand_info.state,
            target=resolve_variable(node.operand),
        )

    def _eval_postfix(self, node: PostfixExpr, state: EvaluationState) -> EvaluationInfo:
        operand_info = self._eval_node(node.operand, state)
        if not operand_info.reachable():
            return operand_info
        extension = self._extension_for(node.language)
        return extension.evaluate_postfix(
            node.operator,
            operand_info.value,
            operand_info.state,
            target=resolve_variable(node.operand),
        )

    #---------------------------------------------------------------------------
    # Control Flow
    #---------------------------------------------------------------------------

    def _eval_if(self, node: IfExpr, state: EvaluationState) -> EvaluationInfo:
        """
        Evaluate an if statement or ternary.

        Both branches are walked from the condition's state. A definite
        boolean condition selects one of them; otherwise their results merge.
        An unreachable condition is not a boolean, so its branches merge too.
        """
        cond_info = self._eval_node(node.condition, state)

        then_info = self._eval_branch(node.then_branch, cond_info.state)
        else_info = self._eval_branch(node.else_branch, cond_info.state)

        cond = to_constant(cond_info.value)
        if isinstance(cond, BoolConst):
            return then_info if cond.value else else_info
        return then_info.merge(else_info)

    def _eval_branch(self, branch: Optional[Node], state: EvaluationState) -> EvaluationInfo:
        if branch is None:
            return EvaluationInfo(UNDETERMINED, state)
        return self._eval_node(branch, state)

    def _eval_block(self, node: BlockExpr, state: EvaluationState) -> EvaluationInfo:
        info = EvaluationInfo(UNDETERMINED, state)
        for expr in node.expressions:
            info = self._eval_node(expr, info.state)
            if not info.reachable():
                return info
        return info

    def _eval_declaration(self, node: DeclarationExpr, state: EvaluationState) -> EvaluationInfo:
        if node.initializer is None:
            return EvaluationInfo(UNDETERMINED, state)
        return self._eval_assignment(node.variable, node.initializer, state)


#==============================================================================
# Convenience Functions
#==============================================================================

def create_evaluator(
    extensions: Optional[ExtensionRegistry] = None,
    options: Optional[EvalOptions] = None,
) -> TreeBasedEvaluator:
    """
    Create an evaluator instance.

    Args:
        extensions: Extension registry (default registry if None)
        options: Evaluation options (optional)

    Returns:
        New TreeBasedEvaluator instance
    """
    return TreeBasedEvaluator(extensions, options)


def evaluate(
    node: Node,
    state: Optional[EvaluationState] = None,
    extensions: Optional[ExtensionRegistry] = None,
    options: Optional[EvalOptions] = None,
) -> EvaluationInfo:
    """
    Convenience function for single-node evaluation.

    Args:
        node: Node to evaluate
        state: Incoming state (empty if None)
        extensions: Extension registry (default registry if None)
        options: Evaluation options (optional)

    Returns:
        The node's value and the outgoing state
    """
    return TreeBasedEvaluator(extensions, options).evaluate(node, state)


def analyze(
    body: Node,
    state: Optional[EvaluationState] = None,
    extensions: Optional[ExtensionRegistry] = None,
    options: Optional[EvalOptions] = None,
) -> EvaluationInfo:
    """Convenience function for analyzing a routine body"""
    return TreeBasedEvaluator(extensions, options).analyze(body, state)
