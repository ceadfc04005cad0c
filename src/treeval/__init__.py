"""
treeval: Tree-Based Symbolic Evaluation

Intraprocedural constant/value propagation with provenance tracking, computed
directly over an expression tree. For any expression the evaluator answers
what value(s) it can have and which variables or opaque computations that
value depends on.
"""

from __future__ import annotations

#==============================================================================
# Errors
#==============================================================================

from treeval.errors import (
    ErrorCodes,
    TreevalError,
    ContractViolation,
    exhaustive,
)

#==============================================================================
# Declarations and Tree
#==============================================================================

from treeval.declarations import (
    Declaration,
    DeclarationArena,
    DeclarationKind,
    EnumConstant,
)
from treeval.tree import (
    # Operators
    AccessType,
    BinaryOperator,
    PostfixOperator,
    PrefixOperator,
    # Nodes
    Node,
    LiteralExpr,
    ClassLiteralExpr,
    ReturnExpr,
    BreakExpr,
    ContinueExpr,
    ThrowExpr,
    SimpleReferenceExpr,
    QualifiedExpr,
    CallExpr,
    BinaryExpr,
    PrefixExpr,
    PostfixExpr,
    IfExpr,
    BlockExpr,
    DeclarationExpr,
    ParenthesizedExpr,
    OpaqueExpr,
    # Helpers
    is_node,
    resolve,
    resolve_variable,
    render_node,
)

#==============================================================================
# Values
#==============================================================================

from treeval.values import (
    # Variants
    UValue,
    Constant,
    Dependency,
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
    # Singletons
    NOTHING,
    UNDETERMINED,
    NULL,
    TRUE,
    FALSE,
    # Guards
    is_constant,
    is_dependent,
    is_variable,
    is_external,
    is_phi,
    is_nothing,
    is_undetermined,
    is_reachable,
    # Accessors
    unwrap,
    to_constant,
    to_variable,
    dependencies_of,
    # Constructors
    null_const,
    bool_const,
    int_const,
    char_const,
    float_const,
    enum_const,
    type_const,
    external_val,
    dependent_val,
    variable_val,
    phi_val,
    format_value,
)
from treeval.lattice import (
    merge,
    lift_binary,
    lift_unary,
    dependencies_with_self,
)
from treeval.domains import (
    Operator,
    OperatorRegistry,
    create_lattice_registry,
)

#==============================================================================
# State and Evaluation
#==============================================================================

from treeval.state import (
    EvaluationState,
    EvaluationInfo,
    empty_state,
)
from treeval.extensions import (
    EvaluatorExtension,
    StandardExtension,
    ExtensionRegistry,
    default_extension_registry,
    empty_extension_registry,
)
from treeval.evaluator import (
    EvalOptions,
    TreeBasedEvaluator,
    create_evaluator,
    evaluate,
    analyze,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ErrorCodes",
    "TreevalError",
    "ContractViolation",
    "exhaustive",
    # Declarations
    "Declaration",
    "DeclarationArena",
    "DeclarationKind",
    "EnumConstant",
    # Tree
    "AccessType",
    "BinaryOperator",
    "PostfixOperator",
    "PrefixOperator",
    "Node",
    "LiteralExpr",
    "ClassLiteralExpr",
    "ReturnExpr",
    "BreakExpr",
    "ContinueExpr",
    "ThrowExpr",
    "SimpleReferenceExpr",
    "QualifiedExpr",
    "CallExpr",
    "BinaryExpr",
    "PrefixExpr",
    "PostfixExpr",
    "IfExpr",
    "BlockExpr",
    "DeclarationExpr",
    "ParenthesizedExpr",
    "OpaqueExpr",
    "is_node",
    "resolve",
    "resolve_variable",
    "render_node",
    # Values
    "UValue",
    "Constant",
    "Dependency",
    "NullConst",
    "BoolConst",
    "IntConst",
    "FloatConst",
    "EnumEntryConst",
    "TypeLiteralConst",
    "DependentVal",
    "VariableVal",
    "ExternalVal",
    "PhiVal",
    "NothingVal",
    "UndeterminedVal",
    "NOTHING",
    "UNDETERMINED",
    "NULL",
    "TRUE",
    "FALSE",
    "is_constant",
    "is_dependent",
    "is_variable",
    "is_external",
    "is_phi",
    "is_nothing",
    "is_undetermined",
    "is_reachable",
    "unwrap",
    "to_constant",
    "to_variable",
    "dependencies_of",
    "null_const",
    "bool_const",
    "int_const",
    "char_const",
    "float_const",
    "enum_const",
    "type_const",
    "external_val",
    "dependent_val",
    "variable_val",
    "phi_val",
    "format_value",
    # Lattice
    "merge",
    "lift_binary",
    "lift_unary",
    "dependencies_with_self",
    "Operator",
    "OperatorRegistry",
    "create_lattice_registry",
    # State
    "EvaluationState",
    "EvaluationInfo",
    "empty_state",
    # Extensions
    "EvaluatorExtension",
    "StandardExtension",
    "ExtensionRegistry",
    "default_extension_registry",
    "empty_extension_registry",
    # Evaluator
    "EvalOptions",
    "TreeBasedEvaluator",
    "create_evaluator",
    "evaluate",
    "analyze",
]
