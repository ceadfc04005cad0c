"""
treeval Reference Tree
Closed set of expression node kinds consumed by the evaluator

Nodes are frozen dataclasses with a class-level 'kind' tag for dispatch.
They compare and hash by identity: two structurally equal nodes at different
places in a tree are different occurrences, and an ExternalVal keyed by one
must not be confused with the other.

Language front ends build these nodes; this module only supplies the node
records, the operator vocabularies, resolve() and a one-line renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional, Tuple, Union

from treeval.declarations import Declaration, Resolved


#==============================================================================
# Operators
#==============================================================================

class BinaryOperator(str, Enum):
    """Binary operator symbols"""
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIV = "/"
    MOD = "%"
    EQUALS = "=="
    NOT_EQUALS = "!="
    GREATER = ">"
    LESS = "<"
    GREATER_OR_EQUALS = ">="
    LESS_OR_EQUALS = "<="
    BITWISE_AND = "&"
    BITWISE_OR = "|"
    BITWISE_XOR = "^"
    LOGICAL_AND = "&&"
    LOGICAL_OR = "||"
    PLUS_ASSIGN = "+="
    MINUS_ASSIGN = "-="
    MULTIPLY_ASSIGN = "*="
    DIVIDE_ASSIGN = "/="
    REMAINDER_ASSIGN = "%="
    AND_ASSIGN = "&="
    OR_ASSIGN = "|="
    XOR_ASSIGN = "^="


class PrefixOperator(str, Enum):
    """Prefix (unary) operator symbols"""
    UNARY_MINUS = "-"
    UNARY_PLUS = "+"
    LOGICAL_NOT = "!"
    BITWISE_NOT = "~"
    INC = "++"
    DEC = "--"


class PostfixOperator(str, Enum):
    """Postfix operator symbols"""
    INC = "++"
    DEC = "--"


class AccessType(str, Enum):
    """Qualified expression access types"""
    SIMPLE = "."
    SAFE = "?."


#==============================================================================
# Expression Nodes
#==============================================================================

@dataclass(frozen=True, eq=False)
class LiteralExpr:
    """Literal expression; is_char marks a one-character literal"""
    kind: ClassVar[str] = "literal"
    value: Any
    is_char: bool = False


@dataclass(frozen=True, eq=False)
class ClassLiteralExpr:
    """Type/class literal (Foo.class); type_name is None if unresolved"""
    kind: ClassVar[str] = "classLiteral"
    type_name: Optional[str] = None


@dataclass(frozen=True, eq=False)
class ReturnExpr:
    """Return from the enclosing routine"""
    kind: ClassVar[str] = "return"
    value: Optional[Node] = None


@dataclass(frozen=True, eq=False)
class BreakExpr:
    """Break out of a loop"""
    kind: ClassVar[str] = "break"
    label: Optional[str] = None


@dataclass(frozen=True, eq=False)
class ContinueExpr:
    """Continue a loop"""
    kind: ClassVar[str] = "continue"
    label: Optional[str] = None


@dataclass(frozen=True, eq=False)
class ThrowExpr:
    """Throw an exception"""
    kind: ClassVar[str] = "throw"
    exception: Optional[Node] = None


@dataclass(frozen=True, eq=False)
class SimpleReferenceExpr:
    """Reference by name; target is what the name resolves to, if anything"""
    kind: ClassVar[str] = "reference"
    name: str
    target: Optional[Resolved] = None


@dataclass(frozen=True, eq=False)
class QualifiedExpr:
    """Member access: receiver.selector"""
    kind: ClassVar[str] = "qualified"
    receiver: Node
    selector: Node
    access_type: AccessType = AccessType.SIMPLE
    language: Optional[str] = None


@dataclass(frozen=True, eq=False)
class CallExpr:
    """Call of a routine that is not evaluated"""
    kind: ClassVar[str] = "call"
    callee: str
    arguments: Tuple[Node, ...] = ()


@dataclass(frozen=True, eq=False)
class BinaryExpr:
    """Binary operation, including assignment"""
    kind: ClassVar[str] = "binary"
    left: Node
    operator: BinaryOperator
    right: Node
    language: Optional[str] = None


@dataclass(frozen=True, eq=False)
class PrefixExpr:
    """Prefix operation (-x, !x, ++x)"""
    kind: ClassVar[str] = "prefix"
    operator: PrefixOperator
    operand: Node
    language: Optional[str] = None


@dataclass(frozen=True, eq=False)
class PostfixExpr:
    """Postfix operation (x++, x--)"""
    kind: ClassVar[str] = "postfix"
    operand: Node
    operator: PostfixOperator
    language: Optional[str] = None


@dataclass(frozen=True, eq=False)
class IfExpr:
    """If statement or ternary; either branch may be absent"""
    kind: ClassVar[str] = "if"
    condition: Node
    then_branch: Optional[Node] = None
    else_branch: Optional[Node] = None
    is_ternary: bool = False


@dataclass(frozen=True, eq=False)
class BlockExpr:
    """Sequence of expressions evaluated in order"""
    kind: ClassVar[str] = "block"
    expressions: Tuple[Node, ...] = ()


@dataclass(frozen=True, eq=False)
class DeclarationExpr:
    """Local variable declaration with optional initializer"""
    kind: ClassVar[str] = "declaration"
    variable: Declaration
    initializer: Optional[Node] = None


@dataclass(frozen=True, eq=False)
class ParenthesizedExpr:
    """Parenthesized expression"""
    kind: ClassVar[str] = "parenthesized"
    expression: Node


@dataclass(frozen=True, eq=False)
class OpaqueExpr:
    """A construct this tree does not model (loops, lambdas, ...)"""
    kind: ClassVar[str] = "opaque"
    description: str = ""


Node = Union[
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
]

NODE_TYPES = (
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
)


def is_node(obj: Any) -> bool:
    """Check if obj is one of the closed node kinds"""
    return isinstance(obj, NODE_TYPES)


#==============================================================================
# Resolution
#==============================================================================

def resolve(node: Node) -> Optional[Resolved]:
    """
    Resolve a reference-like node to the declaration it names.

    Qualified expressions resolve through their selector and parentheses are
    looked through. Anything else resolves to None.
    """
    if isinstance(node, SimpleReferenceExpr):
        return node.target
    if isinstance(node, QualifiedExpr):
        return resolve(node.selector)
    if isinstance(node, ParenthesizedExpr):
        return resolve(node.expression)
    return None


def resolve_variable(node: Node) -> Optional[Declaration]:
    """Resolve a node to a variable-like declaration, ignoring enum constants"""
    target = resolve(node)
    return target if isinstance(target, Declaration) else None


#==============================================================================
# Rendering
#==============================================================================

def render_node(node: Optional[Node]) -> str:
    """Render a node as a single line of source-like text"""
    if node is None:
        return "<noexpr>"

    kind = node.kind

    if kind == "literal":
        if node.value is None:
            return "null"
        if isinstance(node.value, bool):
            return "true" if node.value else "false"
        if isinstance(node.value, str):
            quote = "'" if node.is_char else '"'
            return f"{quote}{node.value}{quote}"
        return repr(node.value)
    elif kind == "classLiteral":
        return f"{node.type_name or '<unresolved>'}.class"
    elif kind == "return":
        return "return" if node.value is None else f"return {render_node(node.value)}"
    elif kind == "break":
        return "break" if node.label is None else f"break@{node.label}"
    elif kind == "continue":
        return "continue" if node.label is None else f"continue@{node.label}"
    elif kind == "throw":
        return f"throw {render_node(node.exception)}"
    elif kind == "reference":
        return node.name
    elif kind == "qualified":
        return f"{render_node(node.receiver)}{node.access_type.value}{render_node(node.selector)}"
    elif kind == "call":
        args = ", ".join(render_node(a) for a in node.arguments)
        return f"{node.callee}({args})"
    elif kind == "binary":
        return f"{render_node(node.left)} {node.operator.value} {render_node(node.right)}"
    elif kind == "prefix":
        return f"{node.operator.value}{render_node(node.operand)}"
    elif kind == "postfix":
        return f"{render_node(node.operand)}{node.operator.value}"
    elif kind == "if":
        if node.is_ternary:
            return (f"({render_node(node.condition)}) ? ({render_node(node.then_branch)})"
                    f" : ({render_node(node.else_branch)})")
        text = f"if ({render_node(node.condition)}) {render_node(node.then_branch)}"
        if node.else_branch is not None:
            text += f" else {render_node(node.else_branch)}"
        return text
    elif kind == "block":
        return "{ " + "; ".join(render_node(e) for e in node.expressions) + " }"
    elif kind == "declaration":
        if node.initializer is None:
            return f"var {node.variable.name}"
        return f"var {node.variable.name} = {render_node(node.initializer)}"
    elif kind == "parenthesized":
        return f"({render_node(node.expression)})"
    elif kind == "opaque":
        return node.description or "<opaque>"
    else:
        return "???"
