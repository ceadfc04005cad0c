# treeval Error Types
# Error domain for engine contract violations and registry misuse

from __future__ import annotations

from enum import Enum
from typing import Any, NoReturn


#==============================================================================
# Error Codes
#==============================================================================

class ErrorCodes(str, Enum):
    """Error code constants for treeval errors"""

    # Contract violations (engine defects)
    PHI_ARITY = "PhiArity"
    UNKNOWN_NODE_KIND = "UnknownNodeKind"

    # Registry errors
    DUPLICATE_EXTENSION = "DuplicateExtension"
    DUPLICATE_OPERATOR = "DuplicateOperator"
    UNKNOWN_OPERATOR = "UnknownOperator"


#==============================================================================
# treeval Error Classes
#==============================================================================

class TreevalError(Exception):
    """Base exception class for all treeval errors"""

    def __init__(self, code: ErrorCodes, message: str, meta: dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta

    def __str__(self) -> str:
        return self.message

    #---------------------------------------------------------------------------
    # Static factory methods for common errors
    #---------------------------------------------------------------------------

    @staticmethod
    def duplicate_extension(language: str) -> "TreevalError":
        """Create a DuplicateExtension error"""
        return TreevalError(
            ErrorCodes.DUPLICATE_EXTENSION,
            f"Evaluator extension for language '{language}' already registered",
            {"language": language},
        )

    @staticmethod
    def duplicate_operator(ns: str, name: str) -> "TreevalError":
        """Create a DuplicateOperator error"""
        return TreevalError(
            ErrorCodes.DUPLICATE_OPERATOR,
            f"Operator {ns}:{name} already registered",
        )

    @staticmethod
    def unknown_operator(ns: str, name: str) -> "TreevalError":
        """Create an UnknownOperator error"""
        return TreevalError(
            ErrorCodes.UNKNOWN_OPERATOR,
            f"Unknown operator: {ns}:{name}",
        )


class ContractViolation(TreevalError, AssertionError):
    """
    An internal engine invariant was broken.

    Never caught inside the library: seeing one means the engine has a defect,
    not that the analysed tree is unusual.
    """

    @staticmethod
    def phi_arity(members: Any) -> "ContractViolation":
        """Create a PhiArity violation"""
        return ContractViolation(
            ErrorCodes.PHI_ARITY,
            f"Phi should contain two or more values: {members!r}",
        )

    @staticmethod
    def unknown_node_kind(value: Any) -> "ContractViolation":
        """Create an UnknownNodeKind violation"""
        return ContractViolation(
            ErrorCodes.UNKNOWN_NODE_KIND,
            f"Unexpected value: {value!r}",
        )


#==============================================================================
# Exhaustiveness Checking
#==============================================================================

def exhaustive(value: Any) -> NoReturn:
    """
    Asserts that a value is unreachable, ensuring exhaustive handling.
    Use in the final branch of a kind dispatch to ensure all variants are handled.

    Raises:
        ContractViolation: If called (indicating unhandled case)

    Example:
        kind = value.kind
        if kind == "int":
            return ...
        elif kind == "phi":
            return ...
        else:
            exhaustive(value)  # Error if a kind is missing
    """
    raise ContractViolation.unknown_node_kind(value)
