"""Shared fixtures for the treeval test suite"""

import pytest

from treeval import (
    BinaryExpr,
    BinaryOperator,
    DeclarationArena,
    LiteralExpr,
    SimpleReferenceExpr,
    TreeBasedEvaluator,
)


class TreeBuilder:
    """Small helpers for building reference trees in tests"""

    @staticmethod
    def lit(value, is_char=False):
        return LiteralExpr(value, is_char)

    @staticmethod
    def ref(decl):
        return SimpleReferenceExpr(decl.name, decl)

    @staticmethod
    def binary(left, operator, right, language=None):
        return BinaryExpr(left, BinaryOperator(operator), right, language)

    def assign(self, decl, rhs):
        return self.binary(self.ref(decl), "=", rhs)


@pytest.fixture
def arena():
    return DeclarationArena()


@pytest.fixture
def evaluator():
    return TreeBasedEvaluator()


@pytest.fixture
def t():
    return TreeBuilder()
