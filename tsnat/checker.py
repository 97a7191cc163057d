"""Type inference for expressions."""

from __future__ import annotations

from .ast import (
    BinaryExpr,
    BinaryOp,
    BoolLit,
    Expr,
    Ident,
    NullLit,
    NumberLit,
    ParenExpr,
    StringLit,
    UnaryExpr,
    UnaryOp,
    UndefinedLit,
)
from .ty import (
    TYPE_ANY,
    TYPE_BOOLEAN,
    TYPE_NULL,
    TYPE_NUMBER,
    TYPE_STRING,
    TYPE_UNDEFINED,
    TypeArena,
    TypeId,
)

_ARITHMETIC = frozenset({BinaryOp.ADD, BinaryOp.SUB, BinaryOp.MUL, BinaryOp.DIV})
_COMPARISON = frozenset(
    {
        BinaryOp.EQ_EQ,
        BinaryOp.EQ_EQ_EQ,
        BinaryOp.BANG_EQ,
        BinaryOp.BANG_EQ_EQ,
        BinaryOp.LT,
        BinaryOp.LT_EQ,
        BinaryOp.GT,
        BinaryOp.GT_EQ,
    }
)


class Checker:
    """Infers the types of expressions against a ``TypeArena``."""

    def __init__(self, arena: TypeArena) -> None:
        self.arena = arena

    def check_expr(self, expr: Expr, expected: TypeId) -> TypeId:
        """Return the inferred type of ``expr``; ``expected`` is not yet enforced."""
        return self.infer_expr(expr)

    def infer_expr(self, expr: Expr) -> TypeId:
        """Return the type of ``expr``; unhandled forms are ``any``."""
        if isinstance(expr, NumberLit):
            return TYPE_NUMBER
        if isinstance(expr, StringLit):
            return TYPE_STRING
        if isinstance(expr, BoolLit):
            return TYPE_BOOLEAN
        if isinstance(expr, NullLit):
            return TYPE_NULL
        if isinstance(expr, UndefinedLit):
            return TYPE_UNDEFINED
        if isinstance(expr, Ident):
            return TYPE_ANY
        if isinstance(expr, BinaryExpr):
            self.infer_expr(expr.left)
            self.infer_expr(expr.right)
            if expr.op in _ARITHMETIC:
                return TYPE_NUMBER
            if expr.op in _COMPARISON:
                return TYPE_BOOLEAN
            return TYPE_ANY
        if isinstance(expr, UnaryExpr):
            self.infer_expr(expr.operand)
            if expr.op is UnaryOp.NOT:
                return TYPE_BOOLEAN
            if expr.op in (UnaryOp.NEG, UnaryOp.PLUS):
                return TYPE_NUMBER
            return TYPE_ANY
        if isinstance(expr, ParenExpr):
            return self.infer_expr(expr.expr)
        return TYPE_ANY