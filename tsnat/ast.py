"""Syntax tree nodes produced by the parser.

Identifiers and string contents are plain ``str`` values. Child lists are
tuples, so every node is immutable and compares structurally. A ``span``
is whatever location object the token stream carries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .tokens import Span


class SourceType(Enum):
    MODULE = auto()
    SCRIPT = auto()


@dataclass(frozen=True)
class Program:
    stmts: tuple[Stmt, ...]
    span: Span
    source_type: SourceType


# ── Statements ────────────────────────────────────────────────


@dataclass(frozen=True)
class BlockStmt:
    stmts: tuple[Stmt, ...]
    span: Span


class VarKind(Enum):
    CONST = "const"
    LET = "let"
    VAR = "var"


@dataclass(frozen=True)
class VarDeclarator:
    name: str
    ty: Optional[TypeNode]
    init: Optional[Expr]
    span: Span


@dataclass(frozen=True)
class VarDecl:
    kind: VarKind
    decls: tuple[VarDeclarator, ...]
    span: Span


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr
    span: Span


@dataclass(frozen=True)
class IfStmt:
    test: Expr
    consequent: Stmt
    alternate: Optional[Stmt]
    span: Span


@dataclass(frozen=True)
class SwitchCase:
    """One ``case`` clause; ``test`` is None for ``default``."""

    test: Optional[Expr]
    consecutive: tuple[Stmt, ...]
    span: Span


@dataclass(frozen=True)
class SwitchStmt:
    discriminant: Expr
    cases: tuple[SwitchCase, ...]
    span: Span


@dataclass(frozen=True)
class ForStmt:
    init: Optional[ForInit]
    test: Optional[Expr]
    update: Optional[Expr]
    body: Stmt
    span: Span


@dataclass(frozen=True)
class ForInStmt:
    left: ForInit
    right: Expr
    body: Stmt
    span: Span


@dataclass(frozen=True)
class ForOfStmt:
    is_await: bool
    left: ForInit
    right: Expr
    body: Stmt
    span: Span


@dataclass(frozen=True)
class WhileStmt:
    test: Expr
    body: Stmt
    span: Span


@dataclass(frozen=True)
class DoWhileStmt:
    body: Stmt
    test: Expr
    span: Span


@dataclass(frozen=True)
class ReturnStmt:
    value: Optional[Expr]
    span: Span


@dataclass(frozen=True)
class ThrowStmt:
    argument: Expr
    span: Span


@dataclass(frozen=True)
class CatchHandler:
    param: Optional[str]
    body: BlockStmt
    span: Span


@dataclass(frozen=True)
class TryStmt:
    block: BlockStmt
    handler: Optional[CatchHandler]
    finalizer: Optional[BlockStmt]
    span: Span


@dataclass(frozen=True)
class BreakStmt:
    label: Optional[str]
    span: Span


@dataclass(frozen=True)
class ContinueStmt:
    label: Optional[str]
    span: Span


@dataclass(frozen=True)
class LabeledStmt:
    label: str
    body: Stmt
    span: Span


# ── Functions ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Param:
    name: str
    ty: Optional[TypeNode]
    init: Optional[Expr]
    is_rest: bool
    span: Span


@dataclass(frozen=True)
class FunctionDecl:
    """A function declaration, function expression or class constructor."""

    id: Optional[str]
    params: tuple[Param, ...]
    body: Optional[BlockStmt]
    return_ty: Optional[TypeNode]
    is_async: bool
    is_generator: bool
    span: Span


# ── Classes ───────────────────────────────────────────────────


class AccessModifier(Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"


@dataclass(frozen=True)
class MethodDecl:
    key: str
    func: FunctionDecl
    is_static: bool
    access: Optional[AccessModifier]
    span: Span


@dataclass(frozen=True)
class PropertyDecl:
    key: str
    ty: Optional[TypeNode]
    init: Optional[Expr]
    is_static: bool
    access: Optional[AccessModifier]
    span: Span


@dataclass(frozen=True)
class ClassDecl:
    """A class; a ``FunctionDecl`` in ``body`` is the constructor."""

    id: Optional[str]
    super_class: Optional[Expr]
    body: tuple[ClassMember, ...]
    span: Span


# ── Imports & Exports ─────────────────────────────────────────


@dataclass(frozen=True)
class NamedImport:
    """``{ imported as local }``; ``imported`` is None when not renamed."""

    local: str
    imported: Optional[str]


@dataclass(frozen=True)
class DefaultImport:
    local: str


@dataclass(frozen=True)
class NamespaceImport:
    local: str


@dataclass(frozen=True)
class ImportDecl:
    specifiers: tuple[ImportSpecifier, ...]
    source: str
    span: Span


@dataclass(frozen=True)
class ExportSpecifier:
    local: str
    exported: Optional[str]


@dataclass(frozen=True)
class ExportDecl:
    decl: Optional[Stmt]
    specifiers: tuple[ExportSpecifier, ...]
    source: Optional[str]
    is_default: bool
    span: Span


@dataclass(frozen=True)
class NativeImportDecl:
    name: str
    source: str
    span: Span


@dataclass(frozen=True)
class NativeFunctionDecl:
    name: str
    params: tuple[Param, ...]
    return_type: Optional[TypeNode]
    span: Span


# ── Expressions ───────────────────────────────────────────────


@dataclass(frozen=True)
class NumberLit:
    value: float
    span: Span


@dataclass(frozen=True)
class StringLit:
    value: str
    span: Span


@dataclass(frozen=True)
class BoolLit:
    value: bool
    span: Span


@dataclass(frozen=True)
class NullLit:
    span: Span


@dataclass(frozen=True)
class UndefinedLit:
    span: Span


@dataclass(frozen=True)
class ThisExpr:
    span: Span


@dataclass(frozen=True)
class Ident:
    name: str
    span: Span


@dataclass(frozen=True)
class MemberExpr:
    object: Expr
    property: str
    span: Span


@dataclass(frozen=True)
class IndexExpr:
    object: Expr
    index: Expr
    span: Span


@dataclass(frozen=True)
class OptChainExpr:
    object: Expr
    property: str
    span: Span


class UnaryOp(Enum):
    NEG = auto()
    PLUS = auto()
    NOT = auto()
    BIT_NOT = auto()
    TYPEOF = auto()
    VOID = auto()
    DELETE = auto()
    PRE_INC = auto()
    PRE_DEC = auto()
    POST_INC = auto()
    POST_DEC = auto()


@dataclass(frozen=True)
class UnaryExpr:
    op: UnaryOp
    operand: Expr
    span: Span


class BinaryOp(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EXP = "**"
    EQ_EQ = "=="
    EQ_EQ_EQ = "==="
    BANG_EQ = "!="
    BANG_EQ_EQ = "!=="
    LT = "<"
    GT = ">"
    LT_EQ = "<="
    GT_EQ = ">="
    AND = "&&"
    OR = "||"
    NULLISH_COALESCE = "??"
    BIT_AND = "&"
    BIT_OR = "|"
    BIT_XOR = "^"
    SHL = "<<"
    SHR = ">>"
    USHR = ">>>"
    IN = "in"
    INSTANCEOF = "instanceof"


@dataclass(frozen=True)
class BinaryExpr:
    op: BinaryOp
    left: Expr
    right: Expr
    span: Span


class AssignOp(Enum):
    EQ = "="
    ADD_EQ = "+="
    SUB_EQ = "-="
    MUL_EQ = "*="
    DIV_EQ = "/="
    MOD_EQ = "%="
    EXP_EQ = "**="
    AND_EQ = "&&="
    OR_EQ = "||="
    NULLISH_EQ = "??="
    BIT_AND_EQ = "&="
    BIT_OR_EQ = "|="
    BIT_XOR_EQ = "^="
    SHL_EQ = "<<="
    SHR_EQ = ">>="
    USHR_EQ = ">>>="


@dataclass(frozen=True)
class AssignExpr:
    op: AssignOp
    left: Expr
    right: Expr
    span: Span


@dataclass(frozen=True)
class ConditionalExpr:
    test: Expr
    consequent: Expr
    alternate: Expr
    span: Span


@dataclass(frozen=True)
class CallExpr:
    callee: Expr
    args: tuple[Expr, ...]
    span: Span


@dataclass(frozen=True)
class NewExpr:
    callee: Expr
    args: tuple[Expr, ...]
    span: Span


@dataclass(frozen=True)
class ArrowExpr:
    """An arrow function; ``body`` is an expression or a ``BlockStmt``."""

    params: tuple[Param, ...]
    body: ArrowBody
    is_async: bool
    span: Span


@dataclass(frozen=True)
class TemplateExpr:
    quasis: tuple[str, ...]
    exprs: tuple[Expr, ...]
    span: Span


@dataclass(frozen=True)
class SpreadExpr:
    argument: Expr
    span: Span


@dataclass(frozen=True)
class ArrayExpr:
    elements: tuple[Expr, ...]
    span: Span


@dataclass(frozen=True)
class ObjProp:
    key: str
    value: Expr
    span: Span


@dataclass(frozen=True)
class ObjectExpr:
    properties: tuple[ObjProp, ...]
    span: Span


@dataclass(frozen=True)
class ParenExpr:
    expr: Expr
    span: Span


@dataclass(frozen=True)
class AsExpr:
    expr: Expr
    ty: TypeNode
    span: Span


# ── Type annotations ──────────────────────────────────────────


class KeywordTypeKind(Enum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    BIGINT = "bigint"
    SYMBOL = "symbol"
    NULL = "null"
    UNDEFINED = "undefined"
    VOID = "void"
    NEVER = "never"
    UNKNOWN = "unknown"
    ANY = "any"
    OBJECT = "object"


@dataclass(frozen=True)
class KeywordType:
    kind: KeywordTypeKind
    span: Span


@dataclass(frozen=True)
class LiteralNumberType:
    value: float
    span: Span


@dataclass(frozen=True)
class LiteralStringType:
    value: str
    span: Span


@dataclass(frozen=True)
class LiteralBoolType:
    value: bool
    span: Span


@dataclass(frozen=True)
class TypeRef:
    name: str
    type_args: Optional[tuple[TypeNode, ...]]
    span: Span


@dataclass(frozen=True)
class ArrayType:
    """``T[]``; its span is the span of the element type."""

    element: TypeNode

    @property
    def span(self) -> Span:
        return self.element.span


@dataclass(frozen=True)
class TupleType:
    elements: tuple[TypeNode, ...]
    span: Span


@dataclass(frozen=True)
class FunctionTypeNode:
    params: tuple[Param, ...]
    return_ty: TypeNode
    span: Span


@dataclass(frozen=True)
class UnionType:
    types: tuple[TypeNode, ...]
    span: Span


@dataclass(frozen=True)
class IntersectionType:
    types: tuple[TypeNode, ...]
    span: Span


@dataclass(frozen=True)
class ParenType:
    inner: TypeNode
    span: Span


Stmt = Union[
    BlockStmt,
    VarDecl,
    ExprStmt,
    IfStmt,
    SwitchStmt,
    ForStmt,
    ForInStmt,
    ForOfStmt,
    WhileStmt,
    DoWhileStmt,
    ReturnStmt,
    ThrowStmt,
    TryStmt,
    BreakStmt,
    ContinueStmt,
    LabeledStmt,
    FunctionDecl,
    ClassDecl,
    ImportDecl,
    ExportDecl,
    NativeImportDecl,
    NativeFunctionDecl,
]

Expr = Union[
    NumberLit,
    StringLit,
    BoolLit,
    NullLit,
    UndefinedLit,
    ThisExpr,
    Ident,
    MemberExpr,
    IndexExpr,
    OptChainExpr,
    UnaryExpr,
    BinaryExpr,
    ConditionalExpr,
    AssignExpr,
    CallExpr,
    NewExpr,
    ArrowExpr,
    FunctionDecl,
    TemplateExpr,
    SpreadExpr,
    ArrayExpr,
    ObjectExpr,
    ParenExpr,
    AsExpr,
]

TypeNode = Union[
    KeywordType,
    LiteralNumberType,
    LiteralStringType,
    LiteralBoolType,
    TypeRef,
    ArrayType,
    TupleType,
    FunctionTypeNode,
    UnionType,
    IntersectionType,
    ParenType,
]

ClassMember = Union[FunctionDecl, MethodDecl, PropertyDecl]
ImportSpecifier = Union[NamedImport, DefaultImport, NamespaceImport]
ForInit = Union[VarDecl, Expr]
ArrowBody = Union[Expr, BlockStmt]