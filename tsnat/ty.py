"""Semantic types and the arena that owns them.

Types are referred to by integer ids handed out by a ``TypeArena``. The
built-in primitive types occupy the first ids in a fixed order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Union

TypeId = int

TYPE_NEVER: TypeId = 0
TYPE_UNKNOWN: TypeId = 1
TYPE_ANY: TypeId = 2
TYPE_NULL: TypeId = 3
TYPE_UNDEFINED: TypeId = 4
TYPE_VOID: TypeId = 5
TYPE_NUMBER: TypeId = 6
TYPE_STRING: TypeId = 7
TYPE_BOOLEAN: TypeId = 8
TYPE_BIGINT: TypeId = 9
TYPE_SYMBOL: TypeId = 10


class PrimitiveKind(Enum):
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


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind


@dataclass(frozen=True)
class LiteralNumber:
    value: float


@dataclass(frozen=True)
class LiteralString:
    value: str


@dataclass(frozen=True)
class LiteralBool:
    value: bool


@dataclass(frozen=True)
class PropertyType:
    ty: TypeId
    optional: bool = False
    readonly: bool = False


@dataclass(frozen=True)
class ObjectType:
    """A structural object type; property order is kept."""

    properties: Mapping[str, PropertyType] = field(default_factory=dict)


@dataclass(frozen=True)
class ArrayType:
    element: TypeId


@dataclass(frozen=True)
class ParamType:
    name: str
    ty: TypeId
    optional: bool = False


@dataclass(frozen=True)
class FunctionType:
    params: tuple[ParamType, ...]
    return_ty: TypeId


@dataclass(frozen=True)
class UnionType:
    members: tuple[TypeId, ...]


@dataclass(frozen=True)
class IntersectionType:
    members: tuple[TypeId, ...]


@dataclass(frozen=True)
class TypeParam:
    name: str
    constraint: Optional[TypeId] = None
    default: Optional[TypeId] = None


@dataclass(frozen=True)
class GenericType:
    target: TypeId
    args: tuple[TypeId, ...]


@dataclass(frozen=True)
class ConditionalType:
    check_type: TypeId
    extends_type: TypeId
    true_type: TypeId
    false_type: TypeId


@dataclass(frozen=True)
class MappedType:
    """``{ [K in ...]: T[K] }``; a modifier of True adds, False removes."""

    type_param: TypeParam
    type_def: TypeId
    readonly_mod: Optional[bool] = None
    optional_mod: Optional[bool] = None


@dataclass(frozen=True)
class IndexedAccessType:
    object_type: TypeId
    index_type: TypeId


@dataclass(frozen=True)
class TemplateLiteralType:
    quasis: tuple[str, ...]
    exprs: tuple[TypeId, ...]


@dataclass(frozen=True)
class KeyofType:
    target: TypeId


@dataclass(frozen=True)
class TypeofType:
    target: TypeId


@dataclass(frozen=True)
class InferType:
    name: str


Type = Union[
    Primitive,
    LiteralNumber,
    LiteralString,
    LiteralBool,
    ObjectType,
    ArrayType,
    FunctionType,
    UnionType,
    IntersectionType,
    TypeParam,
    GenericType,
    ConditionalType,
    MappedType,
    IndexedAccessType,
    TemplateLiteralType,
    KeyofType,
    TypeofType,
    InferType,
]

_BUILTINS = (
    PrimitiveKind.NEVER,
    PrimitiveKind.UNKNOWN,
    PrimitiveKind.ANY,
    PrimitiveKind.NULL,
    PrimitiveKind.UNDEFINED,
    PrimitiveKind.VOID,
    PrimitiveKind.NUMBER,
    PrimitiveKind.STRING,
    PrimitiveKind.BOOLEAN,
    PrimitiveKind.BIGINT,
    PrimitiveKind.SYMBOL,
)


class TypeArena:
    """Owns every type and hands out ids for them."""

    def __init__(self) -> None:
        self._types: list[Type] = []
        for kind in _BUILTINS:
            self.alloc(Primitive(kind))

    def alloc(self, ty: Type) -> TypeId:
        """Store ``ty`` and return its new id."""
        self._types.append(ty)
        return len(self._types) - 1

    def get(self, type_id: TypeId) -> Type:
        """Return the type stored under ``type_id``."""
        if not 0 <= type_id < len(self._types):
            raise IndexError(f"unknown type id {type_id}")
        return self._types[type_id]

    def __len__(self) -> int:
        return len(self._types)