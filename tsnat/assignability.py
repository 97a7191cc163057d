"""Structural assignability between semantic types."""

from __future__ import annotations

from .ty import (
    FunctionType,
    GenericType,
    IntersectionType,
    LiteralBool,
    LiteralNumber,
    LiteralString,
    ObjectType,
    Primitive,
    PrimitiveKind,
    TypeArena,
    TypeId,
    TypeParam,
    UnionType,
)


def _is_primitive(ty: object, kind: PrimitiveKind) -> bool:
    return isinstance(ty, Primitive) and ty.kind is kind


class AssignabilityChecker:
    """Answers whether one type in an arena may be assigned to another."""

    def __init__(self, arena: TypeArena) -> None:
        self.arena = arena

    def is_assignable(self, source: TypeId, target: TypeId) -> bool:
        """Return True if ``source`` is assignable to ``target``."""
        if source == target:
            return True

        src = self.arena.get(source)
        tgt = self.arena.get(target)

        if _is_primitive(src, PrimitiveKind.NEVER):
            return True
        if _is_primitive(src, PrimitiveKind.ANY) or _is_primitive(tgt, PrimitiveKind.ANY):
            return True
        if _is_primitive(tgt, PrimitiveKind.UNKNOWN):
            return True

        if isinstance(src, LiteralNumber) and _is_primitive(tgt, PrimitiveKind.NUMBER):
            return True
        if isinstance(src, LiteralString) and _is_primitive(tgt, PrimitiveKind.STRING):
            return True
        if isinstance(src, LiteralBool) and _is_primitive(tgt, PrimitiveKind.BOOLEAN):
            return True

        if isinstance(tgt, UnionType):
            return any(self.is_assignable(source, t) for t in tgt.members)
        if isinstance(src, UnionType):
            return all(self.is_assignable(s, target) for s in src.members)
        if isinstance(tgt, IntersectionType):
            return all(self.is_assignable(source, t) for t in tgt.members)
        if isinstance(src, IntersectionType):
            return any(self.is_assignable(s, target) for s in src.members)

        if isinstance(src, ObjectType) and isinstance(tgt, ObjectType):
            return self._object_assignable(src, tgt)
        if isinstance(src, FunctionType) and isinstance(tgt, FunctionType):
            return self._function_assignable(src, tgt)

        if isinstance(tgt, TypeParam):
            # Only the identical parameter is assignable, handled above.
            return False
        if isinstance(src, TypeParam):
            if src.constraint is None:
                return False
            return self.is_assignable(src.constraint, target)

        if isinstance(src, GenericType) and isinstance(tgt, GenericType):
            return self._generic_assignable(src, tgt)

        return False

    def _object_assignable(self, src: ObjectType, tgt: ObjectType) -> bool:
        for key, tgt_prop in tgt.properties.items():
            src_prop = src.properties.get(key)
            if src_prop is None:
                if not tgt_prop.optional:
                    return False
            elif not self.is_assignable(src_prop.ty, tgt_prop.ty):
                return False
        return True

    def _function_assignable(self, src: FunctionType, tgt: FunctionType) -> bool:
        if not self.is_assignable(src.return_ty, tgt.return_ty):
            return False
        if len(src.params) > len(tgt.params):
            return False
        # Parameters are contravariant.
        return all(
            self.is_assignable(tgt_param.ty, src_param.ty)
            for src_param, tgt_param in zip(src.params, tgt.params)
        )

    def _generic_assignable(self, src: GenericType, tgt: GenericType) -> bool:
        if src.target != tgt.target or len(src.args) != len(tgt.args):
            return False
        return all(
            self.is_assignable(s, t) or self.is_assignable(t, s)
            for s, t in zip(src.args, tgt.args)
        )