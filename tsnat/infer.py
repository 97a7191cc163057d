"""Generic instantiation, type-parameter substitution and conditional types."""

from __future__ import annotations

from dataclasses import replace
from typing import Mapping, Sequence

from .assignability import AssignabilityChecker
from .ty import (
    ConditionalType,
    FunctionType,
    GenericType,
    ObjectType,
    PropertyType,
    TypeArena,
    TypeId,
    TypeParam,
    UnionType,
)


class TypeInferencer:
    """Builds derived types inside a ``TypeArena``."""

    def __init__(self, arena: TypeArena) -> None:
        self.arena = arena

    def instantiate_generic(self, target: TypeId, args: Sequence[TypeId]) -> TypeId:
        """Record ``target`` applied to ``args`` as a new generic type."""
        return self.arena.alloc(GenericType(target, tuple(args)))

    def substitute(self, ty_id: TypeId, substitutions: Mapping[str, TypeId]) -> TypeId:
        """Return ``ty_id`` with type parameters replaced by name.

        Composite types are rebuilt as new types; anything else keeps its id.
        """
        ty = self.arena.get(ty_id)

        if isinstance(ty, TypeParam):
            return substitutions.get(ty.name, ty_id)
        if isinstance(ty, UnionType):
            members = tuple(self.substitute(m, substitutions) for m in ty.members)
            return self.arena.alloc(UnionType(members))
        if isinstance(ty, ObjectType):
            properties = {
                name: PropertyType(
                    self.substitute(prop.ty, substitutions), prop.optional, prop.readonly
                )
                for name, prop in ty.properties.items()
            }
            return self.arena.alloc(ObjectType(properties))
        if isinstance(ty, FunctionType):
            params = tuple(
                replace(param, ty=self.substitute(param.ty, substitutions))
                for param in ty.params
            )
            return_ty = self.substitute(ty.return_ty, substitutions)
            return self.arena.alloc(FunctionType(params, return_ty))
        if isinstance(ty, GenericType):
            args = tuple(self.substitute(a, substitutions) for a in ty.args)
            return self.arena.alloc(GenericType(ty.target, args))
        return ty_id

    def evaluate_conditional(
        self,
        check_type: TypeId,
        extends_type: TypeId,
        true_type: TypeId,
        false_type: TypeId,
    ) -> TypeId:
        """Evaluate ``check extends ext ? true : false``.

        Distributes over a union, and defers when the checked type is a
        type parameter.
        """
        ct = self.arena.get(check_type)
        if isinstance(ct, UnionType):
            results = tuple(
                self.evaluate_conditional(m, extends_type, true_type, false_type)
                for m in ct.members
            )
            return self.arena.alloc(UnionType(results))

        if isinstance(ct, TypeParam):
            return self.arena.alloc(
                ConditionalType(check_type, extends_type, true_type, false_type)
            )

        if AssignabilityChecker(self.arena).is_assignable(check_type, extends_type):
            return true_type
        return false_type