import pytest

from tsnat.infer import TypeInferencer
from tsnat.ty import (
    TYPE_BOOLEAN,
    TYPE_NUMBER,
    TYPE_STRING,
    ConditionalType,
    FunctionType,
    GenericType,
    LiteralNumber,
    ObjectType,
    ParamType,
    PropertyType,
    TypeArena,
    TypeParam,
    UnionType,
)


@pytest.fixture
def arena():
    return TypeArena()


@pytest.fixture
def inf(arena):
    return TypeInferencer(arena)


def test_instantiate_generic(arena, inf):
    target = arena.alloc(TypeParam("T"))
    before = len(arena)
    gid = inf.instantiate_generic(target, [TYPE_STRING, TYPE_NUMBER])
    assert len(arena) == before + 1
    assert arena.get(gid) == GenericType(target, (TYPE_STRING, TYPE_NUMBER))


def test_substitute_type_param(arena, inf):
    t = arena.alloc(TypeParam("T"))
    assert inf.substitute(t, {"T": TYPE_STRING}) == TYPE_STRING
    assert inf.substitute(t, {"U": TYPE_STRING}) == t


def test_substitute_primitive_keeps_id(arena, inf):
    before = len(arena)
    assert inf.substitute(TYPE_NUMBER, {"T": TYPE_STRING}) == TYPE_NUMBER
    assert len(arena) == before


def test_substitute_union(arena, inf):
    t = arena.alloc(TypeParam("T"))
    u = arena.alloc(UnionType((t, TYPE_NUMBER)))
    new = inf.substitute(u, {"T": TYPE_STRING})
    assert arena.get(new) == UnionType((TYPE_STRING, TYPE_NUMBER))


def test_substitute_object_keeps_flags_and_order(arena, inf):
    t = arena.alloc(TypeParam("T"))
    obj = arena.alloc(
        ObjectType(
            {
                "b": PropertyType(t, optional=True),
                "a": PropertyType(TYPE_NUMBER, readonly=True),
            }
        )
    )
    new = arena.get(inf.substitute(obj, {"T": TYPE_BOOLEAN}))
    assert list(new.properties) == ["b", "a"]
    assert new.properties["b"] == PropertyType(TYPE_BOOLEAN, optional=True)
    assert new.properties["a"] == PropertyType(TYPE_NUMBER, readonly=True)


def test_substitute_function(arena, inf):
    t = arena.alloc(TypeParam("T"))
    fn = arena.alloc(FunctionType((ParamType("x", t, optional=True),), t))
    new = arena.get(inf.substitute(fn, {"T": TYPE_STRING}))
    assert new == FunctionType((ParamType("x", TYPE_STRING, optional=True),), TYPE_STRING)


def test_substitute_generic(arena, inf):
    t = arena.alloc(TypeParam("T"))
    base = arena.alloc(TypeParam("Box"))
    g = inf.instantiate_generic(base, [t])
    new = arena.get(inf.substitute(g, {"T": TYPE_NUMBER}))
    assert new == GenericType(base, (TYPE_NUMBER,))


def test_conditional_true_branch(arena, inf):
    lit = arena.alloc(LiteralNumber(1.0))
    assert inf.evaluate_conditional(lit, TYPE_NUMBER, TYPE_BOOLEAN, TYPE_STRING) == TYPE_BOOLEAN


def test_conditional_false_branch(arena, inf):
    assert inf.evaluate_conditional(TYPE_STRING, TYPE_NUMBER, TYPE_BOOLEAN, TYPE_STRING) == TYPE_STRING


def test_conditional_distributes_over_union(arena, inf):
    lit = arena.alloc(LiteralNumber(1.0))
    u = arena.alloc(UnionType((lit, TYPE_STRING)))
    yes = arena.alloc(LiteralNumber(2.0))
    no = arena.alloc(LiteralNumber(3.0))
    result = inf.evaluate_conditional(u, TYPE_NUMBER, yes, no)
    assert arena.get(result) == UnionType((yes, no))


def test_conditional_defers_on_type_param(arena, inf):
    t = arena.alloc(TypeParam("T"))
    result = inf.evaluate_conditional(t, TYPE_NUMBER, TYPE_BOOLEAN, TYPE_STRING)
    assert arena.get(result) == ConditionalType(t, TYPE_NUMBER, TYPE_BOOLEAN, TYPE_STRING)


def test_substitute_unknown_id_raises(inf):
    with pytest.raises(IndexError):
        inf.substitute(9999, {})