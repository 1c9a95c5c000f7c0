import pytest

from wthr.environment import Environment
from wthr.errors import UndefinedVariable


def test_lookup_walks_outward():
    outer = Environment()
    outer.define("x", 1)
    inner = outer.child()
    inner.define("y", 2)
    assert inner.lookup("x") == 1
    assert inner.lookup("y") == 2
    assert inner.find("x") is outer
    assert "y" not in outer


def test_define_shadows_without_touching_outer():
    outer = Environment()
    outer.define("x", 1)
    inner = outer.child()
    inner.define("x", 2)
    assert inner.lookup("x") == 2
    assert outer.lookup("x") == 1


def test_missing_name():
    with pytest.raises(UndefinedVariable, match="'ghost'"):
        Environment().child().lookup("ghost")


def test_depth_and_iteration():
    env = Environment().child().child()
    env.define("a", 1)
    env.define("b", 2)
    assert env.depth() == 2
    assert list(env) == ["a", "b"]
