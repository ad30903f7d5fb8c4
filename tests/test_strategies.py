"""
tests.test_strategies
Default cloner and applier strategies.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from dataclasses import dataclass

import pytest
from pydantic import BaseModel, ConfigDict

from preoccupied.memento import History, deep_copy, overwrite, shallow_copy


class Settings(BaseModel):
    """
    Mutable pydantic model used as live state.
    """

    name: str = "default"
    level: int = 0


@dataclass
class Point:
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class FrozenPoint:
    x: int = 0


class FrozenSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = "default"


class Plain:
    def __init__(self, **values):
        self.__dict__.update(values)


def test_shallow_copy_is_independent_container():
    """
    The shallow cloner copies the container but shares members.
    """

    original = {"items": [1, 2]}
    clone = shallow_copy(original)
    assert clone == original
    assert clone is not original
    assert clone["items"] is original["items"]

    assert shallow_copy("text") == "text"


def test_deep_copy_copies_members():
    """
    The deep cloner copies nested members too.
    """

    original = {"items": [1, 2]}
    clone = deep_copy(original)
    original["items"].append(3)
    assert clone == {"items": [1, 2]}


@pytest.mark.parametrize("target, body, expected", [
    pytest.param({"a": 1, "b": 2}, {"c": 3}, {"c": 3}, id="dict"),
    pytest.param([1, 2, 3], [9], [9], id="list"),
    pytest.param({1, 2}, {3}, {3}, id="set"),
    pytest.param(bytearray(b"abc"), bytearray(b"z"), bytearray(b"z"), id="bytearray"),
])
def test_overwrite_containers(target, body, expected):
    """
    Mutable containers are overwritten in place, keeping their identity.
    """

    before = id(target)
    overwrite(target, body)
    assert target == expected
    assert id(target) == before


def test_overwrite_pydantic_model():
    """
    Pydantic models are overwritten field by field.
    """

    live = Settings(name="live", level=3)
    overwrite(live, Settings(name="saved", level=1))
    assert live == Settings(name="saved", level=1)


def test_overwrite_dataclass():
    """
    Dataclasses are overwritten field by field.
    """

    live = Point(1, 2)
    overwrite(live, Point(5, 6))
    assert live == Point(5, 6)


def test_overwrite_plain_object():
    """
    Plain objects are overwritten through their attribute dictionary.
    """

    live = Plain(a=1, stale=True)
    overwrite(live, Plain(a=2))
    assert vars(live) == {"a": 2}


@pytest.mark.parametrize("target, body, members", [
    pytest.param({"tags": []}, {"tags": ["a"]}, lambda s: s["tags"], id="dict"),
    pytest.param([[]], [["a"]], lambda s: s[0], id="list"),
    pytest.param(Point(), Point(x=["a"]), lambda s: s.x, id="dataclass"),
    pytest.param(Plain(items=[]), Plain(items=["a"]), lambda s: s.items,
                 id="plain-object"),
])
def test_overwrite_does_not_share_members(target, body, members):
    """
    Nested members written onto the target are copies of the body's.
    """

    overwrite(target, body)
    assert members(target) == ["a"]
    assert members(target) is not members(body)

    members(target).append("live")
    assert members(body) == ["a"]


@pytest.mark.parametrize("target, body", [
    pytest.param(1, 2, id="int"),
    pytest.param("a", "b", id="str"),
    pytest.param((1,), (2,), id="tuple"),
    pytest.param(FrozenPoint(1), FrozenPoint(2), id="frozen-dataclass"),
    pytest.param(FrozenSettings(), FrozenSettings(name="x"), id="frozen-model"),
])
def test_overwrite_rejects_immutable(target, body):
    """
    Values that cannot be changed in place raise TypeError.
    """

    with pytest.raises(TypeError) as error:
        overwrite(target, body)
    assert "apply_with" in str(error.value)


def test_pydantic_state_round_trip():
    """
    Default strategies are enough to undo edits to a flat pydantic model.
    """

    history = History.create().equality().build()
    settings = Settings()
    history.save(settings)

    settings.name = "tuned"
    settings.level = 9
    history.save(settings)

    assert history.undo(settings)
    assert settings == Settings()

    assert history.redo(settings)
    assert settings == Settings(name="tuned", level=9)


def test_custom_applier_for_immutable_state():
    """
    Immutable values can be tracked through a holder and a custom applier.
    """

    holder = {"value": "a"}

    history = (History.create()
               .clone_with(lambda h: h["value"])
               .apply_with(lambda h, body: h.update(value=body))
               .build())

    history.save(holder)
    holder["value"] = "b"
    history.save(holder)

    assert history.undo(holder)
    assert holder == {"value": "a"}
    assert history.current.state == "a"


# The end.
