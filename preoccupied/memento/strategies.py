# This library is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This library is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this library; if not, see <http://www.gnu.org/licenses/>.

"""
preoccupied.memento.strategies

Default cloner and applier strategies for :class:`History`.

A cloner turns the caller's live state into an independent snapshot body. An
applier writes a stored snapshot body back onto the caller's live state, in
place. The defaults are a shallow copy and a structural overwrite, which is
enough for flat mutable objects such as dicts, lists, dataclasses and pydantic
models. Anything with nested mutable members should be configured with
:func:`deep_copy` (or a purpose-built cloner) instead.

Example:

```python
history = History.create().clone_with(deep_copy).build()

doc = {"text": "", "tags": []}
history.save(doc)

doc["text"] = "hello"
doc["tags"].append("greeting")
history.save(doc)

history.undo(doc)
assert doc == {"text": "", "tags": []}
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import copy
import dataclasses
from collections.abc import MutableMapping, MutableSequence, MutableSet
from typing import Any, Callable, TypeVar

from pydantic import BaseModel
from typing_extensions import TypeAlias


__all__ = (
    "Applier",
    "Cloner",
    "EqualityComparer",
    "deep_copy",
    "overwrite",
    "shallow_copy",
)


S = TypeVar("S")


Cloner: TypeAlias = Callable[[Any], Any]
"""
cloner(state) -> body, producing an independent snapshot body
"""

Applier: TypeAlias = Callable[[Any, Any], None]
"""
applier(target, body) -> None, writing body onto the live target in place
"""

EqualityComparer: TypeAlias = Callable[[Any, Any], bool]
"""
comparer(previous_body, candidate_body) -> bool, True when a save is a no-op
"""


def shallow_copy(state: S) -> S:
    """
    Default cloner. Immutable values come back as themselves.
    """

    return copy.copy(state)


def deep_copy(state: S) -> S:
    """
    Cloner for states with nested mutable members.
    """

    return copy.deepcopy(state)


def overwrite(target: Any, body: Any) -> None:
    """
    Default applier, replacing the contents of `target` with those of `body`.

    The target keeps its identity, so any other references the owner holds
    to it observe the restored values. The members written onto the target
    are deep copies, so later edits to the live state never reach back into
    the stored snapshot. Values that cannot be altered in place (ints,
    strings, tuples, frozen dataclasses or frozen pydantic models) raise
    TypeError; wrap those in a mutable holder or configure an explicit
    applier.

    :param target: The caller's live state, mutated in place
    :param body: The stored snapshot body to copy from
    :raises TypeError: if the target cannot be overwritten in place
    """

    if isinstance(target, BaseModel):
        if type(target).model_config.get("frozen"):
            raise TypeError(_immutable_message(target))
        body = copy.deepcopy(body)
        _overwrite_fields(target, body, type(target).model_fields)

    elif dataclasses.is_dataclass(target) and not isinstance(target, type):
        params = getattr(type(target), "__dataclass_params__", None)
        if params is not None and params.frozen:
            raise TypeError(_immutable_message(target))
        body = copy.deepcopy(body)
        names = [f.name for f in dataclasses.fields(target)]
        _overwrite_fields(target, body, names)

    elif isinstance(target, MutableMapping):
        body = copy.deepcopy(body)
        target.clear()
        target.update(body)

    elif isinstance(target, MutableSequence):
        target[:] = copy.deepcopy(body)

    elif isinstance(target, MutableSet):
        body = copy.deepcopy(body)
        target.clear()
        target |= set(body)

    elif _has_dict(target):
        body = copy.deepcopy(body)
        target.__dict__.clear()
        target.__dict__.update(vars(body))

    else:
        raise TypeError(_immutable_message(target))


def _overwrite_fields(target: Any, body: Any, names) -> None:
    for name in names:
        setattr(target, name, getattr(body, name))


def _has_dict(value: Any) -> bool:
    return isinstance(getattr(value, "__dict__", None), dict)


def _immutable_message(target: Any) -> str:
    return (f"Cannot overwrite {type(target).__name__} in place;"
            " configure an applier with apply_with().")


# The end.
