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
preoccupied.memento.history

A versioned snapshot history engine, providing undo, redo, and
point-in-time restore around some caller-owned mutable state.

The engine never holds on to the live state itself. Each :meth:`History.save`
clones it into an immutable :class:`Snapshot`, and :meth:`History.undo`,
:meth:`History.redo`, and :meth:`History.restore` write a stored snapshot back
onto the live state through the configured applier. Saving after an undo or a
restore discards the snapshots ahead of the cursor, in the same way a commit
from a checked-out past revision abandons the old future.

Example:

```python
history = (History.create()
           .clone_with(deep_copy)
           .equality()
           .capacity(100)
           .build())

doc = {"text": ""}
history.save(doc, tag="init")

doc["text"] = "A"
history.save(doc)

doc["text"] = "AB"
history.save(doc)

assert history.undo(doc)
assert doc["text"] == "A"

assert history.redo(doc)
assert doc["text"] == "AB"

assert history.restore(1, doc)
assert doc["text"] == ""
```

A History is not safe for concurrent use. Callers sharing one between threads
must serialize access themselves.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import logging
import operator
from bisect import bisect_left
from typing import Any, Generic, Iterator, List, Optional, Tuple, TypeVar, Union

from .config import HistoryConfig
from .policies import (
    ResolutionPolicy, Selector, is_selector, matcher_like, resolver)
from .snapshot import Snapshot
from .strategies import Applier, Cloner, EqualityComparer


__all__ = (
    "History",
    "HistoryBuilder",
)


logger = logging.getLogger(__name__)


S = TypeVar("S")


class History(Generic[S]):
    """
    Linear, branchable timeline of state snapshots with a cursor marking the
    snapshot currently materialized into the live state.
    """

    def __init__(
            self,
            config: Optional[HistoryConfig] = None,
            **options: Any) -> None:

        if config is None:
            config = HistoryConfig(**options)
        elif options:
            config = HistoryConfig(**{**dict(config), **options})

        self._cloner: Cloner = config.cloner
        self._applier: Applier = config.applier
        self._equality: Optional[EqualityComparer] = config.equality
        self._capacity: int = config.capacity

        # retained snapshots, oldest first, sorted by version
        self._snapshots: List[Snapshot[S]] = []

        # index into _snapshots, -1 when empty
        self._cursor: int = -1

        # independent of list positions, so eviction never rewinds it
        self._next_version: int = 1


    @classmethod
    def create(cls) -> "HistoryBuilder[S]":
        """
        Return a fluent builder for configuring a new history.
        """

        return HistoryBuilder()


    @property
    def capacity(self) -> int:
        """
        Maximum retained snapshots, 0 when unbounded.
        """

        return self._capacity


    @property
    def count(self) -> int:
        return len(self._snapshots)


    @property
    def current_version(self) -> int:
        """
        Version of the snapshot at the cursor, 0 when nothing was saved yet.
        """

        if self._cursor < 0:
            return 0
        return self._snapshots[self._cursor].version


    @property
    def can_undo(self) -> bool:
        return self._cursor > 0


    @property
    def can_redo(self) -> bool:
        return 0 <= self._cursor < len(self._snapshots) - 1


    @property
    def current(self) -> Optional[Snapshot[S]]:
        """
        The snapshot at the cursor, or None when the history is empty. The
        live state is not consulted nor touched.
        """

        if self._cursor < 0:
            return None
        return self._snapshots[self._cursor]


    def try_get_current(self) -> Tuple[bool, Optional[Snapshot[S]]]:
        """
        Return a ``(found, snapshot)`` pair for the snapshot at the cursor.
        """

        current = self.current
        return current is not None, current


    @property
    def history(self) -> Tuple[Snapshot[S], ...]:
        """
        A fresh copy of all retained snapshots, oldest first.
        """

        return tuple(self._snapshots)


    def save(self, state: S, tag: Optional[str] = None) -> int:
        """
        Capture `state` as a new snapshot at the head of the timeline.

        If an equality comparer is configured and the cloned state equals the
        snapshot at the cursor, nothing changes and the cursor's version is
        returned. Otherwise any snapshots ahead of the cursor are discarded,
        the new snapshot is appended, and the oldest snapshots are evicted
        while the capacity is exceeded.

        :param state: The live state, cloned via the configured cloner
        :param tag: Optional label for the snapshot
        :return: The version of the new snapshot, or of the current snapshot
          when the save was suppressed as a duplicate
        """

        body = self._cloner(state)

        if self._equality is not None and self._cursor >= 0:
            current = self._snapshots[self._cursor]
            if self._equality(current.state, body):
                logger.debug("save suppressed, identical to version %d",
                             current.version)
                return current.version

        self._truncate()

        version = self._next_version
        self._next_version += 1

        self._snapshots.append(Snapshot(version=version, state=body, tag=tag))
        self._cursor = len(self._snapshots) - 1
        logger.debug("saved version %d (tag=%r)", version, tag)

        self._evict()
        return version


    def _truncate(self) -> None:
        """
        Drop every snapshot after the cursor.
        """

        ahead = len(self._snapshots) - self._cursor - 1
        if ahead > 0:
            dropped = self._snapshots[self._cursor + 1:]
            del self._snapshots[self._cursor + 1:]
            logger.debug("truncated versions %d..%d",
                         dropped[0].version, dropped[-1].version)


    def _evict(self) -> None:
        """
        Drop the oldest snapshots until the capacity is respected. The
        snapshot at the cursor is never evicted.
        """

        if not self._capacity:
            return

        excess = min(len(self._snapshots) - self._capacity, self._cursor)
        if excess > 0:
            evicted = self._snapshots[:excess]
            del self._snapshots[:excess]
            self._cursor -= excess
            logger.debug("evicted versions %d..%d",
                         evicted[0].version, evicted[-1].version)


    def _apply(self, state: S, index: int) -> None:
        # applier first, so a failing applier leaves the cursor alone
        self._applier(state, self._snapshots[index].state)
        self._cursor = index
        logger.debug("cursor moved to version %d",
                     self._snapshots[index].version)


    def undo(self, state: S) -> bool:
        """
        Apply the snapshot before the cursor onto `state`.

        :return: True if a prior snapshot existed and was applied, False
          (with `state` untouched) otherwise
        """

        if self._cursor <= 0:
            return False
        self._apply(state, self._cursor - 1)
        return True


    def redo(self, state: S) -> bool:
        """
        Apply the snapshot after the cursor onto `state`.

        :return: True if a later snapshot existed and was applied, False
          (with `state` untouched) otherwise
        """

        if not self.can_redo:
            return False
        self._apply(state, self._cursor + 1)
        return True


    def restore(
            self,
            version: Selector,
            state: S,
            *,
            policy: Union[str, ResolutionPolicy, None] = None) -> bool:
        """
        Apply the snapshot with the given version onto `state` and move the
        cursor to it. Snapshots ahead of it are kept until the next save.

        By default the version must match exactly. A policy name ("exact",
        "le", "ge") or :class:`ResolutionPolicy` instance may be given to
        resolve nearest versions, or selectors such as ``"<=4"`` or
        ``">=2;<5"``, instead.

        :param version: Version number or selector to restore
        :param state: The live state, overwritten via the configured applier
        :param policy: Resolution policy, exact when omitted
        :return: True if a retained snapshot was found and applied, False
          (with `state` untouched) otherwise
        :raises ValueError: if the policy name is not recognised, or a
          comparison selector is given without a policy
        """

        found = self.find(version, policy=policy)
        if found is None:
            return False
        self._apply(state, self._locate(found.version))
        return True


    def find(
            self,
            selector: Selector,
            *,
            policy: Union[str, ResolutionPolicy, None] = None) -> Optional[Snapshot[S]]:
        """
        Return the retained snapshot matching `selector`, or None. Values
        which are neither an int nor a string never match.

        :raises ValueError: if the policy name is not recognised, or a
          comparison selector is given without a policy
        """

        if not is_selector(selector):
            return None

        if (policy is None and isinstance(selector, str)
                and matcher_like(selector)):
            raise ValueError(f"Selector {selector!r} requires a policy")

        version = resolver(policy).resolve(selector, self.versions())
        if version is None:
            return None
        index = self._locate(version)
        return self._snapshots[index] if index >= 0 else None


    def _locate(self, version: int) -> int:
        versions = self.versions()
        index = bisect_left(versions, version)
        if index < len(versions) and versions[index] == version:
            return index
        return -1


    def versions(self) -> Tuple[int, ...]:
        """
        The retained version numbers in ascending order.
        """

        return tuple(snap.version for snap in self._snapshots)


    def earliest(self) -> Optional[int]:
        """
        The lowest retained version, or None when empty.
        """

        return self._snapshots[0].version if self._snapshots else None


    def latest(self) -> Optional[int]:
        """
        The highest retained version, or None when empty.
        """

        return self._snapshots[-1].version if self._snapshots else None


    def tags(self) -> Tuple[Snapshot[S], ...]:
        """
        The retained snapshots which carry a tag, oldest first.
        """

        return tuple(snap for snap in self._snapshots if snap.has_tag)


    def __len__(self) -> int:
        return len(self._snapshots)


    def __contains__(self, version: Any) -> bool:
        return (isinstance(version, int) and not isinstance(version, bool)
                and self._locate(version) >= 0)


    def __iter__(self) -> Iterator[Snapshot[S]]:
        return iter(self.history)


    def __repr__(self) -> str:
        return (f"<{type(self).__name__} count={self.count}"
                f" current_version={self.current_version}"
                f" capacity={self._capacity}>")


class HistoryBuilder(Generic[S]):
    """
    Fluent configuration for a :class:`History`. Each option is validated as
    it is set, so an invalid capacity fails here rather than in ``build()``.
    """

    def __init__(self) -> None:
        self._config = HistoryConfig()


    def clone_with(self, cloner: Cloner) -> "HistoryBuilder[S]":
        """
        Configure how live state is copied into a snapshot body. Provide a
        deep copy for mutable object graphs.
        """

        self._config.cloner = cloner
        return self


    def apply_with(self, applier: Applier) -> "HistoryBuilder[S]":
        """
        Configure how a snapshot body is written back onto the live state.
        """

        self._config.applier = applier
        return self


    def equality(
            self,
            comparer: Optional[EqualityComparer] = operator.eq) -> "HistoryBuilder[S]":
        """
        Enable duplicate-save suppression using `comparer`, which defaults
        to ``==``. Passing None disables suppression again.
        """

        self._config.equality = comparer
        return self


    def capacity(self, capacity: Optional[int]) -> "HistoryBuilder[S]":
        """
        Limit the retained snapshots, evicting the oldest first. 0 or None
        means unbounded.

        :raises pydantic.ValidationError: if capacity is negative
        """

        self._config.capacity = 0 if capacity is None else capacity
        return self


    def build(self) -> History[S]:
        return History(self._config.model_copy())


# The end.
