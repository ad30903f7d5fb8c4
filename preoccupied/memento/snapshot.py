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
preoccupied.memento.snapshot
Immutable point-in-time record stored by a :class:`History`.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generic, Optional, TypeVar


__all__ = (
    "Snapshot",
)


S = TypeVar("S")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Snapshot(Generic[S]):
    """
    A cloned copy of some tracked state, identified by a monotonic version.

    Versions are assigned by the owning history at save time, starting at 1,
    and are never reused, even once older snapshots have been evicted.
    """

    version: int
    state: S
    timestamp: datetime = field(default_factory=_utcnow)
    tag: Optional[str] = None


    @property
    def has_tag(self) -> bool:
        return bool(self.tag)


# The end.
