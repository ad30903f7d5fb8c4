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
preoccupied.memento.config
Validated configuration for :class:`History` instances.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from .strategies import overwrite, shallow_copy


__all__ = (
    "HistoryConfig",
)


class HistoryConfig(BaseModel):
    """
    Strategies and limits for a history engine.

    Assignment is validated, so an invalid value (such as a negative
    capacity) is rejected at the moment it is configured rather than when the
    engine is first used.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
    )

    cloner: Callable[[Any], Any] = Field(
        default=shallow_copy,
        description="Produces an independent snapshot body from live state")

    applier: Callable[[Any, Any], None] = Field(
        default=overwrite,
        description="Writes a snapshot body back onto live state in place")

    equality: Optional[Callable[[Any, Any], bool]] = Field(
        default=None,
        description="Detects a save identical to the current snapshot")

    capacity: int = Field(
        default=0,
        ge=0,
        description="Maximum retained snapshots, 0 for unbounded")


# The end.
