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
preoccupied.memento
Namespace package segment providing a versioned snapshot history engine
with undo, redo, and point-in-time restore.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from .config import HistoryConfig
from .editor import DocumentState, TextEditor, run_demo
from .history import History, HistoryBuilder
from .policies import (
    ResolutionPolicy, ResolveVersionExact, ResolveVersionGE,
    ResolveVersionLE, lookup_policy)
from .snapshot import Snapshot
from .strategies import deep_copy, overwrite, shallow_copy


__all__ = (
    "History",
    "HistoryBuilder",
    "HistoryConfig",
    "Snapshot",

    "deep_copy",
    "overwrite",
    "shallow_copy",

    "ResolutionPolicy",
    "ResolveVersionExact",
    "ResolveVersionGE",
    "ResolveVersionLE",
    "lookup_policy",

    "DocumentState",
    "TextEditor",
    "run_demo",
)


# The end.
