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
preoccupied.memento.editor

A minimal in-memory text editor keeping its document history in a
:class:`History`. Every edit records a tagged snapshot; undo and redo walk the
timeline; an edit made after an undo abandons the redo branch.

Example:

```python
editor = TextEditor()
editor.insert("Hello")
editor.insert(", world")
editor.undo()
assert editor.state.text == "Hello"

editor.insert("!")
assert not editor.can_redo
assert editor.state.text == "Hello!"
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from threading import RLock
from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .history import History
from .snapshot import Snapshot


__all__ = (
    "DocumentState",
    "TextEditor",
    "run_demo",
)


class DocumentState(BaseModel):
    """
    Immutable editor state captured in each snapshot.
    """

    model_config = ConfigDict(frozen=True)

    text: str = ""
    caret: int = Field(default=0, ge=0)
    selection_length: int = Field(default=0, ge=0)


    @property
    def has_selection(self) -> bool:
        return self.selection_length > 0


    @property
    def selection_start(self) -> int:
        return self.caret


    @property
    def selection_end(self) -> int:
        # exclusive
        return self.caret + self.selection_length


    def __str__(self) -> str:
        if self.has_selection:
            return (f"Text='{self.text}' Caret={self.caret}"
                    f" Sel=[{self.selection_start},{self.selection_end})")
        return f"Text='{self.text}' Caret={self.caret}"


def _capture(editor: "TextEditor") -> DocumentState:
    # DocumentState is frozen, so the value itself is a safe snapshot body
    return editor._state


def _restore(editor: "TextEditor", state: DocumentState) -> None:
    editor._state = state


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _short(text: str) -> str:
    return text if len(text) <= 8 else f"{text[:8]}…"


class TextEditor:
    """
    Text editor encapsulating editing operations and history management.

    Editing methods return the version of the snapshot they recorded, or the
    current version when nothing changed.
    """

    def __init__(
            self,
            capacity: int = 500,
            skip_duplicates: bool = True) -> None:

        self._lock = RLock()
        self._state = DocumentState()
        self._batching = False

        builder = (History.create()
                   .clone_with(_capture)
                   .apply_with(_restore)
                   .capacity(capacity))
        if skip_duplicates:
            builder.equality()

        self._history: History[DocumentState] = builder.build()
        self._history.save(self, tag="init")


    @property
    def state(self) -> DocumentState:
        with self._lock:
            return self._state


    @property
    def version(self) -> int:
        return self._history.current_version


    @property
    def can_undo(self) -> bool:
        return self._history.can_undo


    @property
    def can_redo(self) -> bool:
        return self._history.can_redo


    @property
    def history(self) -> Tuple[Snapshot[DocumentState], ...]:
        return self._history.history


    def _commit(self, tag: Optional[str] = None) -> int:
        if self._batching:
            # deferred until the batch completes
            return self.version
        return self._history.save(self, tag)


    def _set(self, text: str, caret: int, selection_length: int = 0) -> None:
        self._state = DocumentState(
            text=text, caret=caret, selection_length=selection_length)


    def move_caret(self, position: int) -> int:
        with self._lock:
            state = self._state
            caret = _clamp(position, 0, len(state.text))
            if caret == state.caret and not state.has_selection:
                return self.version
            self._set(state.text, caret)
            return self._commit(tag=f"caret:{caret}")


    def select(self, start: int, length: int) -> int:
        with self._lock:
            state = self._state
            start = _clamp(start, 0, len(state.text))
            end = _clamp(start + length, 0, len(state.text))
            length = end - start
            if start == state.caret and length == state.selection_length:
                return self.version
            self._set(state.text, start, length)
            return self._commit(
                tag=f"select:{start}-{end}" if length else "select:empty")


    def _splice(self, text: str) -> Tuple[str, int]:
        # replace the selection (if any) or insert at the caret
        state = self._state
        start, end = state.selection_start, state.selection_end
        return state.text[:start] + text + state.text[end:], start + len(text)


    def insert(self, text: str) -> int:
        """
        Insert `text` at the caret, replacing any selection. Empty text is
        ignored.
        """

        if not text:
            return self.version

        with self._lock:
            doc, caret = self._splice(text)
            self._set(doc, caret)
            return self._commit(tag=f"insert:{_short(text)}")


    def replace_selection(self, text: str) -> int:
        """
        Replace the selected text with `text`, or insert it when there is no
        selection.
        """

        with self._lock:
            if not self._state.has_selection:
                return self.insert(text)
            doc, caret = self._splice(text)
            self._set(doc, caret)
            return self._commit(tag=f"replace:{_short(text)}")


    def _delete_selection(self) -> int:
        doc, caret = self._splice("")
        self._set(doc, caret)
        return self._commit(tag="delete:sel")


    def backspace(self, count: int = 1) -> int:
        with self._lock:
            state = self._state
            if count <= 0:
                return self.version
            if state.has_selection:
                return self._delete_selection()
            if state.caret == 0:
                return self.version

            take = min(count, state.caret)
            start = state.caret - take
            self._set(state.text[:start] + state.text[state.caret:], start)
            return self._commit(
                tag="backspace" if take == 1 else f"backspace:{take}")


    def delete_forward(self, count: int = 1) -> int:
        with self._lock:
            state = self._state
            if count <= 0:
                return self.version
            if state.has_selection:
                return self._delete_selection()
            if state.caret >= len(state.text):
                return self.version

            take = min(count, len(state.text) - state.caret)
            end = state.caret + take
            self._set(state.text[:state.caret] + state.text[end:], state.caret)
            return self._commit(tag="del" if take == 1 else f"del:{take}")


    def undo(self) -> bool:
        with self._lock:
            return self._history.undo(self)


    def redo(self) -> bool:
        with self._lock:
            return self._history.redo(self)


    def batch(
            self,
            tag: str,
            action: Callable[["TextEditor"], bool]) -> int:
        """
        Perform several edits as one logical step. A single snapshot is saved
        when `action` returns a truthy value and the document changed.

        :param tag: Label for the resulting snapshot
        :param action: Callable receiving this editor to perform edits
        :return: The new version, or the current version when nothing was
          saved
        :raises RuntimeError: if called from within another batch
        """

        with self._lock:
            if self._batching:
                raise RuntimeError("Already batching.")

            self._batching = True
            before = self._state
            try:
                commit = action(self)
                changed = before != self._state
            finally:
                self._batching = False

            if not (commit and changed):
                return self.version
            return self._history.save(self, tag)


def run_demo() -> List[str]:
    """
    Run a sample editing session, returning a log of the versions and text
    after each step. The last line summarises the final state.
    """

    editor = TextEditor(capacity=100)
    log: List[str] = []

    def capture(action: str) -> None:
        state = editor.state
        log.append(f"v{editor.version}:{action} -> '{state.text}'"
                   f" (caret {state.caret})")

    editor.insert("Hello")
    capture("insert Hello")
    editor.insert(", world")
    capture("insert , world")
    editor.move_caret(5)
    capture("move caret")
    editor.insert(" brave new")
    capture("insert brave new")
    editor.select(0, 5)
    capture("select first word")
    editor.replace_selection("Hi")
    capture("replace selection")
    editor.backspace()
    capture("backspace")
    editor.undo()
    capture("undo")
    editor.undo()
    capture("undo")
    editor.redo()
    capture("redo")

    # diverging after an undo abandons the redo branch
    editor.move_caret(len(editor.state.text))
    capture("caret end")
    editor.insert("!!!")
    capture("branch insert !!!")

    log.append(f"FINAL:'{editor.state.text}' version={editor.version}"
               f" history={len(editor.history)}")
    return log


# The end.
