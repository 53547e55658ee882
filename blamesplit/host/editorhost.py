# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Editor capabilities consumed by the blame viewer.

The blame core only ever talks to an EditorHost; it never touches widgets.
Buffers hold content, views display a buffer. Lines are 1-based.
"""

from __future__ import annotations

import dataclasses
import enum
import itertools
import logging
from collections.abc import Callable, Sequence
from typing import Any

from blamesplit.settings import SplitSide

Buffer = Any
View = Any
SubscriptionHandler = Callable[[View], None]


class EventKind(enum.Enum):
    CursorMoved = enum.auto()
    "The cursor moved in a view showing the scope buffer. Handler receives that view."

    BufferClosing = enum.auto()
    "The scope buffer is about to be destroyed. Fires once, handler receives None."


class NotifyLevel(enum.IntEnum):
    Debug = logging.DEBUG
    Info = logging.INFO
    Warning = logging.WARNING
    Error = logging.ERROR


_subscriptionSerial = itertools.count(1)


@dataclasses.dataclass(eq=False)
class Subscription:
    kind: EventKind
    scope: Buffer
    handler: SubscriptionHandler
    serial: int = dataclasses.field(default_factory=lambda: next(_subscriptionSerial))
    active: bool = True

    def __repr__(self):
        return f"<Subscription #{self.serial} {self.kind.name} {'active' if self.active else 'dead'}>"


class EditorHost:
    """
    Abstract host editor surface. See QtEditorHost for the Qt implementation.
    """

    # ---------------------------------------------
    # Buffers

    def createBuffer(self, name: str, contentType: str = "", lines: Sequence[str] = (),
                     path: str = "", scratch: bool = True) -> Buffer:
        """
        Create a buffer. Scratch buffers are read-only to the user
        and are destroyed when the last view showing them closes.
        """
        raise NotImplementedError()

    def destroyBuffer(self, buffer: Buffer):
        raise NotImplementedError()

    def isBufferValid(self, buffer: Buffer | None) -> bool:
        raise NotImplementedError()

    def bufferName(self, buffer: Buffer) -> str:
        raise NotImplementedError()

    def bufferPath(self, buffer: Buffer) -> str:
        raise NotImplementedError()

    def bufferContentType(self, buffer: Buffer) -> str:
        raise NotImplementedError()

    def bufferLines(self, buffer: Buffer) -> list[str]:
        raise NotImplementedError()

    def bufferLine(self, buffer: Buffer, line: int) -> str | None:
        """ Return the text of a 1-based line, or None if out of range. """
        lines = self.bufferLines(buffer)
        if 1 <= line <= len(lines):
            return lines[line - 1]
        return None

    def lineCount(self, buffer: Buffer) -> int:
        raise NotImplementedError()

    def setBufferLines(self, buffer: Buffer, lines: Sequence[str]):
        """ Replace the entire content of a buffer, even a read-only one. """
        raise NotImplementedError()

    def mapKey(self, buffer: Buffer, keys: str | Sequence[str], callback: Callable[[], Any], description: str = ""):
        """ Bind a key action that is active in any view showing this buffer. """
        raise NotImplementedError()

    # ---------------------------------------------
    # Views

    def currentView(self) -> View | None:
        raise NotImplementedError()

    def isViewValid(self, view: View | None) -> bool:
        raise NotImplementedError()

    def viewBuffer(self, view: View) -> Buffer:
        raise NotImplementedError()

    def setViewBuffer(self, view: View, buffer: Buffer):
        raise NotImplementedError()

    def openSplit(self, buffer: Buffer, side: SplitSide, widthColumns: int, focus: bool) -> View:
        raise NotImplementedError()

    def closeView(self, view: View):
        raise NotImplementedError()

    def focusView(self, view: View):
        raise NotImplementedError()

    def viewLine(self, view: View) -> int:
        raise NotImplementedError()

    def setViewLine(self, view: View, line: int):
        """ Move the cursor to a 1-based line without changing input focus. """
        raise NotImplementedError()

    # ---------------------------------------------
    # Overlays

    def openOverlay(self, buffer: Buffer, title: str, widthRatio: float, heightRatio: float) -> View:
        raise NotImplementedError()

    def closeOverlay(self, view: View):
        raise NotImplementedError()

    # ---------------------------------------------
    # Events & notifications

    def subscribe(self, kind: EventKind, scope: Buffer, handler: SubscriptionHandler) -> Subscription:
        raise NotImplementedError()

    def unsubscribe(self, subscription: Subscription | None):
        raise NotImplementedError()

    def notify(self, message: str, level: NotifyLevel = NotifyLevel.Info):
        raise NotImplementedError()
