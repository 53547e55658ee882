# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from blamesplit.host.bufferview import BufferView
from blamesplit.host.editorhost import EditorHost, EventKind, NotifyLevel, Subscription, SubscriptionHandler
from blamesplit.host.overlayframe import OverlayFrame
from blamesplit.host.textbuffer import TextBuffer
from blamesplit.qt import *
from blamesplit.settings import SplitSide
from blamesplit.toolbox import QSignalBlockerContext

if TYPE_CHECKING:
    from blamesplit.editorwindow import EditorWindow

logger = logging.getLogger(__name__)


class QtEditorHost(QObject, EditorHost):
    """
    EditorHost backed by Qt widgets living in an EditorWindow.
    """

    notified = Signal(str, int)

    def __init__(self, window: EditorWindow):
        super().__init__(window)
        self.setObjectName("QtEditorHost")

        self.window = window
        self.views: list[BufferView] = []
        self.buffers: list[TextBuffer] = []
        self.subscriptions: dict[tuple[EventKind, TextBuffer], list[Subscription]] = {}
        self.notifications: list[tuple[str, NotifyLevel]] = []

    # ---------------------------------------------
    # Buffers

    def createBuffer(self, name: str, contentType: str = "", lines: Sequence[str] = (),
                     path: str = "", scratch: bool = True) -> TextBuffer:
        buffer = TextBuffer(self, name, contentType, path, scratch)
        if lines:
            self.setBufferLines(buffer, lines)
        self.buffers.append(buffer)
        logger.debug(f"Created {buffer}")
        return buffer

    def destroyBuffer(self, buffer: TextBuffer):
        if not self.isBufferValid(buffer) or buffer.closing:
            return

        buffer.closing = True
        logger.debug(f"Destroying {buffer}")

        # Fire one-shot closing hooks before anything goes away
        for subscription in self._takeSubscriptions(EventKind.BufferClosing, buffer):
            subscription.handler(None)

        # Drop every other subscription scoped to this buffer
        for kind in EventKind:
            self._takeSubscriptions(kind, buffer)

        for view in self.views:
            if view.buffer is buffer:
                view.setBuffer(None)

        buffer.alive = False
        self.buffers.remove(buffer)
        buffer.deleteLater()

    def isBufferValid(self, buffer: TextBuffer | None) -> bool:
        return buffer is not None and buffer.alive

    def bufferName(self, buffer: TextBuffer) -> str:
        return buffer.name

    def bufferPath(self, buffer: TextBuffer) -> str:
        return buffer.path

    def bufferContentType(self, buffer: TextBuffer) -> str:
        return buffer.contentType

    def bufferLines(self, buffer: TextBuffer) -> list[str]:
        return buffer.lines()

    def lineCount(self, buffer: TextBuffer) -> int:
        return buffer.lineCount()

    def setBufferLines(self, buffer: TextBuffer, lines: Sequence[str]):
        assert self.isBufferValid(buffer)

        # Replacing the text moves the cursor in every view showing the buffer.
        # These aren't user cursor moves, so keep them from reaching subscribers.
        views = self.viewsShowing(buffer)

        wasModifiable = buffer.modifiable
        buffer.modifiable = True
        try:
            with QSignalBlockerContext(*views):
                buffer.replaceLines(lines)
        finally:
            buffer.modifiable = wasModifiable

    def mapKey(self, buffer: TextBuffer, keys: str | Sequence[str], callback: Callable[[], Any], description: str = ""):
        buffer.bindKeys(keys, callback, description)

    # ---------------------------------------------
    # Views

    def viewsShowing(self, buffer: TextBuffer) -> list[BufferView]:
        return [view for view in self.views if view.buffer is buffer]

    def registerView(self, view: BufferView):
        assert view not in self.views
        self.views.append(view)
        view.cursorMoved.connect(self._onCursorMoved)

    def currentView(self) -> BufferView | None:
        focusWidget = QApplication.focusWidget()
        if isinstance(focusWidget, BufferView) and focusWidget in self.views:
            return focusWidget
        return self.window.lastFocusedView()

    def isViewValid(self, view: BufferView | None) -> bool:
        return view is not None and view in self.views

    def viewBuffer(self, view: BufferView) -> TextBuffer:
        return view.buffer

    def setViewBuffer(self, view: BufferView, buffer: TextBuffer):
        assert self.isViewValid(view)
        assert self.isBufferValid(buffer)
        view.setBuffer(buffer)
        self.window.onViewBufferChanged(view)

    def openSplit(self, buffer: TextBuffer, side: SplitSide, widthColumns: int, focus: bool) -> BufferView:
        view = BufferView()
        view.setBuffer(buffer)
        self.registerView(view)

        widthPx = 0
        if widthColumns > 0:
            widthPx = (view.fontMetrics().horizontalAdvance("M" * widthColumns)
                       + view.verticalScrollBar().sizeHint().width()
                       + 2 * view.frameWidth())

        self.window.insertSplit(view, side == SplitSide.Left, widthPx)

        if focus:
            self.focusView(view)

        return view

    def closeView(self, view: BufferView):
        if not self.isViewValid(view):
            return

        assert view is not self.window.primaryView, "can't close the primary view"

        buffer = view.buffer
        frame = view.overlayFrame
        hadFocus = view.hasFocus()

        self.views.remove(view)
        view.cursorMoved.disconnect(self._onCursorMoved)

        if frame is not None:
            frame.hide()
            frame.deleteLater()
        else:
            self.window.removeSplit(view)
            view.deleteLater()

        if hadFocus:
            self.window.restoreFocus()

        # Scratch buffers go away with the last view showing them
        if buffer is not None and buffer.scratch and not self.viewsShowing(buffer):
            self.destroyBuffer(buffer)

    def focusView(self, view: BufferView):
        view.setFocus(Qt.FocusReason.OtherFocusReason)
        self.window.rememberFocus(view)

    def viewLine(self, view: BufferView) -> int:
        return view.line()

    def setViewLine(self, view: BufferView, line: int):
        view.setLine(line)

    # ---------------------------------------------
    # Overlays

    def openOverlay(self, buffer: TextBuffer, title: str, widthRatio: float, heightRatio: float) -> BufferView:
        frame = OverlayFrame(self.window.centralWidget(), title, widthRatio, heightRatio)
        view = frame.view
        view.setBuffer(buffer)
        self.registerView(view)

        frame.show()
        frame.raise_()
        view.setFocus(Qt.FocusReason.PopupFocusReason)
        return view

    def closeOverlay(self, view: BufferView):
        assert view is None or view.overlayFrame is not None, "not an overlay"
        self.closeView(view)

    # ---------------------------------------------
    # Events & notifications

    def subscribe(self, kind: EventKind, scope: TextBuffer, handler: SubscriptionHandler) -> Subscription:
        assert self.isBufferValid(scope), "can't subscribe to a dead buffer"
        subscription = Subscription(kind, scope, handler)
        self.subscriptions.setdefault((kind, scope), []).append(subscription)
        logger.debug(f"Subscribed {subscription} on {scope}")
        return subscription

    def unsubscribe(self, subscription: Subscription | None):
        if subscription is None or not subscription.active:
            return

        subscription.active = False
        key = (subscription.kind, subscription.scope)
        bucket = self.subscriptions.get(key, [])
        if subscription in bucket:
            bucket.remove(subscription)
        if not bucket:
            self.subscriptions.pop(key, None)

    def liveSubscriptions(self, kind: EventKind, scope: TextBuffer) -> list[Subscription]:
        return [s for s in self.subscriptions.get((kind, scope), []) if s.active]

    def _takeSubscriptions(self, kind: EventKind, scope: TextBuffer) -> list[Subscription]:
        bucket = self.subscriptions.pop((kind, scope), [])
        for subscription in bucket:
            subscription.active = False
        return bucket

    def _onCursorMoved(self, view: BufferView):
        buffer = view.buffer
        if buffer is None:
            return

        # Copy the list: handlers may subscribe/unsubscribe while we iterate
        for subscription in self.liveSubscriptions(EventKind.CursorMoved, buffer):
            if subscription.active:
                subscription.handler(view)

    def notify(self, message: str, level: NotifyLevel = NotifyLevel.Info):
        logger.log(level, message)
        self.notifications.append((message, level))
        self.window.showStatusMessage(message, level)
        self.notified.emit(message, int(level))
