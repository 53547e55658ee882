# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

from blamesplit.blame.session import BlameSession
from blamesplit.host.editorhost import EventKind, Subscription, View
from blamesplit.localization import *

logger = logging.getLogger(__name__)


class CursorSynchronizer:
    """
    Keeps the cursor on the same line in the source view and the blame view.

    Moving the cursor in one view moves it in the other. The move we cause
    in the other view fires a cursor event of its own; `session.syncing`
    makes that echo a no-op.
    """

    subscriptions: list[Subscription]

    def __init__(self, session: BlameSession):
        self.session = session
        self.subscriptions = []

    @property
    def enabled(self) -> bool:
        return self.session.syncEnabled

    def isAttached(self) -> bool:
        return any(s.active for s in self.subscriptions)

    def toggle(self) -> bool:
        session = self.session
        session.syncEnabled = not session.syncEnabled

        if session.syncEnabled:
            session.notify(_("Cursor sync enabled."))
            self.syncLine(session.blameView, session.sourceView)
        else:
            session.notify(_("Cursor sync disabled."))

        return session.syncEnabled

    def attach(self):
        session = self.session
        host = session.host

        self.detach()

        if host.isBufferValid(session.sourceBuffer):
            self.subscriptions.append(host.subscribe(EventKind.CursorMoved, session.sourceBuffer, self._onSourceCursorMoved))
        if host.isBufferValid(session.blameBuffer):
            self.subscriptions.append(host.subscribe(EventKind.CursorMoved, session.blameBuffer, self._onBlameCursorMoved))

    def detach(self):
        host = self.session.host
        for subscription in self.subscriptions:
            host.unsubscribe(subscription)
        self.subscriptions.clear()

    def _onSourceCursorMoved(self, view: View):
        if view is self.session.sourceView:
            self.syncLine(view, self.session.blameView)

    def _onBlameCursorMoved(self, view: View):
        if view is self.session.blameView:
            self.syncLine(view, self.session.sourceView)

    def syncLine(self, fromView: View | None, toView: View | None):
        session = self.session
        host = session.host

        if not session.syncEnabled or session.syncing:
            return

        if not host.isViewValid(fromView) or not host.isViewValid(toView):
            return

        toBuffer = host.viewBuffer(toView)
        if not host.isBufferValid(toBuffer):
            return

        session.syncing = True
        try:
            line = host.viewLine(fromView)
            # Remember the line the user picked, not where it landed in a shorter view
            session.lastKnownLine = line
            host.setViewLine(toView, max(1, min(line, host.lineCount(toBuffer))))
        finally:
            session.syncing = False
