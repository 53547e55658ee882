# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

from blamesplit.blame.revision import extractRevisionId, shortRevision
from blamesplit.blame.session import BlameSession
from blamesplit.contenttypes import CommitContentType
from blamesplit.gitdriver import GitJob, JobResult
from blamesplit.host.editorhost import Buffer, EventKind, NotifyLevel, Subscription
from blamesplit.localization import *
from blamesplit.toolbox.textutils import splitOutputLines

logger = logging.getLogger(__name__)


class DetailViewer:
    """
    Shows `git show --pretty=full` for a revision in an overlay.

    The overlay runs its own job, independently of the session's active
    job, so looking at a commit doesn't interrupt a blame in progress.
    """

    job: GitJob | None
    closingSubscription: Subscription | None

    def __init__(self, session: BlameSession):
        self.session = session
        self.job = None
        self.closingSubscription = None

    def showForCurrentLine(self):
        session = self.session
        host = session.host

        if not host.isViewValid(session.blameView):
            return

        line = host.bufferLine(session.blameBuffer, host.viewLine(session.blameView))
        revision = extractRevisionId(line)
        if not revision:
            session.notify(_("No revision on this line."), NotifyLevel.Warning)
            return

        self.show(revision)

    def show(self, revision: str):
        session = self.session
        host = session.host
        sessionPrefs = session.prefs

        self.close()

        short = shortRevision(revision, sessionPrefs.shortHashChars)
        title = _("Commit {0}", short)

        buffer = host.createBuffer(title, CommitContentType, [_("Loading commit details…")])
        host.mapKey(buffer, sessionPrefs.closeOverlayKeys, self.close, _("Close commit details"))

        view = host.openOverlay(buffer, title, sessionPrefs.overlayWidthRatio, sessionPrefs.overlayHeightRatio)

        session.detailBuffer = buffer
        session.detailView = view
        self.closingSubscription = host.subscribe(EventKind.BufferClosing, buffer, self._onBufferClosing)

        self.job = session.driver.run(["show", "--pretty=full", revision], session.workdir,
                                      lambda result: self._onDetailLoaded(buffer, result))

    def close(self):
        session = self.session
        host = session.host

        job = self.job
        self.job = None
        session.driver.stop(job)

        # Unsubscribe first so that closing the overlay below doesn't call us back
        host.unsubscribe(self.closingSubscription)
        self.closingSubscription = None

        view = session.detailView
        buffer = session.detailBuffer
        session.detailView = None
        session.detailBuffer = None

        if host.isViewValid(view):
            host.closeOverlay(view)
        if host.isBufferValid(buffer):
            host.destroyBuffer(buffer)

    def _onBufferClosing(self, _view):
        # The overlay went away without going through close()
        logger.debug("Detail buffer closing")
        self.closingSubscription = None

        job = self.job
        self.job = None
        self.session.driver.stop(job)

        view = self.session.detailView
        self.session.detailView = None
        self.session.detailBuffer = None

        host = self.session.host
        if host.isViewValid(view):
            host.closeOverlay(view)

    def _onDetailLoaded(self, buffer: Buffer, result: JobResult):
        session = self.session
        host = session.host

        self.job = None

        if buffer is not session.detailBuffer or not host.isBufferValid(buffer):
            return

        lines = splitOutputLines(result.stdout) if result.ok else []
        if lines:
            host.setBufferLines(buffer, lines)
            if host.isViewValid(session.detailView):
                host.setViewLine(session.detailView, 1)
            return

        lines = [_("Failed to load commit details."), _("Exit code: {0}", result.formatExitCode())]
        if result.stderr.strip():
            lines += [""] + splitOutputLines(result.stderr.strip())
        host.setBufferLines(buffer, lines)
        session.notify(_("Failed to load commit details."), NotifyLevel.Error)
