# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Time travel: replace the file in the source view with its contents as of
the parent of the revision under the blame cursor, then blame that.
"""

from __future__ import annotations

import logging

from blamesplit.blame.revision import extractRevisionId, shortRevision
from blamesplit.blame.session import BlameSession
from blamesplit.contenttypes import ContentTypes
from blamesplit.gitdriver import JobResult
from blamesplit.host.editorhost import NotifyLevel
from blamesplit.localization import *
from blamesplit.toolbox.textutils import firstLine, splitOutputLines, tquo

logger = logging.getLogger(__name__)


class RevisionNavigator:
    def __init__(self, session: BlameSession):
        self.session = session

    def currentRevision(self) -> str | None:
        session = self.session
        host = session.host
        if not host.isViewValid(session.blameView) or not host.isBufferValid(session.blameBuffer):
            return None
        line = host.bufferLine(session.blameBuffer, host.viewLine(session.blameView))
        return extractRevisionId(line)

    def travelToParent(self):
        session = self.session
        host = session.host

        if not host.isViewValid(session.blameView):
            return

        revision = self.currentRevision()
        if not revision:
            session.notify(_("No revision on this line."), NotifyLevel.Warning)
            return

        session.lastKnownLine = host.viewLine(session.blameView)

        logger.info(f"Traveling to parent of {revision}")
        session.startJob(["rev-parse", "--verify", f"{revision}^"],
                         lambda result: self._onParentResolved(revision, result))

    def _onParentResolved(self, revision: str, result: JobResult):
        session = self.session

        if result.didNotRun:
            session.notify(_("Couldn’t resolve the parent of {0}: {1}",
                             shortRevision(revision, session.prefs.shortHashChars), firstLine(result.errorText())),
                           NotifyLevel.Error)
            return

        parent = firstLine(result.stdout) if result.ok else ""
        if not parent:
            # Typically the root commit
            short = shortRevision(revision, session.prefs.shortHashChars)
            session.notify(_("No parent revision for {0}.", short), NotifyLevel.Warning)
            return

        session.startJob(["show", f"{parent}:{session.relativePath}"],
                         lambda result: self._onSnapshotLoaded(parent, result))

    def _onSnapshotLoaded(self, parent: str, result: JobResult):
        session = self.session
        host = session.host
        short = shortRevision(parent, session.prefs.shortHashChars)

        if not result.ok:
            message = _("Couldn’t load {0} at {1}: {2}", tquo(session.fileName), short,
                        firstLine(result.errorText()))
            session.notify(message, NotifyLevel.Error)
            return

        original = session.originalSourceBuffer
        if host.isBufferValid(original):
            contentType = host.bufferContentType(original)
        else:
            contentType = ContentTypes.forPath(session.filePath)

        snapshot = host.createBuffer(f"{session.fileName}@{short}", contentType,
                                     splitOutputLines(result.stdout), scratch=True)

        previousSnapshots = session.snapshotBuffers
        session.snapshotBuffers = [snapshot]
        session.sourceBuffer = snapshot
        session.revision = parent

        if host.isViewValid(session.sourceView):
            host.setViewBuffer(session.sourceView, snapshot)

        for buffer in previousSnapshots:
            host.destroyBuffer(buffer)

        session.renderer.render(session.filePath, parent, exact=True)
