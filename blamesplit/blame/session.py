# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import copy
import logging
import os
from collections.abc import Iterator
from typing import TYPE_CHECKING

from blamesplit.gitdriver import GitDriver, GitJob, JobCallback, JobResult
from blamesplit.host.editorhost import Buffer, EditorHost, NotifyLevel, Subscription, View
from blamesplit.settings import Prefs, prefs as globalPrefs

if TYPE_CHECKING:
    from blamesplit.blame.cursorsync import CursorSynchronizer
    from blamesplit.blame.detailviewer import DetailViewer
    from blamesplit.blame.navigator import RevisionNavigator
    from blamesplit.blame.renderer import BlameRenderer

logger = logging.getLogger(__name__)


def relativeWorkdirPath(path: str, workdir: str) -> str:
    relPath = os.path.relpath(os.path.realpath(path), os.path.realpath(workdir))
    return relPath.replace(os.sep, "/")


class BlameSession:
    """
    All the mutable state of one blame viewer.

    A session pairs a source view (showing the file, or a historical
    snapshot of it) with a blame view. It owns at most one job at a time.
    """

    host: EditorHost
    driver: GitDriver
    prefs: Prefs

    sourceView: View | None
    sourceBuffer: Buffer | None
    blameView: View | None
    blameBuffer: Buffer | None
    detailView: View | None
    detailBuffer: Buffer | None

    activeJob: GitJob | None

    syncEnabled: bool
    syncing: bool
    "True only for the duration of one cursor synchronization step (non-reentrant section)"

    lastKnownLine: int

    renderer: BlameRenderer
    navigator: RevisionNavigator
    detail: DetailViewer
    cursorSync: CursorSynchronizer

    def __init__(self, host: EditorHost, sourceView: View, filePath: str, workdir: str, relativePath: str,
                 sessionPrefs: Prefs | None = None, driver: GitDriver | None = None):
        # Prefs are frozen for the lifetime of the session
        self.prefs = copy.deepcopy(sessionPrefs or globalPrefs)
        self.host = host
        self.driver = driver or GitDriver(self.prefs.gitPath, self.prefs.jobTimeoutMilliseconds())

        self.filePath = filePath
        self.workdir = workdir
        self.relativePath = relativePath
        self.revision = None

        self.sourceView = sourceView
        self.sourceBuffer = host.viewBuffer(sourceView)
        self.originalSourceBuffer = self.sourceBuffer
        self.snapshotBuffers = []

        self.blameView = None
        self.blameBuffer = None
        self.detailView = None
        self.detailBuffer = None

        self.activeJob = None
        self.closingSubscription: Subscription | None = None

        self.syncEnabled = self.prefs.syncOnOpen
        self.syncing = False
        self.lastKnownLine = 1
        self.isTornDown = False

    def __repr__(self):
        return f"<BlameSession {self.relativePath!r} @ {self.revision or 'workdir'}>"

    @property
    def fileName(self) -> str:
        return os.path.basename(self.filePath)

    def workdirPath(self, path: str) -> str:
        """ Path relative to the work tree, with forward slashes as git expects. """
        if path == self.filePath:
            return self.relativePath
        return relativeWorkdirPath(path, self.workdir)

    def notify(self, message: str, level: NotifyLevel = NotifyLevel.Info):
        self.host.notify(f"{self.prefs.messagePrefix} {message}", level)

    def startJob(self, args: list[str], callback: JobCallback) -> GitJob:
        """
        Stop the active job, then run a new one in the work tree.

        The callback only fires if the job is still the active job when it
        completes; results from a job that got superseded are dropped.
        """

        self.stopActiveJob()

        job: GitJob | None = None

        def onJobDone(result: JobResult):
            if job is not self.activeJob:
                logger.debug(f"Dropping stale result from {job.formatCommandLine()}")
                return
            self.activeJob = None
            callback(result)

        job = self.driver.run(args, self.workdir, onJobDone)
        self.activeJob = job
        return job

    def stopActiveJob(self):
        job = self.activeJob
        self.activeJob = None
        self.driver.stop(job)

    def teardown(self):
        """
        Release everything the session holds: job, subscriptions, overlay,
        snapshot buffers, blame view. Puts the original file back into the
        source view. Safe to call more than once.
        """

        if self.isTornDown:
            return
        self.isTornDown = True

        logger.info(f"Tearing down {self}")
        host = self.host

        host.unsubscribe(self.closingSubscription)
        self.closingSubscription = None

        self.stopActiveJob()
        self.cursorSync.detach()
        self.detail.close()

        # Put the working copy back into the source view
        original = self.originalSourceBuffer
        if (host.isViewValid(self.sourceView)
                and host.isBufferValid(original)
                and host.viewBuffer(self.sourceView) is not original):
            host.setViewBuffer(self.sourceView, original)

        for snapshot in self.snapshotBuffers:
            host.destroyBuffer(snapshot)

        if host.isViewValid(self.blameView):
            host.closeView(self.blameView)
        if host.isBufferValid(self.blameBuffer):
            host.destroyBuffer(self.blameBuffer)

        self.clear()

    def clear(self):
        self.sourceView = None
        self.sourceBuffer = None
        self.originalSourceBuffer = None
        self.snapshotBuffers = []
        self.blameView = None
        self.blameBuffer = None
        self.detailView = None
        self.detailBuffer = None
        self.activeJob = None
        self.revision = None
        self.syncing = False
        self.lastKnownLine = 1


class BlameSessionRegistry:
    """
    Live blame sessions, keyed by their blame view.
    """

    def __init__(self):
        self._sessions: dict[View, BlameSession] = {}

    def __len__(self):
        return len(self._sessions)

    def __iter__(self) -> Iterator[BlameSession]:
        return iter(list(self._sessions.values()))

    def register(self, session: BlameSession):
        assert session.blameView is not None
        assert session.blameView not in self._sessions
        self._sessions[session.blameView] = session

    def unregister(self, session: BlameSession):
        for view, s in list(self._sessions.items()):
            if s is session:
                del self._sessions[view]

    def findByBlameView(self, view: View | None) -> BlameSession | None:
        if view is None:
            return None
        return self._sessions.get(view)

    def findBySourceView(self, view: View | None) -> BlameSession | None:
        if view is None:
            return None
        for session in self._sessions.values():
            if session.sourceView is view:
                return session
        return None

    def findByView(self, view: View | None) -> BlameSession | None:
        """ Find the session that a source, blame, or detail view belongs to. """
        session = self.findByBlameView(view) or self.findBySourceView(view)
        if session is None and view is not None:
            session = next((s for s in self._sessions.values() if s.detailView is view), None)
        return session
