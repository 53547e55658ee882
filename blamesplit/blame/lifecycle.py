# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import logging
import os

import pygit2

from blamesplit.blame.cursorsync import CursorSynchronizer
from blamesplit.blame.detailviewer import DetailViewer
from blamesplit.blame.navigator import RevisionNavigator
from blamesplit.blame.renderer import BlameRenderer
from blamesplit.blame.session import BlameSession, BlameSessionRegistry, relativeWorkdirPath
from blamesplit.contenttypes import BlameContentType
from blamesplit.gitdriver import GitDriver
from blamesplit.host.editorhost import EditorHost, EventKind, NotifyLevel, View
from blamesplit.localization import *
from blamesplit.qt import *
from blamesplit.settings import Prefs, prefs
from blamesplit.toolbox.textutils import tquo

logger = logging.getLogger(__name__)


class BlameValidationError(Exception):
    pass


@dataclasses.dataclass(frozen=True)
class BlameTarget:
    filePath: str
    workdir: str
    relativePath: str


class BlameViewer(QObject):
    """
    Opens and closes blame sessions in an EditorHost.
    """

    sessionOpened = Signal(object)
    sessionClosed = Signal(object)

    def __init__(self, host: EditorHost, parent: QObject | None = None):
        super().__init__(parent)
        self.setObjectName("BlameViewer")
        self.host = host
        self.registry = BlameSessionRegistry()

    def validateSourceBuffer(self, view: View | None, sessionPrefs: Prefs | None = None) -> BlameTarget:
        host = self.host
        sessionPrefs = sessionPrefs or prefs

        if not host.isViewValid(view):
            raise BlameValidationError(_("There’s no file to blame here."))

        buffer = host.viewBuffer(view)
        path = host.bufferPath(buffer) if host.isBufferValid(buffer) else ""
        if not path:
            raise BlameValidationError(_("There’s no file to blame here."))

        if not os.path.isfile(path):
            raise BlameValidationError(_("{0} hasn’t been saved to disk yet.", tquo(os.path.basename(path))))

        try:
            driver = GitDriver(sessionPrefs.gitPath)
        except ValueError as exc:
            raise BlameValidationError(_("Invalid git command: {0} ({1})", tquo(sessionPrefs.gitPath), exc)) from exc

        if not driver.isAvailable():
            raise BlameValidationError(_("Git executable not found: {0}", tquo(sessionPrefs.gitPath)))

        try:
            repoPath = pygit2.discover_repository(os.path.dirname(os.path.abspath(path)))
            repo = pygit2.Repository(repoPath) if repoPath else None
        except pygit2.GitError as exc:
            raise BlameValidationError(_("Couldn’t open the repository: {0}", exc)) from exc

        if repo is None or repo.is_bare or not repo.workdir:
            raise BlameValidationError(_("{0} isn’t inside a git working tree.", tquo(os.path.basename(path))))

        workdir = os.path.normpath(repo.workdir)
        repo.free()

        relativePath = relativeWorkdirPath(path, workdir)
        if relativePath.startswith("../"):
            raise BlameValidationError(_("{0} isn’t inside a git working tree.", tquo(os.path.basename(path))))

        return BlameTarget(os.path.realpath(path), workdir, relativePath)

    def sessionForView(self, view: View | None) -> BlameSession | None:
        return self.registry.findByView(view)

    def openBlame(self, view: View | None = None) -> BlameSession | None:
        host = self.host

        if view is None:
            view = host.currentView()

        existing = self.registry.findByView(view)
        if existing is not None:
            host.focusView(existing.blameView)
            return existing

        try:
            target = self.validateSourceBuffer(view)
        except BlameValidationError as exc:
            host.notify(f"{prefs.messagePrefix} {exc}", NotifyLevel.Error)
            return None

        session = BlameSession(host, view, target.filePath, target.workdir, target.relativePath)
        session.renderer = BlameRenderer(session)
        session.navigator = RevisionNavigator(session)
        session.detail = DetailViewer(session)
        session.cursorSync = CursorSynchronizer(session)

        sessionPrefs = session.prefs
        buffer = host.createBuffer(f"blamesplit://{session.fileName}", BlameContentType)
        host.mapKey(buffer, sessionPrefs.travelKey, session.navigator.travelToParent, _("Blame parent revision"))
        host.mapKey(buffer, sessionPrefs.detailKey, session.detail.showForCurrentLine, _("Show commit details"))
        host.mapKey(buffer, sessionPrefs.toggleSyncKey, session.cursorSync.toggle, _("Toggle cursor sync"))
        host.mapKey(buffer, sessionPrefs.closeBlameKey, lambda: self.closeBlame(session), _("Close blame"))
        session.blameBuffer = buffer

        session.lastKnownLine = host.viewLine(view)
        session.blameView = host.openSplit(buffer, sessionPrefs.splitSide, sessionPrefs.splitWidth,
                                           sessionPrefs.focusOnOpen)
        session.closingSubscription = host.subscribe(EventKind.BufferClosing, buffer,
                                                     lambda _view: self.teardown(session))

        self.registry.register(session)
        logger.info(f"Opened {session}")
        self.sessionOpened.emit(session)

        session.renderer.render(session.filePath)
        return session

    def closeBlame(self, session: BlameSession):
        # Closing the blame view destroys the blame buffer, whose closing hook tears down the session
        if self.host.isViewValid(session.blameView):
            self.host.closeView(session.blameView)
        else:
            self.teardown(session)

    def toggleSync(self, view: View | None = None) -> bool | None:
        session = self.sessionForView(view or self.host.currentView())
        if session is None:
            return None
        return session.cursorSync.toggle()

    def teardown(self, session: BlameSession):
        self.registry.unregister(session)
        if session.isTornDown:
            return
        session.teardown()
        self.sessionClosed.emit(session)

    def teardownAll(self):
        for session in self.registry:
            self.teardown(session)
