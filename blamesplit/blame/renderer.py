# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

from blamesplit.blame.session import BlameSession
from blamesplit.gitdriver import JobResult
from blamesplit.host.editorhost import NotifyLevel
from blamesplit.localization import *
from blamesplit.toolbox.textutils import splitOutputLines, tquo

logger = logging.getLogger(__name__)


class BlameRenderer:
    """
    Runs git blame and writes its output into the session's blame buffer.
    """

    def __init__(self, session: BlameSession):
        self.session = session

    @staticmethod
    def blameCommand(blameArgs: list[str], path: str, revision: str | None = None, exact: bool = False) -> list[str]:
        """
        Build the arguments for git blame.

        With a revision, blame is pinned to the state right before that
        revision (`<revision>^`), unless `exact` is set.
        """
        args = ["blame"] + list(blameArgs)
        if revision:
            args += [revision if exact else f"{revision}^", "--"]
        args.append(path)
        return args

    def render(self, filePath: str, revision: str | None = None, *, exact: bool = False):
        session = self.session
        host = session.host

        # Cursor moves caused by the new content must not leak into the other view
        session.stopActiveJob()
        session.cursorSync.detach()

        if not host.isBufferValid(session.blameBuffer):
            logger.warning(f"Not rendering, blame buffer is gone: {session}")
            return

        args = self.blameCommand(session.prefs.blameArgs, session.workdirPath(filePath), revision, exact)

        host.setBufferLines(session.blameBuffer, [_("Running git blame for {0}…", tquo(session.fileName))])

        session.startJob(args, self._onBlameDone)

    def _onBlameDone(self, result: JobResult):
        session = self.session
        host = session.host
        buffer = session.blameBuffer

        if not host.isBufferValid(buffer):
            return

        if not result.ok:
            fallback = _("git blame failed with exit code {0}.", result.formatExitCode())
            errorText = result.errorText(fallback)
            lines = splitOutputLines(errorText)
            if errorText != fallback:
                lines.append(_("Exit code: {0}", result.formatExitCode()))
            host.setBufferLines(buffer, lines)
            session.notify(_("Blame failed: {0}", errorText.splitlines()[0]), NotifyLevel.Error)
            return

        lines = splitOutputLines(result.stdout)
        if not lines:
            lines = [_("git blame produced no output for {0}.", tquo(session.fileName))]
        host.setBufferLines(buffer, lines)

        # Put both cursors back on the line the user was looking at
        line = max(1, min(session.lastKnownLine, host.lineCount(buffer)))
        if host.isViewValid(session.blameView):
            host.setViewLine(session.blameView, line)
        if session.syncEnabled and host.isViewValid(session.sourceView):
            sourceLine = max(1, min(line, host.lineCount(host.viewBuffer(session.sourceView))))
            host.setViewLine(session.sourceView, sourceLine)

        session.cursorSync.attach()
