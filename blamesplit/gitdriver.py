# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Asynchronous git invocations on top of QProcess.

Every job settles exactly once: either its completion callback receives a
JobResult, or it is stopped and emits `cancelled`. Completion callbacks run
on the Qt event loop, never on another thread.
"""

from __future__ import annotations

import dataclasses
import io
import logging
import shlex
import shutil
import signal
import time
from collections.abc import Callable

from blamesplit.localization import *
from blamesplit.qt import *
from blamesplit.toolbox.textutils import tquo

logger = logging.getLogger(__name__)

SpawnFailureExitCode = 127
"Synthetic exit code for a process that couldn't be started (like a shell's 'command not found')"

TimeoutExitCode = 124
"Synthetic exit code for a process that ran past its deadline (like coreutils 'timeout')"

CrashExitCode = 255
"Synthetic exit code for a process that crashed without reporting a code"


@dataclasses.dataclass(frozen=True)
class JobResult:
    exitCode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exitCode == 0

    @property
    def didNotRun(self) -> bool:
        """ True if git never got to report an exit code of its own (spawn failure, timeout, crash). """
        return self.exitCode in (SpawnFailureExitCode, TimeoutExitCode, CrashExitCode)

    def errorText(self, fallback: str = "") -> str:
        text = self.stderr.strip()
        if text:
            return text
        return fallback or _("Git command exited with code {0}.", self.formatExitCode())

    def formatExitCode(self) -> str:
        code = self.exitCode

        if code in (SpawnFailureExitCode, TimeoutExitCode, CrashExitCode):
            return f"{code}"

        if code > 128:
            # Shells report "killed by signal N" as 128+N
            try:
                s = signal.Signals(code - 128)
                return f"{code} ({s.name})"
            except ValueError:
                pass

        return f"{code}"


JobCallback = Callable[[JobResult], None]


class GitJob(QProcess):
    """
    One asynchronous git invocation.

    Don't instantiate directly, use GitDriver.run().
    """

    cancelled = Signal()
    settled = Signal()

    _liveJobs: set[GitJob] = set()
    "Jobs whose QProcess hasn't exited yet (keeps them from being GC'd)"

    def __init__(self, tokens: list[str], directory: str, callback: JobCallback, timeoutMs: int = 0):
        super().__init__(None)

        self.setObjectName("GitJob")

        self.callback = callback
        self.isSettled = False
        self.wasCancelled = False
        self.startTime = 0.0

        self.setProgram(tokens[0])
        self.setArguments(tokens[1:])
        if directory:
            self.setWorkingDirectory(directory)

        self._stdout = io.BytesIO()
        self._stderr = io.BytesIO()
        self.readyReadStandardOutput.connect(self._onReadyReadStandardOutput)
        self.readyReadStandardError.connect(self._onReadyReadStandardError)
        self.finished.connect(self._onFinished)
        self.errorOccurred.connect(self._onErrorOccurred)

        self.deadline = QTimer(self)
        self.deadline.setSingleShot(True)
        self.deadline.timeout.connect(self._onDeadline)
        self.timeoutMs = timeoutMs

    def formatCommandLine(self):
        return shlex.join([self.program()] + self.arguments())

    def begin(self):
        GitJob._liveJobs.add(self)
        self.startTime = time.perf_counter()
        logger.info(f"Job starting: {self.formatCommandLine()} (in {self.workingDirectory() or '.'})")
        if self.timeoutMs > 0:
            self.deadline.start(self.timeoutMs)
        self.start()

    def stop(self):
        if self.isSettled:
            return

        logger.info(f"Job stopping: {self.formatCommandLine()}")

        self.isSettled = True
        self.wasCancelled = True
        self.deadline.stop()
        self.terminate()
        self.cancelled.emit()
        self.settled.emit()

    def elapsedMs(self) -> float:
        return 1000 * (time.perf_counter() - self.startTime)

    def stdoutText(self) -> str:
        return self._stdout.getvalue().decode("utf-8", errors="replace")

    def stderrText(self) -> str:
        # Skip progress lines that end with a carriage return
        return '\n'.join(
            line.rstrip().decode("utf-8", errors="replace")
            for line in self._stderr.getvalue().splitlines(keepends=True)
            if not line.endswith(b"\r")
        )

    def _onReadyReadStandardOutput(self):
        self._stdout.write(self.readAllStandardOutput().data())

    def _onReadyReadStandardError(self):
        self._stderr.write(self.readAllStandardError().data())

    def _onFinished(self, exitCode: int, exitStatus: QProcess.ExitStatus):
        if self.isSettled:
            # Stopped or timed out earlier; this is just the process winding down
            self._release()
            return

        # Drain anything that arrived after the last readyRead
        self._onReadyReadStandardOutput()
        self._onReadyReadStandardError()

        if exitStatus == QProcess.ExitStatus.CrashExit and exitCode == 0:
            exitCode = CrashExitCode

        result = JobResult(exitCode, self.stdoutText(), self.stderrText())
        self._settle(result)
        self._release()

    def _onErrorOccurred(self, processError: QProcess.ProcessError):
        if processError != QProcess.ProcessError.FailedToStart:
            # Other errors are followed by finished()
            logger.debug(f"Job error: {processError}")
            return

        message = _("Failed to start {0}: {1}", tquo(self.program()), self.errorString())
        result = JobResult(SpawnFailureExitCode, "", message)

        # errorOccurred may fire from within start(); deliver the result
        # on the next event loop iteration so run() always returns first.
        QTimer.singleShot(0, lambda: self._settleSpawnFailure(result))

    def _settleSpawnFailure(self, result: JobResult):
        # finished() never follows FailedToStart, so release the job here
        self._settle(result)
        self._release()

    def _release(self):
        # Let go of the job on the next event loop iteration, outside of its own signal handlers
        QTimer.singleShot(0, lambda: GitJob._liveJobs.discard(self))

    def _onDeadline(self):
        if self.isSettled:
            return

        seconds = self.timeoutMs / 1000
        logger.warning(f"Job timed out after {seconds:g} s: {self.formatCommandLine()}")

        result = JobResult(TimeoutExitCode, self.stdoutText(), _("Git command timed out after {0:g} seconds.", seconds))
        self._settle(result)
        self.terminate()

    def _settle(self, result: JobResult):
        if self.isSettled:
            return

        self.isSettled = True
        self.deadline.stop()
        logger.info(f"Job done: exit code {result.formatExitCode()} after {self.elapsedMs():.0f} ms: "
                    f"{self.formatCommandLine()}")

        callback = self.callback
        self.callback = None
        try:
            callback(result)
        finally:
            self.settled.emit()


class GitDriver:
    """
    Process runner for git commands.
    """

    def __init__(self, gitPath: str = "git", timeoutMs: int = 0):
        self.commandStem = GitDriver.splitCommandTokens(gitPath)
        self.timeoutMs = timeoutMs

    @staticmethod
    def splitCommandTokens(command: str) -> list[str]:
        # Treat command as POSIX even on Windows!
        return shlex.split(command, posix=True)

    def isAvailable(self) -> bool:
        return bool(self.commandStem) and shutil.which(self.commandStem[0]) is not None

    def run(self, args: list[str], directory: str, callback: JobCallback) -> GitJob:
        tokens = self.commandStem + list(args)
        job = GitJob(tokens, directory, callback, self.timeoutMs)
        job.begin()
        return job

    @staticmethod
    def stop(job: GitJob | None):
        if job is not None:
            job.stop()
