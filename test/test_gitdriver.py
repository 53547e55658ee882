# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import pytest

from blamesplit.gitdriver import (
    CrashExitCode, GitDriver, GitJob, JobResult, SpawnFailureExitCode, TimeoutExitCode)
from .util import *


def testJobResultShape():
    ok = JobResult(0, "out\n", "")
    assert ok.ok

    failed = JobResult(128, "", "fatal: bad revision 'nope'\n")
    assert not failed.ok
    assert failed.errorText() == "fatal: bad revision 'nope'"

    silent = JobResult(3, "", "  \n")
    assert "3" in silent.errorText()
    assert silent.errorText("custom fallback") == "custom fallback"


@pytest.mark.parametrize("code, text", [
    (0, "0"),
    (1, "1"),
    (SpawnFailureExitCode, "127"),
    (TimeoutExitCode, "124"),
    (CrashExitCode, "255"),
    (137, "137 (SIGKILL)"),
])
def testFormatExitCode(code, text):
    assert JobResult(code, "", "").formatExitCode() == text


def testSplitGitCommand():
    assert GitDriver.splitCommandTokens("git") == ["git"]
    assert GitDriver.splitCommandTokens("'/opt/my git/git' -c core.quotepath=off") == [
        "/opt/my git/git", "-c", "core.quotepath=off"]


def testRunGit(qtbot, tempDir):
    driver = GitDriver("git")
    assert driver.isAvailable()

    results = []
    job = driver.run(["--version"], tempDir.name, results.append)
    assert isinstance(job, GitJob)

    waitUntilTrue(lambda: results)
    assert len(results) == 1
    assert results[0].ok
    assert results[0].stdout.startswith("git version")


def testRunGitFailure(qtbot, tempDir):
    results = []
    GitDriver("git").run(["rev-parse", "--verify", "HEAD"], tempDir.name, results.append)

    waitUntilTrue(lambda: results)
    assert not results[0].ok
    assert results[0].exitCode == 128
    assert "not a git repository" in results[0].stderr.lower()


def testSpawnFailureSettlesWithSyntheticExitCode(qtbot, tempDir):
    driver = GitDriver("/nonexistent/bin/git-that-does-not-exist")
    assert not driver.isAvailable()

    results = []
    driver.run(["status"], tempDir.name, results.append)

    # The result is never delivered from within run()
    assert results == []

    waitUntilTrue(lambda: results)
    assert len(results) == 1
    assert results[0].exitCode == SpawnFailureExitCode
    assert "git-that-does-not-exist" in results[0].stderr

    # Callback fires exactly once
    QTest.qWait(200)
    assert len(results) == 1


def testStopJob(qtbot, tempDir):
    driver = GitDriver(delayedGitPath(3))

    results = []
    job = driver.run(["--version"], tempDir.name, results.append)

    with qtbot.waitSignal(job.cancelled, timeout=1000):
        driver.stop(job)

    assert job.wasCancelled

    # Stopping twice is harmless
    driver.stop(job)

    QTest.qWait(500)
    assert results == []


def testJobTimeout(qtbot, tempDir):
    driver = GitDriver(delayedGitPath(3), timeoutMs=300)

    results = []
    driver.run(["--version"], tempDir.name, results.append)

    waitUntilTrue(lambda: results, timeout=3000)
    assert results[0].exitCode == TimeoutExitCode
    assert "timed out" in results[0].stderr

    QTest.qWait(300)
    assert len(results) == 1


@pytest.mark.parametrize("code, didNotRun", [
    (0, False),
    (128, False),
    (SpawnFailureExitCode, True),
    (TimeoutExitCode, True),
    (CrashExitCode, True),
])
def testJobResultDidNotRun(code, didNotRun):
    assert JobResult(code, "", "").didNotRun == didNotRun
