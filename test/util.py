# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import os
import shlex
import sys
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import pygit2

from blamesplit.host.editorhost import EventKind, NotifyLevel
from . import *

TEST_SIGNATURE_NAME = "Test Person"
TEST_SIGNATURE_EMAIL = "toto@example.com"
TEST_SIGNATURE_TIME = 1672600000

_T = TypeVar("_T")


def getTestDataPath(name):
    path = Path(__file__).resolve().parent / "data"
    return str(path / name)


def delayedGitPath(seconds: float) -> str:
    """ A gitPath pref that waits before running git, for slow-job tests. """
    return shlex.join([sys.executable, getTestDataPath("slow-git.py"), f"{seconds}"])


def writeFile(path, text):
    # Prevent accidental littering of current working directory
    assert os.path.isabs(path), "pass me an absolute path"

    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(text.encode("utf-8"))


def readTextFile(path):
    with open(path, "rb") as f:
        return f.read().decode("utf-8")


def makeRepo(tempDir: tempfile.TemporaryDirectory | str, name="TestRepo") -> pygit2.Repository:
    tempDirPath = tempDir if isinstance(tempDir, str) else tempDir.name
    path = os.path.realpath(f"{tempDirPath}/{name}")
    return pygit2.init_repository(path, bare=False)


def commitFile(repo: pygit2.Repository, relPath: str, text: str, message: str = "") -> str:
    """ Write a file in the workdir and commit it on HEAD. Return the full commit id. """

    writeFile(os.path.join(repo.workdir, relPath), text)

    repo.index.add(relPath)
    repo.index.write()
    tree = repo.index.write_tree()

    if repo.head_is_unborn:
        parents = []
        depth = 0
    else:
        parents = [repo.head.target]
        depth = sum(1 for _commit in repo.walk(repo.head.target))

    when = TEST_SIGNATURE_TIME + 3600 * depth
    signature = pygit2.Signature(TEST_SIGNATURE_NAME, TEST_SIGNATURE_EMAIL, when, 0)

    oid = repo.create_commit("HEAD", signature, signature, message or f"Edit {relPath}", tree, parents)
    return str(oid)


def makeHistory(tempDir, relPath: str, versions: list[str]) -> tuple[str, list[str]]:
    """
    Create a repo where each version of a file is committed in turn.
    Return the absolute path to the file and the commit ids, oldest first.
    """
    repo = makeRepo(tempDir)
    commitIds = [commitFile(repo, relPath, text, f"Version {i + 1}") for i, text in enumerate(versions)]
    path = os.path.join(repo.workdir, relPath)
    repo.free()
    return path, commitIds


def waitUntilTrue(
        callback: Callable[[], _T],
        timeout: int = 5000
) -> _T:
    interval = 100
    assert timeout >= interval
    for _ in range(0, timeout, interval):
        result = callback()
        if result:
            return result
        QTest.qWait(interval)
    raise TimeoutError(f"retry failed after {timeout} ms timeout")


def waitForIdle(session, timeout=10000):
    """ Wait until the session has no job in flight. """
    waitUntilTrue(lambda: session.activeJob is None, timeout=timeout)


def notificationsAt(host, level: NotifyLevel) -> list[str]:
    return [message for message, messageLevel in host.notifications if messageLevel == level]


def liveCursorSubscriptions(host) -> list:
    return [subscription
            for (kind, _scope), bucket in host.subscriptions.items() if kind == EventKind.CursorMoved
            for subscription in bucket if subscription.active]


def blameRevisions(host, session) -> list[str]:
    from blamesplit.blame import extractRevisionId
    return [extractRevisionId(line) for line in host.bufferLines(session.blameBuffer)]
