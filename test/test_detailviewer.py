# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import pytest

from blamesplit.blame import shortRevision
from blamesplit.contenttypes import CommitContentType
from blamesplit.gitdriver import GitDriver
from .util import *


@pytest.fixture
def history(tempDir):
    return makeHistory(tempDir, "hello.txt", [
        "hello\n",
        "hello\nworld\n",
    ])


def openBlame(editor, path):
    assert editor.openFile(path)
    session = editor.blameViewer.openBlame(editor.primaryView)
    waitForIdle(session)
    return session


def waitForDetail(session):
    waitUntilTrue(lambda: session.detail.job is None)


def testShowCommitDetail(editor, history):
    path, commits = history
    session = openBlame(editor, path)
    host = editor.host

    host.setViewLine(session.blameView, 2)
    QTest.keyClick(session.blameView, Qt.Key.Key_Return)

    detailView = session.detailView
    detailBuffer = session.detailBuffer
    assert detailView is not None
    assert detailView.overlayFrame.title() == f"Commit {shortRevision(commits[1])}"
    assert detailView.overlayFrame.isVisible()
    assert host.bufferContentType(detailBuffer) == CommitContentType

    waitForDetail(session)

    lines = host.bufferLines(detailBuffer)
    assert lines[0] == f"commit {commits[1]}"
    assert lines[1].startswith("Author: Test Person")
    assert lines[2].startswith("Commit: Test Person")
    assert "    Version 2" in lines
    assert host.viewLine(detailView) == 1
    assert detailView.isReadOnly()

    # Close with the overlay's close key
    QTest.keyClick(detailView, Qt.Key.Key_Escape)
    assert session.detailView is None
    assert session.detailBuffer is None
    assert not host.isBufferValid(detailBuffer)
    assert not host.isViewValid(detailView)

    # The blame session lives on
    assert host.isViewValid(session.blameView)


def testCloseDetailWithQ(editor, history):
    path, _commits = history
    session = openBlame(editor, path)

    session.detail.showForCurrentLine()
    detailView = session.detailView
    QTest.keyClick(detailView, Qt.Key.Key_Q)

    assert session.detailView is None
    # Q in the overlay must not have closed the blame view
    assert editor.host.isViewValid(session.blameView)


def testSingleOverlayAtATime(editor, history):
    path, commits = history
    session = openBlame(editor, path)
    host = editor.host

    session.detail.show(commits[0])
    firstBuffer = session.detailBuffer
    session.detail.show(commits[1])
    secondBuffer = session.detailBuffer

    assert not host.isBufferValid(firstBuffer)
    assert host.isBufferValid(secondBuffer)
    assert len([view for view in host.views if view.overlayFrame is not None]) == 1

    waitForDetail(session)
    assert host.bufferLines(secondBuffer)[0] == f"commit {commits[1]}"

    session.detail.close()


def testDetailFailure(editor, history):
    path, _commits = history
    session = openBlame(editor, path)
    host = editor.host

    session.detail.show("deadbeefdeadbeefdeadbeefdeadbeefdeadbeef")
    assert host.bufferLines(session.detailBuffer) == ["Loading commit details…"]
    waitForDetail(session)

    lines = host.bufferLines(session.detailBuffer)
    assert lines[0] == "Failed to load commit details."
    assert lines[1] == "Exit code: 128"
    assert notificationsAt(host, NotifyLevel.Error) == ["[blamesplit] Failed to load commit details."]

    session.detail.close()
    assert session.detailView is None


def testDetailOnLineWithoutRevision(editor, history):
    path, _commits = history
    session = openBlame(editor, path)
    host = editor.host

    host.setBufferLines(session.blameBuffer, ["not a blame line"])
    session.detail.showForCurrentLine()

    assert session.detailView is None
    assert notificationsAt(host, NotifyLevel.Warning) == ["[blamesplit] No revision on this line."]


def testDetailDoesNotCancelBlame(editor, history):
    path, commits = history
    session = openBlame(editor, path)
    session.prefs.gitPath = delayedGitPath(1)
    session.driver.commandStem = GitDriver.splitCommandTokens(session.prefs.gitPath)

    session.renderer.render(session.filePath)
    blameJob = session.activeJob
    assert blameJob is not None

    session.detail.show(commits[0])
    assert session.activeJob is blameJob

    waitForIdle(session)
    waitForDetail(session)
    assert commits[0].startswith(blameRevisions(editor.host, session)[0])
    assert editor.host.bufferLines(session.detailBuffer)[0] == f"commit {commits[0]}"
    session.detail.close()


def testDestroyingDetailBufferClearsSession(editor, history):
    path, commits = history
    session = openBlame(editor, path)
    host = editor.host

    session.detail.show(commits[0])
    detailView = session.detailView

    # Something other than the detail viewer kills the buffer
    host.destroyBuffer(session.detailBuffer)

    assert session.detailView is None
    assert session.detailBuffer is None
    assert session.detail.job is None
    assert not host.isViewValid(detailView)


def testTeardownClosesDetail(editor, history):
    path, commits = history
    session = openBlame(editor, path)
    host = editor.host

    session.detail.show(commits[0])
    detailBuffer = session.detailBuffer

    editor.blameViewer.closeBlame(session)
    assert not host.isBufferValid(detailBuffer)
    assert session.detailView is None


def testDetailWithEmptyOutputShowsFailure(editor, tempDir):
    path, _commits = makeHistory(tempDir, "empty.txt", [""])
    session = openBlame(editor, path)
    host = editor.host

    # git shows the empty blob successfully, but prints nothing
    session.detail.show("e69de29bb2d1d6434b8b29ae775a18c2e48c5391")
    waitForDetail(session)

    lines = host.bufferLines(session.detailBuffer)
    assert lines == ["Failed to load commit details.", "Exit code: 0"]
    assert notificationsAt(host, NotifyLevel.Error) == ["[blamesplit] Failed to load commit details."]
    session.detail.close()
