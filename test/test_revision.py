# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import pytest

from blamesplit.blame.revision import MIN_REVISION_CHARS, extractRevisionId, shortRevision
from blamesplit.toolbox.textutils import firstLine, splitOutputLines


def testExtractRevisionFromBlameLine():
    line = "a1b2c3d (Author 2024-01-01 10:00:00 +0000 1) some code"
    assert extractRevisionId(line) == "a1b2c3d"


@pytest.mark.parametrize("line", [
    "",
    None,
    "Running git blame for “hello.txt”…",
    "fatal: no such path 'hello.txt' in HEAD",
    "abc123 (Author 2024-01-01 10:00:00 +0000 1) too short",
    "  a1b2c3d (leading whitespace)",
])
def testExtractRevisionRejectsLinesWithoutRevision(line):
    assert extractRevisionId(line) is None


def testExtractRevisionKeepsWholeHexRun():
    fullId = "0123456789abcdefABCDEF0123456789abcdef01"
    assert extractRevisionId(f"{fullId} some text") == fullId
    assert extractRevisionId("deadbeefcafe") == "deadbeefcafe"
    assert extractRevisionId("a" * MIN_REVISION_CHARS) == "a" * MIN_REVISION_CHARS


def testShortRevision(resetPrefs):
    fullId = "0123456789abcdef0123456789abcdef01234567"
    assert shortRevision(fullId) == "0123456"
    assert shortRevision(fullId, 10) == "0123456789"

    resetPrefs.shortHashChars = 12
    assert shortRevision(fullId) == "0123456789ab"


def testSplitOutputLines():
    assert splitOutputLines("") == []
    assert splitOutputLines("a\nb\n") == ["a", "b"]
    assert splitOutputLines("a\nb") == ["a", "b"]
    # Only one trailing empty line is dropped
    assert splitOutputLines("a\n\n") == ["a", ""]
    assert splitOutputLines("\n") == [""]
    assert splitOutputLines("a\n\nb\n") == ["a", "", "b"]


def testFirstLine():
    assert firstLine("\n  \nfatal: bad revision\nmore\n") == "fatal: bad revision"
    assert firstLine("") == ""
