# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from blamesplit.contenttypes import ContentTypes, PlainText
from blamesplit.settings import LoggingLevel, Prefs, SplitSide


def testPrefsDefaults():
    prefs = Prefs()
    assert prefs.gitPath == "git"
    assert prefs.blameArgs == ["--root", "--date=iso"]
    assert prefs.splitSide == SplitSide.Left
    assert prefs.syncOnOpen
    assert prefs.closeOverlayKeys == ["Q", "Escape"]
    assert prefs.jobTimeoutMilliseconds() == 60_000


def testPrefsApplyDict():
    prefs = Prefs()
    prefs.applyDict({
        "splitSide": "right",
        "splitWidth": 100,
        "verbosity": 20,
        "blameArgs": ["-w"],
        "jobTimeoutSeconds": 0,
    })
    assert prefs.splitSide is SplitSide.Right
    assert prefs.splitWidth == 100
    assert prefs.verbosity is LoggingLevel.Info
    assert prefs.blameArgs == ["-w"]
    assert prefs.jobTimeoutMilliseconds() == 0


def testPrefsApplyDictIgnoresBadValues():
    prefs = Prefs()
    prefs.applyDict({
        "splitSide": "upside-down",
        "splitWidth": "wide",
        "focusOnOpen": 0,
        "gitPath": 42,
        "_category_blame": 99,
        "unknownKey": True,
    })
    assert prefs == Prefs()


def testPrefsToDictRoundTrip():
    prefs = Prefs(splitSide=SplitSide.Right, messagePrefix="[blame]")
    obj = prefs.toDict()
    assert obj["splitSide"] == "right"
    assert "_category_general" not in obj

    prefs2 = Prefs()
    prefs2.applyDict(obj)
    assert prefs2 == prefs


def testPrefsReset():
    prefs = Prefs()
    prefs.gitPath = "/opt/git/bin/git"
    prefs.blameArgs.append("-M")
    prefs.reset()
    assert prefs == Prefs()


def testPrefsNotWrittenInTestMode():
    assert Prefs().write() == ""
    assert not Prefs().load()


def testContentTypeForPath():
    assert ContentTypes.forPath("src/main.py") == "python"
    assert ContentTypes.forPath("include/foo.h") == "c"
    assert ContentTypes.forPath("Makefile") == "make"
    assert ContentTypes.forPath("notes.unknownextension") == PlainText
    assert ContentTypes.forPath("") == PlainText
