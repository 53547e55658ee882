# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator
from typing import TYPE_CHECKING

import pygit2
import pytest
from pytestqt.qtbot import QtBot

from blamesplit.application import BlameSplitApplication

# Plain 'pytest' invocations run offscreen too, unless test.py --visual asked otherwise
if not os.environ.get("TESTVISUAL"):
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

if TYPE_CHECKING:
    # For '-> EditorWindow' type annotation, without pulling in EditorWindow in the actual fixture
    from blamesplit.editorwindow import EditorWindow


def setUpGitConfigSearchPaths():
    """
    Prevent unit tests from accessing the host system's git config files.
    This modifies libgit2 search paths and GIT_CONFIG environment variables
    for vanilla git.
    """
    ConfigLevel = pygit2.enums.ConfigLevel

    for level in ConfigLevel.GLOBAL, ConfigLevel.XDG, ConfigLevel.SYSTEM:
        pygit2.settings.search_path[level] = ""

    os.environ["GIT_CONFIG_NOSYSTEM"] = "1"
    os.environ["GIT_CONFIG_SYSTEM"] = os.devnull
    os.environ["GIT_CONFIG_GLOBAL"] = os.devnull


@pytest.fixture(scope='session', autouse=True)
def maskHostGitConfig():
    setUpGitConfigSearchPaths()


@pytest.fixture(scope='session', autouse=True)
def setUpLogging():
    rootLogger = logging.root
    rootLogger.setLevel(logging.DEBUG)

    yield

    # Chatty destructors may cause spam after pytest has wound down.
    # Work around https://github.com/pytest-dev/pytest/issues/5502
    for handler in rootLogger.handlers:
        rootLogger.removeHandler(handler)


@pytest.fixture(autouse=True)
def resetPrefs():
    from blamesplit.appconsts import APP_TESTMODE
    from blamesplit.settings import prefs

    # Prevent loading/saving prefs
    assert APP_TESTMODE

    prefs.reset()
    yield prefs
    prefs.reset()


@pytest.fixture(scope="session")
def qapp_args():
    mainPyPath = os.path.join(os.path.dirname(__file__), "..", "blamesplit", "__main__.py")
    mainPyPath = os.path.normpath(mainPyPath)
    return [mainPyPath]


@pytest.fixture(scope="session")
def qapp_cls():
    yield BlameSplitApplication


@pytest.fixture
def tempDir() -> Generator[tempfile.TemporaryDirectory, None, None]:
    td = tempfile.TemporaryDirectory(prefix="blamesplittest-")
    yield td
    td.cleanup()


@pytest.fixture
def editor(qtbot: QtBot) -> Generator[EditorWindow, None, None]:
    from blamesplit import qt
    from blamesplit.editorwindow import EditorWindow

    # Prevent unit tests from reading actual user settings
    qt.QStandardPaths.setTestModeEnabled(True)

    app = BlameSplitApplication.instance()
    app.beginSession(bootUi=False)

    window = EditorWindow()
    with qtbot.waitExposed(window):
        window.show()

    yield window

    viewer = window.blameViewer
    window.close()

    # Closing the window must tear down every blame session
    assert len(viewer.registry) == 0, "Unit test has leaked blame sessions"

    app.endSession()
