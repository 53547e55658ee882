# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

# Import as few internal modules as possible here to avoid premature initialization
# from cascading imports before the QApplication has booted.
from blamesplit.localization import *
from blamesplit.qt import *

if TYPE_CHECKING:
    from blamesplit.editorwindow import EditorWindow

logger = logging.getLogger(__name__)


class BlameSplitApplication(QApplication):
    mainWindow: EditorWindow | None
    commandLinePaths: list[str]
    installedLocale: QLocale | None

    @staticmethod
    def instance() -> BlameSplitApplication:
        me = QApplication.instance()
        assert isinstance(me, BlameSplitApplication)
        return me

    def __init__(self, argv: list[str], bootScriptPath: str = ""):
        super().__init__(argv)
        self.setObjectName("BlameSplitApplication")

        if not bootScriptPath and argv:
            bootScriptPath = argv[0]

        self.mainWindow = None
        self.commandLinePaths = []
        self.installedLocale = None

        self.setApplicationName(APP_SYSTEM_NAME)  # used by QStandardPaths
        self.setApplicationDisplayName(APP_DISPLAY_NAME)  # user-friendly name
        self.setApplicationVersion(APP_VERSION)
        self.setDesktopFileName(APP_IDENTIFIER)

        # Add asset search path relative to boot script
        assetSearchPath = str(Path(bootScriptPath).parent / "assets")
        QDir.addSearchPath("assets", assetSearchPath)

        # Process command line
        parser = QCommandLineParser()
        parser.setApplicationDescription(qAppName() + " - " + _("Text editor with a git blame viewer."))
        parser.addHelpOption()
        parser.addVersionOption()
        parser.addPositionalArgument("files", _("Files to open on launch."), "[files...]")
        parser.process(argv)

        self.commandLinePaths = [str(Path(p).resolve()) for p in parser.positionalArguments()]

        self.aboutToQuit.connect(self.endSession)

    def beginSession(self, bootUi=True):
        from blamesplit.settings import prefs

        prefs.reset()
        try:
            prefs.load()
        except (OSError, ValueError) as exc:
            logger.warning(f"Couldn't load prefs: {exc}")

        self.applyLoggingLevelPref()
        self.applyLanguagePref()

        if bootUi:
            self.bootUi()

    def endSession(self):
        if self.mainWindow is not None:
            self.mainWindow.blameViewer.teardownAll()

    def bootUi(self):
        from blamesplit.editorwindow import EditorWindow

        window = EditorWindow()
        self.mainWindow = window
        window.destroyed.connect(self.onMainWindowDestroyed)

        # Only the last file is shown; the editor has a single primary view
        for path in self.commandLinePaths:
            window.openFile(path)

        window.show()

    def onMainWindowDestroyed(self):
        self.mainWindow = None

    def applyLoggingLevelPref(self):
        from blamesplit.settings import prefs
        logging.root.setLevel(prefs.verbosity.value)

    def applyLanguagePref(self):
        from blamesplit.settings import prefs

        if prefs.language:
            locale = QLocale(prefs.language)
        elif APP_TESTMODE:
            # Unit tests look for English strings regardless of the host machine's locale
            locale = QLocale(QLocale.Language.English)
        else:  # pragma: no cover
            locale = QLocale()

        QLocale.setDefault(locale)
        self.installedLocale = locale

        moFilePath = ""
        genericLanguageCode = locale.name().split("_")[0]
        for stem in locale.name(), genericLanguageCode:
            languageFile = QFile(f"assets:lang/{stem}.mo")
            if languageFile.exists():
                moFilePath = languageFile.fileName()
                break

        if not installGettextTranslator(moFilePath):
            logger.debug(f"No translations for {locale.name()}, using English")
