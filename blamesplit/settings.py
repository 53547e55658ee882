# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import logging

from blamesplit.prefsfile import PrefsFile
from blamesplit.qt import *

logger = logging.getLogger(__name__)


class SplitSide(enum.StrEnum):
    Left = "left"
    Right = "right"


class QtApiNames(enum.StrEnum):
    Automatic = ""
    PyQt6 = "pyqt6"
    PySide6 = "pyside6"


class LoggingLevel(enum.IntEnum):
    Debug = logging.DEBUG
    Info = logging.INFO
    Warning = logging.WARNING


@dataclasses.dataclass
class Prefs(PrefsFile):
    """
    User configuration. Fields are read once when a blame session is
    constructed, so changes only affect sessions opened afterwards.
    """

    _filename = "prefs.json"

    _category_general           : int                   = 0
    language                    : str                   = ""
    gitPath                     : str                   = "git"
    verbosity                   : LoggingLevel          = LoggingLevel.Debug if APP_TESTMODE else LoggingLevel.Warning
    forceQtApi                  : QtApiNames            = QtApiNames.Automatic

    _category_blame             : int                   = 0
    blameArgs                   : list[str]             = dataclasses.field(default_factory=lambda: ["--root", "--date=iso"])
    splitSide                   : SplitSide             = SplitSide.Left
    splitWidth                  : int                   = 80
    focusOnOpen                 : bool                  = True
    syncOnOpen                  : bool                  = True
    shortHashChars              : int                   = 7
    jobTimeoutSeconds           : int                   = 60
    messagePrefix               : str                   = "[blamesplit]"

    _category_detail            : int                   = 0
    overlayWidthRatio           : float                 = 0.8
    overlayHeightRatio          : float                 = 0.8

    _category_keys              : int                   = 0
    openBlameKey                : str                   = "Ctrl+B"
    travelKey                   : str                   = "-"
    detailKey                   : str                   = "Return"
    toggleSyncKey               : str                   = "S"
    closeBlameKey               : str                   = "Q"
    closeOverlayKeys            : list[str]             = dataclasses.field(default_factory=lambda: ["Q", "Escape"])

    def monoFont(self):
        return QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont)

    def jobTimeoutMilliseconds(self) -> int:
        return max(0, self.jobTimeoutSeconds) * 1000


# Initialize default prefs.
# The app should load the user's prefs with prefs.load().
prefs = Prefs()
