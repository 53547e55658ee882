# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import sys as _sys
import os as _os


def _envBool(key: str) -> bool:
    return _os.environ.get(key, "") not in ["", "0"]


APP_VERSION = "0.3.0"
APP_SYSTEM_NAME = "blamesplit"
APP_DISPLAY_NAME = "BlameSplit"
APP_IDENTIFIER = "org.blamesplit.blamesplit"

APP_TESTMODE = _envBool("APP_TESTMODE") or "pytest" in _sys.modules
"""
Unit testing mode (don't touch real user prefs, etc.).
Can be forced with environment variable APP_TESTMODE.
"""

if APP_TESTMODE:
    APP_SYSTEM_NAME += "_testmode"
    APP_DISPLAY_NAME += "TestMode"
