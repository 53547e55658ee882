# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from .messageboxes import asyncMessageBox, excMessageBox
from .qtutils import ShortcutKeys, MultiShortcut, makeMultiShortcut, keySequenceFromEvent, centeredRect
from .textutils import escape, tquo, splitOutputLines, firstLine
from .qsignalblockercontext import QSignalBlockerContext
