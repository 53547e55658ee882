# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from blamesplit.qt import *

ShortcutKeys = QKeySequence | QKeySequence.StandardKey | Qt.Key | str
MultiShortcut = list[QKeySequence]


def makeMultiShortcut(*args) -> MultiShortcut:
    if len(args) == 1 and isinstance(args[0], list):
        args = args[0]

    shortcuts = []

    for alt in args:
        t = type(alt)
        if t is str:
            shortcuts.append(QKeySequence(alt))
        elif t is QKeySequence.StandardKey:
            shortcuts.extend(QKeySequence.keyBindings(alt))
        elif t is Qt.Key:
            shortcuts.append(QKeySequence(alt))
        else:
            assert t is QKeySequence
            shortcuts.append(alt)

    # Ensure no duplicates (stable order since Python 3.7+)
    shortcuts = list(dict.fromkeys(shortcuts))

    return shortcuts


def keySequenceFromEvent(event: QKeyEvent) -> QKeySequence:
    return QKeySequence(event.keyCombination())


def centeredRect(outer: QRect, widthRatio: float, heightRatio: float) -> QRect:
    """
    Return a rectangle covering the given fractions of `outer`, centered in it.
    """
    width = max(1, int(outer.width() * widthRatio))
    height = max(1, int(outer.height() * heightRatio))
    x = outer.x() + (outer.width() - width) // 2
    y = outer.y() + (outer.height() - height) // 2
    return QRect(x, y, width, height)
