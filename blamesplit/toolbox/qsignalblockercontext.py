# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import weakref

from blamesplit.qt import *


class QSignalBlockerContext:
    """
    Context manager that blocks the signals of several QObjects at once.
    Nested contexts on the same object only unblock it when the outermost one exits.
    """

    nestingLevels: dict[weakref.ReferenceType[QObject], int] = {}

    def __init__(self, *objectsToBlock: QObject):
        self.objectsToBlock = [weakref.ref(o) for o in objectsToBlock]

    def __enter__(self):
        for ref in self.objectsToBlock:
            o = ref()
            assert o is not None
            depth = self.nestingLevels.get(ref, 0) + 1
            self.nestingLevels[ref] = depth
            if depth == 1:
                o.blockSignals(True)
        return self

    def __exit__(self, excType, excValue, excTraceback):
        for ref in self.objectsToBlock:
            depth = self.nestingLevels.get(ref, 0) - 1
            assert depth >= 0
            o = ref()
            if depth == 0 or o is None:
                self.nestingLevels.pop(ref, None)
                if o is not None:
                    o.blockSignals(False)
            else:
                self.nestingLevels[ref] = depth
