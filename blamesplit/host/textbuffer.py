# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Sequence
from typing import Any

from blamesplit.qt import *
from blamesplit.toolbox import makeMultiShortcut

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class KeyBinding:
    keys: list[QKeySequence]
    callback: Callable[[], Any]
    description: str = ""


class TextBuffer(QObject):
    """
    Content shown by one or more BufferViews.

    Wraps a QTextDocument, plus the metadata the editor keeps about it:
    display name, content type tag, file path, and buffer-scoped key bindings.
    """

    def __init__(self, parent: QObject, name: str, contentType: str = "", path: str = "", scratch: bool = True):
        super().__init__(parent)
        self.setObjectName(f"TextBuffer:{name}")

        self.name = name
        self.contentType = contentType
        self.path = path
        self.scratch = scratch
        self.modifiable = not scratch
        self.alive = True
        self.closing = False
        self.keyBindings: list[KeyBinding] = []

        self.document = QTextDocument(self)
        self.document.setDocumentLayout(QPlainTextDocumentLayout(self.document))
        self.document.setMetaInformation(QTextDocument.MetaInformation.DocumentTitle, name)

    def __repr__(self):
        return f"<TextBuffer {self.name!r}{' scratch' if self.scratch else ''}{'' if self.alive else ' dead'}>"

    def lines(self) -> list[str]:
        return self.document.toPlainText().split("\n")

    def lineCount(self) -> int:
        return self.document.blockCount()

    def replaceLines(self, lines: Sequence[str]):
        assert self.modifiable, "buffer isn't modifiable"
        self.document.setPlainText("\n".join(lines))
        self.document.setModified(False)

    def bindKeys(self, keys: str | Sequence[str], callback: Callable[[], Any], description: str = ""):
        if isinstance(keys, str):
            keys = [keys]
        sequences = makeMultiShortcut(list(keys))
        self.keyBindings.append(KeyBinding(sequences, callback, description))

    def findKeyBinding(self, sequence: QKeySequence) -> KeyBinding | None:
        # Later bindings take precedence over earlier ones
        for binding in reversed(self.keyBindings):
            if sequence in binding.keys:
                return binding
        return None
