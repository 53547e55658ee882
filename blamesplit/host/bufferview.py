# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

from blamesplit.host.textbuffer import TextBuffer
from blamesplit.qt import *
from blamesplit.settings import prefs
from blamesplit.toolbox import keySequenceFromEvent

logger = logging.getLogger(__name__)


class BufferView(QPlainTextEdit):
    """
    Plain text view onto a TextBuffer.

    Key presses matching one of the buffer's key bindings are routed
    to the binding instead of the text editor.
    """

    cursorMoved = Signal(object)

    buffer: TextBuffer | None

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("BufferView")

        self.buffer = None
        self.overlayFrame = None
        self._blankDocument = QTextDocument(self)
        self._blankDocument.setDocumentLayout(QPlainTextDocumentLayout(self._blankDocument))

        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.setFont(prefs.monoFont())
        self.setDocument(self._blankDocument)

        self.cursorPositionChanged.connect(lambda: self.cursorMoved.emit(self))

    def __repr__(self):
        return f"<BufferView {self.buffer!r}>"

    def setBuffer(self, buffer: TextBuffer | None):
        self.buffer = buffer

        if buffer is None:
            self.setDocument(self._blankDocument)
            self.setReadOnly(True)
            return

        self.setDocument(buffer.document)
        self.setReadOnly(not buffer.modifiable)
        # Keep the font: setDocument() resets the document's default font
        self.document().setDefaultFont(self.font())

    def line(self) -> int:
        return self.textCursor().blockNumber() + 1

    def setLine(self, line: int):
        document = self.document()
        line = max(1, min(line, document.blockCount()))
        cursor = QTextCursor(document.findBlockByNumber(line - 1))
        self.setTextCursor(cursor)
        self.ensureCursorVisible()

    def keyPressEvent(self, event: QKeyEvent):
        if self.buffer is not None and self.buffer.keyBindings:
            sequence = keySequenceFromEvent(event)
            binding = self.buffer.findKeyBinding(sequence)
            if binding is not None:
                logger.debug(f"Key {sequence.toString()} in {self.buffer.name}: {binding.description}")
                event.accept()
                binding.callback()
                return

        super().keyPressEvent(event)
