# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from blamesplit.host.bufferview import BufferView
from blamesplit.qt import *
from blamesplit.toolbox import centeredRect


class OverlayFrame(QFrame):
    """
    Floating frame over the editor area, holding a title and a BufferView.
    Follows the size of its parent widget.
    """

    def __init__(self, parent: QWidget, title: str, widthRatio: float, heightRatio: float):
        super().__init__(parent)
        self.setObjectName("OverlayFrame")

        self.widthRatio = widthRatio
        self.heightRatio = heightRatio

        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setFrameShadow(QFrame.Shadow.Raised)
        self.setAutoFillBackground(True)

        self.titleLabel = QLabel(title, self)
        self.titleLabel.setAlignment(Qt.AlignmentFlag.AlignCenter)
        font = self.titleLabel.font()
        font.setBold(True)
        self.titleLabel.setFont(font)

        self.view = BufferView(self)
        self.view.overlayFrame = self
        self.view.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(2)
        layout.addWidget(self.titleLabel)
        layout.addWidget(self.view)

        parent.installEventFilter(self)
        self.reposition()

    def title(self) -> str:
        return self.titleLabel.text()

    def reposition(self):
        self.setGeometry(centeredRect(self.parentWidget().rect(), self.widthRatio, self.heightRatio))

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self.reposition()
        return False
