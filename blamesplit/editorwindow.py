# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os

from blamesplit.blame import BlameViewer
from blamesplit.contenttypes import ContentTypes
from blamesplit.host.bufferview import BufferView
from blamesplit.host.editorhost import NotifyLevel
from blamesplit.host.qthost import QtEditorHost
from blamesplit.localization import *
from blamesplit.qt import *
from blamesplit.settings import prefs
from blamesplit.toolbox import ShortcutKeys, asyncMessageBox, makeMultiShortcut, splitOutputLines

logger = logging.getLogger(__name__)


class EditorWindow(QMainWindow):
    """
    Minimal text editor hosting the blame viewer: one primary view in a
    horizontal splitter, plus whatever splits and overlays the blame viewer opens.
    """

    statusMessageTimeouts = {
        NotifyLevel.Debug: 3000,
        NotifyLevel.Info: 5000,
        NotifyLevel.Warning: 10000,
        NotifyLevel.Error: 0,
    }

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("EditorWindow")
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)

        # Overlays float over this widget, outside the splitter's layout
        editorArea = QWidget(self)
        editorArea.setObjectName("EditorArea")
        self.splitter = QSplitter(Qt.Orientation.Horizontal, editorArea)
        self.splitter.setChildrenCollapsible(False)
        layout = QVBoxLayout(editorArea)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.splitter)
        self.setCentralWidget(editorArea)

        self.host = QtEditorHost(self)
        self.blameViewer = BlameViewer(self.host, self)

        self.primaryView = BufferView(self.splitter)
        self.primaryView.setObjectName("PrimaryView")
        self.splitter.addWidget(self.primaryView)
        self.host.registerView(self.primaryView)
        self._lastFocusedView = self.primaryView

        QApplication.instance().focusChanged.connect(self.onFocusChanged)

        self.fillMenuBar()
        self.newFile()

        self.resize(1200, 800)

    def fillMenuBar(self):
        menuBar = self.menuBar()

        fileMenu = menuBar.addMenu(_("&File"))
        fileMenu.setObjectName("FileMenu")
        self.newAction = self.makeAction(fileMenu, _("&New"), self.newFile, QKeySequence.StandardKey.New)
        self.openAction = self.makeAction(fileMenu, _("&Open…"), self.openFileDialog, QKeySequence.StandardKey.Open)
        self.saveAction = self.makeAction(fileMenu, _("&Save"), self.saveFile, QKeySequence.StandardKey.Save)
        fileMenu.addSeparator()
        self.makeAction(fileMenu, _("&Quit"), self.close, QKeySequence.StandardKey.Quit)

        viewMenu = menuBar.addMenu(_("&View"))
        viewMenu.setObjectName("ViewMenu")
        self.blameAction = self.makeAction(viewMenu, _("&Blame"), self.openBlame, prefs.openBlameKey)
        self.toggleSyncAction = self.makeAction(viewMenu, _("Toggle &Cursor Sync"), self.toggleSync)

    def makeAction(self, menu: QMenu, text: str, callback, *keys: ShortcutKeys) -> QAction:
        action = QAction(text, self)
        action.triggered.connect(lambda: callback())
        if keys:
            action.setShortcuts(makeMultiShortcut(list(keys)))
        menu.addAction(action)
        return action

    # -------------------------------------------------------------------------
    # Files

    def currentFileBuffer(self):
        return self.host.viewBuffer(self.primaryView)

    def releasePrimaryBuffer(self):
        """ Close any blame session on the primary view, then drop its file buffer. """
        session = self.blameViewer.registry.findBySourceView(self.primaryView)
        if session is not None:
            self.blameViewer.closeBlame(session)

        oldBuffer = self.host.viewBuffer(self.primaryView)
        if self.host.isBufferValid(oldBuffer):
            self.host.destroyBuffer(oldBuffer)

    def newFile(self):
        self.releasePrimaryBuffer()
        buffer = self.host.createBuffer(_("Untitled"), scratch=False)
        self.host.setViewBuffer(self.primaryView, buffer)
        self.host.focusView(self.primaryView)

    def openFileDialog(self):
        path, _dummy = QFileDialog.getOpenFileName(self, _("Open File"))
        if path:
            self.openFile(path)

    def openFile(self, path: str) -> bool:
        path = os.path.abspath(path)

        try:
            with open(path, encoding="utf-8", errors="replace") as file:
                text = file.read()
        except OSError as exc:
            logger.warning(f"Couldn't open {path}: {exc}")
            qmb = asyncMessageBox(self, 'warning', _("Open File"),
                                  _("Couldn’t open {0}: {1}", os.path.basename(path), exc.strerror or str(exc)))
            qmb.show()
            return False

        self.releasePrimaryBuffer()

        buffer = self.host.createBuffer(os.path.basename(path), ContentTypes.forPath(path),
                                        splitOutputLines(text), path=path, scratch=False)
        self.host.setViewBuffer(self.primaryView, buffer)
        self.host.focusView(self.primaryView)
        logger.info(f"Opened {path}")
        return True

    def saveFile(self, path: str = "") -> bool:
        buffer = self.currentFileBuffer()
        if not self.host.isBufferValid(buffer) or buffer.scratch:
            self.host.notify(_("This buffer can’t be saved."), NotifyLevel.Warning)
            return False

        path = path or buffer.path
        if not path:
            path, _dummy = QFileDialog.getSaveFileName(self, _("Save File"))
            if not path:
                return False

        with open(path, "w", encoding="utf-8") as file:
            file.write("\n".join(buffer.lines()) + "\n")

        buffer.path = os.path.abspath(path)
        buffer.name = os.path.basename(path)
        buffer.contentType = ContentTypes.forPath(path)
        buffer.document.setModified(False)
        self.onViewBufferChanged(self.primaryView)
        self.host.notify(_("Saved {0}.", buffer.name))
        return True

    # -------------------------------------------------------------------------
    # Blame actions

    def openBlame(self):
        return self.blameViewer.openBlame()

    def toggleSync(self):
        if self.blameViewer.toggleSync() is None:
            self.host.notify(f"{prefs.messagePrefix} " + _("Blame isn’t open here."), NotifyLevel.Warning)

    # -------------------------------------------------------------------------
    # Split management (called by QtEditorHost)

    def insertSplit(self, view: BufferView, left: bool, widthPx: int):
        index = 0 if left else self.splitter.count()
        self.splitter.insertWidget(index, view)

        sizes = self.splitter.sizes()
        total = sum(sizes) or self.splitter.width()
        if widthPx <= 0 or widthPx >= total:
            widthPx = total // 2

        index = self.splitter.indexOf(view)
        others = sum(size for i, size in enumerate(sizes) if i != index) or 1
        remaining = max(0, total - widthPx)
        newSizes = [widthPx if i == index else size * remaining // others
                    for i, size in enumerate(sizes)]
        self.splitter.setSizes(newSizes)

    def removeSplit(self, view: BufferView):
        view.hide()
        view.setParent(None)

    # -------------------------------------------------------------------------
    # Focus tracking

    def onFocusChanged(self, old: QWidget | None, new: QWidget | None):
        if isinstance(new, BufferView) and self.host.isViewValid(new):
            self._lastFocusedView = new

    def rememberFocus(self, view: BufferView):
        self._lastFocusedView = view

    def lastFocusedView(self) -> BufferView:
        if self.host.isViewValid(self._lastFocusedView):
            return self._lastFocusedView
        return self.primaryView

    def restoreFocus(self):
        view = self.lastFocusedView()
        view.setFocus(Qt.FocusReason.OtherFocusReason)

    # -------------------------------------------------------------------------
    # Feedback

    def onViewBufferChanged(self, view: BufferView):
        if view is self.primaryView and view.buffer is not None:
            self.setWindowTitle(f"{view.buffer.name} - {qAppName()}")

    def showStatusMessage(self, message: str, level: NotifyLevel):
        self.statusBar().showMessage(message, self.statusMessageTimeouts.get(level, 0))

    def closeEvent(self, event: QCloseEvent):
        self.blameViewer.teardownAll()
        super().closeEvent(event)
