# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import traceback

from blamesplit.localization import *
from blamesplit.qt import *
from blamesplit.toolbox.textutils import escape

logger = logging.getLogger(__name__)

MessageBoxIconName = str


def asyncMessageBox(
        parent: QWidget | None,
        icon: MessageBoxIconName,
        title: str,
        text: str,
        buttons=QMessageBox.StandardButton.NoButton,
        deleteOnClose=True,
) -> QMessageBox:
    icons = {
        'information': QMessageBox.Icon.Information,
        'warning': QMessageBox.Icon.Warning,
        'critical': QMessageBox.Icon.Critical,
        'question': QMessageBox.Icon.Question,
    }

    qmb = QMessageBox(icons.get(icon, QMessageBox.Icon.NoIcon), title, text, buttons, parent)
    qmb.setWindowModality(Qt.WindowModality.WindowModal)
    if deleteOnClose:
        qmb.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
    if buttons == QMessageBox.StandardButton.NoButton:
        qmb.setStandardButtons(QMessageBox.StandardButton.Ok)
    return qmb


def excMessageBox(
        exc: BaseException,
        title: str = "",
        message: str = "",
        parent: QWidget | None = None,
        printExc: bool = True,
        icon: MessageBoxIconName = 'critical',
):
    if printExc:
        logger.error(message or "Unhandled exception", exc_info=exc)

    # Without a QApplication, there's nothing more we can do
    if not QApplication.instance():
        return

    if not title:
        title = _("Unhandled exception")
    if not message:
        message = _("An unexpected error occurred.")

    summary = traceback.format_exception_only(type(exc), exc)
    details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    qmb = asyncMessageBox(parent, icon, title, f"<p>{message}</p><p><small>{escape(''.join(summary))}</small></p>")
    qmb.setDetailedText(details)

    if APP_TESTMODE:
        # Don't block unit tests on a modal dialog
        logger.warning(f"excMessageBox suppressed in test mode: {title}")
        qmb.deleteLater()
        return

    qmb.show()
