# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import signal
import sys

from blamesplit.qt import *

logger = logging.getLogger("blamesplit")

LOG_FORMAT = '%(levelname).1s %(asctime)s %(filename)-16s | %(message)s'


def excepthook(exctype, value, tb):
    # Log it (the root level is set from prefs), then tell the user
    logger.critical("Unhandled exception", exc_info=(exctype, value, tb))

    from blamesplit.toolbox import excMessageBox
    excMessageBox(value, printExc=False)


def stopOnSigint(app: QApplication) -> QTimer:
    """
    Quit on Ctrl+C. Quitting tears down every blame session,
    which stops any git process still running.
    """

    signal.signal(signal.SIGINT, lambda *_dummy: QTimer.singleShot(0, app.quit))

    # Python only runs signal handlers between bytecodes, so give it a chance
    # to run while Qt's event loop is idle
    pump = QTimer(app)
    pump.timeout.connect(lambda: None)
    pump.start(300)
    return pump


def main():
    # Default to WARNING until prefs are loaded (see applyLoggingLevelPref)
    logging.basicConfig(stream=sys.stderr, level=logging.WARNING, format=LOG_FORMAT, datefmt="%H:%M:%S")
    logging.captureWarnings(True)

    # Note that a debugger may override this hook
    sys.excepthook = excepthook

    from blamesplit.application import BlameSplitApplication
    app = BlameSplitApplication(sys.argv, __file__)
    stopOnSigint(app)

    app.beginSession()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
