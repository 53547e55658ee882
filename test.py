#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Run the BlameSplit test suite. Extra arguments go to pytest.

The blame tests drive a real git executable, so check for one up front
rather than letting every test fail on a spawn error.
"""

import argparse
import os
import shutil
import sys
from pathlib import Path

import pytest


def parseArgs():
    parser = argparse.ArgumentParser(description="Run the BlameSplit test suite",
                                     epilog="Additional arguments are forwarded to pytest (see: pytest --help).")
    parser.add_argument("--qt", default="pyqt6", choices=["pyqt6", "pyside6"], help="Qt bindings to use (pyqt6 by default)")
    parser.add_argument("--visual", action="store_true", help="show the editor windows while testing (implies -1)")
    parser.add_argument("-1", dest="single", action="store_true", help="run tests one at a time instead of in parallel")
    parser.add_argument("--cov", action="store_true", help="produce a coverage report for the blamesplit package")
    parser.add_argument("--git", default="git", metavar="PATH", help="git executable to test against")
    return parser.parse_known_args()


def run():
    os.chdir(Path(__file__).parent)
    args, pytestArgs = parseArgs()

    git = shutil.which(args.git)
    if not git:
        sys.exit(f"Can't find git executable {args.git!r}; the blame tests need it.")

    # Put the chosen git first on PATH, where GitDriver's default "git" resolves
    os.environ["PATH"] = os.pathsep.join([str(Path(git).parent), os.environ.get("PATH", "")])
    os.environ["PYTEST_QT_API"] = args.qt

    if args.visual:
        os.environ["TESTVISUAL"] = "1"
    else:
        os.environ["QT_QPA_PLATFORM"] = "offscreen"

    if not (args.single or args.visual):
        pytestArgs = ["-n", "auto"] + pytestArgs

    if args.cov:
        pytestArgs = ["--cov=blamesplit", "--cov-report=term"] + pytestArgs

    sys.exit(pytest.main(pytestArgs))


if __name__ == '__main__':
    run()
