# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from html import escape as escape

from blamesplit.localization import *


def tquo(text: str) -> str:
    """ Quote plain text with language-dependent typographic quotes. """
    return _("“{0}”").format(text)


def splitOutputLines(text: str) -> list[str]:
    """
    Split process output into lines.
    Only a single trailing empty line (the final newline) is dropped;
    blank lines inside the text are kept.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def firstLine(text: str) -> str:
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line
    return ""
