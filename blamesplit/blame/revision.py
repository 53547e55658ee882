# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import re

from blamesplit.settings import prefs

MIN_REVISION_CHARS = 7

_leadingHexPattern = re.compile(r"^[0-9a-fA-F]+")


def extractRevisionId(line: str | None) -> str | None:
    """
    Return the revision id at the start of a blame line,
    or None if the line doesn't start with enough hex digits.
    """
    if not line:
        return None

    match = _leadingHexPattern.match(line)
    if not match:
        return None

    revision = match.group(0)
    if len(revision) < MIN_REVISION_CHARS:
        return None

    return revision


def shortRevision(revision: str, length: int = 0) -> str:
    return revision[:length or prefs.shortHashChars]
