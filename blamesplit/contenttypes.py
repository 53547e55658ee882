# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os.path

import pygments.lexers
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

PlainText = "text"
BlameContentType = "gitblame"
CommitContentType = "gitcommit"

# Override Pygments priorities for ambiguous extensions
extensionDisambiguations = {
    ".h": "c",
    ".hh": "cpp",
    ".html": "html",
    ".m": "objective-c",
    ".pl": "perl",
    ".s": "gas",
    ".sql": "sql",
    ".v": "verilog",
    ".xml": "xml",
}


class ContentTypes:
    """
    Maps file paths to a content type tag (a Pygments lexer alias).
    """

    cache: dict[str, str] = {}
    " Content type by file extension or verbatim file name "

    @classmethod
    def forPath(cls, path: str) -> str:
        if not path:
            return PlainText

        fileName = os.path.basename(path)
        _dummy, ext = os.path.splitext(fileName)
        key = ext or fileName

        try:
            return cls.cache[key]
        except KeyError:
            pass

        contentType = extensionDisambiguations.get(ext, "")

        if not contentType:
            try:
                # Only the file name is passed in, the file itself is never read
                lexer = pygments.lexers.get_lexer_for_filename(fileName)
                contentType = lexer.aliases[0] if lexer.aliases else lexer.name.lower()
            except ClassNotFound:
                contentType = PlainText

        logger.debug(f"Content type for {key}: {contentType}")
        cls.cache[key] = contentType
        return contentType
