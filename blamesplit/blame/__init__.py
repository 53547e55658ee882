# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from .cursorsync import CursorSynchronizer
from .detailviewer import DetailViewer
from .lifecycle import BlameTarget, BlameValidationError, BlameViewer
from .navigator import RevisionNavigator
from .renderer import BlameRenderer
from .revision import MIN_REVISION_CHARS, extractRevisionId, shortRevision
from .session import BlameSession, BlameSessionRegistry
