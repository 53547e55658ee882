#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Stand-in for git that sleeps before handing over to the real git.

Usage: slow-git.py SECONDS [git arguments...]

SIGTERM while sleeping kills the shim before git ever runs,
which is what the cancellation and timeout tests rely on.
"""

import os
import shutil
import sys
import time

delay = float(sys.argv[1])
gitArgs = sys.argv[2:]

# Progress-style line (ends with CR) that GitJob must leave out of stderr
print(f"slow-git: waiting {delay:g} s", end="\r", file=sys.stderr, flush=True)
time.sleep(delay)

git = shutil.which("git")
if not git:
    print("slow-git: git not found", file=sys.stderr)
    sys.exit(127)

os.execv(git, [git] + gitArgs)
