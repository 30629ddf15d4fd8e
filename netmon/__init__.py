#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Library shared by the netmon active checks.

Every check is a single shot process: fetch a value, compare it against its
levels, print one status line and exit with the state as exit code.
"""

__version__ = "1.0.0"
