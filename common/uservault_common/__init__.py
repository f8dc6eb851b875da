"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""

# Semantic version components
MAJOR = 0
MINOR = 1
PATCH = 0

# e.g. "alpha", "beta", "rc1", or None
PRE_RELEASE = "beta"

VERSION = (MAJOR, MINOR, PATCH, PRE_RELEASE)

__version__ = f"V{MAJOR}.{MINOR}.{PATCH}"

if PRE_RELEASE:
    __version__ += f"-{PRE_RELEASE}"
