"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from enum import Enum


class ServiceDegradationStatus(Enum):
    """ Overall status reported by the health endpoint """

    # All components report no degradation
    HEALTHY = "healthy"

    # At least one component is partially degraded
    DEGRADED = "degraded"

    # At least one component is fully degraded
    CRITICAL = "critical"


class ComponentDegradationLevel(Enum):
    """ Degradation level of a single component (database, service) """

    NONE = "none"
    PART_DEGRADED = "partial"
    FULLY_DEGRADED = "fully_degraded"
