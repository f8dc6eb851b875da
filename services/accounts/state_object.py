"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import time
from dataclasses import dataclass, field
from uservault_common.service_health_enums import ComponentDegradationLevel


@dataclass
class StateObject:
    """
    Process-wide health and identity of the accounts service.

    The account store updates the database fields after each query and the
    health endpoint reports them.

    Attributes:
        service_health (ComponentDegradationLevel): Health of the service.
        service_health_state_str (str): Description of the service health.
        database_health (ComponentDegradationLevel): Health of PostgreSQL
                                                     as last observed.
        database_health_state_str (str): Description of the database health.
        version (str): Version string of the service.
        startup_time (int): Unix time at which the service started.
    """
    service_health: ComponentDegradationLevel = ComponentDegradationLevel.NONE
    service_health_state_str: str = ""
    database_health: ComponentDegradationLevel = ComponentDegradationLevel.NONE
    database_health_state_str: str = ""
    version: str = ""
    startup_time: int = field(default_factory=lambda: int(time.time()))
