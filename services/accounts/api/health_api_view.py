"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from http import HTTPStatus
import logging
import time
import quart
from uservault_common.base_api_view import BaseApiView
from uservault_common.service_health_enums import (ComponentDegradationLevel,
                                                   ServiceDegradationStatus)
from uservault_accounts.state_object import StateObject


class HealthApiView(BaseApiView):
    """
    Liveness probe reporting the health recorded in the state object.

    Attributes:
        _logger (logging.Logger): Logger instance for recording events.
        _state_object (StateObject): Shared state with health and version.
    """

    def __init__(self, logger: logging.Logger,
                 state_object: StateObject) -> None:
        self._logger = logger.getChild(__name__)
        self._state_object = state_object

    def _issues(self) -> list[dict]:
        components = (
            ("database", self._state_object.database_health,
             self._state_object.database_health_state_str),
            ("service", self._state_object.service_health,
             self._state_object.service_health_state_str),
        )

        return [{"component": name, "status": level.value, "details": details}
                for name, level, details in components
                if level != ComponentDegradationLevel.NONE]

    async def health(self):
        """
        Report overall status, per-component health, current issues, uptime
        and version. Always answers 200 while the process is alive.

        Returns:
            tuple: (JSON response, HTTP status code)
        """
        issues = self._issues()

        if not issues:
            status = ServiceDegradationStatus.HEALTHY
        elif any(issue["status"] ==
                 ComponentDegradationLevel.FULLY_DEGRADED.value
                 for issue in issues):
            status = ServiceDegradationStatus.CRITICAL
        else:
            status = ServiceDegradationStatus.DEGRADED

        if status != ServiceDegradationStatus.HEALTHY:
            self._logger.debug("Health check reports %s", status.value)

        response: dict = {
            "status": status.value,
            "dependencies": {
                "database": self._state_object.database_health.value,
                "service": self._state_object.service_health.value
            },
            "issues": issues or None,
            "uptime_seconds": int(time.time()) -
                              self._state_object.startup_time,
            "version": self._state_object.version
        }

        return quart.jsonify(response), HTTPStatus.OK
