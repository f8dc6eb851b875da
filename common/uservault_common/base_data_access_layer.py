"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import abc
import logging
from uservault_common.service_health_enums import ComponentDegradationLevel


class BaseDataAccessLayer(abc.ABC):
    """
    Common plumbing for asyncpg backed data access layers.

    Holds the per-request connection and a child logger, and keeps the
    shared state object's database health in step with the outcome of each
    query.
    """

    def __init__(self, db, logger: logging.Logger, state_object=None):
        self._db = db
        self._logger: logging.Logger = logger.getChild(__name__)
        self._state_object = state_object

    @staticmethod
    def _rows_affected(status: str) -> int:
        """
        Number of rows reported by an asyncpg command status string.

        ``Connection.execute`` returns tags such as ``"UPDATE 1"`` or
        ``"INSERT 0 1"``; the affected row count is always the last token.
        """
        if not status:
            return 0

        try:
            return int(status.split()[-1])

        except ValueError:
            return 0

    def _mark_database_healthy(self) -> None:
        if self._state_object is None:
            return

        self._state_object.database_health = ComponentDegradationLevel.NONE
        self._state_object.database_health_state_str = "Database operational"

    def _mark_database_degraded(self,
                                level: ComponentDegradationLevel,
                                details: str) -> None:
        if self._state_object is None:
            return

        self._state_object.database_health = level
        self._state_object.database_health_state_str = details
