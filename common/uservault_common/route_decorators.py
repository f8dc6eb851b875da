"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""

NO_DB_ATTRIBUTE = "_no_db"


def route_not_using_db(func):
    """
    Mark a route handler as not needing a pooled database connection.

    The ``before_request`` hook of the service looks for this marker on the
    resolved view function and skips acquiring a connection, so endpoints
    such as the health check keep answering while the database is down.

    Args:
        func (Callable): The route handler function to decorate.

    Returns:
        Callable: The same function with the marker attribute set.
    """
    setattr(func, NO_DB_ATTRIBUTE, True)
    return func


def is_route_not_using_db(func) -> bool:
    """ Return True if ``func`` was decorated with ``route_not_using_db``. """
    return bool(getattr(func, NO_DB_ATTRIBUTE, False))
