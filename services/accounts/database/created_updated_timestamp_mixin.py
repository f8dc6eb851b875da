"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from sqlalchemy import Column, DateTime, func


class CreatedUpdatedTimestampMixin:
    """
    SQLAlchemy mixin adding creation and update timestamps.

    Attributes:
        created_at (datetime): Set by the database when the row is inserted.
            Never changed afterwards.
        updated_at (datetime): NULL until the application records a profile
            mutation; it is written explicitly by the update query rather
            than refreshed on every write, so credential changes and login
            stamps leave it untouched.
    """
    # pylint: disable=too-few-public-methods
    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(),
                        nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
