"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from sqlalchemy import (BigInteger, Column, DateTime, ForeignKey, Identity,
                        Index, String, func)
from .base import Base


class UserPasswordHistory(Base):
    """
    SQLAlchemy model of ``users_password_history``.

    Append-only log of every password hash a user has had, including the
    one set at account creation. It is only read to refuse password reuse.

    Attributes:
        id (int): Primary key generated by the database.
        user_id (int): Owning user (``users.id``).
        pass_hash (str): bcrypt hash that was set.
        created_at (datetime): When the hash was recorded.
    """
    # pylint: disable=too-few-public-methods
    __tablename__ = "users_password_history"

    id = Column(BigInteger, Identity(always=False), primary_key=True)
    user_id = Column(BigInteger, ForeignKey("users.id"), nullable=False)
    pass_hash = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(),
                        nullable=False)

    __table_args__ = (
        Index("ix_users_password_history_user_id", "user_id"),
    )
