"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from sqlalchemy import (BigInteger, Boolean, Column, DateTime, Identity,
                        Index, String, Text, text)
from .base import Base
from .created_updated_timestamp_mixin import CreatedUpdatedTimestampMixin

EMAIL_UNIQUE_INDEX = "uq_users_email"
SLUG_UNIQUE_INDEX = "uq_users_slug"


class User(CreatedUpdatedTimestampMixin, Base):
    """
    SQLAlchemy model of the ``users`` table.

    Rows are never physically removed: deletion sets ``deleted_at`` and every
    query of the service filters on ``deleted_at IS NULL``. Email and slug
    uniqueness is enforced by partial unique indexes over live rows only,
    so the identifiers of a deleted account can be taken again.

    Attributes:
        id (int): Primary key generated by the database.
        email (str): Lower-cased email address, unique among live users.
        slug (str): URL-safe identifier derived from ``full_name``, unique
            among live users.
        full_name (str): Normalised full name.
        avatar_url (str): Optional avatar URL.
        bio (str): Optional biography.
        role (str): ``unconfirmed`` until confirmed, then ``user``.
        is_verified (bool): Set when the account is confirmed.
        pass_hash (str): bcrypt hash of the active password.
        pass_updated_at (datetime): When the active password was last set
            through a password change.
        last_login_at (datetime): Stamped by every email lookup.
        deleted_at (datetime): Soft delete marker.
    """
    # pylint: disable=too-few-public-methods
    __tablename__ = "users"

    id = Column(BigInteger, Identity(always=False), primary_key=True)
    email = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    full_name = Column(String(128), nullable=False)
    avatar_url = Column(Text)
    bio = Column(Text)
    role = Column(String(32), nullable=False,
                  server_default=text("'unconfirmed'"))
    is_verified = Column(Boolean, nullable=False, server_default=text("false"))
    pass_hash = Column(String(128), nullable=False)
    pass_updated_at = Column(DateTime(timezone=True))
    last_login_at = Column(DateTime(timezone=True))
    deleted_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index(EMAIL_UNIQUE_INDEX, "email", unique=True,
              postgresql_where=text("deleted_at IS NULL")),
        Index(SLUG_UNIQUE_INDEX, "slug", unique=True,
              postgresql_where=text("deleted_at IS NULL")),
    )
