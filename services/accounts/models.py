"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from dataclasses import dataclass, field
from datetime import datetime
import enum
import typing


class UserRole(enum.Enum):
    """ Role column values of the users table """
    UNCONFIRMED = "unconfirmed"
    USER = "user"


@dataclass
class User:
    """
    Account record as exposed by the service (never carries credentials).

    Attributes:
        id (int): Immutable numeric identity, assigned by the database.
        email (str): Unique (among live users) lower-cased email address.
        slug (str): Unique URL-safe identifier derived from ``full_name``.
        full_name (str): Normalised full name.
        avatar_url (Optional[str]): Avatar image URL.
        bio (Optional[str]): Free text biography.
        role (str): ``"unconfirmed"`` until confirmed, then ``"user"``.
        is_verified (bool): Set by confirmation.
        last_login_at (Optional[datetime]): Last successful email lookup.
        created_at (Optional[datetime]): Creation time.
        updated_at (Optional[datetime]): Last profile mutation time.
    """
    # pylint: disable=too-many-instance-attributes
    id: typing.Optional[int] = None
    email: str = ""
    slug: str = ""
    full_name: str = ""
    avatar_url: typing.Optional[str] = None
    bio: typing.Optional[str] = None
    role: str = UserRole.UNCONFIRMED.value
    is_verified: bool = False
    last_login_at: typing.Optional[datetime] = None
    created_at: typing.Optional[datetime] = None
    updated_at: typing.Optional[datetime] = None

    def to_dict(self) -> dict:
        """ Public profile projection, timestamps as ISO 8601 strings. """

        def _iso(value: typing.Optional[datetime]) -> typing.Optional[str]:
            return value.isoformat() if value else None

        return {
            "id": self.id,
            "email": self.email,
            "slug": self.slug,
            "full_name": self.full_name,
            "avatar_url": self.avatar_url,
            "bio": self.bio,
            "role": self.role,
            "is_verified": self.is_verified,
            "last_login_at": _iso(self.last_login_at),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class Credential:
    """ Password material of a user: the bcrypt hash, never plaintext. """
    password_hash: str
    updated_at: typing.Optional[datetime] = None

    def __repr__(self) -> str:
        return f"Credential(password_hash='***', updated_at={self.updated_at!r})"


@dataclass(frozen=True)
class PasswordHistoryEntry:
    """ One previously used password hash of a user. """
    password_hash: str
    created_at: datetime = field(compare=False)


@dataclass
class UserUpdate:
    """
    Partial profile update. A field left as None is absent from the
    request and must not be written.

    ``slug`` is derived from ``full_name`` by the service and is only
    meaningful when ``full_name`` is present.
    """
    avatar_url: typing.Optional[str] = None
    full_name: typing.Optional[str] = None
    bio: typing.Optional[str] = None
    slug: typing.Optional[str] = None

    def has_changes(self) -> bool:
        """ True if at least one profile field is present. """
        return any(value is not None for value in
                   (self.avatar_url, self.full_name, self.bio))
