"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import abc
from uservault_accounts.models import (Credential,
                                       PasswordHistoryEntry,
                                       User,
                                       UserUpdate)


class AccountStore(abc.ABC):
    """
    Persistence contract used by the account service.

    Every operation only sees users that have not been soft deleted.
    Failures are raised as ``ServiceError``: NOT_FOUND for a lookup miss or
    a mutation that affected no row, ALREADY_EXISTS for uniqueness
    violations and INTERNAL for storage faults.
    """

    @abc.abstractmethod
    async def get_by_id(self, user_id: int) -> User:
        """ User with ``user_id``. """

    @abc.abstractmethod
    async def get_by_slug(self, slug: str) -> User:
        """ User with ``slug``. """

    @abc.abstractmethod
    async def get_by_email(self, email: str) -> tuple[User, Credential]:
        """
        User and credential for ``email``; also stamps ``last_login_at``.
        Failing to write the stamp fails the lookup.
        """

    @abc.abstractmethod
    async def create(self, user: User, credential: Credential) -> User:
        """
        Insert a new user, returning it with id, role and timestamps set.
        ALREADY_EXISTS names the colliding field (``email`` or ``slug``).
        """

    @abc.abstractmethod
    async def confirm(self, user_id: int) -> None:
        """ Move the user to the confirmed role and mark it verified. """

    @abc.abstractmethod
    async def update(self, user_id: int, update: UserUpdate) -> None:
        """ Write the fields present in ``update``. """

    @abc.abstractmethod
    async def update_password_hash(self,
                                   user_id: int,
                                   password_hash: str) -> None:
        """ Replace the active credential. """

    @abc.abstractmethod
    async def soft_delete(self, user_id: int) -> None:
        """ Mark the user deleted. """

    @abc.abstractmethod
    async def append_password_history(self,
                                      user_id: int,
                                      password_hash: str) -> None:
        """ Append ``password_hash`` to the user's password history. """

    @abc.abstractmethod
    async def list_password_history(self,
                                    user_id: int
                                    ) -> list[PasswordHistoryEntry]:
        """ Full password history of the user, oldest first. """
