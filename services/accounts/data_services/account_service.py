"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import logging
from uservault_common.errors import (bad_request,
                                     bad_request_hidden,
                                     forbidden,
                                     ServiceError)
from uservault_accounts.credential_manager import CredentialManager
from uservault_accounts.data_access_layer.account_store import AccountStore
from uservault_accounts.models import Credential, User, UserUpdate
from uservault_accounts.user_naming import (generate_slug,
                                            normalise_email,
                                            normalise_full_name)

FORBIDDEN_MESSAGE = "You do not have permission to modify this user's data"
INVALID_PASSWORD_MESSAGE = "invalid password"


class PasswordMismatchError(Exception):
    """ Internal cause attached to a failed authentication. """


class AccountService:
    """
    Account lifecycle operations on top of an ``AccountStore``.

    Self-service entry points (``update_profile``, ``change_password``,
    ``delete_user``) require the caller to be the target user and refuse
    before the store is touched otherwise. Their ``*_admin`` variants skip
    that check.
    """

    def __init__(self,
                 store: AccountStore,
                 credential_manager: CredentialManager,
                 logger: logging.Logger) -> None:
        self._store = store
        self._credentials = credential_manager
        self._logger = logger.getChild(__name__)

    async def get_user_by_identifier(self, identifier: str) -> User:
        """
        Resolve ``identifier`` as a numeric id if it parses as an integer,
        otherwise as a slug.
        """
        user_id = _parse_user_id(identifier)
        if user_id is not None:
            return await self._store.get_by_id(user_id)

        return await self._store.get_by_slug(identifier)

    async def authenticate(self, email: str, password: str) -> User:
        """
        Look the user up by email (which stamps the last login) and check
        the password.

        Raises:
            ServiceError: NOT_FOUND for an unknown or deleted account,
                BAD_REQUEST "invalid password" on a mismatch.
        """
        user, credential = await self._store.get_by_email(
            normalise_email(email))

        if not self._credentials.verify(credential.password_hash, password):
            self._logger.info("Password mismatch for user %s", user.id)
            raise bad_request_hidden(
                PasswordMismatchError(f"password mismatch for user {user.id}"),
                INVALID_PASSWORD_MESSAGE)

        return user

    async def create_user(self, profile: User, password: str) -> User:
        """
        Create a pending account and record its first password in the
        history.

        If recording the history fails the call fails even though the user
        row has been committed.
        """
        password_hash = self._credentials.hash(password)

        full_name = normalise_full_name(profile.full_name)
        slug = generate_slug(full_name)
        if not slug:
            raise bad_request("full name must contain letters or digits")

        new_user = User(email=normalise_email(profile.email),
                        slug=slug,
                        full_name=full_name,
                        avatar_url=profile.avatar_url,
                        bio=profile.bio)

        created = await self._store.create(new_user,
                                           Credential(password_hash))

        try:
            await self._store.append_password_history(created.id,
                                                      password_hash)

        except ServiceError:
            self._logger.error("User %s created but password history was "
                               "not recorded", created.id)
            raise

        return created

    async def confirm_user(self, user_id: int) -> None:
        await self._store.confirm(user_id)

    async def update_profile(self,
                             caller_id: int,
                             target_id: int,
                             update: UserUpdate) -> None:
        self._check_self_service(caller_id, target_id)
        await self.update_profile_admin(target_id, update)

    async def update_profile_admin(self,
                                   target_id: int,
                                   update: UserUpdate) -> None:
        """ Partial profile update without the caller identity check. """
        prepared = UserUpdate(avatar_url=update.avatar_url,
                              bio=update.bio)

        if update.full_name is not None:
            prepared.full_name = normalise_full_name(update.full_name)
            prepared.slug = generate_slug(prepared.full_name)
            if not prepared.slug:
                raise bad_request("full name must contain letters or digits")

        await self._store.update(target_id, prepared)

    async def change_password(self,
                              caller_id: int,
                              target_id: int,
                              password: str) -> None:
        self._check_self_service(caller_id, target_id)
        await self.change_password_admin(target_id, password)

    async def change_password_admin(self,
                                    target_id: int,
                                    password: str) -> None:
        """
        Rotate the credential of ``target_id``.

        The candidate is checked against the whole password history first;
        on reuse nothing is written. Otherwise the new hash becomes the
        active credential and is then appended to the history; a failed
        append fails the call although the credential has changed.
        """
        history = await self._store.list_password_history(target_id)
        self._credentials.check_reuse(password, history)

        password_hash = self._credentials.hash(password)
        await self._store.update_password_hash(target_id, password_hash)

        try:
            await self._store.append_password_history(target_id,
                                                      password_hash)

        except ServiceError:
            self._logger.error("Password of user %s changed but history was "
                               "not recorded", target_id)
            raise

    async def delete_user(self, caller_id: int, target_id: int) -> None:
        self._check_self_service(caller_id, target_id)
        await self.delete_user_admin(target_id)

    async def delete_user_admin(self, target_id: int) -> None:
        await self._store.soft_delete(target_id)

    def _check_self_service(self, caller_id: int, target_id: int) -> None:
        if caller_id != target_id:
            self._logger.warning("User %s attempted to modify user %s",
                                 caller_id, target_id)
            raise forbidden(FORBIDDEN_MESSAGE)


def _parse_user_id(identifier: str):
    try:
        return int(identifier)

    except (TypeError, ValueError):
        return None
