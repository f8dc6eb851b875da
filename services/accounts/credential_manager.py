"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import logging
import typing
from passlib.exc import PasswordValueError
from passlib.hash import bcrypt
from uservault_common.errors import bad_request, bad_request_hidden, internal
from uservault_accounts.models import PasswordHistoryEntry

DEFAULT_BCRYPT_ROUNDS = 12
MIN_BCRYPT_ROUNDS = 4
MAX_BCRYPT_ROUNDS = 31

PASSWORD_ALREADY_USED_MESSAGE = "this password is already used"
PASSWORD_NOT_ACCEPTED_MESSAGE = \
    "password contains characters that are not allowed"


class PasswordReusedError(Exception):
    """ Internal cause attached when a candidate matches a history entry. """


class CredentialManager:
    """
    Password hashing, verification and the reuse policy over the password
    history of a user.

    The bcrypt cost is fixed when the manager is constructed and never
    derived from the data being hashed.
    """

    def __init__(self,
                 logger: logging.Logger,
                 rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        if not MIN_BCRYPT_ROUNDS <= rounds <= MAX_BCRYPT_ROUNDS:
            raise ValueError(f"bcrypt rounds must be between "
                             f"{MIN_BCRYPT_ROUNDS} and {MAX_BCRYPT_ROUNDS}, "
                             f"got {rounds}")

        self._logger = logger.getChild(__name__)
        self._rounds = rounds
        self._hasher = bcrypt.using(rounds=rounds)

    @property
    def rounds(self) -> int:
        """ bcrypt cost factor used for new hashes. """
        return self._rounds

    def hash(self, plaintext: str) -> str:
        """
        Salted bcrypt hash of ``plaintext``.

        Raises:
            ServiceError: BAD_REQUEST if bcrypt refuses the password (e.g. it
                contains a NUL byte), INTERNAL if the hashing backend fails.
        """
        try:
            return self._hasher.hash(plaintext)

        except PasswordValueError as ex:
            raise bad_request(PASSWORD_NOT_ACCEPTED_MESSAGE) from ex

        except (ValueError, TypeError) as ex:
            self._logger.error("Password hashing failed: %s",
                               type(ex).__name__)
            raise internal(ex) from ex

    def verify(self, password_hash: str, plaintext: str) -> bool:
        """
        Check ``plaintext`` against ``password_hash``.

        Any failure, including a missing or malformed hash, counts as a
        mismatch.
        """
        if not password_hash:
            return False

        try:
            return bool(bcrypt.verify(plaintext, password_hash))

        except PasswordValueError:
            # bcrypt could never have stored such a password.
            return False

        except (ValueError, TypeError):
            self._logger.warning("Stored password hash could not be parsed")
            return False

    def check_reuse(self,
                    plaintext: str,
                    history: typing.Iterable[PasswordHistoryEntry]) -> None:
        """
        Reject ``plaintext`` if it matches any hash in ``history``.

        Entries are checked in order and the check stops at the first match.

        Raises:
            ServiceError: BAD_REQUEST with a generic message on reuse.
        """
        for position, entry in enumerate(history):
            if self.verify(entry.password_hash, plaintext):
                cause = PasswordReusedError(
                    f"candidate matches history entry {position} created "
                    f"{entry.created_at}")
                raise bad_request_hidden(cause, PASSWORD_ALREADY_USED_MESSAGE)
