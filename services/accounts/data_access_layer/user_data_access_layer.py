"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import contextlib
from datetime import datetime, timezone
import typing
import asyncpg
from uservault_common.base_data_access_layer import BaseDataAccessLayer
from uservault_common.errors import (already_exists,
                                     internal,
                                     not_found,
                                     ServiceError)
from uservault_common.service_health_enums import ComponentDegradationLevel
from uservault_accounts.data_access_layer.account_store import AccountStore
from uservault_accounts.database.user import (EMAIL_UNIQUE_INDEX,
                                              SLUG_UNIQUE_INDEX)
from uservault_accounts.models import (Credential,
                                       PasswordHistoryEntry,
                                       User,
                                       UserRole,
                                       UserUpdate)

USER_COLUMNS = ("id, email, slug, full_name, avatar_url, bio, role, "
                "is_verified, last_login_at, created_at, updated_at")

# Unique index name -> user field it protects.
UNIQUE_INDEX_FIELDS = {
    EMAIL_UNIQUE_INDEX: "email",
    SLUG_UNIQUE_INDEX: "slug",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _record_to_user(record) -> User:
    return User(id=record["id"],
                email=record["email"],
                slug=record["slug"],
                full_name=record["full_name"],
                avatar_url=record["avatar_url"],
                bio=record["bio"],
                role=record["role"],
                is_verified=record["is_verified"],
                last_login_at=record["last_login_at"],
                created_at=record["created_at"],
                updated_at=record["updated_at"])


class UserDataAccessLayer(BaseDataAccessLayer, AccountStore):
    """
    asyncpg implementation of ``AccountStore`` over the ``users`` and
    ``users_password_history`` tables.

    The layer works on the connection acquired for the current request.
    Storage faults are converted into INTERNAL ``ServiceError`` instances
    and reflected in the database health of the state object.
    """

    @contextlib.contextmanager
    def _storage_operation(self, operation: str) -> typing.Iterator[None]:
        """
        Translate asyncpg failures raised while running ``operation``.
        ``ServiceError`` instances raised inside the block pass through.
        """
        try:
            yield
            self._mark_database_healthy()

        except ServiceError:
            self._mark_database_healthy()
            raise

        except asyncpg.IntegrityConstraintViolationError as ex:
            self._logger.debug("Constraint violation during %s: %s",
                               operation, getattr(ex, "constraint_name", ""))
            self._mark_database_healthy()
            raise internal(ex) from ex

        except (asyncpg.PostgresConnectionError,
                asyncpg.InterfaceError,
                OSError) as ex:
            self._logger.exception("Database connection error during %s",
                                   operation)
            self._mark_database_degraded(
                ComponentDegradationLevel.FULLY_DEGRADED,
                "Database unreachable")
            raise internal(ex) from ex

        except asyncpg.PostgresError as ex:
            self._logger.exception("Database error during %s: %s",
                                   operation, ex)
            self._mark_database_degraded(
                ComponentDegradationLevel.PART_DEGRADED,
                "Database operation failed")
            raise internal(ex) from ex

    async def get_by_id(self, user_id: int) -> User:
        with self._storage_operation("user lookup by id"):
            record = await self._db.fetchrow(
                f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE id = $1 AND deleted_at IS NULL
                """,
                user_id)

            if record is None:
                raise not_found("user", "id", user_id)

            return _record_to_user(record)

    async def get_by_slug(self, slug: str) -> User:
        with self._storage_operation("user lookup by slug"):
            record = await self._db.fetchrow(
                f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE slug = $1 AND deleted_at IS NULL
                """,
                slug)

            if record is None:
                raise not_found("user", "slug", slug)

            return _record_to_user(record)

    async def get_by_email(self, email: str) -> tuple[User, Credential]:
        # Lookup and last-login stamp are one statement: the lookup cannot
        # succeed without the stamp being written.
        with self._storage_operation("user lookup by email"):
            record = await self._db.fetchrow(
                f"""
                UPDATE users
                SET last_login_at = $2
                WHERE email = $1 AND deleted_at IS NULL
                RETURNING {USER_COLUMNS}, pass_hash, pass_updated_at
                """,
                email, _utc_now())

            if record is None:
                self._logger.debug("No live user for email %s", email)
                raise not_found("user", "email", email)

            return (_record_to_user(record),
                    Credential(password_hash=record["pass_hash"],
                               updated_at=record["pass_updated_at"]))

    async def create(self, user: User, credential: Credential) -> User:
        try:
            with self._storage_operation("user creation"):
                record = await self._db.fetchrow(
                    """
                    INSERT INTO users(email, slug, full_name, avatar_url,
                                      bio, pass_hash)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    RETURNING id, role, is_verified, created_at
                    """,
                    user.email, user.slug, user.full_name, user.avatar_url,
                    user.bio, credential.password_hash)

        except ServiceError as ex:
            field = self._colliding_field(ex.cause)
            if field is None:
                raise

            self._logger.info("Rejected user creation, %s already in use",
                              field)
            raise already_exists("user", field, getattr(user, field)) from ex

        created = User(id=record["id"],
                       email=user.email,
                       slug=user.slug,
                       full_name=user.full_name,
                       avatar_url=user.avatar_url,
                       bio=user.bio,
                       role=record["role"] or UserRole.UNCONFIRMED.value,
                       is_verified=record["is_verified"],
                       created_at=record["created_at"])
        self._logger.info("Created user %s (%s)", created.slug, created.id)
        return created

    @staticmethod
    def _colliding_field(cause) -> typing.Optional[str]:
        if not isinstance(cause, asyncpg.UniqueViolationError):
            return None

        field = UNIQUE_INDEX_FIELDS.get(getattr(cause, "constraint_name", None))
        if field:
            return field

        # Fall back to the "Key (column)=(value)" detail text.
        detail = getattr(cause, "detail", None) or ""
        for candidate in UNIQUE_INDEX_FIELDS.values():
            if f"({candidate})" in detail:
                return candidate

        return None

    async def confirm(self, user_id: int) -> None:
        with self._storage_operation("user confirmation"):
            status = await self._db.execute(
                """
                UPDATE users
                SET role = $2, is_verified = TRUE
                WHERE id = $1 AND deleted_at IS NULL
                """,
                user_id, UserRole.USER.value)

            if self._rows_affected(status) == 0:
                raise not_found("user", "id", user_id)

        self._logger.info("Confirmed user %s", user_id)

    async def update(self, user_id: int, update: UserUpdate) -> None:
        args: list = [user_id]
        assignments: list[str] = []

        def _assign(column: str, value) -> None:
            args.append(value)
            assignments.append(f"{column} = ${len(args)}")

        if update.avatar_url is not None:
            _assign("avatar_url", update.avatar_url)

        if update.full_name is not None:
            _assign("full_name", update.full_name)
            _assign("slug", update.slug)

        if update.bio is not None:
            _assign("bio", update.bio)

        if update.has_changes():
            _assign("updated_at", _utc_now())
        else:
            # Nothing to write: still confirm the row exists.
            assignments.append("id = id")

        try:
            with self._storage_operation("user update"):
                status = await self._db.execute(
                    f"""
                    UPDATE users
                    SET {", ".join(assignments)}
                    WHERE id = $1 AND deleted_at IS NULL
                    """,
                    *args)

                if self._rows_affected(status) == 0:
                    raise not_found("user", "id", user_id)

        except ServiceError as ex:
            if self._colliding_field(ex.cause) != "slug":
                raise
            raise already_exists("user", "slug", update.slug) from ex

    async def update_password_hash(self,
                                   user_id: int,
                                   password_hash: str) -> None:
        with self._storage_operation("password update"):
            status = await self._db.execute(
                """
                UPDATE users
                SET pass_hash = $2, pass_updated_at = $3
                WHERE id = $1 AND deleted_at IS NULL
                """,
                user_id, password_hash, _utc_now())

            if self._rows_affected(status) == 0:
                raise not_found("user", "id", user_id)

        self._logger.info("Updated password of user %s", user_id)

    async def soft_delete(self, user_id: int) -> None:
        with self._storage_operation("user deletion"):
            status = await self._db.execute(
                """
                UPDATE users
                SET deleted_at = $2
                WHERE id = $1 AND deleted_at IS NULL
                """,
                user_id, _utc_now())

            if self._rows_affected(status) == 0:
                raise not_found("user", "id", user_id)

        self._logger.info("Soft deleted user %s", user_id)

    async def append_password_history(self,
                                      user_id: int,
                                      password_hash: str) -> None:
        with self._storage_operation("password history append"):
            status = await self._db.execute(
                """
                INSERT INTO users_password_history(user_id, pass_hash)
                VALUES ($1, $2)
                """,
                user_id, password_hash)

            if self._rows_affected(status) == 0:
                raise internal(None, "password history was not recorded")

    async def list_password_history(self,
                                    user_id: int
                                    ) -> list[PasswordHistoryEntry]:
        with self._storage_operation("password history lookup"):
            records = await self._db.fetch(
                """
                SELECT pass_hash, created_at
                FROM users_password_history
                WHERE user_id = $1
                ORDER BY created_at, id
                """,
                user_id)

        return [PasswordHistoryEntry(password_hash=record["pass_hash"],
                                     created_at=record["created_at"])
                for record in records]
