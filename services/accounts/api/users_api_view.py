"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from http import HTTPStatus
import typing
from pydantic import BaseModel, Field, field_validator
import quart
from uservault_common.errors import ServiceError
from uservault_accounts.api.account_api_view import AccountApiView
from uservault_accounts.api.auth_api_view import (check_password_bytes,
                                                  PASSWORD_MAX_LENGTH,
                                                  PASSWORD_MIN_LENGTH)
from uservault_accounts.models import UserUpdate


# --- Request Models ---
class GetUserByIdentifierRequest(BaseModel):
    """
    Attributes:
        identifier (str): Numeric user id or slug.
    """
    identifier: str = Field(min_length=1, max_length=255)


class UpdateUserRequest(BaseModel):
    """
    Partial profile update. Omitted (or null) fields are left unchanged.

    Attributes:
        id (int): Id of the user to update.
        avatar_url (Optional[str]): New avatar URL.
        full_name (Optional[str]): New full name, the slug follows it.
        bio (Optional[str]): New biography.
    """
    id: int
    avatar_url: typing.Optional[str] = Field(default=None, max_length=2048)
    full_name: typing.Optional[str] = Field(default=None, min_length=1,
                                            max_length=128)
    bio: typing.Optional[str] = Field(default=None, max_length=4096)

    def to_update(self) -> UserUpdate:
        return UserUpdate(avatar_url=self.avatar_url,
                          full_name=self.full_name,
                          bio=self.bio)


class UpdateUserPasswordRequest(BaseModel):
    """
    Attributes:
        id (int): Id of the user whose password changes.
        password (str): New plaintext password.
    """
    id: int
    password: str = Field(min_length=PASSWORD_MIN_LENGTH,
                          max_length=PASSWORD_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class DeleteUserRequest(BaseModel):
    """
    Attributes:
        id (int): Id of the user to delete.
    """
    id: int


class UsersApiView(AccountApiView):
    """
    Profile lookups and the self-service mutations.

    Mutations take the caller id from the ``X-User-Id`` header set by the
    gateway and only act on the caller's own record.
    """

    async def get_user_by_identifier(self):
        """
        Public profile lookup by numeric id or slug.

        Returns:
            tuple: (JSON response, HTTP status code)
                - 200 OK: ``{"user": {...}}``.
                - 404 Not Found: No live user matches.
        """
        try:
            req = await self._parse_request(GetUserByIdentifierRequest)
            user = await self._account_service().get_user_by_identifier(
                req.identifier)

        except ServiceError as ex:
            return self._error_response(ex)

        return quart.jsonify({"user": user.to_dict()}), HTTPStatus.OK

    async def get_user_profile(self):
        """ Profile of the caller. """
        try:
            caller_id = self._caller_id()
            user = await self._account_service().get_user_by_identifier(
                str(caller_id))

        except ServiceError as ex:
            return self._error_response(ex)

        return quart.jsonify({"user": user.to_dict()}), HTTPStatus.OK

    async def update_user(self):
        """
        Partial update of the caller's profile.

        Returns:
            tuple: (JSON response, HTTP status code)
                - 200 OK: ``{}``.
                - 403 Forbidden: ``id`` is not the caller.
                - 404 Not Found: The user does not exist.
        """
        try:
            caller_id = self._caller_id()
            req = await self._parse_request(UpdateUserRequest)
            await self._account_service().update_profile(caller_id, req.id,
                                                         req.to_update())

        except ServiceError as ex:
            return self._error_response(ex)

        return self._acknowledge()

    async def update_user_password(self):
        """
        Change the caller's password; previously used passwords are
        refused with 400.
        """
        try:
            caller_id = self._caller_id()
            req = await self._parse_request(UpdateUserPasswordRequest)
            await self._account_service().change_password(caller_id, req.id,
                                                          req.password)

        except ServiceError as ex:
            return self._error_response(ex)

        return self._acknowledge()

    async def delete_user(self):
        """ Soft delete the caller's account. """
        try:
            caller_id = self._caller_id()
            req = await self._parse_request(DeleteUserRequest)
            await self._account_service().delete_user(caller_id, req.id)

        except ServiceError as ex:
            return self._error_response(ex)

        return self._acknowledge()
