"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from http import HTTPStatus
from pydantic import BaseModel, EmailStr, Field, field_validator
import quart
from uservault_common.errors import ServiceError
from uservault_accounts.api.account_api_view import AccountApiView
from uservault_accounts.models import User

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72

# bcrypt ignores everything past the first 72 bytes of a password.
PASSWORD_MAX_BYTES = 72


def check_password_bytes(password: str) -> str:
    """ Refuse passwords bcrypt would truncate once UTF-8 encoded. """
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} "
                         "bytes when UTF-8 encoded")
    return password


# --- Request Models ---
class CreateUserRequest(BaseModel):
    """
    Request model for creating an account.

    Attributes:
        email (EmailStr): Email address of the new account.
        full_name (str): Full name; normalised and used to derive the slug.
        password (str): Plaintext password, hashed before storage.
    """
    email: EmailStr
    full_name: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH,
                          max_length=PASSWORD_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class LoginEmailRequest(BaseModel):
    """
    Request model for logging in with email and password.

    Attributes:
        email (EmailStr): Email address of the account.
        password (str): Plaintext password to verify.
    """
    email: EmailStr
    password: str = Field(min_length=1)


class AuthApiView(AccountApiView):
    """
    Unauthenticated account endpoints: account creation and email/password
    login.
    """

    async def create_user(self):
        """
        Create a pending account.

        Returns:
            tuple: (JSON response, HTTP status code)
                - 201 Created: ``{"user": {...}}``.
                - 400 Bad Request: Invalid request body.
                - 409 Conflict: Email or slug already in use, the field is
                  named in the response.
        """
        try:
            req = await self._parse_request(CreateUserRequest)
            user = await self._account_service().create_user(
                User(email=req.email, full_name=req.full_name),
                req.password)

        except ServiceError as ex:
            return self._error_response(ex)

        return quart.jsonify({"user": user.to_dict()}), HTTPStatus.CREATED

    async def login_email(self):
        """
        Authenticate with email and password and return the profile.

        Returns:
            tuple: (JSON response, HTTP status code)
                - 200 OK: ``{"user": {...}}``.
                - 400 Bad Request: Invalid body or invalid password.
                - 404 Not Found: No live account for the email.
        """
        try:
            req = await self._parse_request(LoginEmailRequest)
            user = await self._account_service().authenticate(req.email,
                                                               req.password)

        except ServiceError as ex:
            return self._error_response(ex)

        return quart.jsonify({"user": user.to_dict()}), HTTPStatus.OK
