"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from pydantic import BaseModel
from uservault_common.errors import ServiceError
from uservault_accounts.api.account_api_view import AccountApiView
from uservault_accounts.api.users_api_view import (DeleteUserRequest,
                                                   UpdateUserPasswordRequest,
                                                   UpdateUserRequest)


class ConfirmUserRequest(BaseModel):
    """
    Attributes:
        user_id (int): Id of the pending user to confirm.
    """
    user_id: int


class AdminApiView(AccountApiView):
    """
    Administrative account endpoints.

    No caller identity match is required here; the gateway only routes
    administrators to these endpoints.
    """

    async def confirm_user(self):
        """ Move a pending account to the confirmed state. """
        try:
            req = await self._parse_request(ConfirmUserRequest)
            await self._account_service().confirm_user(req.user_id)

        except ServiceError as ex:
            return self._error_response(ex)

        return self._acknowledge()

    async def update_user(self):
        try:
            req = await self._parse_request(UpdateUserRequest)
            await self._account_service().update_profile_admin(
                req.id, req.to_update())

        except ServiceError as ex:
            return self._error_response(ex)

        return self._acknowledge()

    async def update_user_password(self):
        try:
            req = await self._parse_request(UpdateUserPasswordRequest)
            await self._account_service().change_password_admin(
                req.id, req.password)

        except ServiceError as ex:
            return self._error_response(ex)

        return self._acknowledge()

    async def delete_user(self):
        try:
            req = await self._parse_request(DeleteUserRequest)
            await self._account_service().delete_user_admin(req.id)

        except ServiceError as ex:
            return self._error_response(ex)

        return self._acknowledge()
