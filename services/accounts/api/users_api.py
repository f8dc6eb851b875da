"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import logging
from quart import Blueprint
from uservault_accounts.api.users_api_view import UsersApiView
from uservault_accounts.credential_manager import CredentialManager
from uservault_accounts.state_object import StateObject


def create_blueprint(logger: logging.Logger,
                     state_object: StateObject,
                     credential_manager: CredentialManager) -> Blueprint:
    """
    Create the blueprint of the profile lookup and self-service routes.

    Args:
        logger (logging.Logger): Logger instance for logging messages.
        state_object (StateObject): Shared service state.
        credential_manager (CredentialManager): Password hashing policy.

    Returns:
        Blueprint: Blueprint with the user routes.
    """
    view = UsersApiView(logger, state_object, credential_manager)

    blueprint = Blueprint('users_api', __name__)

    logger.debug("Registering Users API routes:")

    logger.debug("=> /users/get_user_by_identifier [POST]")

    @blueprint.route("/get_user_by_identifier", methods=["POST"])
    async def users_get_by_identifier_request():
        return await view.get_user_by_identifier()

    logger.debug("=> /users/profile [GET]")

    @blueprint.route("/profile", methods=["GET"])
    async def users_profile_request():
        return await view.get_user_profile()

    logger.debug("=> /users/update_user [POST]")

    @blueprint.route("/update_user", methods=["POST"])
    async def users_update_request():
        return await view.update_user()

    logger.debug("=> /users/update_user_password [POST]")

    @blueprint.route("/update_user_password", methods=["POST"])
    async def users_update_password_request():
        return await view.update_user_password()

    logger.debug("=> /users/delete_user [POST]")

    @blueprint.route("/delete_user", methods=["POST"])
    async def users_delete_request():
        return await view.delete_user()

    return blueprint
