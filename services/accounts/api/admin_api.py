"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import logging
from quart import Blueprint
from uservault_accounts.api.admin_api_view import AdminApiView
from uservault_accounts.credential_manager import CredentialManager
from uservault_accounts.state_object import StateObject


def create_blueprint(logger: logging.Logger,
                     state_object: StateObject,
                     credential_manager: CredentialManager) -> Blueprint:
    """
    Create the blueprint of the administrative routes.

    Args:
        logger (logging.Logger): Logger instance for logging messages.
        state_object (StateObject): Shared service state.
        credential_manager (CredentialManager): Password hashing policy.

    Returns:
        Blueprint: Blueprint with the admin routes.
    """
    view = AdminApiView(logger, state_object, credential_manager)

    blueprint = Blueprint('admin_api', __name__)

    logger.debug("Registering Admin API routes:")

    logger.debug("=> /admin/confirm_user [POST]")

    @blueprint.route("/confirm_user", methods=["POST"])
    async def admin_confirm_user_request():
        return await view.confirm_user()

    logger.debug("=> /admin/update_user [POST]")

    @blueprint.route("/update_user", methods=["POST"])
    async def admin_update_user_request():
        return await view.update_user()

    logger.debug("=> /admin/update_user_password [POST]")

    @blueprint.route("/update_user_password", methods=["POST"])
    async def admin_update_user_password_request():
        return await view.update_user_password()

    logger.debug("=> /admin/delete_user [POST]")

    @blueprint.route("/delete_user", methods=["POST"])
    async def admin_delete_user_request():
        return await view.delete_user()

    return blueprint
