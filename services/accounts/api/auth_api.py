"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import logging
from quart import Blueprint
from uservault_accounts.api.auth_api_view import AuthApiView
from uservault_accounts.credential_manager import CredentialManager
from uservault_accounts.state_object import StateObject


def create_blueprint(logger: logging.Logger,
                     state_object: StateObject,
                     credential_manager: CredentialManager) -> Blueprint:
    """
    Create the blueprint of the unauthenticated account endpoints.

    Args:
        logger (logging.Logger): Logger instance for logging messages.
        state_object (StateObject): Shared service state.
        credential_manager (CredentialManager): Password hashing policy.

    Returns:
        Blueprint: Blueprint with the ``create_user`` and ``login_email``
                   routes.
    """
    view = AuthApiView(logger, state_object, credential_manager)

    blueprint = Blueprint('auth_api', __name__)

    logger.debug("Registering Auth API routes:")

    logger.debug("=> /auth/create_user [POST]")

    @blueprint.route("/create_user", methods=["POST"])
    async def auth_create_user_request():
        return await view.create_user()

    logger.debug("=> /auth/login_email [POST]")

    @blueprint.route("/login_email", methods=["POST"])
    async def auth_login_email_request():
        return await view.login_email()

    return blueprint
