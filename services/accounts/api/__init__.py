"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import logging
import quart
from uservault_accounts.credential_manager import CredentialManager
from uservault_accounts.state_object import StateObject
from .admin_api import create_blueprint as create_admin_bp
from .auth_api import create_blueprint as create_auth_bp
from .health_api import create_blueprint as create_health_bp
from .users_api import create_blueprint as create_users_bp


def create_routes(logger: logging.Logger,
                  state_object: StateObject,
                  credential_manager: CredentialManager) -> quart.Blueprint:
    """
    Create the API blueprint of the accounts service and register the
    sub-blueprints under their prefixes.

    Args:
        logger (logging.Logger): Logger instance for logging within the APIs.
        state_object (StateObject): Shared service state.
        credential_manager (CredentialManager): Password hashing policy.

    Returns:
        quart.Blueprint: The configured API blueprint.
    """
    api_bp = quart.Blueprint("api_routes", __name__)

    api_bp.register_blueprint(create_auth_bp(logger, state_object,
                                             credential_manager),
                              url_prefix="/auth")
    api_bp.register_blueprint(create_users_bp(logger, state_object,
                                              credential_manager),
                              url_prefix="/users")
    api_bp.register_blueprint(create_admin_bp(logger, state_object,
                                              credential_manager),
                              url_prefix="/admin")
    api_bp.register_blueprint(create_health_bp(logger, state_object))

    return api_bp
