"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import logging
from quart import Blueprint
from uservault_common.route_decorators import route_not_using_db
from uservault_accounts.api.health_api_view import HealthApiView
from uservault_accounts.state_object import StateObject


def create_blueprint(logger: logging.Logger,
                     state_object: StateObject) -> Blueprint:
    """
    Create the blueprint of the liveness probe.

    The route is marked as not using the database so it answers even when
    no pooled connection can be acquired.

    Args:
        logger (logging.Logger): Logger used for route registration.
        state_object (StateObject): Service state reported by the probe.

    Returns:
        Blueprint: Blueprint with the ``/health`` route.
    """
    view = HealthApiView(logger, state_object)

    blueprint = Blueprint('health_api', __name__)

    logger.debug("Registering Health API routes:")
    logger.debug("=> /health [GET]")

    @blueprint.route('/health', methods=['GET'])
    @route_not_using_db
    async def health_request():
        return await view.health()

    return blueprint
