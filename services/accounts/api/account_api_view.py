"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import logging
import typing
import quart
from uservault_common.base_api_view import BaseApiView
from uservault_accounts.credential_manager import CredentialManager
from uservault_accounts.data_access_layer.account_store import AccountStore
from uservault_accounts.data_access_layer.user_data_access_layer import (
    UserDataAccessLayer)
from uservault_accounts.data_services.account_service import AccountService
from uservault_accounts.state_object import StateObject

# (connection, logger, state object) -> AccountStore
StoreFactory = typing.Callable[[typing.Any, logging.Logger, StateObject],
                               AccountStore]


class AccountApiView(BaseApiView):
    """
    Base of the views that serve account operations.

    An ``AccountService`` is assembled per request around the connection
    the ``before_request`` hook stored in ``quart.g.db``.
    """
    # pylint: disable=too-few-public-methods

    def __init__(self,
                 logger: logging.Logger,
                 state_object: StateObject,
                 credential_manager: CredentialManager,
                 store_factory: StoreFactory = UserDataAccessLayer) -> None:
        self._logger = logger.getChild(__name__)
        self._state_object = state_object
        self._credential_manager = credential_manager
        self._store_factory = store_factory

    def _account_service(self) -> AccountService:
        store = self._store_factory(quart.g.db, self._logger,
                                    self._state_object)
        return AccountService(store, self._credential_manager, self._logger)
