"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import asyncio
import logging
import os
import sys
import typing
from uservault_common import __version__
from uservault_common.configuration.configuration import (Configuration,
                                                          FALSE_STRINGS,
                                                          TRUE_STRINGS)
from uservault_common.base_microservice_application \
    import BaseMicroserviceApplication
from uservault_common.logging_consts import LOGGING_DATETIME_FORMAT_STRING, \
                                            LOGGING_DEFAULT_LOG_LEVEL, \
                                            LOGGING_LOG_FORMAT_STRING
from uservault_accounts.api import create_routes
from uservault_accounts.configuration_layout import CONFIGURATION_LAYOUT
from uservault_accounts.credential_manager import CredentialManager
from uservault_accounts.state_object import StateObject


class Application(BaseMicroserviceApplication):
    """ UserVault Accounts Service """

    def __init__(self, quart_instance):
        super().__init__()
        self._quart_instance = quart_instance
        self._config: typing.Optional[Configuration] = None
        self._state_object: StateObject = StateObject()
        self._credential_manager: typing.Optional[CredentialManager] = None

        self._logger = logging.getLogger(__name__)
        log_format = logging.Formatter(LOGGING_LOG_FORMAT_STRING,
                                       LOGGING_DATETIME_FORMAT_STRING)
        console_stream = logging.StreamHandler(sys.stdout)
        console_stream.setFormatter(log_format)
        self._logger.setLevel(LOGGING_DEFAULT_LOG_LEVEL)
        self._logger.propagate = True
        self._logger.addHandler(console_stream)

    @property
    def state_object(self) -> StateObject:
        return self._state_object

    @property
    def create_schema_on_startup(self) -> bool:
        """ Value of ``database::create_schema`` once initialised. """
        if self._config is None:
            return False
        return bool(self._config.get_entry("database", "create_schema"))

    async def _initialise(self) -> bool:
        self._logger.info("UserVault Accounts Microservice %s", __version__)

        config_file = os.getenv("USERVAULT_ACCOUNTS_CONFIG_FILE", None)
        raw_required = os.getenv("USERVAULT_ACCOUNTS_CONFIG_FILE_REQUIRED",
                                 "false").strip().lower()

        if raw_required in TRUE_STRINGS:
            config_file_required: bool = True
        elif raw_required in FALSE_STRINGS:
            config_file_required: bool = False
        else:
            print(f"[FATAL ERROR] Invalid value for "
                  f"USERVAULT_ACCOUNTS_CONFIG_FILE_REQUIRED: '{raw_required}'",
                  flush=True)
            return False

        if not config_file and config_file_required:
            print("[FATAL ERROR] Configuration file missing!", flush=True)
            return False

        self._config = Configuration()
        self._config.configure(CONFIGURATION_LAYOUT,
                               config_file,
                               config_file_required)

        try:
            self._config.process_config()

        except ValueError as ex:
            self._logger.critical("Configuration error : %s", ex)
            return False

        self._logger.setLevel(self._config.get_entry("logging", "log_level"))

        self._display_configuration_details()

        self._state_object.version = __version__

        self._credential_manager = CredentialManager(
            self._logger,
            rounds=self._config.get_entry("security", "bcrypt_rounds"))

        self._quart_instance.register_blueprint(
            create_routes(self._logger, self._state_object,
                          self._credential_manager))

        return True

    async def _main_loop(self) -> None:
        """ Nothing runs in the background; requests are served by Quart. """
        await asyncio.sleep(0.1)

    async def _shutdown(self):
        """ Shutdown logic. """

    def _display_configuration_details(self):
        self._logger.info("Configuration")
        self._logger.info("=============")
        self._logger.info("[logging]")
        self._logger.info("=> Logging log level              : %s",
                          self._config.get_entry("logging", "log_level"))
        self._logger.info("[security]")
        self._logger.info("=> bcrypt rounds                  : %s",
                          self._config.get_entry("security", "bcrypt_rounds"))
        self._logger.info("[database]")
        self._logger.info("=> Create schema on startup       : %s",
                          self._config.get_entry("database", "create_schema"))
