"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from uservault_common.configuration.configuration_setup import (
    ConfigItemDataType,
    ConfigurationSetup,
    ConfigurationSetupItem)
from uservault_common.logging_consts import LOGGING_VALID_LOG_LEVELS
from uservault_accounts.credential_manager import (DEFAULT_BCRYPT_ROUNDS,
                                                   MAX_BCRYPT_ROUNDS,
                                                   MIN_BCRYPT_ROUNDS)

CONFIGURATION_LAYOUT = ConfigurationSetup(
    {
        "logging": [
            ConfigurationSetupItem(
                "log_level", ConfigItemDataType.STRING,
                valid_values=LOGGING_VALID_LOG_LEVELS, default_value="INFO")
        ],
        "security": [
            ConfigurationSetupItem(
                "bcrypt_rounds", ConfigItemDataType.UNSIGNED_INT,
                default_value=DEFAULT_BCRYPT_ROUNDS,
                min_value=MIN_BCRYPT_ROUNDS, max_value=MAX_BCRYPT_ROUNDS)
        ],
        "database": [
            ConfigurationSetupItem(
                "create_schema", ConfigItemDataType.BOOLEAN,
                default_value=False)
        ],
    }
)
