"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import configparser
import os
import typing
from uservault_common.configuration.configuration_setup import (
    ConfigItemDataType,
    ConfigurationSetup,
    ConfigurationSetupItem)

TRUE_STRINGS = {"1", "true", "yes", "on"}
FALSE_STRINGS = {"0", "false", "no", "off"}


class Configuration:
    """
    Typed configuration built from an optional INI file overlaid by
    environment variables.

    For every item of the layout the value is taken from the environment
    variable ``SECTION_ITEM`` (upper case) first, then from the INI file,
    then from the item default.
    """

    def __init__(self):
        self._parser = configparser.ConfigParser()
        self._config_file: typing.Optional[str] = None
        self._has_config_file: bool = False
        self._config_file_required: bool = False
        self._layout: typing.Optional[ConfigurationSetup] = None
        self._config_items: dict[str, dict[str, typing.Any]] = {}

        self._converters: dict[ConfigItemDataType,
                               typing.Callable[[str, ConfigurationSetupItem,
                                                typing.Any], typing.Any]] = {
            ConfigItemDataType.BOOLEAN: self._to_bool,
            ConfigItemDataType.FLOAT: self._to_float,
            ConfigItemDataType.INT: self._to_int,
            ConfigItemDataType.STRING: self._to_str,
            ConfigItemDataType.UNSIGNED_INT: self._to_uint,
        }

    def configure(self,
                  layout: ConfigurationSetup,
                  config_file: typing.Optional[str] = None,
                  file_required: bool = False) -> None:
        """
        Set the layout and the optional configuration file.

        Args:
            layout: Schema of the configuration (required).
            config_file: Path of an INI file to read (optional).
            file_required: Fail processing if the file cannot be read.
        """
        if layout is None:
            raise ValueError("Configuration layout cannot be None.")

        self._layout = layout
        self._config_file = config_file
        self._config_file_required = file_required

    def process_config(self) -> None:
        """
        Read the file (if any) and resolve every item of the layout.

        Raises:
            RuntimeError: ``configure`` was not called first.
            ValueError: The file is unreadable or malformed, or an item is
                missing or invalid.
        """
        if self._layout is None:
            raise RuntimeError("Configuration layout must be set before "
                               "processing.")

        if self._config_file:
            try:
                files_read = self._parser.read(self._config_file)

            except configparser.Error as ex:
                raise ValueError(f"[ConfigError] Failed to parse file "
                                 f"'{self._config_file}': {ex}") from ex

            if not files_read and self._config_file_required:
                raise ValueError(f"[ConfigError] Required config file "
                                 f"'{self._config_file}' could not be "
                                 "opened.")

            self._has_config_file = bool(files_read)

        for section in self._layout.get_sections():
            values = self._config_items.setdefault(section, {})

            for item in self._layout.get_section(section):
                converter = self._converters.get(item.item_type)
                if converter is None:
                    raise ValueError(f"[ConfigError] Unsupported type "
                                     f"'{item.item_type}' for "
                                     f"'{section}::{item.item_name}'")

                raw = self._raw_value(section, item)
                values[item.item_name] = None if raw is None \
                    else converter(section, item, raw)

    def get_entry(self, section: str, item: str) -> typing.Any:
        """
        Resolved value of ``section::item``.

        Raises:
            ValueError: The key is not part of the processed layout.
        """
        try:
            return self._config_items[section][item]

        except KeyError as ex:
            raise ValueError(f"[ConfigError] Invalid key "
                             f"'{section}::{item}'") from ex

    def _raw_value(self,
                   section: str,
                   item: ConfigurationSetupItem) -> typing.Any:
        value = os.getenv(f"{section}_{item.item_name}".upper())

        if value is None and self._has_config_file:
            value = self._parser.get(section, item.item_name, fallback=None)

        if value is None:
            value = item.default_value

        if value is None and item.is_required:
            raise ValueError(f"[ConfigError] Missing required "
                             f"'{section}::{item.item_name}'")

        return value

    @staticmethod
    def _to_str(section: str, item: ConfigurationSetupItem, raw) -> str:
        value = str(raw)

        if item.valid_values and value not in item.valid_values:
            raise ValueError(f"[ConfigError] '{section}::{item.item_name}' "
                             f"has invalid value '{value}', expected one of "
                             f"{item.valid_values}")
        return value

    @staticmethod
    def _to_bool(section: str, item: ConfigurationSetupItem, raw) -> bool:
        if isinstance(raw, bool):
            return raw

        lowered = str(raw).strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False

        raise ValueError(f"[ConfigError] '{section}::{item.item_name}' has "
                         f"invalid boolean '{raw}'")

    @staticmethod
    def _check_range(section: str, item: ConfigurationSetupItem, value):
        if item.min_value is not None and value < item.min_value:
            raise ValueError(f"[ConfigError] '{section}::{item.item_name}' "
                             f"value {value} is below minimum "
                             f"{item.min_value}")

        if item.max_value is not None and value > item.max_value:
            raise ValueError(f"[ConfigError] '{section}::{item.item_name}' "
                             f"value {value} is above maximum "
                             f"{item.max_value}")
        return value

    def _to_int(self, section: str, item: ConfigurationSetupItem, raw) -> int:
        try:
            value = int(raw)

        except (ValueError, TypeError) as ex:
            raise ValueError(f"[ConfigError] '{section}::{item.item_name}' "
                             f"has invalid int '{raw}'") from ex

        return self._check_range(section, item, value)

    def _to_uint(self, section: str, item: ConfigurationSetupItem, raw) -> int:
        value = self._to_int(section, item, raw)

        if value < 0:
            raise ValueError(f"[ConfigError] '{section}::{item.item_name}' "
                             f"has invalid unsigned int '{value}'")
        return value

    def _to_float(self,
                  section: str,
                  item: ConfigurationSetupItem,
                  raw) -> float:
        try:
            value = float(raw)

        except (ValueError, TypeError) as ex:
            raise ValueError(f"[ConfigError] '{section}::{item.item_name}' "
                             f"has invalid float '{raw}'") from ex

        return self._check_range(section, item, value)
