"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import enum
import typing
from dataclasses import dataclass


class ConfigItemDataType(enum.Enum):
    """ Data type a configuration item is parsed into """
    BOOLEAN = "bool"
    FLOAT = "float"
    INT = "int"
    STRING = "string"
    UNSIGNED_INT = "uint"


@dataclass(frozen=True)
class ConfigurationSetupItem:
    """
    Description of a single configuration key.

    Attributes:
        item_name: Key name within its section.
        item_type: Type the raw value is converted to.
        valid_values: Allowed values for string items, if restricted.
        is_required: Fail if no source provides a value and there is no
            default.
        default_value: Value used when no source provides one.
        min_value: Inclusive lower bound for numeric items.
        max_value: Inclusive upper bound for numeric items.
    """
    # pylint: disable=too-many-instance-attributes

    item_name: str
    item_type: ConfigItemDataType
    valid_values: typing.Optional[list] = None
    is_required: bool = False
    default_value: typing.Optional[object] = None
    min_value: typing.Optional[float] = None
    max_value: typing.Optional[float] = None


class ConfigurationSetup:
    """
    Configuration layout, keyed by section name.

    Each section maps to the list of ``ConfigurationSetupItem`` instances
    expected in it.
    """

    def __init__(self, setup_items: dict) -> None:
        if not isinstance(setup_items, dict):
            raise TypeError("setup_items must be a dict[str, "
                            "list[ConfigurationSetupItem]]")

        self._items = setup_items

    def get_sections(self) -> list:
        """ Names of all sections in the layout. """
        return list(self._items.keys())

    def get_section(self, name: str) -> list[ConfigurationSetupItem]:
        """ Items of section ``name``, or an empty list if it is unknown. """
        return self._items.get(name, [])
