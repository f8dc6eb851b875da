import os
import tempfile
import textwrap
import unittest
from unittest.mock import patch
from uservault_common.configuration.configuration import Configuration
from uservault_common.configuration.configuration_setup import (
    ConfigItemDataType,
    ConfigurationSetup,
    ConfigurationSetupItem)
from uservault_accounts.configuration_layout import CONFIGURATION_LAYOUT


class TestConfiguration(unittest.TestCase):
    def setUp(self):
        self.config = Configuration()

    def _write_config(self, contents: str) -> str:
        handle = tempfile.NamedTemporaryFile("w", suffix=".ini",
                                             delete=False)
        with handle:
            handle.write(textwrap.dedent(contents))
        self.addCleanup(os.remove, handle.name)
        return handle.name

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults_without_file(self):
        self.config.configure(CONFIGURATION_LAYOUT)
        self.config.process_config()

        self.assertEqual(self.config.get_entry("logging", "log_level"),
                         "INFO")
        self.assertEqual(self.config.get_entry("security", "bcrypt_rounds"),
                         12)
        self.assertFalse(self.config.get_entry("database", "create_schema"))

    @patch.dict(os.environ, {}, clear=True)
    def test_values_from_file(self):
        path = self._write_config("""
            [logging]
            log_level = DEBUG

            [security]
            bcrypt_rounds = 10

            [database]
            create_schema = yes
            """)

        self.config.configure(CONFIGURATION_LAYOUT, path, True)
        self.config.process_config()

        self.assertEqual(self.config.get_entry("logging", "log_level"),
                         "DEBUG")
        self.assertEqual(self.config.get_entry("security", "bcrypt_rounds"),
                         10)
        self.assertTrue(self.config.get_entry("database", "create_schema"))

    def test_environment_overrides_file(self):
        path = self._write_config("""
            [security]
            bcrypt_rounds = 10
            """)

        with patch.dict(os.environ, {"SECURITY_BCRYPT_ROUNDS": "14"},
                        clear=True):
            self.config.configure(CONFIGURATION_LAYOUT, path)
            self.config.process_config()

        self.assertEqual(self.config.get_entry("security", "bcrypt_rounds"),
                         14)

    @patch.dict(os.environ, {"SECURITY_BCRYPT_ROUNDS": "3"}, clear=True)
    def test_rounds_below_minimum_are_rejected(self):
        self.config.configure(CONFIGURATION_LAYOUT)
        with self.assertRaises(ValueError):
            self.config.process_config()

    @patch.dict(os.environ, {"SECURITY_BCRYPT_ROUNDS": "32"}, clear=True)
    def test_rounds_above_maximum_are_rejected(self):
        self.config.configure(CONFIGURATION_LAYOUT)
        with self.assertRaises(ValueError):
            self.config.process_config()

    @patch.dict(os.environ, {"LOGGING_LOG_LEVEL": "VERBOSE"}, clear=True)
    def test_invalid_log_level_is_rejected(self):
        self.config.configure(CONFIGURATION_LAYOUT)
        with self.assertRaises(ValueError):
            self.config.process_config()

    @patch.dict(os.environ, {"DATABASE_CREATE_SCHEMA": "perhaps"}, clear=True)
    def test_invalid_boolean_is_rejected(self):
        self.config.configure(CONFIGURATION_LAYOUT)
        with self.assertRaises(ValueError):
            self.config.process_config()

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_required_file(self):
        self.config.configure(CONFIGURATION_LAYOUT,
                              "/nonexistent/accounts.ini", True)
        with self.assertRaises(ValueError):
            self.config.process_config()

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_required_item(self):
        layout = ConfigurationSetup({
            "service": [ConfigurationSetupItem(
                "name", ConfigItemDataType.STRING, is_required=True)]
        })
        self.config.configure(layout)

        with self.assertRaises(ValueError):
            self.config.process_config()

    def test_process_without_layout(self):
        with self.assertRaises(RuntimeError):
            self.config.process_config()

    def test_configure_without_layout(self):
        with self.assertRaises(ValueError):
            self.config.configure(None)

    @patch.dict(os.environ, {}, clear=True)
    def test_unknown_entry(self):
        self.config.configure(CONFIGURATION_LAYOUT)
        self.config.process_config()

        with self.assertRaises(ValueError):
            self.config.get_entry("security", "unknown")
