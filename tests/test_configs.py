"""
Tests for config loading and validation in `cmdrisk.core.configs`.
"""

import os
import unittest
import tempfile
from pathlib import Path
from unittest.mock import patch

from cmdrisk.core.configs import (
    DEFAULT_BLOCKED_COMMANDS,
    DEFAULT_PROTECTED_PATHS,
    get_safety_settings,
    load_raw_config,
)


class TestLoadRawConfig(unittest.TestCase):
    """Test cases for raw config loading."""

    def setUp(self):
        """Set up test environment with temporary directories."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = Path(self.temp_dir) / "config.cfg"
        self.env_file = Path(self.temp_dir) / ".env"

    def tearDown(self):
        """Clean up temporary files."""
        import shutil

        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, *, defaults: dict, safety: dict) -> None:
        import configparser

        cfg = configparser.ConfigParser(interpolation=None)
        cfg["DEFAULT"] = defaults
        cfg["SAFETY"] = safety
        with open(self.config_file, "w") as handle:
            cfg.write(handle)

    def test_load_raw_config_lowercases_keys(self):
        self._write_config(
            defaults={"SHELL": "bash"},
            safety={"CONFIRM_THRESHOLD": "dangerous", "BLOCKED_COMMANDS": "shutdown, halt"},
        )

        with patch.dict(os.environ, {}, clear=True):
            raw = load_raw_config(self.config_file, env_path=self.env_file)
        self.assertEqual(raw["shell"], "bash")
        self.assertEqual(raw["confirm_threshold"], "dangerous")
        self.assertEqual(raw["blocked_commands"], "shutdown, halt")

    def test_load_raw_config_missing_file_returns_empty_dict(self):
        self.assertFalse(self.config_file.exists())
        with patch.dict(os.environ, {}, clear=True):
            raw = load_raw_config(self.config_file, env_path=self.env_file)
        self.assertEqual(raw, {}, "Should return empty dict when config does not exist")

    def test_dotenv_overrides_file(self):
        self._write_config(defaults={}, safety={"confirm_threshold": "safe"})
        self.env_file.write_text("CMDRISK_CONFIRM_THRESHOLD=dangerous\nMAX_AFFECTED_FILES=5\n")

        with patch.dict(os.environ, {}, clear=True):
            raw = load_raw_config(self.config_file, env_path=self.env_file)
        self.assertEqual(raw["confirm_threshold"], "dangerous")
        self.assertEqual(raw["max_affected_files"], "5")

    def test_environment_overrides_everything(self):
        self._write_config(defaults={}, safety={"require_confirmation": "true"})
        self.env_file.write_text("CMDRISK_REQUIRE_CONFIRMATION=true\n")

        with patch.dict(os.environ, {"CMDRISK_REQUIRE_CONFIRMATION": "false"}, clear=True):
            raw = load_raw_config(self.config_file, env_path=self.env_file)
        self.assertEqual(raw["require_confirmation"], "false")


class TestGetSafetySettings(unittest.TestCase):
    """Test cases for SafetySettings parsing."""

    def test_defaults(self):
        settings = get_safety_settings({})
        self.assertEqual(settings.blocked_commands, DEFAULT_BLOCKED_COMMANDS)
        self.assertEqual(settings.protected_paths, DEFAULT_PROTECTED_PATHS)
        self.assertEqual(settings.allowed_paths, [])
        self.assertEqual(settings.confirm_threshold, "caution")
        self.assertTrue(settings.require_confirmation)
        self.assertEqual(settings.path_violation_level, "caution")
        self.assertEqual(settings.max_affected_files, 100)

    def test_defaults_are_not_shared(self):
        first = get_safety_settings({})
        first.blocked_commands.append("halt")
        self.assertNotIn("halt", get_safety_settings({}).blocked_commands)

    def test_list_parsing(self):
        settings = get_safety_settings({
            "blocked_commands": "shutdown, init 0 ,\nhalt",
            "allowed_paths": "~/projects,/tmp",
        })
        self.assertEqual(settings.blocked_commands, ["shutdown", "init 0", "halt"])
        self.assertEqual(settings.allowed_paths, ["~/projects", "/tmp"])

    def test_empty_value_clears_list(self):
        settings = get_safety_settings({"protected_paths": ""})
        self.assertEqual(settings.protected_paths, [])

    def test_boolean_parsing(self):
        self.assertFalse(get_safety_settings({"require_confirmation": "no"}).require_confirmation)
        self.assertTrue(get_safety_settings({"require_confirmation": "Yes"}).require_confirmation)
        self.assertTrue(get_safety_settings({"require_confirmation": ""}).require_confirmation)

    def test_values_are_normalised(self):
        settings = get_safety_settings({
            "confirm_threshold": " Dangerous ",
            "path_violation_level": "DANGEROUS",
            "max_affected_files": "25",
        })
        self.assertEqual(settings.confirm_threshold, "dangerous")
        self.assertEqual(settings.path_violation_level, "dangerous")
        self.assertEqual(settings.max_affected_files, 25)

    def test_invalid_values_raise_with_key_name(self):
        cases = {
            "confirm_threshold": "critical",
            "path_violation_level": "safe",
            "max_affected_files": "lots",
        }
        for key, value in cases.items():
            with self.subTest(key=key):
                with self.assertRaises(ValueError) as context:
                    get_safety_settings({key: value})
                self.assertIn(key, str(context.exception))

    def test_negative_max_affected_files_raises(self):
        with self.assertRaises(ValueError):
            get_safety_settings({"max_affected_files": "-1"})


if __name__ == "__main__":
    unittest.main()
