from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from kmipexplorer.runtime import config


class ConfigBehaviorTests(unittest.TestCase):
    def test_theme_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("kmipexplorer.runtime.config.CONFIG_PATH", config_path):
                self.assertIsNone(config.load_theme_name())
                config.save_theme_name("  ocean ")
                self.assertEqual(config.load_theme_name(), "ocean")
                self.assertTrue(config_path.exists())

    def test_malformed_file_reads_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("[1, 2", encoding="utf-8")
            with mock.patch("kmipexplorer.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})

    def test_connection_defaults_keep_non_empty_strings(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("kmipexplorer.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"addr": "kmip.local:5696", "cert": " ", "key": 3, "theme": "ocean"})
                self.assertEqual(config.load_connection_defaults(), {"addr": "kmip.local:5696"})

    def test_save_failure_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("", encoding="utf-8")
            with mock.patch("kmipexplorer.runtime.config.CONFIG_PATH", blocker / "config.json"):
                config.save_config({"theme": "ocean"})
                self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
