"""Tests for config file loading and priority."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from spanhive import config
from spanhive.errors import ConfigError


class TestConfigFileLoading(unittest.TestCase):
    """Test TOML config file loading."""

    def _write(self, directory, text, name="spanhive.toml"):
        path = Path(directory) / name
        path.write_text(text)
        return path

    def test_load_toml_config_basic(self):
        """Test loading a basic TOML config file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write(tmpdir, """
[tracing]
service_name = "billing"
sample_rate = 20

[exporters]
enable_console = true
""")
            loaded = config.load_toml_config(str(path))
            self.assertEqual(loaded["tracing"]["service_name"], "billing")
            self.assertEqual(loaded["tracing"]["sample_rate"], 20)
            self.assertTrue(loaded["exporters"]["enable_console"])

    def test_load_toml_config_missing_file(self):
        """Test that loading missing file returns empty dict."""
        self.assertEqual(config.load_toml_config("/nonexistent/file.toml"), {})

    def test_load_toml_config_invalid_toml(self):
        """Test that invalid TOML raises ConfigError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write(tmpdir, "invalid [toml content")
            with self.assertRaises(ConfigError):
                config.load_toml_config(str(path))

    def test_find_config_file_in_directory(self):
        """Test finding a config file in the given directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write(tmpdir, "[tracing]\n")
            self.assertEqual(config.find_config_file(tmpdir), path)

    def test_find_config_file_resolves_home_at_call_time(self):
        """Test that the user config file is looked up under the home directory current at call time."""
        with tempfile.TemporaryDirectory() as home, tempfile.TemporaryDirectory() as cwd:
            user_dir = Path(home) / ".spanhive"
            user_dir.mkdir()
            path = self._write(user_dir, "[tracing]\n", name="config.toml")
            with mock.patch.object(Path, "home", return_value=Path(home)):
                self.assertEqual(config.find_config_file(cwd), path)

    def test_find_config_file_without_home(self):
        """Test that a missing home directory means no user config file."""
        with tempfile.TemporaryDirectory() as cwd:
            with mock.patch.object(Path, "home", side_effect=RuntimeError("no home")):
                self.assertIsNone(config.user_config_file())
                self.assertIsNone(config.find_config_file(cwd))

    def test_load_config_from_file(self):
        """Test that load_config() reads settings from an explicit file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write(tmpdir, "[tracing]\nsample_rate = 5\nsample_excludes_child_spans = true\n")
            loaded = config.load_config(str(path), environ={})
            self.assertEqual(loaded.tracing.sample_rate, 5)
            self.assertTrue(loaded.tracing.sample_excludes_child_spans)
            self.assertFalse(loaded.exporters.enable_console)


class TestConfigPriority(unittest.TestCase):
    """Environment overrides the file, keyword overrides win over both."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "spanhive.toml")
        with open(self.path, "w") as fh:
            fh.write('[tracing]\nservice_name = "from-file"\nsample_rate = 2\n')

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_env_overrides_file(self):
        """Test that environment variables override the config file."""
        loaded = config.load_config(
            self.path,
            environ={"SPANHIVE_SAMPLE_RATE": "8", "SPANHIVE_DEBUG": "true"},
        )
        self.assertEqual(loaded.tracing.service_name, "from-file")
        self.assertEqual(loaded.tracing.sample_rate, 8)
        self.assertTrue(loaded.tracing.debug)

    def test_overrides_win(self):
        """Test that keyword overrides win over environment and file."""
        loaded = config.load_config(
            self.path,
            environ={"SPANHIVE_SERVICE_NAME": "from-env"},
            service_name="from-kwargs",
            otlp_endpoint="http://collector:4318/v1/traces",
        )
        self.assertEqual(loaded.tracing.service_name, "from-kwargs")
        self.assertEqual(loaded.exporters.otlp_endpoint, "http://collector:4318/v1/traces")

    def test_invalid_sample_rate(self):
        """Test that a sample rate below 1 is rejected."""
        with self.assertRaises(ConfigError):
            config.load_config(self.path, environ={}, sample_rate=0)

    def test_unknown_option(self):
        """Test that an unknown keyword override raises ConfigError."""
        with self.assertRaises(ConfigError):
            config.load_config(self.path, environ={}, colour="blue")

    def test_unknown_key_in_file(self):
        """Test that an unknown key in the config file raises ConfigError."""
        with open(self.path, "a") as fh:
            fh.write("api_key = 'misplaced'\n")
        with self.assertRaises(ConfigError):
            config.load_config(self.path, environ={})


if __name__ == "__main__":
    unittest.main()
