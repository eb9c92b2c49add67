import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from modscout.config import ScoutConfig, load_config, load_config_file
from modscout.exceptions import ConfigParseError, ConfigValidationError


class TestScoutConfig(unittest.TestCase):
    def test_from_dict(self):
        config = ScoutConfig.from_dict(
            {
                "game_version": "1.20.1",
                "loader": "Fabric",
                "auto_pick": False,
                "curseforge": {"api_key": "abc"},
                "batch": {"delay": 1.5},
                "http": {"user_agent": "test/1.0"},
            }
        )
        self.assertEqual(config.loader, "fabric")
        self.assertEqual(config.batch_delay, 1.5)
        self.assertEqual(config.user_agent, "test/1.0")

        context = config.to_context()
        self.assertEqual(context.game_version, "1.20.1")
        self.assertFalse(context.auto_pick)
        self.assertTrue(context.has_secondary_credential)

    def test_arguments_override_file_values(self):
        config = ScoutConfig.from_dict({"game_version": "1.20.1", "loader": "forge"})
        context = config.to_context("1.21", "quilt", True, "key")
        self.assertEqual(
            (context.game_version, context.loader, context.auto_pick, context.curseforge_api_key),
            ("1.21", "quilt", True, "key"),
        )

    def test_detected_values_take_precedence(self):
        context = ScoutConfig.from_dict({"game_version": "1.20.1"}).to_context()
        detected = context.with_detected("1.19.2", None)
        self.assertEqual(detected.game_version, "1.19.2")
        self.assertEqual(detected.loader, "")

    def test_detected_loader_is_lowercased(self):
        context = ScoutConfig.from_dict({"loader": "forge"}).to_context()
        self.assertEqual(context.with_detected(None, "Fabric").loader, "fabric")
        self.assertEqual(context.with_detected(None, None).loader, "forge")

    def test_unknown_loader(self):
        with self.assertRaises(ConfigValidationError):
            ScoutConfig.from_dict({"loader": "liteloader"})

    def test_negative_delay(self):
        with self.assertRaises(ConfigValidationError):
            ScoutConfig.from_dict({"batch": {"delay": -1}})

    def test_api_key_from_environment(self):
        with patch.dict(os.environ, {"CURSEFORGE_API_KEY": "from-env"}):
            self.assertEqual(load_config().curseforge_api_key, "from-env")


class TestConfigFiles(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_toml(self):
        path = self.dir / "modscout.toml"
        path.write_text('game_version = "1.20.1"\nloader = "neoforge"\n[batch]\ndelay = 0\n')
        config = load_config(str(path))
        self.assertEqual(config.loader, "neoforge")
        self.assertEqual(config.batch_delay, 0)

    def test_yaml(self):
        path = self.dir / "modscout.yaml"
        path.write_text("game_version: '1.19.2'\ncurseforge:\n  api_key: k\n")
        config = load_config(str(path))
        self.assertEqual(config.game_version, "1.19.2")
        self.assertEqual(config.curseforge_api_key, "k")

    def test_json(self):
        path = self.dir / "modscout.json"
        path.write_text('{"loader": "quilt"}')
        self.assertEqual(load_config(str(path)).loader, "quilt")

    def test_missing_file(self):
        with self.assertRaises(ConfigParseError):
            load_config_file(str(self.dir / "nope.toml"))

    def test_unsupported_format(self):
        path = self.dir / "modscout.ini"
        path.write_text("[x]")
        with self.assertRaises(ConfigParseError):
            load_config_file(str(path))

    def test_broken_toml(self):
        path = self.dir / "broken.toml"
        path.write_text("game_version = ")
        with self.assertRaises(ConfigParseError):
            load_config_file(str(path))


if __name__ == "__main__":
    unittest.main()
