import os
import tempfile
import unittest


class TestLoadConfig(unittest.TestCase):
    def setUp(self) -> None:
        # Snapshot env we touch.
        self._orig = os.environ.get("OPEN_CODELABS_CONFIG")
        os.environ.pop("OPEN_CODELABS_CONFIG", None)
        self._tmp = tempfile.TemporaryDirectory()

    def tearDown(self) -> None:
        os.environ.pop("OPEN_CODELABS_CONFIG", None)
        if self._orig is not None:
            os.environ["OPEN_CODELABS_CONFIG"] = self._orig
        self._tmp.cleanup()

    def _write(self, name: str, text: str) -> str:
        path = os.path.join(self._tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_missing_file_gives_defaults(self):
        from config import AppConfig, load_config

        cfg = load_config(os.path.join(self._tmp.name, "missing.yaml"))

        self.assertEqual(cfg, AppConfig())
        self.assertEqual(cfg.categories["gcp"], "#4285f4")
        self.assertEqual(cfg.title_max_length, 60)

    def test_explicit_path_wins_over_env(self):
        from config import load_config

        env_path = self._write("env.yaml", "site_title: From env\n")
        explicit = self._write("explicit.yaml", "site_title: Explicit\n")
        os.environ["OPEN_CODELABS_CONFIG"] = env_path

        self.assertEqual(load_config(explicit).site_title, "Explicit")
        self.assertEqual(load_config().site_title, "From env")

    def test_yaml_overrides_fields(self):
        from config import load_config

        path = self._write(
            "site.yaml",
            "content_dir: docs\n"
            "fail_on_warnings: true\n"
            "categories:\n"
            "  gcp: '#000000'\n",
        )
        cfg = load_config(path)

        self.assertEqual(cfg.content_dir, "docs")
        self.assertTrue(cfg.fail_on_warnings)
        self.assertEqual(cfg.categories, {"gcp": "#000000"})

    def test_empty_file_gives_defaults(self):
        from config import AppConfig, load_config

        self.assertEqual(load_config(self._write("empty.yaml", "")), AppConfig())

    def test_non_mapping_is_rejected(self):
        from config import load_config

        with self.assertRaises(ValueError):
            load_config(self._write("list.yaml", "- a\n- b\n"))

    def test_configure_logging_rejects_unknown_level(self):
        from config import configure_logging

        with self.assertRaises(ValueError):
            configure_logging("LOUD")


if __name__ == "__main__":
    unittest.main()
