import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume.config import ATSConfig, get_config  # noqa: E402


class ATSConfigTests(unittest.TestCase):
    def test_defaults(self):
        config = ATSConfig()
        self.assertEqual(config.min_token_length, 4)
        self.assertEqual(config.frequency_keywords, 40)
        self.assertEqual(config.max_keywords, 50)
        self.assertEqual(config.max_missing_keywords, 15)
        self.assertIsNone(config.rng_seed)

    def test_invalid_values_rejected(self):
        with self.assertRaises(ValueError):
            ATSConfig(min_token_length=0)
        with self.assertRaises(ValueError):
            ATSConfig(apply_delay_seconds=-1)

    def test_from_yaml_reads_ats_section(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "ats.yaml"
            path.write_text(
                "ats:\n"
                "  max_keywords: 20\n"
                "  apply_delay_seconds: 0\n"
                "  rng_seed: 7\n"
                "  stemming: true\n",
                encoding="utf-8",
            )
            with self.assertLogs('resume.config', level='WARNING') as logs:
                config = ATSConfig.from_yaml(str(path))

        self.assertEqual(config.max_keywords, 20)
        self.assertEqual(config.apply_delay_seconds, 0)
        self.assertEqual(config.rng_seed, 7)
        self.assertEqual(config.frequency_keywords, 40)
        self.assertIn("stemming", logs.output[0])

    def test_empty_yaml_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "ats.yaml"
            path.write_text("", encoding="utf-8")
            self.assertEqual(ATSConfig.from_yaml(str(path)), ATSConfig())

    def test_get_config_uses_env_path(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "custom.yaml"
            path.write_text("ats:\n  max_found_keywords: 12\n", encoding="utf-8")

            with patch.dict(os.environ, {"RESUME_ATS_CONFIG": str(path)}):
                self.assertEqual(get_config().max_found_keywords, 12)

            missing = str(Path(tmp_dir) / "absent.yaml")
            with patch.dict(os.environ, {"RESUME_ATS_CONFIG": missing}):
                self.assertEqual(get_config(), ATSConfig())


if __name__ == "__main__":
    unittest.main()
