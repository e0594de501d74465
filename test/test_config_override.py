"""Tests for config override behavior with defaults."""

import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PaperPortal.config import DEFAULT_CONFIG_PATH, load_config_with_defaults


_BASE_YAML = """
log:
  level: INFO
  to_file: false
  dir: log

storage:
  db_path: database/portal.db
  files_dir: storage/papers
  public_base_url: http://localhost:8000/files/papers
  max_upload_bytes: 10485760
  allowed_content_types: [application/pdf]
  enrich_batch_size: 20

auth:
  missing_role_fallback: teacher

scholar:
  enabled: false
  base_url: https://serpapi.com/search.json
  api_key_env: SERPAPI_API_KEY
  max_results: 100
  timeout: 30
"""


class TestConfigOverride(unittest.TestCase):
    def _load(self, override_yaml: str):
        with tempfile.TemporaryDirectory() as tmp:
            default_path = Path(tmp) / "default.yml"
            default_path.write_text(_BASE_YAML, encoding="utf-8")
            override_path = Path(tmp) / "override.yml"
            override_path.write_text(override_yaml, encoding="utf-8")
            return load_config_with_defaults(override_path, default_path=default_path)

    def test_override_merges_with_defaults(self) -> None:
        cfg = self._load(
            """
log:
  level: DEBUG

storage:
  db_path: /tmp/other.db

auth:
  missing_role_fallback: none
"""
        )
        self.assertEqual(cfg.runtime.level, "DEBUG")
        self.assertEqual(cfg.runtime.dir, "log")
        self.assertEqual(cfg.storage.db_path, "/tmp/other.db")
        self.assertEqual(cfg.storage.files_dir, "storage/papers")
        self.assertEqual(cfg.auth.missing_role_fallback, "none")

    def test_empty_override_uses_defaults(self) -> None:
        cfg = self._load("{}")
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertEqual(cfg.storage.enrich_batch_size, 20)
        self.assertEqual(cfg.scholar.max_results, 100)

    def test_non_mapping_root_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "mapping"):
            self._load("- just\n- a list\n")

    def test_repository_default_file_parses(self) -> None:
        cfg = load_config_with_defaults(
            REPO_ROOT / DEFAULT_CONFIG_PATH, default_path=REPO_ROOT / DEFAULT_CONFIG_PATH
        )
        self.assertEqual(cfg.storage.max_upload_bytes, 10 * 1024 * 1024)
        self.assertFalse(cfg.scholar.enabled)


if __name__ == "__main__":
    unittest.main()
