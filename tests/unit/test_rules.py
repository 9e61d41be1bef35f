"""
Rules loader tests.

The rules file is loaded once at startup; anything malformed must fail fast.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from castpress.rules.loader import load_rules

PROJECT_ROOT = Path(__file__).parent.parent.parent


def _write_rules(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


@pytest.fixture
def raw_rules() -> dict:
    with open(PROJECT_ROOT / "rules.yaml") as f:
        return yaml.safe_load(f)


class TestLoadRules:
    def test_load_project_rules_file(self) -> None:
        rules = load_rules(PROJECT_ROOT / "rules.yaml")

        assert rules.project.slug == "castpress"
        assert set(rules.listing.profiles) == {"article", "podcast"}
        assert rules.listing.profiles["article"].default_sort == "date"
        assert rules.listing.profiles["podcast"].sort_fields["duration"] == "duration_seconds"
        assert rules.scheduler.interval_seconds > 0
        assert rules.auth.token_ttl_minutes == 240

    def test_missing_file(self) -> None:
        with pytest.raises(FileNotFoundError, match="CASTPRESS_RULES_PATH"):
            load_rules(Path("/nonexistent/rules.yaml"))

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("invalid: yaml: content: [")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_rules(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("")

        with pytest.raises(ValueError, match="YAML mapping"):
            load_rules(path)

    def test_missing_section(self, tmp_path: Path, raw_rules: dict) -> None:
        del raw_rules["listing"]

        with pytest.raises(ValueError, match="validation failed"):
            load_rules(_write_rules(tmp_path, raw_rules))

    def test_default_sort_must_be_a_sort_field(self, tmp_path: Path, raw_rules: dict) -> None:
        raw_rules["listing"]["profiles"]["article"]["default_sort"] = "popularity"

        with pytest.raises(ValueError, match="default_sort"):
            load_rules(_write_rules(tmp_path, raw_rules))

    def test_non_positive_interval_rejected(self, tmp_path: Path, raw_rules: dict) -> None:
        raw_rules["scheduler"]["interval_seconds"] = 0

        with pytest.raises(ValueError):
            load_rules(_write_rules(tmp_path, raw_rules))
