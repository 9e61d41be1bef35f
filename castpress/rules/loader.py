"""
Reads castpress's rules.yaml.

The file sets listing limits and sort profiles, the publication scheduler
interval, upload limits, auth and rate-limit settings, CORS origins and
ops paths. The API refuses to start when it cannot be loaded.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from castpress.rules.models import Rules


def load_rules(path: Path) -> Rules:
    """
    Parse and validate the castpress rules file at path.

    Raises FileNotFoundError when the file is missing and ValueError when
    it is empty, not YAML, or does not match the Rules model.
    """
    if not path.is_file():
        raise FileNotFoundError(
            f"castpress rules file not found at {path} (set CASTPRESS_RULES_PATH to override)"
        )

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in castpress rules file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"castpress rules file {path} must be a YAML mapping of sections")

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"castpress rules validation failed for {path}:\n{e}") from e
