import logging
import os
from pathlib import Path

from castpress.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when the runtime environment does not satisfy the ops rules."""


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.

    Creates the data directory when it is required but missing, and fails
    when it cannot be written or required environment variables are unset.
    """
    ops = rules.ops

    if ops.data_dir_required:
        data_dir.mkdir(parents=True, exist_ok=True)
        if not os.access(data_dir, os.W_OK):
            raise ConfigError(f"Data directory {data_dir} is not writable")

    missing = [name for name in ops.required_env if name not in os.environ]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    if os.environ.get("CASTPRESS_SECRET_KEY") is None:
        logger.warning("CASTPRESS_SECRET_KEY is not set; using the development signing key")

    logger.info("Configuration validated (data dir %s)", data_dir)
