import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

# Defaults for the organiser-facing settings
DEFAULT_GROUP_SIZE = 16
DEFAULT_PLANT_BASED_MAXIMUM = 5
DEFAULT_SAME_NATIONALITY_MAXIMUM = 4
DEFAULT_SAME_GENDER_PERCENTAGE_LIMIT = 75

# Environment variable -> Settings field
ENV_SETTINGS: Dict[str, str] = {
    "GROUPMAKER_GROUP_SIZE": "group_size",
    "GROUPMAKER_PLANT_BASED_MAX": "plant_based_group_maximum",
    "GROUPMAKER_NATIONALITY_MAX": "same_nationality_group_maximum",
    "GROUPMAKER_GENDER_LIMIT": "same_gender_percentage_limit",
}

# Output file names
PARTICIPANTS_MATCHED_CSV = "participants-matched.csv"
GUIDES_MATCHED_CSV = "guides-matched.csv"
GROUPS_CSV = "groups.csv"
RUN_REPORT_MD = "run_report.md"
MAIL_FILENAME_TEMPLATE = "group{number}.md"


def load_settings(overrides: Optional[Dict[str, Any]] = None, use_dotenv: bool = True):
    """Build Settings from defaults, environment variables and explicit overrides.

    Precedence (lowest to highest): model defaults, GROUPMAKER_* environment
    variables (after loading a .env file), then non-None `overrides`.

    Args:
        overrides: Mapping of Settings field name to value; None values are ignored.
        use_dotenv: Whether to load a .env file before reading the environment.

    Returns:
        A validated Settings instance.

    Raises:
        ValueError: If an environment variable is not an integer.
        pydantic.ValidationError: If a value is out of bounds.
    """
    from .data_models import Settings

    if use_dotenv:
        load_dotenv()

    values: Dict[str, Any] = {}
    for env_name, field in ENV_SETTINGS.items():
        raw = os.environ.get(env_name)
        if raw is None or not raw.strip():
            continue
        try:
            values[field] = int(raw)
        except ValueError:
            raise ValueError(f"{env_name} must be an integer, got {raw!r}")
        logger.debug("Setting %s=%s from %s", field, values[field], env_name)

    for field, value in (overrides or {}).items():
        if value is not None:
            values[field] = value

    return Settings(**values)
