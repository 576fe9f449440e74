import logging
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^\s*```ya?ml\s*\n(.*?)^\s*```", re.MULTILINE | re.DOTALL)


def extract_yaml(text: str) -> str:
    """The first ```yaml fenced block of ``text``, or ``text`` itself."""
    match = _FENCE.search(text)
    return match.group(1) if match else text


def load_rules(path: Path, required: bool = False) -> Rules:
    """
    Load and validate the monetization, accounts and storage rules.

    A missing file yields the built-in defaults unless ``required`` is set,
    in which case FileNotFoundError is raised. Malformed YAML or values that
    fail the schema raise ValueError so startup fails fast.
    """
    path = Path(path)
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Rules file not found at: {path}")
        logger.info("No rules file at %s, using defaults", path)
        return Rules()

    try:
        data = yaml.safe_load(extract_yaml(path.read_text(encoding="utf-8")))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        rules = Rules.model_validate(data or {})
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e
    logger.info("Rules loaded from %s", path)
    return rules
