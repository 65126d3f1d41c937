"""YAML loader for the setup guide with caching and validation."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from signin_doctor.data.guide.models import SetupGuide

logger = logging.getLogger(__name__)

GUIDE_PATH = Path(__file__).parent / "guide.yaml"


class GuideLoadError(Exception):
    """Raised when the guide file fails to load."""

    pass


def _load_yaml_file(file_path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Raises:
        GuideLoadError: If file cannot be read or parsed
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise GuideLoadError(f"Guide file not found: {file_path}")
    except yaml.YAMLError as e:
        raise GuideLoadError(f"Invalid YAML in {file_path}: {e}")


@lru_cache(maxsize=8)
def _load_guide_file(file_path: str) -> SetupGuide:
    path = Path(file_path)
    logger.debug(f"Loading setup guide from {path}")
    data = _load_yaml_file(path)
    try:
        guide = SetupGuide(**data)
    except ValidationError as e:
        error_details = []
        for error in e.errors():
            loc = " -> ".join(str(l) for l in error["loc"])
            error_details.append(f"  {loc}: {error['msg']}")
        raise GuideLoadError(f"Validation error in {path}:\n" + "\n".join(error_details))
    logger.info(f"Loaded setup guide with {len(guide.steps)} steps from {path.name}")
    return guide


def load_guide(path: Path | None = None) -> SetupGuide:
    """Load the setup guide (cached per path).

    Args:
        path: Alternative guide file. Defaults to the bundled ``guide.yaml``.

    Raises:
        GuideLoadError: If the file is missing, unparsable or invalid.
    """
    return _load_guide_file(str(path or GUIDE_PATH))
