"""Upgrade-step catalogs.

The bundled catalogs live in ``upgrade_guide/data`` as one JSON array per
framework. ``StepRepository`` is the seam for other storage backends; the JSON
implementation is the only one shipped.
"""

import os
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from upgrade_guide.models import UpgradeStep
from upgrade_guide.utils import get_logger, load_json

logger = get_logger(__name__)

SUPPORTED_FRAMEWORKS = ("Next.JS", "Angular")

CATALOG_FILES: Dict[str, str] = {
    "nextjs": "nextjs-upgrade-steps.json",
    "angular": "angular-upgrade-steps.json",
}

DEFAULT_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")


def normalize_framework(framework: Any) -> str:
    """Case- and punctuation-insensitive key: ``"Next.JS" -> "nextjs"``."""
    return re.sub(r"[^a-z0-9]", "", str(framework or "").lower())


def parse_steps(records: Any, *, source: str = "<memory>") -> List[UpgradeStep]:
    """Validate raw catalog records, skipping the ones that do not fit the model."""
    if not isinstance(records, list):
        raise ValueError(f"catalog {source} must be a JSON array, got {type(records).__name__}")

    steps: List[UpgradeStep] = []
    for idx, rec in enumerate(records):
        try:
            steps.append(UpgradeStep.model_validate(rec))
        except ValidationError as e:
            logger.warning("catalog %s: skipping malformed step #%d: %s", source, idx, e.errors()[0].get("msg", e))
    if len(steps) != len(records):
        logger.info("catalog %s: loaded=%d skipped=%d", source, len(steps), len(records) - len(steps))
    return steps


class StepRepository(ABC):
    @abstractmethod
    def load_steps(self, framework: str) -> List[UpgradeStep]:
        """Return the full catalog for ``framework``, or ``[]`` when unavailable."""


class JsonStepRepository(StepRepository):
    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = data_dir or DEFAULT_DATA_DIR

    def catalog_path(self, framework: str) -> Optional[str]:
        fname = CATALOG_FILES.get(normalize_framework(framework))
        if not fname:
            return None
        return os.path.join(self.data_dir, fname)

    def load_steps(self, framework: str) -> List[UpgradeStep]:
        path = self.catalog_path(framework)
        if path is None:
            logger.warning("unsupported framework=%r (supported: %s)", framework, ", ".join(SUPPORTED_FRAMEWORKS))
            return []

        try:
            records = load_json(path)
            steps = parse_steps(records, source=os.path.basename(path))
        except (OSError, ValueError, RecursionError) as e:
            logger.error("Failed to load upgrade steps for %s: %s", framework, e)
            return []

        logger.info("catalog loaded framework=%s steps=%d", framework, len(steps))
        return steps


def get_repository(cfg: Optional[Dict[str, Any]] = None) -> StepRepository:
    catalog_cfg = (cfg or {}).get("catalog") or {}
    return JsonStepRepository(catalog_cfg.get("dir"))
