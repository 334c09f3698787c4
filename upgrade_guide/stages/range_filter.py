from __future__ import annotations

from typing import List

from upgrade_guide.models import UpgradeStep
from upgrade_guide.utils import get_logger

logger = get_logger(__name__)


def filter_by_range(steps: List[UpgradeStep], from_version: float, to_version: float) -> List[UpgradeStep]:
    """Keep steps fully contained in ``[from_version, to_version]``."""
    out = [s for s in steps if s.from_version >= from_version and s.to_version <= to_version]
    logger.info("range.filter: kept=%d from=%d (window=%s..%s)", len(out), len(steps), from_version, to_version)
    return out
