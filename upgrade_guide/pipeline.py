import time
from typing import List

from upgrade_guide.models import UpgradeStep
from upgrade_guide.stages.range_filter import filter_by_range
from upgrade_guide.stages.type_consolidation import consolidate_by_type
from upgrade_guide.stages.file_consolidation import consolidate_by_affected_file
from upgrade_guide.stages.ordering import sort_steps
from upgrade_guide.utils import get_logger

logger = get_logger(__name__)


def run_consolidation_pipeline(steps: List[UpgradeStep], from_version: float, to_version: float) -> List[UpgradeStep]:
    """Filter, consolidate and order catalog steps for one upgrade window."""
    t0 = time.monotonic()

    relevant = filter_by_range(steps, from_version, to_version)
    if not relevant:
        logger.info("pipeline: no steps in window %s..%s", from_version, to_version)
        return []

    by_type = consolidate_by_type(relevant, to_version)
    by_file = consolidate_by_affected_file(by_type)
    ordered = sort_steps(by_file)

    logger.info(
        "pipeline: steps=%d from=%d took_ms=%d",
        len(ordered),
        len(steps),
        int((time.monotonic() - t0) * 1000),
    )
    return ordered
