from __future__ import annotations

import hashlib
import re
from typing import Dict, List, Optional

from upgrade_guide.models import CONSOLIDATED_STEP_TYPES, UpgradeStep
from upgrade_guide.utils import format_version, get_logger

logger = get_logger(__name__)

_VERSION = r"[0-9]+\.[0-9]+(?:\.[0-9]+)?"
_TO_VERSION_RE = re.compile(rf"to {_VERSION}")
_BARE_VERSION_RE = re.compile(_VERSION)
_CARET_VERSION_RE = re.compile(rf"@\^{_VERSION}")
_WORD_VERSION_RE = re.compile(rf"version {_VERSION}")


# ---------- Package updates ----------

def consolidate_package_updates(steps: List[UpgradeStep], target_version: float) -> Optional[UpgradeStep]:
    """Collapse a run of package bumps into a single bump to ``target_version``.

    The first step is the template. Its instruction loses the first
    ``to X.Y`` phrase and the first bare version token and gets
    ``to <target>`` appended; every version reference in its description is
    pointed at the target. Intermediate versions do not survive.
    """
    if not steps:
        return None

    first = steps[0]
    min_version = min(s.from_version for s in steps)
    target = format_version(target_version)

    base = _TO_VERSION_RE.sub("", first.instruction, count=1)
    base = _BARE_VERSION_RE.sub("", base, count=1)
    instruction = f"{base.strip()} to {target}"

    description = _CARET_VERSION_RE.sub(f"@^{target}", first.detailed_description)
    description = _WORD_VERSION_RE.sub(f"version {target}", description)
    description = _TO_VERSION_RE.sub(f"to {target}", description)

    return UpgradeStep(
        instruction=instruction,
        detailed_description=description,
        from_version=min_version,
        to_version=target_version,
        step_type=first.step_type,
    )


# ---------- Exact duplicate removal ----------

def _instruction_hash(instruction: str) -> str:
    return hashlib.md5(instruction.strip().lower().encode("utf-8")).hexdigest()


def remove_duplicate_instructions(steps: List[UpgradeStep]) -> List[UpgradeStep]:
    seen = set()
    out: List[UpgradeStep] = []
    for step in steps:
        h = _instruction_hash(step.instruction)
        if h in seen:
            continue
        seen.add(h)
        out.append(step)
    return out


# ---------- Stage entry ----------

def consolidate_by_type(steps: List[UpgradeStep], target_version: float) -> List[UpgradeStep]:
    by_type: Dict[str, List[UpgradeStep]] = {}
    passthrough: List[UpgradeStep] = []

    for step in steps:
        if step.step_type and step.step_type in CONSOLIDATED_STEP_TYPES:
            by_type.setdefault(step.step_type, []).append(step)
        else:
            passthrough.append(step)

    consolidated: List[UpgradeStep] = []
    for step_type, group in by_type.items():
        if step_type == "package-update":
            merged = consolidate_package_updates(group, target_version)
            if merged is not None:
                consolidated.append(merged)
        else:
            consolidated.extend(remove_duplicate_instructions(group))

    out = consolidated + passthrough
    logger.info(
        "consolidate.type: kept=%d from=%d (groups=%s passthrough=%d)",
        len(out),
        len(steps),
        ",".join(f"{k}:{len(v)}" for k, v in by_type.items()) or "-",
        len(passthrough),
    )
    return out
