from __future__ import annotations

import math
import re
from typing import Dict, List, Optional

from upgrade_guide.models import UpgradeStep, step_type_priority
from upgrade_guide.utils import get_logger

logger = get_logger(__name__)

GENERAL_SECTION = "general"
FALLBACK_STEP_TYPE = "configuration"

_VERSION = r"[0-9]+\.[0-9]+(?:\.[0-9]+)?"
_TO_VERSION_RE = re.compile(rf"to {_VERSION}", re.IGNORECASE)
_WORD_VERSION_RE = re.compile(rf"version {_VERSION}", re.IGNORECASE)
_BARE_VERSION_RE = re.compile(_VERSION)

_NUMBERED_HEADER_RE = re.compile(r"^[0-9]+\.\s*\*\*")
_NUMBER_PREFIX_RE = re.compile(r"^[0-9]+\.\s*")
_NUMBERED_LINE_RE = re.compile(r"^[0-9]+\.")


# ---------- Instructions ----------

def unique_base_instructions(steps: List[UpgradeStep]) -> List[str]:
    """Instructions with version references stripped, deduplicated."""
    seen: Dict[str, None] = {}
    for step in steps:
        base = _TO_VERSION_RE.sub("", step.instruction)
        base = _WORD_VERSION_RE.sub("", base)
        base = _BARE_VERSION_RE.sub("", base)
        base = base.strip()
        if base:
            seen[base] = None
    return list(seen)


def consolidated_instruction(base_instructions: List[str], file_name: str) -> str:
    if len(base_instructions) == 1:
        return f"Update {file_name} configuration"
    return f"Update {file_name} with multiple configuration changes"


# ---------- Detailed descriptions ----------

def _is_section_header(line: str) -> bool:
    if _NUMBERED_HEADER_RE.match(line):
        return True
    return line.startswith("**") and line.endswith("**")


def _section_name(line: str) -> str:
    return _NUMBER_PREFIX_RE.sub("", line, count=1).replace("**", "").lower()


def _collect_section(sections: Dict[str, Dict[str, None]], name: str, content: Dict[str, None]) -> None:
    if not content:
        return
    bucket = sections.setdefault(name, {})
    for line in content:
        bucket[line] = None


def merge_detailed_descriptions(steps: List[UpgradeStep]) -> str:
    """Union the outlined descriptions of ``steps`` section by section.

    Sections are opened by ``N. **Title**`` lines or standalone ``**Title**``
    lines; text before the first header belongs to the general section, which
    is emitted without a header. Headers are renumbered from 1, code fences and
    stray numbered-list lines are dropped.
    """
    sections: Dict[str, Dict[str, None]] = {}

    for step in steps:
        current = GENERAL_SECTION
        content: Dict[str, None] = {}
        for raw in step.detailed_description.split("\n"):
            line = raw.strip()
            if _is_section_header(line):
                _collect_section(sections, current, content)
                current = _section_name(line)
                content = {}
            elif line:
                content[line] = None
        _collect_section(sections, current, content)

    out: List[str] = []
    index = 1
    for name, lines in sections.items():
        if name != GENERAL_SECTION:
            out.append(f"{index}. **{name}**:")
            index += 1
        for line in lines:
            if line.startswith("```") or _NUMBERED_LINE_RE.match(line):
                continue
            out.append(line)
        out.append("")

    return "\n".join(out).strip()


# ---------- Step type ----------

def most_important_step_type(steps: List[UpgradeStep]) -> str:
    best: Optional[str] = None
    best_priority = math.inf
    for step in steps:
        if not step.step_type:
            continue
        priority = step_type_priority(step.step_type)
        if priority < best_priority:
            best_priority = priority
            best = step.step_type
    return best or FALLBACK_STEP_TYPE


# ---------- Stage entry ----------

def consolidate_file_steps(steps: List[UpgradeStep], file_name: str) -> Optional[UpgradeStep]:
    if not steps:
        return None

    ordered = sorted(steps, key=lambda s: s.from_version)
    first, last = ordered[0], ordered[-1]

    return UpgradeStep(
        instruction=consolidated_instruction(unique_base_instructions(ordered), file_name),
        detailed_description=merge_detailed_descriptions(ordered),
        from_version=first.from_version,
        to_version=last.to_version,
        step_type=most_important_step_type(ordered),
        affected_file=file_name,
    )


def consolidate_by_affected_file(steps: List[UpgradeStep]) -> List[UpgradeStep]:
    by_file: Dict[str, List[UpgradeStep]] = {}
    without_file: List[UpgradeStep] = []

    for step in steps:
        if step.affected_file:
            by_file.setdefault(step.affected_file, []).append(step)
        else:
            without_file.append(step)

    consolidated: List[UpgradeStep] = []
    merged_files = 0
    for file_name, group in by_file.items():
        if len(group) == 1:
            consolidated.append(group[0])
            continue
        merged = consolidate_file_steps(group, file_name)
        if merged is not None:
            consolidated.append(merged)
            merged_files += 1

    out = consolidated + without_file
    logger.info("consolidate.file: kept=%d from=%d (files=%d merged=%d)", len(out), len(steps), len(by_file), merged_files)
    return out
