from __future__ import annotations

from typing import List

from upgrade_guide.models import UpgradeStep, step_type_priority


def _sort_key(step: UpgradeStep):
    return (step_type_priority(step.step_type), step.from_version, step.to_version)


def sort_steps(steps: List[UpgradeStep]) -> List[UpgradeStep]:
    # sorted() is stable: equal keys keep their input order
    return sorted(steps, key=_sort_key)
