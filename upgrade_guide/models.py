from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Lower value sorts first and wins when several types compete for one step.
STEP_TYPE_PRIORITY: Dict[str, int] = {
    "package-update": 1,
    "dependencies": 2,
    "configuration": 3,
    "code-update": 4,
    "testing": 5,
    "deployment": 6,
}
DEFAULT_STEP_PRIORITY = 10

STEP_TYPE_LABELS: Dict[str, str] = {
    "package-update": "Package Update",
    "dependencies": "Dependencies",
    "configuration": "Configuration",
    "code-update": "Code Update",
    "testing": "Testing",
    "deployment": "Deployment",
}
DEFAULT_STEP_LABEL = "General"

# Kinds that are grouped before file consolidation; everything else passes through.
CONSOLIDATED_STEP_TYPES = ("package-update", "dependencies", "configuration")


def step_type_priority(step_type: Optional[str]) -> int:
    return STEP_TYPE_PRIORITY.get(step_type or "", DEFAULT_STEP_PRIORITY)


def step_type_label(step_type: Optional[str]) -> str:
    return STEP_TYPE_LABELS.get(step_type or "", DEFAULT_STEP_LABEL)


class UpgradeStep(BaseModel):
    """One unit of upgrade guidance tied to a version range.

    Field aliases follow the catalog JSON (``detailedDescription``, ``from``,
    ``to``, ``stepType``, ``affectedFile``). Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    instruction: str = Field(min_length=1)
    detailed_description: str = Field(default="", alias="detailedDescription")
    from_version: float = Field(alias="from")
    to_version: float = Field(alias="to")
    step_type: Optional[str] = Field(default=None, alias="stepType")
    affected_file: Optional[str] = Field(default=None, alias="affectedFile")

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
