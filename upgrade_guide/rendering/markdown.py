from typing import Any, Dict, List, Optional

from upgrade_guide.models import step_type_label
from upgrade_guide.utils import format_version


def _render_step(index: int, step: Dict[str, Any], show_details: bool) -> List[str]:
    lines = [f"## {index}. {step['instruction']}", ""]

    meta = []
    if step.get("stepType"):
        meta.append(step_type_label(step["stepType"]))
    meta.append(f"{format_version(step['from'])} → {format_version(step['to'])}")
    if step.get("affectedFile"):
        meta.append(f"`{step['affectedFile']}`")
    lines.append("_" + " · ".join(meta) + "_")

    desc = (step.get("detailedDescription") or "").strip()
    if show_details and desc:
        lines.extend(["", desc])
    lines.append("")
    return lines


def render_md(
    response: Dict[str, Any],
    framework: str,
    from_version: float,
    to_version: float,
    rendering_cfg: Optional[Dict[str, Any]] = None,
) -> str:
    """Render an upgrade-steps response as a Markdown checklist."""
    show_details = bool((rendering_cfg or {}).get("show_details", True))

    out = [f"# {framework} upgrade: {format_version(from_version)} → {format_version(to_version)}", ""]
    if response.get("warning"):
        out.extend([f"> ⚠️ {response['warning']}", ""])

    for i, step in enumerate(response.get("steps", []), start=1):
        out.extend(_render_step(i, step, show_details))

    return "\n".join(out).rstrip() + "\n"
