import re
import time
import uuid
import yaml
from typing import Dict, Any, List, Optional

from upgrade_guide.catalog import StepRepository, get_repository
from upgrade_guide.models import UpgradeStep
from upgrade_guide.pipeline import run_consolidation_pipeline
from upgrade_guide.rendering.markdown import render_md
from upgrade_guide.utils import format_version, get_logger, validate_config, write_output

logger = get_logger(__name__)


def compute_upgrade_steps(
    framework: str,
    from_version: float,
    to_version: float,
    *,
    repository: Optional[StepRepository] = None,
) -> List[UpgradeStep]:
    """Ordered, consolidated upgrade steps for one framework and version window.

    Unsupported frameworks and windows with nothing in them both yield ``[]``;
    the window is taken literally, so ``to_version < from_version`` is empty too.
    """
    repo = repository or get_repository()
    all_steps = repo.load_steps(framework)
    return run_consolidation_pipeline(all_steps, from_version, to_version)


def has_upgrade_path(
    framework: str,
    from_version: float,
    to_version: float,
    *,
    repository: Optional[StepRepository] = None,
) -> bool:
    return len(compute_upgrade_steps(framework, from_version, to_version, repository=repository)) > 0


def no_path_warning(framework: str, from_version: float, to_version: float) -> str:
    return (
        f"No upgrade steps found for {framework} from version {format_version(from_version)} "
        f"to {format_version(to_version)}. This upgrade path may not be supported."
    )


def build_response(
    framework: str,
    from_version: float,
    to_version: float,
    *,
    repository: Optional[StepRepository] = None,
) -> Dict[str, Any]:
    """Response body for an upgrade-steps request: ``{steps, hasPath, warning?}``."""
    steps = compute_upgrade_steps(framework, from_version, to_version, repository=repository)
    has_path = len(steps) > 0
    response: Dict[str, Any] = {
        "steps": [s.to_dict() for s in steps],
        "hasPath": has_path,
    }
    if not has_path:
        response["warning"] = no_path_warning(framework, from_version, to_version)
    return response


def validate_version_window(from_version: float, to_version: float) -> None:
    """Reject windows the version selector would not submit.

    Only the run boundary checks this; ``compute_upgrade_steps`` takes any pair.
    """
    if float(to_version) < float(from_version):
        raise ValueError("To version must be greater than or equal to From version.")
    if float(to_version) == float(from_version):
        raise ValueError("From version and To version cannot be the same.")


def _apply_overrides(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> None:
    if not overrides:
        return

    for key in ("framework", "from_version", "to_version"):
        if overrides.get(key) is not None:
            cfg[key] = overrides[key]

    if overrides.get("catalog_dir") is not None:
        cfg.setdefault("catalog", {})["dir"] = overrides["catalog_dir"]

    if overrides.get("out_dir") is not None or overrides.get("formats"):
        out = cfg.setdefault("output", {})
        if overrides.get("out_dir") is not None:
            out["dir"] = overrides["out_dir"]
        if overrides.get("formats"):
            out["formats"] = list(overrides["formats"])

    if overrides.get("show_details") is not None:
        cfg.setdefault("rendering", {})["show_details"] = overrides["show_details"]


def _output_stem(cfg: Dict[str, Any]) -> str:
    fw = re.sub(r"[^a-z0-9]+", "", str(cfg["framework"]).lower()) or "framework"
    return f"upgrade_{fw}_{format_version(cfg['from_version'])}_{format_version(cfg['to_version'])}"


def _execute(cfg: Dict[str, Any], run_id: str) -> Dict[str, Any]:
    framework = cfg["framework"]
    from_version = float(cfg["from_version"])
    to_version = float(cfg["to_version"])
    logger.info("config loaded framework=%s from=%s to=%s", framework, format_version(from_version), format_version(to_version))

    t0 = time.monotonic()
    response = build_response(framework, from_version, to_version, repository=get_repository(cfg))
    logger.info("computed steps=%d has_path=%s took_ms=%d", len(response["steps"]), response["hasPath"], int((time.monotonic() - t0) * 1000))

    if response.get("warning"):
        logger.warning(response["warning"])

    md = render_md(response, framework, from_version, to_version, cfg.get("rendering", {}))
    result = {"run_id": run_id, "response": response, "markdown": md, "files": []}

    out_cfg = cfg.get("output") or {}
    if out_cfg.get("dir"):
        result["files"] = write_output(md, response, out_cfg, stem=_output_stem(cfg))
        logger.info("output written dir=%s files=%d", out_cfg["dir"], len(result["files"]))

    return result


def run_once(
    config_path: Optional[str] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Execute one upgrade-guide run from a config file and/or CLI overrides."""
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id)

    try:
        cfg: Dict[str, Any] = {}
        if config_path:
            with open(config_path, "r", encoding="utf-8") as f:
                try:
                    cfg = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ValueError(f"Config validation error: {config_path} is not valid YAML: {e}") from e
            if not isinstance(cfg, dict):
                raise ValueError(f"Config validation error: {config_path} must contain a mapping")
        _apply_overrides(cfg, overrides)
        validate_config(cfg)
        validate_version_window(cfg["from_version"], cfg["to_version"])
        return _execute(cfg, run_id)

    except Exception as e:
        logger.error("Run failed: %s", e)
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id)
