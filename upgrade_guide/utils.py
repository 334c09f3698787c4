import os
import json
import datetime as dt
import logging
from logging.handlers import TimedRotatingFileHandler
from jsonschema import Draft202012Validator
from typing import Any, List

# ---------- Version helpers ----------

def format_version(value: Any) -> str:
    """Render a numeric version the way the upgrade catalogs spell them.

    Integral values drop the fractional part (``22.0 -> "22"``); everything
    else keeps its shortest round-trip form (``21.7 -> "21.7"``).
    """
    v = float(value)
    if v.is_integer():
        return str(int(v))
    return repr(v)

# ---------- Config validation ----------

SCHEMA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schemas")

def load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)

def validate_config(cfg: dict):
    schema = load_json(os.path.join(SCHEMA_DIR, "config.schema.json"))
    # shallowest error first
    errors = sorted(Draft202012Validator(schema).iter_errors(cfg), key=lambda e: (len(e.path), list(map(str, e.path))))
    if errors:
        err = errors[0]
        where = ".".join(str(p) for p in err.path) or "<root>"
        raise ValueError(f"Config validation error: {err.message} at {where}")

# ---------- Output writer ----------

def write_output(human_md: str, json_obj: dict, out_cfg: dict, stem: str = "upgrade") -> List[str]:
    out_dir = out_cfg["dir"]
    formats = out_cfg.get("formats") or ["md", "json"]
    os.makedirs(out_dir, exist_ok=True)
    now_local = dt.datetime.now().astimezone()
    ts = now_local.strftime("%Y%m%dT%H%M%S%z")
    base = os.path.join(out_dir, f"{stem}_{ts}")

    generated_files = []

    if "md" in formats:
        md_path = base + ".md"
        with open(md_path, "w", encoding="utf-8") as f:
            f.write(human_md)
        generated_files.append(md_path)

    if "json" in formats:
        json_path = base + ".json"
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(json_obj, f, ensure_ascii=False, indent=2)
        generated_files.append(json_path)

    return generated_files

# ---------- Logging ----------

_LOGGER_INITIALIZED = False
_TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

class JsonFormatter(logging.Formatter):
    """One JSON object per line, UTC timestamps."""

    def format(self, record):
        payload = {
            "ts": dt.datetime.fromtimestamp(record.created, dt.timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _log_handlers() -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    log_dir = os.getenv("LOG_DIR")
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            TimedRotatingFileHandler(os.path.join(log_dir, "upgrade-guide.log"), when="D", backupCount=7, encoding="utf-8")
        )
    return handlers

def _build_logger():
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))
    json_mode = os.getenv("LOG_JSON", "false").lower() == "true"
    fmt = JsonFormatter() if json_mode else logging.Formatter(_TEXT_FORMAT)

    for handler in _log_handlers():
        handler.setLevel(root.level)
        handler.setFormatter(fmt)
        root.addHandler(handler)

    _LOGGER_INITIALIZED = True

def get_logger(name: str = None) -> logging.Logger:
    _build_logger()
    return logging.getLogger(name if name else __name__)
