from __future__ import annotations

# catalog/config.py
import os
import logging
import yaml

_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))

APP_NAME = "catalog-api"
APP_VERSION = "0.1.0"

DEFAULTS = {
    "db_path": None,
    "test_db_path": None,
    "page_size": 8,
    "log_level": "INFO",
}


def config_path() -> str:
    return os.path.join(_PROJECT_ROOT, "config.yaml")


def _read_yaml(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return cfg if isinstance(cfg, dict) else {}


def read_config(path: str | None = None) -> dict:
    """读取 config.yaml 并规范化；缺失或非法的值回落到 DEFAULTS。"""
    cfg = _read_yaml(path or config_path())
    out = dict(DEFAULTS)

    for k in ("db_path", "test_db_path"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()

    try:
        size = int(cfg.get("page_size", DEFAULTS["page_size"]))
        if size > 0:
            out["page_size"] = size
    except (TypeError, ValueError):
        pass

    level = cfg.get("log_level")
    if isinstance(level, str) and isinstance(logging.getLevelName(level.strip().upper()), int):
        out["log_level"] = level.strip().upper()
    return out
