# utils/config.py
import os
from pathlib import Path
import yaml
from dotenv import load_dotenv

from utils.logger import logger

WILDCARD_HOSTS = {"0.0.0.0", "::", ""}


def load_cfg(cfg_path: str | None = None):

    base_dir = Path(__file__).resolve().parents[1]

    cfg_file = Path(cfg_path) if cfg_path else (base_dir / "config.yaml")

    load_dotenv(base_dir / ".env")

    with open(cfg_file, "r", encoding="utf-8") as f:
        raw_cfg = yaml.safe_load(f) or {}

    def resolve_env(obj):
        if isinstance(obj, dict):
            return {k: resolve_env(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [resolve_env(v) for v in obj]
        if isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
            varname = obj[2:-1]
            return os.getenv(varname, "")
        return obj

    cfg = resolve_env(raw_cfg)

    host = (cfg.get("server") or {}).get("host")
    if host is not None and str(host).strip() in WILDCARD_HOSTS:
        logger.warning(f"Server host '{host}' listens on all interfaces, balance is exposed to the network")

    logger.debug(f"Config loaded from {cfg_file}")
    return cfg
