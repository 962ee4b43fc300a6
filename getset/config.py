import yaml, os
from typing import Optional

DEFAULTS = {
    "host": "localhost",
    "port": 8081,
    "config_file": "config.txt",
    "www_dir": "www",
    "section": "main",
    "log_level": "INFO",
}


def resolve_config(cfg: Optional[dict] = None, default_base_dir: Optional[str] = None) -> dict:
    """Fill in defaults and turn relative paths into absolute ones under base_dir."""
    resolved = {**DEFAULTS, **(cfg or {})}
    base_dir = os.path.abspath(resolved.get("base_dir") or default_base_dir or os.getcwd())
    resolved["base_dir"] = base_dir
    resolved["config_path"] = os.path.join(base_dir, resolved["config_file"])
    resolved["www_path"] = os.path.join(base_dir, resolved["www_dir"])
    return resolved


def load_config(path: Optional[str], default_base_dir: Optional[str] = None) -> dict:
    cfg = {}
    if path:
        with open(path, "r") as f:
            cfg = yaml.safe_load(f) or {}
        # relative base_dir is taken from the config file location
        if cfg.get("base_dir") and not os.path.isabs(cfg["base_dir"]):
            cfg["base_dir"] = os.path.join(os.path.dirname(path), cfg["base_dir"])
    return resolve_config(cfg, default_base_dir)
