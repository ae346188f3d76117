"""Server and service config for the EkoSim status server.

Defaults: loaded from config/config.yaml.example (single source of truth, no code-level defaults).
Callers may pass an override dict (e.g. tests binding an ephemeral port); there is no config file or env lookup.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Lazy-loaded example config (single source of truth for defaults)
_EXAMPLE_CONFIG: Optional[Dict[str, Any]] = None


def _load_example_config() -> Dict[str, Any]:
    """Load config.yaml.example as defaults. No code-level defaults."""
    global _EXAMPLE_CONFIG
    if _EXAMPLE_CONFIG is None:
        path = Path(__file__).resolve().parent.parent.parent / "config" / "config.yaml.example"
        with open(path, encoding="utf-8") as f:
            _EXAMPLE_CONFIG = yaml.safe_load(f) or {}
    return _EXAMPLE_CONFIG


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base. Override values take precedence."""
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _merged_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Merge config with example so missing keys come from config file."""
    return _deep_merge(_load_example_config(), cfg)


def _section(cfg: Dict[str, Any], section: str) -> Dict[str, Any]:
    """Get top-level section. Returns {} if missing or not a mapping."""
    s = cfg.get(section)
    return s if isinstance(s, dict) else {}


def get_server_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return listener config (host, port, log_level). Port 3000 on all interfaces unless overridden."""
    cfg = config or {}
    merged = _merged_config(cfg)
    s = _section(merged, "server")
    return {
        "host": str(s.get("host")),
        "port": int(s.get("port")),
        "log_level": str(s.get("log_level") or "info").lower(),
    }


def get_service_info(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the fixed strings served by GET / and GET /health."""
    cfg = config or {}
    merged = _merged_config(cfg)
    s = _section(merged, "service")
    return {
        "status": s.get("status"),
        "message": s.get("message"),
        "health_status": s.get("health_status"),
    }
