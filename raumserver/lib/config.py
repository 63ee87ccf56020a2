"""
Shared configuration loader for raumserver.

Loads a single JSON config file.  Search order:
  1. $RAUMSERVER_CONFIG              (explicit override)
  2. /etc/raumserver/config.json     (system install)
  3. config.json                     (CWD — handy for local dev)

Usage:
    from raumserver.lib.config import cfg

    port      = cfg("server", "port", default=8080)
    seed_host = cfg("kernel", "host")
    log_level = cfg("log", "level", default="INFO")
"""

import json
import logging
import os

logger = logging.getLogger(__name__)

_config: dict | None = None

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _search_paths() -> list[str]:
    paths = ["/etc/raumserver/config.json", "config.json"]
    override = os.environ.get("RAUMSERVER_CONFIG")
    if override:
        paths.insert(0, override)
    return paths


def _validate(config: dict, path: str) -> None:
    """Warn about missing or suspicious config values."""
    server = config.get("server") or {}
    port = server.get("port", 8080)
    if not isinstance(port, int) or not 0 < port < 65536:
        logger.warning("Config %s: server.port '%s' is not a valid port", path, port)
    kernel = config.get("kernel") or {}
    if not kernel.get("host"):
        logger.info("Config %s: no kernel.host — speakers will be discovered via multicast", path)
    level = str((config.get("log") or {}).get("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        logger.warning("Config %s: unknown log.level '%s'", path, level)


def load_config() -> dict:
    """Load config from the first JSON file found. Cached after first call."""
    global _config
    if _config is not None:
        return _config

    for path in _search_paths():
        try:
            with open(path) as f:
                _config = json.load(f)
                logger.info("Config loaded from %s", path)
                _validate(_config, path)
                return _config
        except FileNotFoundError:
            continue
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in %s: %s", path, e)
            continue

    logger.warning("No config.json found — using defaults")
    _config = {}
    return _config


def cfg(section: str, key: str | None = None, *, default=None):
    """Read a config value.

    cfg("server")                    → config["server"]
    cfg("server", "port")            → config["server"]["port"]
    cfg("kernel", "discovery_timeout", default=5) → value or 5
    """
    config = load_config()
    val = config.get(section)
    if key is None:
        return val if val is not None else default
    if isinstance(val, dict):
        return val.get(key, default)
    return default


def reload_config():
    """Force re-read from disk (for testing or hot-reload)."""
    global _config
    _config = None
    return load_config()
