"""
Adapter settings loaded from config/adapters.yaml, with env as override.

Precedence:
  1) Environment variables (if set)
  2) config/adapters.yaml values
  3) Hardcoded defaults

Recognised keys:
    cache_dir:        directory for file-backed metadata caches
    alchemy_api_key:  key used to build Alchemy RPC URLs
    rpc_urls:         {chain_name: url} explicit RPC overrides
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "adapters.yaml"
DEFAULT_CACHE_DIR = Path("data") / "metadata"

RPC_ENV_PREFIX = "DEFI_ADAPTERS_RPC_"


@dataclass
class Settings:
    cache_dir: Path = DEFAULT_CACHE_DIR
    alchemy_api_key: Optional[str] = None
    rpc_urls: Dict[str, str] = field(default_factory=dict)


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        cfg = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("failed to read %s: %s", path, e)
        return {}
    if not isinstance(cfg, dict):
        logger.warning("ignoring %s: expected a mapping, got %s", path, type(cfg).__name__)
        return {}
    return cfg


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Build Settings from the YAML file and the environment.

    Args:
        path: YAML file to read (defaults to config/adapters.yaml)
    """
    cfg = _read_yaml(Path(path) if path is not None else DEFAULT_CONFIG_PATH)

    cache_dir = cfg.get("cache_dir") or DEFAULT_CACHE_DIR
    raw_key = cfg.get("alchemy_api_key")
    alchemy_key = str(raw_key).strip() if raw_key is not None else ""
    alchemy_key = alchemy_key or None

    raw_rpc_urls = cfg.get("rpc_urls") or {}
    if not isinstance(raw_rpc_urls, dict):
        logger.warning("ignoring rpc_urls: expected a mapping, got %s", type(raw_rpc_urls).__name__)
        raw_rpc_urls = {}
    rpc_urls = {str(k).lower(): str(v) for k, v in raw_rpc_urls.items() if v}

    env_cache = os.getenv("DEFI_ADAPTERS_CACHE_DIR", "").strip()
    if env_cache:
        cache_dir = env_cache
    env_key = os.getenv("ALCHEMY_API_KEY", "").strip()
    if env_key:
        alchemy_key = env_key
    for name, value in os.environ.items():
        if name.startswith(RPC_ENV_PREFIX) and value.strip():
            rpc_urls[name[len(RPC_ENV_PREFIX):].lower()] = value.strip()

    return Settings(cache_dir=Path(cache_dir), alchemy_api_key=alchemy_key, rpc_urls=rpc_urls)
