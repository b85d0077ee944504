"""Constants and configuration defaults used in the project."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    NPM_REGISTRY_HOST = "registry.npmjs.org"
    DATASOURCE_ID_NPM = "npm"
    CACHE_NAMESPACE_NPM = "datasource-npm"
    NPM_CACHE_MINUTES = 15
    # Scoped packages known to be public; their unauthenticated responses may be persisted
    NPM_PUBLIC_SCOPES = [
        "@graphql-codegen",
        "@storybook",
        "@types",
        "@typescript-eslint",
    ]
    NPM_ACCEPT_HEADER = "application/json"
    CACHE_DIR = os.path.join(os.path.expanduser("~"), ".cache", "depfetch")
    CONFIG_FILE = "depfetch.yml"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3

    ENV_CONFIG = "DEPFETCH_CONFIG"
    ENV_CACHE_NPM_MINUTES = "DEPFETCH_CACHE_NPM_MINUTES"
    ENV_CACHE_DIR = "DEPFETCH_CACHE_DIR"
    ENV_LOG_LEVEL = "DEPFETCH_LOG_LEVEL"


def _load_yaml_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Read the YAML config file, returning an empty mapping when absent.

    Lookup order: explicit path, DEPFETCH_CONFIG, ./depfetch.yml.
    """
    candidate = path or os.environ.get(Constants.ENV_CONFIG) or Constants.CONFIG_FILE
    if not os.path.isfile(candidate):
        if path:
            logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(candidate, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Couldn't read config file %s: %s", candidate, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level must be a mapping", candidate)
        return {}
    return data


def _parse_minutes(value: Any, source: str) -> Optional[int]:
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid npm cache minutes from %s: %r", source, value)
        return None
    if minutes < 0:
        logger.warning("Ignoring negative npm cache minutes from %s: %r", source, value)
        return None
    return minutes


def load_config(path: Optional[str] = None) -> None:
    """Apply YAML config and environment overrides onto Constants.

    Environment variables take precedence over the YAML file; CLI flags are
    applied afterwards by the caller and win over both.
    """
    data = _load_yaml_config(path)

    npm_cfg = data.get("npm") or {}
    if isinstance(npm_cfg, dict):
        if "cache_minutes" in npm_cfg:
            minutes = _parse_minutes(npm_cfg["cache_minutes"], "config")
            if minutes is not None:
                Constants.NPM_CACHE_MINUTES = minutes
        scopes = npm_cfg.get("public_scopes")
        if isinstance(scopes, list):
            Constants.NPM_PUBLIC_SCOPES = [str(s) for s in scopes]
        if npm_cfg.get("registry_url"):
            Constants.REGISTRY_URL_NPM = str(npm_cfg["registry_url"])

    cache_cfg = data.get("cache") or {}
    if isinstance(cache_cfg, dict) and cache_cfg.get("dir"):
        Constants.CACHE_DIR = os.path.expanduser(str(cache_cfg["dir"]))

    env_minutes = os.environ.get(Constants.ENV_CACHE_NPM_MINUTES)
    if env_minutes:
        minutes = _parse_minutes(env_minutes, Constants.ENV_CACHE_NPM_MINUTES)
        if minutes is not None:
            Constants.NPM_CACHE_MINUTES = minutes

    env_cache_dir = os.environ.get(Constants.ENV_CACHE_DIR)
    if env_cache_dir:
        Constants.CACHE_DIR = os.path.expanduser(env_cache_dir)
