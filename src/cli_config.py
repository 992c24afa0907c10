"""Configuration loading for the CLI.

Resolution options come from three layers, highest precedence first:
CLI flags, the YAML config file, and the built-in defaults in Constants.
A missing or malformed config file never breaks the CLI; it is logged and
treated as empty.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants
from resolution.config import LookupOptions, ResolutionConfig

logger = logging.getLogger(__name__)


def find_config_file(explicit: Optional[str] = None) -> Optional[str]:
    """Return the config path to use, if any.

    Priority:
    1. Explicit --config argument
    2. BUNDLE_RESOLVER_CONFIG environment variable
    3. bundle-resolver.yml / bundle-resolver.yaml in the working directory
    """
    if explicit:
        return explicit
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path and env_path.strip():
        return env_path.strip()
    for candidate in Constants.DEFAULT_CONFIG_FILES:
        if os.path.isfile(candidate):
            return candidate
    return None


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML config file into a dict; problems yield an empty dict."""
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", path)
        return {}
    return data


def build_resolution_config(args, file_config: Optional[Dict[str, Any]] = None) -> ResolutionConfig:
    """Combine the config file's ``resolution`` section with CLI overrides."""
    section = (file_config or {}).get("resolution")
    if section is not None and not isinstance(section, dict):
        logger.warning("Ignoring 'resolution' config section: not a mapping")
        section = None
    config = ResolutionConfig.from_dict(section)

    if getattr(args, "RESOLVE_OPTIONAL", False):
        config.resolve_optional = True
    if getattr(args, "NO_DEPENDENTS", False):
        config.resolve_dependents = False
    if getattr(args, "IGNORE_ERRORS", False):
        config.ignore_errors = True
    if getattr(args, "LOCAL_ONLY", False):
        config.lookup_options |= LookupOptions.LOCAL_ONLY

    logger.debug("Resolution config: %s", config)
    return config
