"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.annihilator/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".annihilator"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
DEFAULT_CONTENT_DIR = DEFAULT_CONFIG_DIR
DEFAULT_CACHE_DIR_NAME = "object-cache"
DEFAULT_FILE_PREFIX = "wp_cache_"
DROPIN_FILE_NAME = "object-cache.yaml"
ENV_FILE_NAME = ".env"

# --- Global Configuration Store (Simple Approach) ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # For testing purposes
_loaded = False

def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(yaml_config)
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):  # ENV VARS take precedence
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no file found).")

    # 3. Environment Variables (Highest priority) are handled in get_config

    _loaded = True
    logger.debug("Configuration loading process completed.")

def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable
    3. YAML config
    4. Default value

    Args:
        key: The configuration key
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    # Environment variables are looked up in uppercase
    env_key = key.upper()
    if env_key in os.environ:
        value = os.environ[env_key]
        if value.lower() == 'true':
            return True
        elif value.lower() == 'false':
            return False
        try:
            if '.' in value:
                return float(value)
            else:
                return int(value)
        except (ValueError, TypeError):
            return value

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default

def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None

# --- Convenience Functions ---

def _get_string(env_key: str, yaml_key: str) -> Optional[str]:
    value = get_config(env_key)
    if value is None:
        value = get_config(yaml_key)
    return str(value) if value is not None else None

def get_content_dir() -> Path:
    """Directory of the host content (drop-in manifest, default cache dir)."""
    content_dir = _get_string('ANNIHILATOR_CONTENT_DIR', 'content_dir')
    return Path(content_dir).expanduser() if content_dir else DEFAULT_CONTENT_DIR

def get_cache_dir() -> Path:
    """Base directory of the file cache."""
    cache_dir = _get_string('ANNIHILATOR_CACHE_DIR', 'cache.dir')
    if cache_dir:
        return Path(cache_dir).expanduser()
    return get_content_dir() / DEFAULT_CACHE_DIR_NAME

def get_file_prefix() -> str:
    prefix = _get_string('ANNIHILATOR_FILE_PREFIX', 'cache.file_prefix')
    return prefix if prefix is not None else DEFAULT_FILE_PREFIX

def get_tenant_id() -> Optional[str]:
    """Active tenant, or None for single-tenant mode."""
    tenant_id = _get_string('ANNIHILATOR_TENANT_ID', 'cache.tenant_id')
    return tenant_id or None

def get_dropin_path() -> Path:
    return get_content_dir() / DROPIN_FILE_NAME

def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")

def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")

# Load configuration when the module is imported
load_configuration()
