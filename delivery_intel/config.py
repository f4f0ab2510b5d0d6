"""
Configuration management for Delivery Intel.

Settings are resolved in this order:
1. Values set explicitly (CLI flags call the ``set_*`` helpers)
2. DELIVERY_INTEL_* environment variables
3. .delivery-intel.toml (local config)
4. pyproject.toml ([tool.delivery-intel] table)
5. Built-in defaults
"""

import os
import tomllib
from pathlib import Path
from typing import Any

# project_root is the parent directory of delivery_intel/
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Global configuration for SSL verification
# Default: True (verify SSL certificates)
# Can be set to False by CLI --insecure flag
VERIFY_SSL = True

# Cache configuration
# Default cache directory: ~/.cache/delivery-intel
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "delivery-intel"
# Default TTL: 5 minutes (in seconds)
DEFAULT_CACHE_TTL = 5 * 60

# Number of dependencies queried concurrently against OSV.dev
DEFAULT_BATCH_SIZE = 10

# Global settings (can be overridden)
_CACHE_DIR: Path | None = None
_CACHE_TTL: int | None = None
_BATCH_SIZE: int | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def get_tool_config() -> dict[str, Any]:
    """
    Return the [tool.delivery-intel] table.

    .delivery-intel.toml takes priority; pyproject.toml is only consulted when
    the local file has no such table.
    """
    for filename in (".delivery-intel.toml", "pyproject.toml"):
        config_path = PROJECT_ROOT / filename
        if not config_path.exists():
            continue
        config = load_config_file(config_path)
        tool_config = config.get("tool", {}).get("delivery-intel")
        if tool_config:
            return tool_config
    return {}


def set_verify_ssl(verify: bool) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool:
    """
    Get the current SSL verification setting.

    Returns:
        Whether SSL verification is enabled.
    """
    return VERIFY_SSL


def get_cache_dir() -> Path:
    """
    Get the cache directory path.

    Priority:
    1. Explicitly set value via set_cache_dir()
    2. DELIVERY_INTEL_CACHE_DIR environment variable
    3. [tool.delivery-intel.cache] directory
    4. Default: ~/.cache/delivery-intel

    Returns:
        Path to the cache directory.
    """
    if _CACHE_DIR is not None:
        return _CACHE_DIR

    env_cache_dir = os.getenv("DELIVERY_INTEL_CACHE_DIR")
    if env_cache_dir:
        return Path(env_cache_dir).expanduser()

    cache_config = get_tool_config().get("cache", {})
    if "directory" in cache_config:
        return Path(cache_config["directory"]).expanduser()

    return DEFAULT_CACHE_DIR


def set_cache_dir(path: Path | str) -> None:
    """
    Set the cache directory path explicitly.

    Args:
        path: Path to the cache directory.
    """
    global _CACHE_DIR
    _CACHE_DIR = Path(path).expanduser()


def get_cache_ttl() -> int:
    """
    Get the cache TTL (Time To Live) in seconds.

    Priority:
    1. Explicitly set value via set_cache_ttl()
    2. DELIVERY_INTEL_CACHE_TTL environment variable
    3. [tool.delivery-intel.cache] ttl_seconds
    4. Default: 300 (5 minutes)

    Returns:
        TTL in seconds.
    """
    if _CACHE_TTL is not None:
        return _CACHE_TTL

    env_cache_ttl = os.getenv("DELIVERY_INTEL_CACHE_TTL")
    if env_cache_ttl:
        try:
            return int(env_cache_ttl)
        except ValueError:
            pass

    cache_config = get_tool_config().get("cache", {})
    if "ttl_seconds" in cache_config:
        return int(cache_config["ttl_seconds"])

    return DEFAULT_CACHE_TTL


def set_cache_ttl(seconds: int) -> None:
    """
    Set the cache TTL (Time To Live) explicitly.

    Args:
        seconds: TTL in seconds.
    """
    global _CACHE_TTL
    _CACHE_TTL = seconds


def is_cache_enabled() -> bool:
    """
    Check if cache is enabled.

    Returns:
        Whether cache is enabled ([tool.delivery-intel.cache] enabled, default True).
    """
    cache_config = get_tool_config().get("cache", {})
    if "enabled" in cache_config:
        return bool(cache_config["enabled"])
    return True


def get_batch_size() -> int:
    """
    Get the number of dependencies queried concurrently per scan batch.

    Priority:
    1. Explicitly set value via set_batch_size()
    2. DELIVERY_INTEL_BATCH_SIZE environment variable
    3. [tool.delivery-intel] batch_size
    4. Default: 10
    """
    if _BATCH_SIZE is not None:
        return _BATCH_SIZE

    env_batch_size = os.getenv("DELIVERY_INTEL_BATCH_SIZE")
    if env_batch_size:
        try:
            value = int(env_batch_size)
            if value >= 1:
                return value
        except ValueError:
            pass

    configured = get_tool_config().get("batch_size")
    if configured is not None:
        if not isinstance(configured, int) or configured < 1:
            raise ValueError(
                f"batch_size must be an integer greater than or equal to 1, got {configured!r}."
            )
        return configured

    return DEFAULT_BATCH_SIZE


def set_batch_size(size: int) -> None:
    """
    Set the scan batch size explicitly.

    Args:
        size: Dependencies per batch (>= 1).

    Raises:
        ValueError: If size is smaller than 1.
    """
    global _BATCH_SIZE
    if size < 1:
        raise ValueError(f"batch_size must be >= 1, got {size}.")
    _BATCH_SIZE = size
