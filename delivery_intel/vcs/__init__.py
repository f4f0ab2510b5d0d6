"""
VCS (Version Control System) abstraction layer for Delivery Intel.

This module provides a unified interface for fetching repository activity
(pull requests, deployments, pipeline runs) and manifest files.
"""

from delivery_intel.vcs.base import BaseVCSProvider, RateLimitError
from delivery_intel.vcs.github import GitHubProvider

__all__ = [
    "BaseVCSProvider",
    "GitHubProvider",
    "RateLimitError",
    "get_vcs_provider",
    "register_vcs_provider",
    "list_supported_platforms",
]

# Registry of supported VCS providers
_PROVIDERS: dict[str, type[BaseVCSProvider]] = {
    "github": GitHubProvider,
}


def get_vcs_provider(platform: str = "github", **kwargs) -> BaseVCSProvider:
    """
    Factory function to get VCS provider instance.

    Args:
        platform: VCS platform name. Default: 'github'
        **kwargs: Provider-specific configuration (e.g., token)

    Returns:
        Initialized VCS provider instance

    Raises:
        ValueError: If platform is not supported

    Example:
        >>> provider = get_vcs_provider("github", token="ghp_xxx")
    """
    platform_lower = platform.lower()

    if platform_lower not in _PROVIDERS:
        supported = ", ".join(sorted(_PROVIDERS.keys()))
        raise ValueError(
            f"Unsupported VCS platform: {platform}. Supported platforms: {supported}"
        )

    provider_class = _PROVIDERS[platform_lower]
    return provider_class(**kwargs)


def register_vcs_provider(platform: str, provider_class: type[BaseVCSProvider]) -> None:
    """
    Register a custom VCS provider.

    Args:
        platform: Platform identifier (e.g., 'gitea')
        provider_class: Class implementing BaseVCSProvider interface

    Raises:
        TypeError: If provider_class doesn't inherit from BaseVCSProvider
    """
    if not isinstance(provider_class, type) or not issubclass(
        provider_class, BaseVCSProvider
    ):
        raise TypeError(
            f"Provider class must inherit from BaseVCSProvider, "
            f"got {provider_class!r}"
        )

    _PROVIDERS[platform.lower()] = provider_class


def list_supported_platforms() -> list[str]:
    """
    List all supported VCS platforms.

    Returns:
        Sorted list of platform identifiers
    """
    return sorted(_PROVIDERS.keys())
