"""
Unsealer Factory following Black Box Design principles.

This factory:
- Reads the unseal method from configuration
- Builds the matching unsealer with its credential parameters
- Returns only the Unsealer interface
"""

import logging

from ...config.provider import ConfigProvider, UnsealerConfig
from .interfaces import Unsealer
from .unsealers import (
    UNSEALERS,
    AppIdUnsealer,
    GithubUnsealer,
    TokenUnsealer,
    UserpassUnsealer,
)

logger = logging.getLogger(__name__)


class UnsealerFactory:
    """
    Factory for building the configured unsealer.

    This is the composition root that maps a method name to the
    unsealer implementing it.
    """

    @staticmethod
    def build(config_provider: ConfigProvider) -> Unsealer:
        """
        Build the unsealer selected by configuration.

        Args:
            config_provider: Configuration provider

        Returns:
            Unsealer for the configured method

        Raises:
            ValueError: If the configured method is not supported
        """
        return UnsealerFactory.from_config(config_provider.get_unsealer_config())

    @staticmethod
    def from_config(config: UnsealerConfig) -> Unsealer:
        """
        Build an unsealer from an explicit configuration.

        Args:
            config: Unseal method and credential parameters

        Returns:
            Unsealer for config.method
        """
        if config.method not in UNSEALERS:
            raise ValueError(
                f"Unknown unseal method {config.method!r}. "
                f"Supported methods: {', '.join(sorted(UNSEALERS))}"
            )

        logger.info(f"Building unsealer for method {config.method}")

        if config.method == "token":
            return TokenUnsealer(auth_token=config.auth_token)
        if config.method == "app-id":
            return AppIdUnsealer(
                app_id=config.app_id,
                user_id_method=config.user_id_method,
                user_id_interface=config.user_id_interface,
                user_id_path=config.user_id_path,
                user_id_hash=config.user_id_hash,
                user_id_salt=config.user_id_salt,
            )
        if config.method == "github":
            return GithubUnsealer(personal_token=config.github_token)
        return UserpassUnsealer(username=config.username, password=config.password)
