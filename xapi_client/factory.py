"""
Factory for creating X client instances with proper initialization.
"""

from __future__ import annotations

import httpx

from xapi_client.client import XClient
from xapi_client.config import ClientSettings, ConfigManager, XCredentials


class XClientFactory:
    """Factory for creating properly initialized X API clients."""

    @staticmethod
    def create_from_config(
        config_manager: ConfigManager,
        *,
        settings: ClientSettings | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> XClient:
        """
        Create an XClient from whatever credentials the manager can load.

        Raises:
            ConfigurationError: If credentials are missing or invalid
        """
        credentials = config_manager.load_credentials()
        return XClientFactory.create_from_credentials(credentials, settings=settings, http=http)

    @staticmethod
    def create_from_credentials(
        credentials: XCredentials,
        *,
        settings: ClientSettings | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> XClient:
        """
        Create an XClient directly from credentials.

        OAuth 1.0a user context is used when all four secrets are present,
        otherwise the bearer token.

        Raises:
            ConfigurationError: If neither credential set is complete
        """
        return XClient(credentials.to_auth(), settings=settings, http=http)
