"""
Async client for the X (Twitter) API with OAuth 1.0a signing and chunked media upload.
"""

__version__ = "0.3.0"

from xapi_client.auth import BearerToken, OAuth1Credentials, OAuth1UserContext
from xapi_client.client import XClient
from xapi_client.config import ClientSettings, ConfigManager, XCredentials
from xapi_client.factory import XClientFactory
from xapi_client.services.media_service import MediaService
from xapi_client.services.post_service import PostService

__all__ = [
    "BearerToken",
    "ClientSettings",
    "ConfigManager",
    "MediaService",
    "OAuth1Credentials",
    "OAuth1UserContext",
    "PostService",
    "XClient",
    "XClientFactory",
    "XCredentials",
    "__version__",
]
