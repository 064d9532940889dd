"""OAuth token management."""

from .token_manager import TokenManager, resolve_token_url, REGIONAL_TOKEN_URLS, DEFAULT_TOKEN_URL

__all__ = ["TokenManager", "resolve_token_url", "REGIONAL_TOKEN_URLS", "DEFAULT_TOKEN_URL"]
