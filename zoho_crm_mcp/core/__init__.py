"""Core components for the Zoho CRM adapter."""

from .errors import (
    CrmApiError,
    RateLimitError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
    is_retryable_error,
    format_error_for_logging,
)
from .models import (
    TenantCredentials,
    CachedToken,
    ConfigError,
    DEFAULT_BASE_URL,
)
from .pagination import PaginationState, build_page, empty_info
from .config_store import (
    get_base_dir,
    profile_path,
    save_json,
    load_json,
    save_profile,
    load_profile,
    list_profiles,
    delete_profile,
)

__all__ = [
    "CrmApiError",
    "RateLimitError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "is_retryable_error",
    "format_error_for_logging",
    "TenantCredentials",
    "CachedToken",
    "ConfigError",
    "DEFAULT_BASE_URL",
    "PaginationState",
    "build_page",
    "empty_info",
    "get_base_dir",
    "profile_path",
    "save_json",
    "load_json",
    "save_profile",
    "load_profile",
    "list_profiles",
    "delete_profile",
]
