"""Zoho CRM client: request execution and canonical operations."""

from .executor import RequestExecutor, RetryingExecutor
from .resources import ModuleResource, ModuleSpec, API_PREFIX
from .crm_client import ZohoCRMClient, create_crm_client

__all__ = [
    "RequestExecutor",
    "RetryingExecutor",
    "ModuleResource",
    "ModuleSpec",
    "API_PREFIX",
    "ZohoCRMClient",
    "create_crm_client",
]
