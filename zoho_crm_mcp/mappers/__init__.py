"""Entity mappers between canonical entities and Zoho CRM records."""

from .base import (
    EntityMapper,
    ReadField,
    WriteField,
    Include,
    OMIT,
    CREATE,
    UPDATE,
    compact,
)
from .crm import CONTACT, COMPANY, DEAL, LEAD, LEAD_CONVERSION, PIPELINE
from .inventory import (
    PRODUCT,
    QUOTE,
    SALES_ORDER,
    PURCHASE_ORDER,
    INVOICE,
    VENDOR,
    PRICE_BOOK,
)
from .service import CAMPAIGN, CASE, SOLUTION, EVENT, NOTE, RECORD_NOTE, ATTACHMENT
from .activities import (
    TASK_ACTIVITY,
    CALL_ACTIVITY,
    MEETING_ACTIVITY,
    EMAIL_ACTIVITY,
    map_activity_status,
)
from .metadata import (
    MODULE,
    FIELD,
    LAYOUT,
    CUSTOM_VIEW,
    RELATED_LIST,
    TAG,
    USER,
    PROFILE,
    ROLE,
)

__all__ = [
    "EntityMapper",
    "ReadField",
    "WriteField",
    "Include",
    "OMIT",
    "CREATE",
    "UPDATE",
    "compact",
    "CONTACT",
    "COMPANY",
    "DEAL",
    "LEAD",
    "LEAD_CONVERSION",
    "PIPELINE",
    "PRODUCT",
    "QUOTE",
    "SALES_ORDER",
    "PURCHASE_ORDER",
    "INVOICE",
    "VENDOR",
    "PRICE_BOOK",
    "CAMPAIGN",
    "CASE",
    "SOLUTION",
    "EVENT",
    "NOTE",
    "RECORD_NOTE",
    "ATTACHMENT",
    "TASK_ACTIVITY",
    "CALL_ACTIVITY",
    "MEETING_ACTIVITY",
    "EMAIL_ACTIVITY",
    "map_activity_status",
    "MODULE",
    "FIELD",
    "LAYOUT",
    "CUSTOM_VIEW",
    "RELATED_LIST",
    "TAG",
    "USER",
    "PROFILE",
    "ROLE",
]
