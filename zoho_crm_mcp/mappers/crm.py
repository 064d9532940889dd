"""Mappers for the core sales modules: contacts, accounts, deals and leads."""

from typing import Any, Mapping

from .base import (
    ALWAYS_DEFINED,
    CREATE_ONLY,
    UPDATE_ONLY,
    OMIT,
    OWNER,
    TIMESTAMPS,
    EntityMapper,
    ReadField,
    WriteField,
    first_item,
    passthrough,
    ref_id,
    ref_id_list,
    ref_name,
    required_text,
)


# Deal status values that translate to a closing stage
DEAL_STATUS_STAGES = {
    "won": "Closed Won",
    "lost": "Closed Lost",
}


def _billing_address(record: Mapping[str, Any]) -> dict[str, Any] | None:
    if not record.get("Billing_Street"):
        return None
    return {
        "street": record.get("Billing_Street"),
        "city": record.get("Billing_City"),
        "state": record.get("Billing_State"),
        "country": record.get("Billing_Country"),
    }


def _status_to_stage(status: Any) -> Any:
    return DEAL_STATUS_STAGES.get(status, OMIT)


def _pipeline_stages(maps: Any) -> list[dict[str, Any]]:
    return [
        {
            "id": stage.get("id"),
            "name": stage.get("display_value"),
            "order": stage.get("sequence_number"),
        }
        for stage in maps or []
    ]


CONTACT = EntityMapper(
    "Contact",
    read_fields=[
        ReadField("firstName", "First_Name"),
        ReadField("lastName", "Last_Name"),
        ReadField("fullName", "Full_Name"),
        ReadField("email", "Email"),
        ReadField("phone", "Phone"),
        ReadField("mobilePhone", "Mobile"),
        ReadField("title", "Title"),
        ReadField("department", "Department"),
        ReadField("companyId", "Account_Name", ref_id),
        ReadField("companyName", "Account_Name", ref_name),
        ReadField("source", "Lead_Source"),
        OWNER,
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("firstName", "First_Name"),
        WriteField("lastName", "Last_Name"),
        WriteField("email", "Email"),
        WriteField("phone", "Phone"),
        WriteField("title", "Title"),
        # Contacts take the bare account id
        WriteField("companyId", "Account_Name"),
        WriteField("source", "Lead_Source", **CREATE_ONLY),
    ],
)


COMPANY = EntityMapper(
    "Company",
    read_fields=[
        ReadField("name", "Account_Name", required_text),
        ReadField("website", "Website"),
        ReadField("industry", "Industry"),
        ReadField("description", "Description"),
        ReadField("numberOfEmployees", "Employees"),
        ReadField("annualRevenue", "Annual_Revenue"),
        ReadField("type", "Account_Type"),
        ReadField("phone", "Phone"),
        ReadField(
            "address",
            _billing_address,
            passthrough,
            projection=("Billing_Street", "Billing_City", "Billing_State", "Billing_Country"),
        ),
        OWNER,
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("name", "Account_Name"),
        WriteField("domain", "Website"),
        WriteField("industry", "Industry"),
        WriteField("description", "Description"),
        WriteField("numberOfEmployees", "Employees"),
        WriteField("type", "Account_Type"),
        WriteField("phone", "Phone"),
        WriteField("address.street", "Billing_Street"),
        WriteField("address.city", "Billing_City"),
        WriteField("address.state", "Billing_State"),
        WriteField("address.country", "Billing_Country"),
    ],
)


DEAL = EntityMapper(
    "Deal",
    read_fields=[
        ReadField("name", "Deal_Name", required_text),
        ReadField("amount", "Amount"),
        ReadField("stage", "Stage"),
        ReadField("stageId", "Stage"),
        ReadField("closeDate", "Closing_Date"),
        ReadField("companyId", "Account_Name", ref_id),
        ReadField("companyName", "Account_Name", ref_name),
        ReadField("contactIds", "Contact_Name", ref_id_list),
        ReadField("probability", "Probability"),
        ReadField("pipelineId", "Pipeline"),
        OWNER,
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("name", "Deal_Name"),
        WriteField("amount", "Amount", **ALWAYS_DEFINED),
        WriteField("stageId", "Stage"),
        WriteField("closeDate", "Closing_Date"),
        WriteField("companyId", "Account_Name", **CREATE_ONLY),
        # Zoho deals carry a single primary contact
        WriteField("contactIds", "Contact_Name", convert=first_item, **CREATE_ONLY),
        WriteField("pipelineId", "Pipeline", **CREATE_ONLY),
        # Must follow stageId: a won/lost status overrides the stage
        WriteField("status", "Stage", convert=_status_to_stage, **UPDATE_ONLY),
    ],
)


LEAD = EntityMapper(
    "Lead",
    read_fields=[
        ReadField("firstName", "First_Name"),
        ReadField("lastName", "Last_Name", required_text),
        ReadField("email", "Email"),
        ReadField("phone", "Phone"),
        ReadField("mobile", "Mobile"),
        ReadField("company", "Company"),
        ReadField("title", "Designation"),
        ReadField("website", "Website"),
        ReadField("industry", "Industry"),
        ReadField("annualRevenue", "Annual_Revenue"),
        ReadField("numberOfEmployees", "No_of_Employees"),
        ReadField("leadSource", "Lead_Source"),
        ReadField("leadStatus", "Lead_Status"),
        ReadField("rating", "Rating"),
        ReadField("description", "Description"),
        ReadField("street", "Street"),
        ReadField("city", "City"),
        ReadField("state", "State"),
        ReadField("zipCode", "Zip_Code"),
        ReadField("country", "Country"),
        OWNER,
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("lastName", "Last_Name", **ALWAYS_DEFINED),
        WriteField("firstName", "First_Name"),
        WriteField("email", "Email"),
        WriteField("phone", "Phone"),
        WriteField("company", "Company"),
        WriteField("title", "Designation"),
        WriteField("website", "Website"),
        WriteField("industry", "Industry"),
        WriteField("leadSource", "Lead_Source"),
        WriteField("leadStatus", "Lead_Status"),
        WriteField("description", "Description"),
    ],
)


# Body of a Leads convert action; only the create rules apply
LEAD_CONVERSION = EntityMapper(
    "LeadConversion",
    read_fields=[
        ReadField("contact", "Contacts", passthrough),
        ReadField("account", "Accounts", passthrough),
        ReadField("deal", "Deals", passthrough),
    ],
    write_fields=[
        WriteField("deals", "Deals"),
        WriteField("accounts", "Accounts"),
        WriteField("contacts", "Contacts"),
        WriteField("carryOverTags", "carry_over_tags", **ALWAYS_DEFINED),
        WriteField("notifyLeadOwner", "notify_lead_owner", **ALWAYS_DEFINED),
        WriteField("notifyNewEntityOwner", "notify_new_entity_owner", **ALWAYS_DEFINED),
    ],
)


PIPELINE = EntityMapper(
    "Pipeline",
    read_fields=[
        ReadField("name", "display_value", passthrough),
        ReadField("isDefault", "default", passthrough),
        ReadField("stages", "maps", _pipeline_stages),
    ],
)
