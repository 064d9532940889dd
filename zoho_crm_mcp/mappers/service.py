"""Mappers for marketing, support and collaboration modules."""

from typing import Any

from .base import (
    ALWAYS_DEFINED,
    CREATE_ONLY,
    OWNER,
    TIMESTAMPS,
    UPDATE_ONLY,
    EntityMapper,
    ReadField,
    WriteField,
    as_ref,
    passthrough,
    ref_id,
    ref_name,
    required_text,
)


def ref_module(value: Any) -> Any:
    """Read the module of a ``{module, id}`` parent reference."""
    if not value:
        return None
    return value.get("module") or None


def _participants(participants: Any) -> list[dict[str, Any]] | None:
    if participants is None:
        return None
    return [
        {
            "participant": p.get("participant"),
            "type": p.get("type"),
            "status": p.get("status"),
        }
        for p in participants
    ]


def _note_parent(data: Any) -> dict[str, Any]:
    return {"module": data.get("parentModule"), "id": data.get("parentId")}


CAMPAIGN = EntityMapper(
    "Campaign",
    read_fields=[
        ReadField("campaignName", "Campaign_Name", required_text),
        ReadField("type", "Type"),
        ReadField("status", "Status"),
        ReadField("startDate", "Start_Date"),
        ReadField("endDate", "End_Date"),
        ReadField("expectedRevenue", "Expected_Revenue"),
        ReadField("budgetedCost", "Budgeted_Cost"),
        ReadField("actualCost", "Actual_Cost"),
        ReadField("expectedResponse", "Expected_Response"),
        ReadField("numSent", "Num_sent"),
        ReadField("parentCampaign", "Parent_Campaign", ref_name),
        ReadField("description", "Description"),
        OWNER,
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("campaignName", "Campaign_Name", **ALWAYS_DEFINED),
        WriteField("type", "Type"),
        WriteField("status", "Status"),
        WriteField("startDate", "Start_Date"),
        WriteField("endDate", "End_Date"),
        WriteField("expectedRevenue", "Expected_Revenue", **ALWAYS_DEFINED),
        WriteField("budgetedCost", "Budgeted_Cost", **ALWAYS_DEFINED),
        WriteField("actualCost", "Actual_Cost", **UPDATE_ONLY),
        WriteField("description", "Description"),
    ],
)

CASE = EntityMapper(
    "Case",
    read_fields=[
        ReadField("subject", "Subject", required_text),
        ReadField("caseNumber", "Case_Number"),
        ReadField("status", "Status"),
        ReadField("type", "Type"),
        ReadField("priority", "Priority"),
        ReadField("origin", "Case_Origin"),
        ReadField("reason", "Case_Reason"),
        ReadField("reportedBy", "Reported_By"),
        ReadField("accountId", "Account_Name", ref_id),
        ReadField("accountName", "Account_Name", ref_name),
        ReadField("contactId", "Contact_Name", ref_id),
        ReadField("contactName", "Contact_Name", ref_name),
        ReadField("dealId", "Deal_Name", ref_id),
        ReadField("dealName", "Deal_Name", ref_name),
        ReadField("productId", "Product_Name", ref_id),
        ReadField("productName", "Product_Name", ref_name),
        ReadField("email", "Email"),
        ReadField("phone", "Phone"),
        ReadField("solution", "Solution"),
        ReadField("internalComments", "Internal_Comments"),
        ReadField("description", "Description"),
        OWNER,
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("subject", "Subject", **ALWAYS_DEFINED),
        WriteField("status", "Status"),
        WriteField("type", "Type"),
        WriteField("priority", "Priority"),
        WriteField("origin", "Case_Origin"),
        WriteField("accountId", "Account_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("contactId", "Contact_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("solution", "Solution", **UPDATE_ONLY),
        WriteField("internalComments", "Internal_Comments", **UPDATE_ONLY),
        WriteField("description", "Description"),
    ],
)

SOLUTION = EntityMapper(
    "Solution",
    read_fields=[
        ReadField("solutionTitle", "Solution_Title", required_text),
        ReadField("solutionNumber", "Solution_Number"),
        ReadField("status", "Status"),
        ReadField("productId", "Product_Name", ref_id),
        ReadField("productName", "Product_Name", ref_name),
        ReadField("question", "Question"),
        ReadField("answer", "Answer"),
        ReadField("addToKnowledgeBase", "Add_to_Knowledge_Base", passthrough),
        ReadField("noOfComments", "No_of_comments"),
        OWNER,
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("solutionTitle", "Solution_Title", **ALWAYS_DEFINED),
        WriteField("status", "Status"),
        WriteField("productId", "Product_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("question", "Question"),
        WriteField("answer", "Answer"),
        WriteField("addToKnowledgeBase", "Add_to_Knowledge_Base", **ALWAYS_DEFINED),
    ],
)

# The Events module seen as a calendar entity (see activities for the
# activity view of the same records)
EVENT = EntityMapper(
    "Event",
    read_fields=[
        ReadField("eventTitle", "Event_Title", required_text),
        ReadField("allDay", "All_day", passthrough),
        ReadField("startDateTime", "Start_DateTime", required_text),
        ReadField("endDateTime", "End_DateTime", required_text),
        ReadField("location", "Location"),
        ReadField("venue", "Venue"),
        ReadField("whatId", "What_Id", ref_id),
        ReadField("whatName", "What_Id", ref_name),
        ReadField("whoId", "Who_Id", ref_id),
        ReadField("whoName", "Who_Id", ref_name),
        ReadField("participants", "Participants", _participants),
        ReadField("remindAt", "Remind_At"),
        ReadField("recurringActivity", "Recurring_Activity", passthrough),
        ReadField("description", "Description"),
        OWNER,
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("eventTitle", "Event_Title", **ALWAYS_DEFINED),
        WriteField("startDateTime", "Start_DateTime", **ALWAYS_DEFINED),
        WriteField("endDateTime", "End_DateTime", **ALWAYS_DEFINED),
        WriteField("allDay", "All_day", **ALWAYS_DEFINED),
        WriteField("location", "Location"),
        WriteField("whatId", "What_Id", convert=as_ref),
        WriteField("whoId", "Who_Id", convert=as_ref),
        WriteField("remindAt", "Remind_At"),
        WriteField("description", "Description"),
        WriteField("participants", "Participants", **CREATE_ONLY),
    ],
)

NOTE_FIELDS = (
    ReadField("noteTitle", "Note_Title"),
    ReadField("noteContent", "Note_Content", required_text),
    ReadField("parentModule", "Parent_Id", ref_module),
    ReadField("parentId", "Parent_Id", ref_id),
    ReadField("voiceNote", "Voice_Note", passthrough),
    OWNER,
    *TIMESTAMPS,
)

NOTE = EntityMapper(
    "Note",
    read_fields=NOTE_FIELDS,
    write_fields=[
        WriteField("noteContent", "Note_Content", **ALWAYS_DEFINED),
        WriteField(_note_parent, "Parent_Id", **CREATE_ONLY),
        WriteField("noteTitle", "Note_Title"),
    ],
)

# Notes added through a record's Notes related list; the parent is in the URL
RECORD_NOTE = EntityMapper(
    "Note",
    read_fields=NOTE_FIELDS,
    write_fields=[
        WriteField("noteContent", "Note_Content", **ALWAYS_DEFINED),
        WriteField("noteTitle", "Note_Title"),
    ],
)

ATTACHMENT = EntityMapper(
    "Attachment",
    read_fields=[
        ReadField("fileName", "File_Name", required_text),
        ReadField("fileId", "File_Id"),
        ReadField("size", "Size"),
        ReadField("parentModule", "Parent_Id", ref_module),
        ReadField("parentId", "Parent_Id", ref_id),
        ReadField("attachmentType", "Attachment_Type"),
        *TIMESTAMPS,
    ],
)
