"""
Activity mappers.

Zoho keeps tasks, calls and meetings in three modules (Tasks, Calls,
Events). Each is mapped onto the same canonical Activity shape so the three
sources can be merged into one list.
"""

from typing import Any

from .base import (
    ALWAYS_DEFINED,
    CREATE_ONLY,
    TIMESTAMPS,
    EntityMapper,
    ReadField,
    WriteField,
    first_item,
    ref_id,
    ref_id_list,
    required_text,
    to_int,
)

# Canonical Activity keys no source module fills
_UNSET = ("dueDate", "activityDate", "status", "durationMinutes", "dealId")


def map_activity_status(status: Any) -> str | None:
    """
    Map a Zoho task status onto the canonical activity status.

    Args:
        status: Zoho status text (e.g., "Not Started", "Completed")

    Returns:
        "completed", "cancelled", "pending", or None for an empty status
    """
    if not status:
        return None
    lower = str(status).lower()
    if lower in ("completed", "closed"):
        return "completed"
    if lower in ("cancelled", "canceled"):
        return "cancelled"
    return "pending"


def _fixed(activity_type: str, *filled: str) -> dict[str, Any]:
    fixed: dict[str, Any] = {"type": activity_type}
    fixed.update({key: None for key in _UNSET if key not in filled})
    return fixed


def _constant(value: Any):
    return lambda data: value


COMMON = (
    ReadField("body", "Description"),
    ReadField("contactIds", "Who_Id", ref_id_list),
    ReadField("companyId", "What_Id", ref_id),
    *TIMESTAMPS,
)

TASK_FIELDS = (
    ReadField("subject", "Subject", required_text),
    ReadField("dueDate", "Due_Date"),
    ReadField("status", "Status", map_activity_status),
    *COMMON,
)

TASK_ACTIVITY = EntityMapper(
    "TaskActivity",
    read_fields=TASK_FIELDS,
    write_fields=[
        WriteField("subject", "Subject", **ALWAYS_DEFINED, **CREATE_ONLY),
        WriteField("body", "Description", **ALWAYS_DEFINED, **CREATE_ONLY),
        WriteField("dueDate", "Due_Date", **ALWAYS_DEFINED, **CREATE_ONLY),
        WriteField(_constant("Not Started"), "Status", **CREATE_ONLY),
        WriteField("contactIds", "Who_Id", convert=first_item, **CREATE_ONLY),
        WriteField("companyId", "What_Id", **CREATE_ONLY),
    ],
    fixed=_fixed("task", "dueDate", "status"),
)

# Emails are logged as completed tasks; reading them back keeps the email type
EMAIL_ACTIVITY = EntityMapper(
    "EmailActivity",
    read_fields=TASK_FIELDS,
    write_fields=[
        WriteField(lambda data: f"Email: {data.get('subject')}", "Subject", **CREATE_ONLY),
        WriteField(
            lambda data: f"Direction: {data.get('direction')}\n\n{data.get('body')}",
            "Description",
            **CREATE_ONLY,
        ),
        WriteField(_constant("Completed"), "Status", **CREATE_ONLY),
        WriteField("contactId", "Who_Id", **CREATE_ONLY),
    ],
    fixed=_fixed("email", "dueDate", "status"),
)

CALL_ACTIVITY = EntityMapper(
    "CallActivity",
    read_fields=[
        ReadField("subject", "Subject", required_text),
        ReadField("dueDate", "Call_Start_Time"),
        ReadField("durationMinutes", "Call_Duration", to_int),
        *COMMON,
    ],
    write_fields=[
        WriteField("subject", "Subject", **ALWAYS_DEFINED, **CREATE_ONLY),
        WriteField(_constant("Outbound"), "Call_Type", **CREATE_ONLY),
        WriteField("notes", "Description", **ALWAYS_DEFINED, **CREATE_ONLY),
        WriteField("durationMinutes", "Call_Duration", convert=str, **CREATE_ONLY),
        WriteField("contactId", "Who_Id", **CREATE_ONLY),
    ],
    fixed=_fixed("call", "dueDate", "durationMinutes"),
)

MEETING_ACTIVITY = EntityMapper(
    "MeetingActivity",
    read_fields=[
        ReadField("subject", "Event_Title", required_text),
        ReadField("activityDate", "Start_DateTime"),
        *COMMON,
    ],
    write_fields=[
        WriteField("subject", "Event_Title", **ALWAYS_DEFINED, **CREATE_ONLY),
        WriteField("body", "Description", **ALWAYS_DEFINED, **CREATE_ONLY),
        WriteField("contactIds", "Who_Id", convert=first_item, **CREATE_ONLY),
        WriteField("companyId", "What_Id", **CREATE_ONLY),
    ],
    fixed=_fixed("meeting", "activityDate"),
)
