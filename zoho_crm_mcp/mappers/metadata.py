"""Mappers for settings, tag and user payloads (snake_case -> camelCase)."""

from typing import Any

from .base import ALWAYS_DEFINED, EntityMapper, ReadField, WriteField, passthrough


def _plain(*pairs: tuple[str, str]) -> list[ReadField]:
    """Settings payloads are copied as-is, only renaming the keys."""
    return [ReadField(key, source, passthrough) for key, source in pairs]


def _pick_list_values(values: Any) -> list[dict[str, Any]] | None:
    if values is None:
        return None
    return [
        {"displayValue": v.get("display_value"), "actualValue": v.get("actual_value")}
        for v in values
    ]


def _layout_sections(sections: Any) -> list[dict[str, Any]] | None:
    if sections is None:
        return None
    return [
        {
            "displayLabel": section.get("display_label"),
            "sequenceNumber": section.get("sequence_number"),
            "columns": section.get("columns"),
            "fields": [
                {
                    "id": f.get("id"),
                    "apiName": f.get("api_name"),
                    "fieldLabel": f.get("field_label"),
                    "dataType": f.get("data_type"),
                }
                for f in section.get("fields") or []
            ],
        }
        for section in sections
    ]


MODULE = EntityMapper(
    "Module",
    read_fields=_plain(
        ("apiName", "api_name"),
        ("moduleName", "module_name"),
        ("singularLabel", "singular_label"),
        ("pluralLabel", "plural_label"),
        ("creatable", "creatable"),
        ("viewable", "viewable"),
        ("editable", "editable"),
        ("deletable", "deletable"),
        ("convertable", "convertable"),
    ),
)

FIELD = EntityMapper(
    "Field",
    read_fields=[
        *_plain(
            ("apiName", "api_name"),
            ("fieldLabel", "field_label"),
            ("dataType", "data_type"),
            ("length", "length"),
            ("required", "required"),
            ("visible", "visible"),
            ("readOnly", "read_only"),
            ("customField", "custom_field"),
        ),
        ReadField("pickListValues", "pick_list_values", _pick_list_values),
    ],
)

LAYOUT = EntityMapper(
    "Layout",
    read_fields=[
        *_plain(("name", "name"), ("status", "status")),
        ReadField("sections", "sections", _layout_sections),
    ],
)

CUSTOM_VIEW = EntityMapper(
    "CustomView",
    read_fields=_plain(
        ("name", "name"),
        ("displayValue", "display_value"),
        ("systemDefined", "system_defined"),
        ("default", "default"),
        ("criteria", "criteria"),
    ),
)

RELATED_LIST = EntityMapper(
    "RelatedList",
    read_fields=_plain(
        ("apiName", "api_name"),
        ("displayLabel", "display_label"),
        ("module", "module"),
        ("type", "type"),
    ),
)

TAG = EntityMapper(
    "Tag",
    read_fields=_plain(
        ("name", "name"),
        ("colorCode", "color_code"),
        ("createdAt", "created_time"),
    ),
    write_fields=[
        WriteField("name", "name", **ALWAYS_DEFINED),
        WriteField("colorCode", "color_code", **ALWAYS_DEFINED),
    ],
)

USER = EntityMapper(
    "User",
    read_fields=_plain(
        ("name", "full_name"),
        ("email", "email"),
        ("role", "role"),
        ("profile", "profile"),
        ("status", "status"),
        ("firstName", "first_name"),
        ("lastName", "last_name"),
        ("mobile", "mobile"),
        ("phone", "phone"),
        ("street", "street"),
        ("city", "city"),
        ("state", "state"),
        ("country", "country"),
        ("timeZone", "time_zone"),
        ("language", "language"),
        ("createdAt", "created_time"),
        ("updatedAt", "modified_time"),
    ),
)

PROFILE = EntityMapper(
    "Profile",
    read_fields=_plain(
        ("name", "name"),
        ("default", "default"),
        ("description", "description"),
        ("createdAt", "created_time"),
    ),
)

ROLE = EntityMapper(
    "Role",
    read_fields=_plain(
        ("name", "name"),
        ("reportingTo", "reporting_to"),
        ("description", "description"),
    ),
)
