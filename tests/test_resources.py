"""Tests for generic module CRUD, search and pagination."""

import pytest

from zoho_crm_mcp.client.resources import ensure_deleted, ensure_success
from zoho_crm_mcp.core.errors import CrmApiError, NotFoundError
from zoho_crm_mcp.core.pagination import PaginationState, build_page

from conftest import page, success


def test_pagination_from_offset():
    """Test page numbers are derived from offset and limit."""
    assert PaginationState.from_params() == PaginationState(page=1, per_page=20)
    assert PaginationState.from_params(limit=10, offset=0).page == 1
    assert PaginationState.from_params(limit=10, offset=25).page == 3
    assert PaginationState.from_params(limit=500).per_page == 200


def test_pagination_query_and_cursor():
    state = PaginationState.from_params(limit=50, offset=100)

    assert state.to_query() == {"page": "3", "per_page": "50"}
    assert state.next_cursor(True) == "4"
    assert state.next_cursor(False) is None


def test_build_page_handles_missing_body():
    state = PaginationState.from_params()
    assert build_page(None, state) == {
        "items": [],
        "count": 0,
        "total": 0,
        "hasMore": False,
        "nextCursor": None,
    }


def test_ensure_success_messages():
    assert ensure_success(success("1"), "create", "Contact")["details"]["id"] == "1"

    failed = {"data": [{"code": "MANDATORY_NOT_FOUND", "message": "required field not found"}]}
    with pytest.raises(CrmApiError) as exc_info:
        ensure_success(failed, "create", "Sales order")
    assert exc_info.value.message == "Failed to create sales order: required field not found"
    assert exc_info.value.status_code == 400

    with pytest.raises(CrmApiError) as exc_info:
        ensure_success(None, "update", "Deal")
    assert exc_info.value.message == "Failed to update deal: Unknown error"


def test_ensure_deleted_accepts_empty_body():
    ensure_deleted(None, "Contact")
    ensure_deleted({"data": [{"code": "SUCCESS"}]}, "Contact")

    with pytest.raises(CrmApiError) as exc_info:
        ensure_deleted({"data": [{"code": "INVALID_DATA", "message": "bad id"}]}, "Price book")
    assert exc_info.value.message == "Failed to delete price book: bad id"


@pytest.mark.asyncio
async def test_list_contacts_projects_fields(crm, fake_zoho):
    """Test contact lists request only the mapped vendor fields."""
    fake_zoho.add("GET", "/crm/v6/Contacts", page(
        [{"id": "1", "Last_Name": "Lovelace"}], count=41, more=True, page_number=3, per_page=10,
    ))

    result = await crm.list_contacts(limit=10, offset=20)

    params = fake_zoho.requests[0].url.params
    assert params["page"] == "3"
    assert params["per_page"] == "10"
    assert params["fields"].split(",")[:2] == ["First_Name", "Last_Name"]

    assert result["count"] == 1
    assert result["total"] == 41
    assert result["hasMore"] is True
    assert result["nextCursor"] == "4"
    assert result["items"][0]["lastName"] == "Lovelace"


@pytest.mark.asyncio
async def test_list_products_has_no_projection(crm, fake_zoho):
    fake_zoho.add("GET", "/crm/v6/Products", page([]))

    result = await crm.list_products()

    assert "fields" not in fake_zoho.requests[0].url.params
    assert result["items"] == []
    assert result["nextCursor"] is None


@pytest.mark.asyncio
async def test_get_missing_record_raises_not_found(crm, fake_zoho):
    """Test an empty data array surfaces as NotFoundError."""
    fake_zoho.add("GET", "/crm/v6/Sales_Orders/404", {"data": []})

    with pytest.raises(NotFoundError) as exc_info:
        await crm.get_sales_order("404")

    assert exc_info.value.message == "Sales order not found: 404"
    assert exc_info.value.status_code == 404
    assert exc_info.value.code == "NOT_FOUND"


@pytest.mark.asyncio
async def test_get_on_no_content_raises_not_found(crm, fake_zoho):
    fake_zoho.add("GET", "/crm/v6/Contacts/1", None, status=204)

    with pytest.raises(NotFoundError):
        await crm.get_contact("1")


@pytest.mark.asyncio
async def test_create_fetches_stored_record(crm, fake_zoho):
    """Test create returns the record as re-read after the write."""
    fake_zoho.add("POST", "/crm/v6/Contacts", success("5001"))
    fake_zoho.add("GET", "/crm/v6/Contacts/5001", {"data": [{
        "id": "5001",
        "First_Name": "Ada",
        "Last_Name": "Lovelace",
        "Full_Name": "Ada Lovelace",
    }]})

    contact = await crm.create_contact({"firstName": "Ada", "lastName": "Lovelace", "phone": ""})

    assert fake_zoho.last_json("POST", "/crm/v6/Contacts") == {
        "data": [{"First_Name": "Ada", "Last_Name": "Lovelace"}]
    }
    assert [r.method for r in fake_zoho.requests] == ["POST", "GET"]
    assert contact["id"] == "5001"
    assert contact["fullName"] == "Ada Lovelace"


@pytest.mark.asyncio
async def test_create_failure_does_not_fetch(crm, fake_zoho):
    fake_zoho.add("POST", "/crm/v6/Purchase_Orders", {"data": [
        {"code": "INVALID_DATA", "message": "invalid vendor"}
    ]})

    with pytest.raises(CrmApiError) as exc_info:
        await crm.create_purchase_order({"subject": "PO-1"})

    assert exc_info.value.message == "Failed to create purchase order: invalid vendor"
    assert len(fake_zoho.requests) == 1


@pytest.mark.asyncio
async def test_update_can_clear_fields(crm, fake_zoho):
    """Test update forwards empty values and sends nothing for absent keys."""
    fake_zoho.add("PUT", "/crm/v6/Contacts/5001", success("5001"))
    fake_zoho.add("GET", "/crm/v6/Contacts/5001", {"data": [{"id": "5001", "Phone": ""}]})

    contact = await crm.update_contact("5001", {"phone": ""})
    assert fake_zoho.last_json("PUT", "/crm/v6/Contacts/5001") == {"data": [{"Phone": ""}]}
    assert contact["phone"] is None

    await crm.update_contact("5001", {})
    assert fake_zoho.last_json("PUT", "/crm/v6/Contacts/5001") == {"data": [{}]}


@pytest.mark.asyncio
async def test_delete_sends_ids_param(crm, fake_zoho):
    fake_zoho.add("DELETE", "/crm/v6/Leads", {"data": [{"code": "SUCCESS", "details": {"id": "9"}}]})

    await crm.delete_lead("9")

    assert fake_zoho.requests[0].url.params["ids"] == "9"


@pytest.mark.asyncio
async def test_delete_failure(crm, fake_zoho):
    fake_zoho.add("DELETE", "/crm/v6/Contacts", {"data": [{"code": "INVALID_DATA", "message": "record not found"}]})

    with pytest.raises(CrmApiError) as exc_info:
        await crm.delete_contact("9")

    assert exc_info.value.message == "Failed to delete contact: record not found"


@pytest.mark.asyncio
async def test_search_contacts_prefers_email_criteria(crm, fake_zoho):
    """Test the email filter wins over phone and other filters are ignored."""
    fake_zoho.add("GET", "/crm/v6/Contacts/search", page([{"id": "1"}]))

    await crm.search_contacts(
        query="ada",
        filters=[
            {"field": "phone", "value": "555"},
            {"field": "email", "value": "ada@example.com"},
            {"field": "title", "value": "CTO"},
        ],
    )

    params = fake_zoho.requests[0].url.params
    assert params["word"] == "ada"
    assert params["criteria"] == "(Email:equals:ada@example.com)"


@pytest.mark.asyncio
async def test_search_contacts_by_phone(crm, fake_zoho):
    fake_zoho.add("GET", "/crm/v6/Contacts/search", page([]))

    await crm.search_contacts(filters=[{"field": "phone", "value": "555"}])

    params = fake_zoho.requests[0].url.params
    assert "word" not in params
    assert params["criteria"] == "(Phone:equals:555)"


@pytest.mark.asyncio
async def test_search_other_modules_ignore_filters(crm, fake_zoho):
    fake_zoho.add("GET", "/crm/v6/Leads/search", None, status=204)

    result = await crm.search_leads(query="acme", filters=[{"field": "email", "value": "x"}])

    params = fake_zoho.requests[0].url.params
    assert params["word"] == "acme"
    assert "criteria" not in params
    assert result["items"] == []
