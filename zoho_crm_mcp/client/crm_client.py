"""
Zoho CRM Client

Exposes the Zoho CRM REST API as CRM-agnostic operations on canonical
entities. One client serves exactly one tenant: create a new client per
incoming request with that request's credentials.
"""

import asyncio
import inspect
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Sequence

import httpx

from ..auth.token_manager import TokenManager
from ..core.errors import CrmApiError, NotFoundError
from ..core.models import TenantCredentials
from ..core.pagination import PaginationState, empty_info
from ..mappers import (
    ATTACHMENT,
    CALL_ACTIVITY,
    CAMPAIGN,
    CASE,
    COMPANY,
    CONTACT,
    CUSTOM_VIEW,
    DEAL,
    EMAIL_ACTIVITY,
    EVENT,
    FIELD,
    INVOICE,
    LAYOUT,
    LEAD,
    LEAD_CONVERSION,
    MEETING_ACTIVITY,
    MODULE,
    NOTE,
    PIPELINE,
    PRICE_BOOK,
    PRODUCT,
    PROFILE,
    PURCHASE_ORDER,
    QUOTE,
    RECORD_NOTE,
    RELATED_LIST,
    ROLE,
    SALES_ORDER,
    SOLUTION,
    TAG,
    TASK_ACTIVITY,
    USER,
    VENDOR,
    EntityMapper,
    compact,
)
from .executor import RequestExecutor, RetryingExecutor
from .resources import (
    API_PREFIX,
    ModuleResource,
    ModuleSpec,
    ensure_deleted,
    ensure_success,
    fetch_page,
)

logger = logging.getLogger(__name__)

BULK_PREFIX = "/crm/bulk/v6"
SETTINGS_PREFIX = f"{API_PREFIX}/settings"

CONTACTS = ModuleSpec(
    "Contacts", "Contact", CONTACT,
    project_fields=True,
    criteria_fields=(("email", "Email"), ("phone", "Phone")),
)
COMPANIES = ModuleSpec("Accounts", "Company", COMPANY, project_fields=True)
DEALS = ModuleSpec("Deals", "Deal", DEAL, project_fields=True)
LEADS = ModuleSpec("Leads", "Lead", LEAD, project_fields=True)
PRODUCTS = ModuleSpec("Products", "Product", PRODUCT)
QUOTES = ModuleSpec("Quotes", "Quote", QUOTE)
SALES_ORDERS = ModuleSpec("Sales_Orders", "Sales order", SALES_ORDER)
PURCHASE_ORDERS = ModuleSpec("Purchase_Orders", "Purchase order", PURCHASE_ORDER)
INVOICES = ModuleSpec("Invoices", "Invoice", INVOICE)
VENDORS = ModuleSpec("Vendors", "Vendor", VENDOR)
PRICE_BOOKS = ModuleSpec("Price_Books", "Price book", PRICE_BOOK)
CAMPAIGNS = ModuleSpec("Campaigns", "Campaign", CAMPAIGN)
CASES = ModuleSpec("Cases", "Case", CASE)
SOLUTIONS = ModuleSpec("Solutions", "Solution", SOLUTION)
EVENTS = ModuleSpec("Events", "Event", EVENT)
NOTES = ModuleSpec("Notes", "Note", NOTE)

# Activity views over the Tasks, Calls and Events modules
TASKS = ModuleSpec("Tasks", "Task", TASK_ACTIVITY)
CALLS = ModuleSpec("Calls", "Call", CALL_ACTIVITY)
MEETINGS = ModuleSpec("Events", "Meeting", MEETING_ACTIVITY)
EMAILS = ModuleSpec("Tasks", "Email", EMAIL_ACTIVITY)

ACTIVITY_SOURCES = (TASKS, CALLS, MEETINGS)


def _timestamp_ms(value: Any) -> float:
    """Parse an ISO timestamp to epoch milliseconds; 0 when missing or invalid."""
    if not value:
        return 0
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp() * 1000


def _involves(activity: Mapping[str, Any], record_id: str) -> bool:
    return (
        record_id in (activity.get("contactIds") or [])
        or activity.get("companyId") == record_id
        or activity.get("dealId") == record_id
    )


class ZohoCRMClient:
    """
    Zoho CRM client for a single tenant.

    Features:
    - OAuth token refresh with per-instance caching
    - Canonical camelCase entities in, canonical entities out
    - Writes are followed by a re-fetch of the stored record
    - Optional retries with exponential backoff (``max_retries``)

    Example:
        async with ZohoCRMClient(credentials) as crm:
            page = await crm.list_contacts(limit=10)
            deal = await crm.move_deal_stage("123", "Negotiation")
    """

    def __init__(
        self,
        credentials: TenantCredentials,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
        max_retries: int = 0,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the client.

        Args:
            credentials: Tenant credentials for this request
            http_client: Optional httpx client (created if None)
            timeout_seconds: Request timeout in seconds
            max_retries: Retries for retryable failures (0 disables retrying)
            clock: Epoch-seconds clock used for token expiry
        """
        self.credentials = credentials
        self.timeout_seconds = timeout_seconds

        # Track if we own the HTTP client (for cleanup)
        self._owns_client = http_client is None

        if http_client is None:
            self.http_client = httpx.AsyncClient(timeout=timeout_seconds)
        else:
            self.http_client = http_client

        self.token_manager = TokenManager(credentials, self.http_client, clock=clock)
        executor = RequestExecutor(credentials, self.http_client, self.token_manager)
        if max_retries > 0:
            executor = RetryingExecutor(executor, max_retries=max_retries)
        self.executor = executor

        self.contacts = ModuleResource(executor, CONTACTS)
        self.companies = ModuleResource(executor, COMPANIES)
        self.deals = ModuleResource(executor, DEALS)
        self.leads = ModuleResource(executor, LEADS)
        self.products = ModuleResource(executor, PRODUCTS)
        self.quotes = ModuleResource(executor, QUOTES)
        self.sales_orders = ModuleResource(executor, SALES_ORDERS)
        self.purchase_orders = ModuleResource(executor, PURCHASE_ORDERS)
        self.invoices = ModuleResource(executor, INVOICES)
        self.vendors = ModuleResource(executor, VENDORS)
        self.price_books = ModuleResource(executor, PRICE_BOOKS)
        self.campaigns = ModuleResource(executor, CAMPAIGNS)
        self.cases = ModuleResource(executor, CASES)
        self.solutions = ModuleResource(executor, SOLUTIONS)
        self.events = ModuleResource(executor, EVENTS)
        self.notes = ModuleResource(executor, NOTES)
        self.tasks = ModuleResource(executor, TASKS)
        self.calls = ModuleResource(executor, CALLS)
        self.meetings = ModuleResource(executor, MEETINGS)
        self.emails = ModuleResource(executor, EMAILS)

    async def aclose(self) -> None:
        """Close the HTTP client if we created it."""
        if self._owns_client and self.http_client:
            await self.http_client.aclose()

    async def __aenter__(self):
        """Async context manager support."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager cleanup."""
        await self.aclose()
        return False

    @classmethod
    def operations(cls) -> list[str]:
        """Return the names of all public operations, sorted."""
        return sorted(
            name
            for name, member in inspect.getmembers(cls, inspect.iscoroutinefunction)
            if not name.startswith("_") and name != "aclose"
        )

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self.executor.request("GET", endpoint, params=params) or {}

    async def _settings_list(
        self,
        endpoint: str,
        key: str,
        mapper: EntityMapper,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        response = await self._get(endpoint, params)
        return [mapper.to_canonical(item) for item in response.get(key) or []]

    async def _settings_get(
        self, endpoint: str, key: str, mapper: EntityMapper, label: str, item_id: str
    ) -> dict[str, Any]:
        response = await self._get(endpoint)
        items = response.get(key) or []
        if not items:
            raise NotFoundError(f"{label} not found: {item_id}")
        return mapper.to_canonical(items[0])

    # ===== CONNECTION =====

    async def test_connection(self) -> dict[str, Any]:
        """
        Check that the credentials work.

        Never raises; failures are reported in the result.

        Returns:
            Dict with ``connected`` (bool) and ``message``
        """
        try:
            response = await self._get(f"{API_PREFIX}/users", {"type": "CurrentUser"})
        except Exception as e:
            logger.warning(f"Connection test failed: {e}")
            return {"connected": False, "message": str(e) or "Connection failed"}

        users = response.get("users") or []
        if users:
            user = users[0]
            return {
                "connected": True,
                "message": f"Connected as {user.get('full_name') or user.get('email')}",
            }
        return {"connected": True, "message": "Connected to Zoho CRM"}

    # ===== CONTACTS =====

    async def list_contacts(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.contacts.list(limit, offset)

    async def get_contact(self, contact_id: str) -> dict[str, Any]:
        return await self.contacts.get(contact_id)

    async def create_contact(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.contacts.create(data)

    async def update_contact(self, contact_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.contacts.update(contact_id, data)

    async def delete_contact(self, contact_id: str) -> None:
        await self.contacts.delete(contact_id)

    async def search_contacts(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        """
        Search contacts.

        Args:
            query: Free-text word search
            filters: Exact-match filters; an ``email`` filter wins over ``phone``
            limit: Page size
            offset: Number of records to skip

        Returns:
            Paginated response of contacts
        """
        return await self.contacts.search(query, filters, limit, offset)

    # ===== COMPANIES =====

    async def list_companies(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.companies.list(limit, offset)

    async def get_company(self, company_id: str) -> dict[str, Any]:
        return await self.companies.get(company_id)

    async def create_company(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.companies.create(data)

    async def update_company(self, company_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.companies.update(company_id, data)

    # ===== DEALS =====

    async def list_deals(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.deals.list(limit, offset)

    async def get_deal(self, deal_id: str) -> dict[str, Any]:
        return await self.deals.get(deal_id)

    async def create_deal(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.deals.create(data)

    async def update_deal(self, deal_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Update a deal.

        A ``status`` of "won" or "lost" sets the stage to "Closed Won" or
        "Closed Lost", overriding ``stageId``; other statuses are ignored.
        """
        return await self.deals.update(deal_id, data)

    async def move_deal_stage(self, deal_id: str, stage_id: str) -> dict[str, Any]:
        return await self.update_deal(deal_id, {"stageId": stage_id})

    async def list_pipelines(self) -> list[dict[str, Any]]:
        """Return the Deals pipelines with their stages."""
        return await self._settings_list(
            f"{SETTINGS_PREFIX}/pipeline", "pipeline", PIPELINE, {"module": "Deals"}
        )

    # ===== ACTIVITIES =====

    async def _activity_page(self, spec: ModuleSpec, state: PaginationState) -> tuple[list, dict]:
        try:
            response = await self.executor.request("GET", spec.path, params=state.to_query())
        except Exception as e:
            logger.warning(f"Skipping {spec.module} in activity list: {e}")
            response = None

        response = response or {}
        records = response.get("data") or []
        info = response.get("info") or empty_info(state.per_page)
        return [spec.mapper.to_canonical(record) for record in records], info

    async def list_activities(
        self,
        limit: int | None = None,
        offset: int | None = None,
        record_id: str | None = None,
    ) -> dict[str, Any]:
        """
        List tasks, calls and meetings as one activity feed.

        The three modules are fetched concurrently with the same page and
        page size. A module that fails to load contributes an empty page.
        Results are merged, optionally filtered to activities linked to
        ``record_id``, and sorted newest first by ``createdAt``.

        Args:
            limit: Page size applied to each module
            offset: Number of records to skip
            record_id: Keep only activities whose contact, company or deal
                matches this id

        Returns:
            Paginated response; ``total`` sums the module totals and
            ``hasMore`` is set when any module has more records
        """
        state = PaginationState.from_params(limit, offset)
        pages = await asyncio.gather(
            *(self._activity_page(spec, state) for spec in ACTIVITY_SOURCES)
        )

        activities = [activity for items, _ in pages for activity in items]
        if record_id:
            activities = [a for a in activities if _involves(a, record_id)]

        # Stable: equal timestamps keep task, call, meeting order
        activities.sort(key=lambda a: _timestamp_ms(a.get("createdAt")), reverse=True)

        has_more = any(bool(info.get("more_records")) for _, info in pages)
        return {
            "items": activities,
            "count": len(activities),
            "total": sum(info.get("count") or 0 for _, info in pages),
            "hasMore": has_more,
            "nextCursor": state.next_cursor(has_more),
        }

    async def create_activity(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create an activity.

        ``type`` selects the Zoho module: "call" is logged as an outbound
        call, "meeting" becomes an event, anything else a "Not Started" task.

        Args:
            data: Canonical activity input (type, subject, body, dueDate,
                contactIds, companyId)

        Returns:
            The created activity
        """
        activity_type = data.get("type")

        if activity_type == "call":
            contact_ids = data.get("contactIds") or []
            return await self.log_call(
                contact_ids[0] if contact_ids else "", data.get("subject"), data.get("body")
            )

        if activity_type == "meeting":
            payload = MEETING_ACTIVITY.create_payload(data)
            return await self.meetings.create_raw(payload)

        payload = TASK_ACTIVITY.create_payload(data)
        return await self.tasks.create_raw(payload)

    async def log_call(
        self,
        contact_id: str,
        subject: str,
        notes: str | None = None,
        duration_minutes: int | None = None,
    ) -> dict[str, Any]:
        """
        Log an outbound call.

        Args:
            contact_id: Contact the call was with (empty for none)
            subject: Call subject
            notes: Call notes
            duration_minutes: Call length in minutes

        Returns:
            The logged call as an activity
        """
        payload = compact(CALL_ACTIVITY.create_payload({
            "contactId": contact_id,
            "subject": subject,
            "notes": notes,
            "durationMinutes": duration_minutes,
        }))
        return await self.calls.create_raw(payload, action="log")

    async def log_email(
        self, contact_id: str, subject: str, body: str, direction: str
    ) -> dict[str, Any]:
        """
        Log an email.

        Zoho has no writable email module, so the email is stored as a
        completed task. The returned activity has type "email".

        Args:
            contact_id: Contact the email was exchanged with
            subject: Email subject
            body: Email body
            direction: "sent" or "received"

        Returns:
            The logged email as an activity
        """
        payload = EMAIL_ACTIVITY.create_payload({
            "contactId": contact_id,
            "subject": subject,
            "body": body,
            "direction": direction,
        })
        return await self.emails.create_raw(payload, action="log")

    # ===== LEADS =====

    async def list_leads(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.leads.list(limit, offset)

    async def get_lead(self, lead_id: str) -> dict[str, Any]:
        return await self.leads.get(lead_id)

    async def create_lead(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.leads.create(data)

    async def update_lead(self, lead_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.leads.update(lead_id, data)

    async def delete_lead(self, lead_id: str) -> None:
        await self.leads.delete(lead_id)

    async def search_leads(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        return await self.leads.search(query, filters, limit, offset)

    async def convert_lead(self, lead_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Convert a lead into a contact, an account and optionally a deal.

        Args:
            lead_id: Lead id
            data: Conversion options (deals, accounts, contacts,
                carryOverTags, notifyLeadOwner, notifyNewEntityOwner)

        Returns:
            Dict with the resulting ``contact``, ``account`` and ``deal``

        Raises:
            CrmApiError: If Zoho returns no conversion result
        """
        payload = LEAD_CONVERSION.create_payload(data)
        response = await self.executor.request(
            "POST",
            f"{LEADS.path}/{lead_id}/actions/convert",
            json_body={"data": [payload]},
        )
        results = (response or {}).get("data") or []
        if not results:
            raise CrmApiError("Failed to convert lead", 400)
        return {f.key: f.read(results[0]) for f in LEAD_CONVERSION.read_fields}

    # ===== PRODUCTS =====

    async def list_products(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.products.list(limit, offset)

    async def get_product(self, product_id: str) -> dict[str, Any]:
        return await self.products.get(product_id)

    async def create_product(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.products.create(data)

    async def update_product(self, product_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.products.update(product_id, data)

    async def delete_product(self, product_id: str) -> None:
        await self.products.delete(product_id)

    async def search_products(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        return await self.products.search(query, filters, limit, offset)

    # ===== QUOTES =====

    async def list_quotes(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.quotes.list(limit, offset)

    async def get_quote(self, quote_id: str) -> dict[str, Any]:
        return await self.quotes.get(quote_id)

    async def create_quote(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.quotes.create(data)

    async def update_quote(self, quote_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.quotes.update(quote_id, data)

    async def delete_quote(self, quote_id: str) -> None:
        await self.quotes.delete(quote_id)

    async def search_quotes(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        return await self.quotes.search(query, filters, limit, offset)

    # ===== SALES ORDERS =====

    async def list_sales_orders(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.sales_orders.list(limit, offset)

    async def get_sales_order(self, sales_order_id: str) -> dict[str, Any]:
        return await self.sales_orders.get(sales_order_id)

    async def create_sales_order(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.sales_orders.create(data)

    async def update_sales_order(self, sales_order_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.sales_orders.update(sales_order_id, data)

    async def delete_sales_order(self, sales_order_id: str) -> None:
        await self.sales_orders.delete(sales_order_id)

    # ===== PURCHASE ORDERS =====

    async def list_purchase_orders(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.purchase_orders.list(limit, offset)

    async def get_purchase_order(self, purchase_order_id: str) -> dict[str, Any]:
        return await self.purchase_orders.get(purchase_order_id)

    async def create_purchase_order(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.purchase_orders.create(data)

    async def update_purchase_order(self, purchase_order_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.purchase_orders.update(purchase_order_id, data)

    async def delete_purchase_order(self, purchase_order_id: str) -> None:
        await self.purchase_orders.delete(purchase_order_id)

    # ===== INVOICES =====

    async def list_invoices(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.invoices.list(limit, offset)

    async def get_invoice(self, invoice_id: str) -> dict[str, Any]:
        return await self.invoices.get(invoice_id)

    async def create_invoice(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.invoices.create(data)

    async def update_invoice(self, invoice_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.invoices.update(invoice_id, data)

    async def delete_invoice(self, invoice_id: str) -> None:
        await self.invoices.delete(invoice_id)

    async def search_invoices(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        return await self.invoices.search(query, filters, limit, offset)

    # ===== VENDORS =====

    async def list_vendors(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.vendors.list(limit, offset)

    async def get_vendor(self, vendor_id: str) -> dict[str, Any]:
        return await self.vendors.get(vendor_id)

    async def create_vendor(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.vendors.create(data)

    async def update_vendor(self, vendor_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.vendors.update(vendor_id, data)

    async def delete_vendor(self, vendor_id: str) -> None:
        await self.vendors.delete(vendor_id)

    async def search_vendors(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        return await self.vendors.search(query, filters, limit, offset)

    # ===== PRICE BOOKS =====

    async def list_price_books(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.price_books.list(limit, offset)

    async def get_price_book(self, price_book_id: str) -> dict[str, Any]:
        return await self.price_books.get(price_book_id)

    async def create_price_book(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.price_books.create(data)

    async def update_price_book(self, price_book_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.price_books.update(price_book_id, data)

    async def delete_price_book(self, price_book_id: str) -> None:
        await self.price_books.delete(price_book_id)

    # ===== CAMPAIGNS =====

    async def list_campaigns(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.campaigns.list(limit, offset)

    async def get_campaign(self, campaign_id: str) -> dict[str, Any]:
        return await self.campaigns.get(campaign_id)

    async def create_campaign(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.campaigns.create(data)

    async def update_campaign(self, campaign_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.campaigns.update(campaign_id, data)

    async def delete_campaign(self, campaign_id: str) -> None:
        await self.campaigns.delete(campaign_id)

    async def search_campaigns(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        return await self.campaigns.search(query, filters, limit, offset)

    # ===== CASES =====

    async def list_cases(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.cases.list(limit, offset)

    async def get_case(self, case_id: str) -> dict[str, Any]:
        return await self.cases.get(case_id)

    async def create_case(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.cases.create(data)

    async def update_case(self, case_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.cases.update(case_id, data)

    async def delete_case(self, case_id: str) -> None:
        await self.cases.delete(case_id)

    async def search_cases(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        return await self.cases.search(query, filters, limit, offset)

    # ===== SOLUTIONS =====

    async def list_solutions(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.solutions.list(limit, offset)

    async def get_solution(self, solution_id: str) -> dict[str, Any]:
        return await self.solutions.get(solution_id)

    async def create_solution(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.solutions.create(data)

    async def update_solution(self, solution_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.solutions.update(solution_id, data)

    async def delete_solution(self, solution_id: str) -> None:
        await self.solutions.delete(solution_id)

    async def search_solutions(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        return await self.solutions.search(query, filters, limit, offset)

    # ===== EVENTS =====

    async def list_events(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.events.list(limit, offset)

    async def get_event(self, event_id: str) -> dict[str, Any]:
        return await self.events.get(event_id)

    async def create_event(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.events.create(data)

    async def update_event(self, event_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.events.update(event_id, data)

    async def delete_event(self, event_id: str) -> None:
        await self.events.delete(event_id)

    async def search_events(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        return await self.events.search(query, filters, limit, offset)

    # ===== NOTES =====

    async def list_notes(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self.notes.list(limit, offset)

    async def get_note(self, note_id: str) -> dict[str, Any]:
        return await self.notes.get(note_id)

    async def create_note(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.notes.create(data)

    async def update_note(self, note_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self.notes.update(note_id, data)

    async def delete_note(self, note_id: str) -> None:
        await self.notes.delete(note_id)

    async def list_record_notes(
        self,
        module: str,
        record_id: str,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        """List the notes attached to one record."""
        state = PaginationState.from_params(limit, offset)
        return await fetch_page(
            self.executor, f"{API_PREFIX}/{module}/{record_id}/Notes", state, NOTE
        )

    async def add_note_to_record(
        self, module: str, record_id: str, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        """
        Attach a new note to a record.

        Args:
            module: Parent module API name (e.g., "Deals")
            record_id: Parent record id
            data: Note input (noteContent, noteTitle)

        Returns:
            The created note
        """
        payload = RECORD_NOTE.create_payload(data)
        response = await self.executor.request(
            "POST",
            f"{API_PREFIX}/{module}/{record_id}/Notes",
            json_body={"data": [payload]},
        )
        entry = ensure_success(response, "add", "note to record")
        return await self.notes.get(entry["details"]["id"])

    # ===== ATTACHMENTS =====

    async def list_attachments(
        self,
        module: str,
        record_id: str,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        state = PaginationState.from_params(limit, offset)
        return await fetch_page(
            self.executor, f"{API_PREFIX}/{module}/{record_id}/Attachments", state, ATTACHMENT
        )

    async def delete_attachment(self, module: str, record_id: str, attachment_id: str) -> None:
        response = await self.executor.request(
            "DELETE", f"{API_PREFIX}/{module}/{record_id}/Attachments/{attachment_id}"
        )
        ensure_deleted(response, "Attachment")

    # ===== COQL =====

    async def execute_coql(self, query: str) -> dict[str, Any]:
        """
        Run a COQL select query.

        Args:
            query: COQL statement (e.g., "select Last_Name from Contacts limit 10")

        Returns:
            Dict with raw ``data`` rows and ``info`` (count, moreRecords, page)
        """
        response = await self.executor.request(
            "POST", f"{API_PREFIX}/coql", json_body={"select_query": query}
        ) or {}
        info = response.get("info") or {}
        return {
            "data": response.get("data") or [],
            "info": {
                "count": info.get("count") or 0,
                "moreRecords": info.get("more_records") or False,
                "page": info.get("page") or 1,
            },
        }

    # ===== BULK =====

    async def _create_bulk_job(self, kind: str, request: Mapping[str, Any]) -> dict[str, Any]:
        response = await self.executor.request(
            "POST", f"{BULK_PREFIX}/{kind}", json_body=dict(request)
        ) or {}
        jobs = response.get("data") or []
        if not jobs:
            raise CrmApiError(f"Failed to create bulk {kind} job", 400)
        return jobs[0].get("details")

    async def _get_bulk_job(self, kind: str, job_id: str) -> dict[str, Any]:
        response = await self._get(f"{BULK_PREFIX}/{kind}/{job_id}")
        jobs = response.get("data") or []
        if not jobs:
            raise NotFoundError(f"Bulk {kind} job not found: {job_id}")
        return jobs[0]

    async def create_bulk_read_job(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Submit a bulk read job; ``request`` is passed to Zoho unchanged."""
        return await self._create_bulk_job("read", request)

    async def get_bulk_read_job(self, job_id: str) -> dict[str, Any]:
        return await self._get_bulk_job("read", job_id)

    async def create_bulk_write_job(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Submit a bulk write job; ``request`` is passed to Zoho unchanged."""
        return await self._create_bulk_job("write", request)

    async def get_bulk_write_job(self, job_id: str) -> dict[str, Any]:
        return await self._get_bulk_job("write", job_id)

    # ===== NOTIFICATIONS =====

    async def enable_notifications(self, channels: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
        """
        Subscribe notification channels.

        Args:
            channels: Channels with channelId, events, channelExpiry, token
                and notifyUrl

        Returns:
            Channel details echoed by Zoho
        """
        watch = [
            compact({
                "channel_id": channel.get("channelId"),
                "events": channel.get("events"),
                "channel_expiry": channel.get("channelExpiry"),
                "token": channel.get("token"),
                "notify_url": channel.get("notifyUrl"),
            })
            for channel in channels
        ]
        response = await self.executor.request(
            "POST", f"{API_PREFIX}/actions/watch", json_body={"watch": watch}
        )
        return (response or {}).get("watch") or []

    async def disable_notifications(self, channel_ids: Sequence[str]) -> None:
        watch = [{"channel_id": channel_id, "_delete_events": True} for channel_id in channel_ids]
        await self.executor.request(
            "PATCH", f"{API_PREFIX}/actions/watch", json_body={"watch": watch}
        )

    async def get_notification_details(self) -> list[dict[str, Any]]:
        response = await self._get(f"{API_PREFIX}/actions/watch")
        return response.get("watch") or []

    # ===== RELATED RECORDS =====

    async def list_related_records(
        self,
        module: str,
        record_id: str,
        related_list: str,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        """List records of a related list; records are returned as Zoho sends them."""
        state = PaginationState.from_params(limit, offset)
        return await fetch_page(
            self.executor, f"{API_PREFIX}/{module}/{record_id}/{related_list}", state
        )

    async def add_related_record(
        self, module: str, record_id: str, related_list: str, related_record_id: str
    ) -> None:
        await self.executor.request(
            "PUT", f"{API_PREFIX}/{module}/{record_id}/{related_list}/{related_record_id}"
        )

    async def remove_related_record(
        self, module: str, record_id: str, related_list: str, related_record_id: str
    ) -> None:
        await self.executor.request(
            "DELETE", f"{API_PREFIX}/{module}/{record_id}/{related_list}/{related_record_id}"
        )

    # ===== METADATA =====

    async def list_modules(self) -> list[dict[str, Any]]:
        return await self._settings_list(f"{SETTINGS_PREFIX}/modules", "modules", MODULE)

    async def get_module(self, api_name: str) -> dict[str, Any]:
        return await self._settings_get(
            f"{SETTINGS_PREFIX}/modules/{api_name}", "modules", MODULE, "Module", api_name
        )

    async def list_fields(self, module: str) -> list[dict[str, Any]]:
        return await self._settings_list(
            f"{SETTINGS_PREFIX}/fields", "fields", FIELD, {"module": module}
        )

    async def list_layouts(self, module: str) -> list[dict[str, Any]]:
        return await self._settings_list(
            f"{SETTINGS_PREFIX}/layouts", "layouts", LAYOUT, {"module": module}
        )

    async def list_custom_views(self, module: str) -> list[dict[str, Any]]:
        return await self._settings_list(
            f"{SETTINGS_PREFIX}/custom_views", "custom_views", CUSTOM_VIEW, {"module": module}
        )

    async def list_related_lists(self, module: str) -> list[dict[str, Any]]:
        return await self._settings_list(
            f"{SETTINGS_PREFIX}/related_lists", "related_lists", RELATED_LIST, {"module": module}
        )

    # ===== TAGS =====

    async def list_tags(self, module: str) -> list[dict[str, Any]]:
        return await self._settings_list(
            f"{SETTINGS_PREFIX}/tags", "tags", TAG, {"module": module}
        )

    async def _write_tag(self, method: str, endpoint: str, tag: dict[str, Any], action: str, module: str):
        response = await self.executor.request(
            method, endpoint, params={"module": module}, json_body={"tags": [tag]}
        ) or {}
        results = response.get("tags") or []
        if not results or results[0].get("code") != "SUCCESS":
            raise CrmApiError(f"Failed to {action} tag", 400)
        return TAG.to_canonical(results[0].get("details") or {})

    async def create_tag(self, module: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create a tag in a module.

        Args:
            module: Module API name
            data: Tag input (name, colorCode)

        Returns:
            The created tag
        """
        tag = compact(TAG.create_payload(data))
        return await self._write_tag("POST", f"{SETTINGS_PREFIX}/tags", tag, "create", module)

    async def update_tag(self, module: str, tag_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        tag = {"id": tag_id, **TAG.update_payload(data)}
        return await self._write_tag(
            "PUT", f"{SETTINGS_PREFIX}/tags/{tag_id}", tag, "update", module
        )

    async def delete_tag(self, tag_id: str) -> None:
        await self.executor.request("DELETE", f"{SETTINGS_PREFIX}/tags/{tag_id}")

    async def add_tags_to_records(
        self, module: str, record_ids: Sequence[str], tag_names: Sequence[str]
    ) -> None:
        await self.executor.request(
            "POST",
            f"{API_PREFIX}/{module}/actions/add_tags",
            json_body={"ids": list(record_ids), "tag_names": list(tag_names)},
        )

    async def remove_tags_from_records(
        self, module: str, record_ids: Sequence[str], tag_names: Sequence[str]
    ) -> None:
        await self.executor.request(
            "POST",
            f"{API_PREFIX}/{module}/actions/remove_tags",
            json_body={"ids": list(record_ids), "tag_names": list(tag_names)},
        )

    # ===== USERS =====

    async def list_users(self, user_type: str | None = None) -> list[dict[str, Any]]:
        """
        List CRM users.

        Args:
            user_type: Zoho user filter (e.g., "ActiveUsers", "CurrentUser")

        Returns:
            List of users
        """
        params = {"type": user_type} if user_type else None
        return await self._settings_list(f"{API_PREFIX}/users", "users", USER, params)

    async def get_user(self, user_id: str) -> dict[str, Any]:
        return await self._settings_get(
            f"{API_PREFIX}/users/{user_id}", "users", USER, "User", user_id
        )

    async def get_current_user(self) -> dict[str, Any]:
        users = await self.list_users("CurrentUser")
        if not users:
            raise NotFoundError("Current user not found")
        return users[0]

    async def list_profiles(self) -> list[dict[str, Any]]:
        return await self._settings_list(f"{SETTINGS_PREFIX}/profiles", "profiles", PROFILE)

    async def get_profile(self, profile_id: str) -> dict[str, Any]:
        return await self._settings_get(
            f"{SETTINGS_PREFIX}/profiles/{profile_id}", "profiles", PROFILE, "Profile", profile_id
        )

    async def list_roles(self) -> list[dict[str, Any]]:
        return await self._settings_list(f"{SETTINGS_PREFIX}/roles", "roles", ROLE)

    async def get_role(self, role_id: str) -> dict[str, Any]:
        return await self._settings_get(
            f"{SETTINGS_PREFIX}/roles/{role_id}", "roles", ROLE, "Role", role_id
        )


def create_crm_client(
    credentials: TenantCredentials,
    http_client: httpx.AsyncClient | None = None,
    timeout_seconds: float = 30.0,
    max_retries: int = 0,
) -> ZohoCRMClient:
    """
    Create a client for one tenant.

    Args:
        credentials: Tenant credentials parsed from request headers,
            environment or a saved profile
        http_client: Optional shared httpx client
        timeout_seconds: Request timeout in seconds
        max_retries: Retries for retryable failures (0 disables retrying)

    Returns:
        Configured ZohoCRMClient
    """
    return ZohoCRMClient(
        credentials,
        http_client=http_client,
        timeout_seconds=timeout_seconds,
        max_retries=max_retries,
    )
