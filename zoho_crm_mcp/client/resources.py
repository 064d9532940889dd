"""
Generic CRUD and search over a single Zoho CRM module.

Every record module (Contacts, Deals, Quotes, ...) follows the same REST
shape, so one ``ModuleResource`` parameterized by a ``ModuleSpec`` covers
them all. Module-specific behaviour (field projection, search criteria)
is declared on the ``ModuleSpec``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..core.errors import CrmApiError, NotFoundError
from ..core.pagination import PaginationState, build_page
from ..mappers.base import EntityMapper

logger = logging.getLogger(__name__)

API_PREFIX = "/crm/v6"


@dataclass(frozen=True)
class ModuleSpec:
    """
    Static description of one Zoho module.

    Attributes:
        module: Zoho API name (e.g., "Sales_Orders")
        label: Human label used in error messages (e.g., "Sales order")
        mapper: Entity mapper for the module's records
        project_fields: Send ``fields=`` with the mapper's source fields on list
        criteria_fields: (canonical filter field, Zoho field) pairs usable as
            exact-match search criteria, in priority order
    """
    module: str
    label: str
    mapper: EntityMapper
    project_fields: bool = False
    criteria_fields: tuple[tuple[str, str], ...] = ()

    @property
    def path(self) -> str:
        return f"{API_PREFIX}/{self.module}"


def ensure_success(response: Any, action: str, label: str) -> dict[str, Any]:
    """
    Check a Zoho write envelope and return its first entry.

    Args:
        response: ``{"data": [{"code": ..., "details": {...}}]}`` envelope
        action: Verb used in the error message (e.g., "create")
        label: Entity label used in the error message

    Returns:
        First entry of ``data``

    Raises:
        CrmApiError: If the entry is missing or its code is not SUCCESS
    """
    entries = (response or {}).get("data") or []
    if not entries or entries[0].get("code") != "SUCCESS":
        message = (entries[0].get("message") if entries else None) or "Unknown error"
        raise CrmApiError(f"Failed to {action} {label.lower()}: {message}", 400)
    return entries[0]


def ensure_deleted(response: Any, label: str) -> None:
    """
    Check a Zoho delete envelope.

    An empty or missing body counts as success.

    Raises:
        CrmApiError: If the first entry reports a non-SUCCESS code
    """
    entries = (response or {}).get("data") or []
    if entries and entries[0].get("code") != "SUCCESS":
        message = entries[0].get("message") or "Unknown error"
        raise CrmApiError(f"Failed to delete {label.lower()}: {message}", 400)


async def fetch_page(
    executor,
    endpoint: str,
    state: PaginationState,
    mapper: EntityMapper | None = None,
    params: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """
    GET one page of records and map it into a paginated response.

    Args:
        executor: Request executor
        endpoint: API path
        state: Page and page size for the request
        mapper: Optional mapper applied to each record
        params: Extra query parameters

    Returns:
        Paginated response dict
    """
    query = state.to_query()
    if params:
        query.update(params)
    response = await executor.request("GET", endpoint, params=query)
    return build_page(response, state, mapper.to_canonical if mapper else None)


class ModuleResource:
    """
    List, get, create, update, delete and search for one module.

    Example:
        contacts = ModuleResource(executor, CONTACTS)
        page = await contacts.list(limit=50)
        contact = await contacts.create({"lastName": "Lovelace"})
    """

    def __init__(self, executor, spec: ModuleSpec):
        """
        Initialize the resource.

        Args:
            executor: Request executor (``RequestExecutor`` or a wrapper)
            spec: Module description
        """
        self.executor = executor
        self.spec = spec

    @property
    def mapper(self) -> EntityMapper:
        return self.spec.mapper

    async def list(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        """
        List one page of records.

        Args:
            limit: Page size (default 20, capped at 200)
            offset: Number of records to skip

        Returns:
            Paginated response with canonical entities
        """
        state = PaginationState.from_params(limit, offset)
        params = None
        if self.spec.project_fields:
            params = {"fields": ",".join(self.mapper.source_fields())}
        return await fetch_page(self.executor, self.spec.path, state, self.mapper, params)

    async def get(self, record_id: str) -> dict[str, Any]:
        """
        Fetch one record by id.

        Raises:
            NotFoundError: If Zoho returns no record
        """
        response = await self.executor.request("GET", f"{self.spec.path}/{record_id}")
        records = (response or {}).get("data") or []
        if not records:
            raise NotFoundError(f"{self.spec.label} not found: {record_id}")
        return self.mapper.to_canonical(records[0])

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create a record and return it as stored by Zoho.

        Only truthy input values are sent, except for fields declared with
        the defined rule. The record is fetched again after the write.

        Args:
            data: Canonical input

        Returns:
            The created record as a canonical entity
        """
        return await self.create_raw(self.mapper.create_payload(data))

    async def create_raw(
        self, payload: Mapping[str, Any], action: str = "create", label: str | None = None
    ) -> dict[str, Any]:
        """Create a record from an already-built vendor payload, then fetch it."""
        response = await self.executor.request(
            "POST", self.spec.path, json_body={"data": [dict(payload)]}
        )
        entry = ensure_success(response, action, label or self.spec.label)
        record_id = entry["details"]["id"]
        logger.debug(f"Created {self.spec.module} record {record_id}")
        return await self.get(record_id)

    async def update(self, record_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Update a record and return it as stored by Zoho.

        Every key present in ``data`` is sent, including None and empty
        values, so callers can clear fields. Absent keys are left untouched.

        Args:
            record_id: Record id
            data: Canonical input

        Returns:
            The updated record as a canonical entity
        """
        payload = self.mapper.update_payload(data)
        response = await self.executor.request(
            "PUT", f"{self.spec.path}/{record_id}", json_body={"data": [payload]}
        )
        ensure_success(response, "update", self.spec.label)
        return await self.get(record_id)

    async def delete(self, record_id: str) -> None:
        """
        Delete a record.

        Raises:
            CrmApiError: If Zoho reports the delete as failed
        """
        response = await self.executor.request(
            "DELETE", self.spec.path, params={"ids": record_id}
        )
        ensure_deleted(response, self.spec.label)

    async def search(
        self,
        query: str | None = None,
        filters: Sequence[Mapping[str, Any]] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        """
        Search records by free text and, where supported, exact field match.

        Args:
            query: Free-text word search
            filters: ``{"field": ..., "value": ...}`` entries; only fields the
                module declares as criteria fields are used, and only the
                first match in declared priority order
            limit: Page size
            offset: Number of records to skip

        Returns:
            Paginated response with canonical entities
        """
        state = PaginationState.from_params(limit, offset)
        params: dict[str, str] = {}
        if query:
            params["word"] = query

        criteria = self._criteria(filters or [])
        if criteria:
            params["criteria"] = criteria

        return await fetch_page(
            self.executor, f"{self.spec.path}/search", state, self.mapper, params
        )

    def _criteria(self, filters: Sequence[Mapping[str, Any]]) -> str | None:
        for canonical, vendor in self.spec.criteria_fields:
            for search_filter in filters:
                if search_filter.get("field") == canonical:
                    return f"({vendor}:equals:{search_filter.get('value')})"
        return None
