"""
Declarative entity mapping between canonical entities and Zoho records.

Each entity kind is described by a table of ``ReadField`` entries (vendor
record -> canonical dict) and ``WriteField`` entries (canonical input ->
vendor payload). Write rules differ between create and update:

- ``Include.TRUTHY``: copy only when the input value is truthy (create default)
- ``Include.DEFINED``: copy whenever the key is present in the input, so
  ``None`` and ``''`` are forwarded and clear the vendor field (update default)
- ``Include.NEVER``: the field is not writable in this mode
"""

import enum
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

CREATE = "create"
UPDATE = "update"


class Include(enum.Enum):
    """Inclusion rule for a write field."""
    TRUTHY = "truthy"
    DEFINED = "defined"
    NEVER = "never"


class _Omit:
    def __repr__(self) -> str:
        return "OMIT"


# Returned by a converter to drop the field from the payload
OMIT = _Omit()

_MISSING = object()


# ----- readers -----

def optional(value: Any) -> Any:
    """Falsy vendor values become None."""
    return value or None


def required_text(value: Any) -> Any:
    """Falsy vendor values become ''."""
    return value or ""


def passthrough(value: Any) -> Any:
    return value


def ref_id(value: Any) -> Any:
    """Read the id of a ``{id, name}`` lookup."""
    if not value:
        return None
    return value.get("id") or None


def ref_name(value: Any) -> Any:
    """Read the name of a ``{id, name}`` lookup."""
    if not value:
        return None
    return value.get("name") or None


def ref_id_list(value: Any) -> list | None:
    """Wrap a single lookup id in a list."""
    if not value:
        return None
    return [value.get("id")]


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def to_int(value: Any) -> int | None:
    """Parse the leading integer of a value such as "30" or "30 min"."""
    if not value:
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def line_items(with_id: bool = False, with_totals: bool = False) -> Callable[[Any], list | None]:
    """
    Build a reader for inventory line items (quoted/ordered/invoiced items).

    Args:
        with_id: Include the line item id
        with_totals: Include net total and tax

    Returns:
        Reader mapping a list of vendor line items to canonical items
    """
    def read(items: Any) -> list | None:
        if items is None:
            return None
        result = []
        for item in items:
            product = item.get("Product_Name") or {}
            mapped: dict[str, Any] = {}
            if with_id:
                mapped["id"] = item.get("id")
            mapped.update({
                "productId": product.get("id"),
                "productName": product.get("name"),
                "quantity": item.get("Quantity"),
                "listPrice": item.get("List_Price"),
                "unitPrice": item.get("Unit_Price"),
                "total": item.get("Total"),
                "discount": item.get("Discount"),
            })
            if with_totals:
                mapped["netTotal"] = item.get("Net_Total")
                mapped["tax"] = item.get("Tax")
            result.append(mapped)
        return result

    return read


# ----- converters -----

def as_ref(value: Any) -> dict[str, Any]:
    """Wrap an id as a ``{"id": ...}`` lookup reference."""
    return {"id": value}


def first_item(values: Any) -> Any:
    return values[0] if values else OMIT


def compact(data: Mapping[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None."""
    return {key: value for key, value in data.items() if value is not None}


def write_line_items(items: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Convert canonical line items into vendor line items."""
    return [
        compact({
            "Product_Name": {"id": item.get("productId")},
            "Quantity": item.get("quantity"),
            "List_Price": item.get("listPrice"),
            "Unit_Price": item.get("unitPrice"),
            "Discount": item.get("discount"),
        })
        for item in items
    ]


# ----- field tables -----

@dataclass(frozen=True)
class ReadField:
    """
    One canonical key read from a vendor record.

    ``source`` is a vendor field name, or a callable receiving the whole
    record for composite values. ``projection`` lists the vendor fields a
    callable source needs, for ``fields=`` query projection.
    """
    key: str
    source: str | Callable[[Mapping[str, Any]], Any]
    reader: Callable[[Any], Any] = optional
    projection: tuple[str, ...] = ()

    def read(self, record: Mapping[str, Any]) -> Any:
        if callable(self.source):
            return self.reader(self.source(record))
        return self.reader(record.get(self.source))

    def vendor_fields(self) -> tuple[str, ...]:
        if self.projection:
            return self.projection
        if isinstance(self.source, str):
            return (self.source,)
        return ()


@dataclass(frozen=True)
class WriteField:
    """
    One vendor field written from canonical input.

    ``key`` is a canonical input key; dotted keys (``address.street``) read a
    nested mapping whose parent must be truthy. A callable key receives the
    whole input and returns the value, or ``OMIT``.
    """
    key: str | Callable[[Mapping[str, Any]], Any]
    target: str
    on_create: Include = Include.TRUTHY
    on_update: Include = Include.DEFINED
    convert: Callable[[Any], Any] | None = None

    def rule(self, mode: str) -> Include:
        return self.on_create if mode == CREATE else self.on_update

    def lookup(self, data: Mapping[str, Any]) -> Any:
        """Return the input value, or ``_MISSING`` when the key is absent."""
        if callable(self.key):
            value = self.key(data)
            return _MISSING if value is OMIT else value

        container: Any = data
        *parents, name = self.key.split(".")
        for parent in parents:
            container = container.get(parent)
            if not container:
                return _MISSING
        if name not in container:
            return _MISSING
        return container[name]


class EntityMapper:
    """
    Two-way mapping for one entity kind.

    Example:
        CONTACT.to_canonical({"id": "1", "First_Name": "Ada"})
        CONTACT.update_payload({"phone": ""})  # {"Phone": ""}
    """

    def __init__(
        self,
        name: str,
        read_fields: Iterable[ReadField],
        write_fields: Iterable[WriteField] = (),
        fixed: Mapping[str, Any] | None = None,
    ):
        """
        Initialize the mapper.

        Args:
            name: Entity kind (e.g., "Contact")
            read_fields: Canonical keys read from vendor records, in order
            write_fields: Vendor fields written from canonical input, in order
            fixed: Canonical keys with constant values (e.g., activity type)
        """
        self.name = name
        self.read_fields = tuple(read_fields)
        self.write_fields = tuple(write_fields)
        self.fixed = dict(fixed or {})

    @property
    def keys(self) -> list[str]:
        """Canonical keys produced by ``to_canonical``."""
        return ["id", *self.fixed, *(f.key for f in self.read_fields)]

    def to_canonical(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Map a vendor record to a canonical entity."""
        entity: dict[str, Any] = {"id": record.get("id")}
        entity.update(self.fixed)
        for read_field in self.read_fields:
            entity[read_field.key] = read_field.read(record)
        return entity

    def write_plan(self, data: Mapping[str, Any], mode: str) -> list[tuple[str, Any, Include]]:
        """
        Compute the vendor fields written for an input.

        Args:
            data: Canonical input mapping
            mode: "create" or "update"

        Returns:
            Ordered (vendor field, value, rule) triples. Later entries for
            the same vendor field win when the payload is built.
        """
        plan = []
        for write_field in self.write_fields:
            rule = write_field.rule(mode)
            if rule is Include.NEVER:
                continue

            value = write_field.lookup(data)
            if value is _MISSING:
                continue
            if rule is Include.TRUTHY and not value:
                continue

            if write_field.convert is not None:
                value = write_field.convert(value)
                if value is OMIT:
                    continue

            plan.append((write_field.target, value, rule))
        return plan

    def create_payload(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return {target: value for target, value, _ in self.write_plan(data, CREATE)}

    def update_payload(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return {target: value for target, value, _ in self.write_plan(data, UPDATE)}

    def source_fields(self) -> list[str]:
        """Vendor field names read by this mapper, in order and de-duplicated."""
        seen: dict[str, None] = {}
        for read_field in self.read_fields:
            for name in read_field.vendor_fields():
                seen.setdefault(name, None)
        return list(seen)


# Audit timestamps present on almost every Zoho record
TIMESTAMPS = (
    ReadField("createdAt", "Created_Time"),
    ReadField("updatedAt", "Modified_Time"),
)

OWNER = ReadField("ownerId", "Owner", ref_id)

# Rule presets for fields that deviate from the create/update defaults
CREATE_ONLY = {"on_update": Include.NEVER}
UPDATE_ONLY = {"on_create": Include.NEVER}
ALWAYS_DEFINED = {"on_create": Include.DEFINED}
