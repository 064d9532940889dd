"""Mappers for the inventory modules: products, vendors, price books and orders."""

from typing import Any

from .base import (
    ALWAYS_DEFINED,
    CREATE_ONLY,
    OWNER,
    TIMESTAMPS,
    EntityMapper,
    ReadField,
    WriteField,
    as_ref,
    line_items,
    passthrough,
    ref_id,
    ref_name,
    required_text,
    write_line_items,
)


def _lookup(prefix: str, source: str) -> list[ReadField]:
    """Read a ``{id, name}`` lookup as ``<prefix>Id`` and ``<prefix>Name``."""
    return [
        ReadField(f"{prefix}Id", source, ref_id),
        ReadField(f"{prefix}Name", source, ref_name),
    ]


def _address(prefix: str, source_prefix: str) -> list[ReadField]:
    return [
        ReadField(f"{prefix}Street", f"{source_prefix}_Street"),
        ReadField(f"{prefix}City", f"{source_prefix}_City"),
        ReadField(f"{prefix}State", f"{source_prefix}_State"),
        ReadField(f"{prefix}Code", f"{source_prefix}_Code"),
        ReadField(f"{prefix}Country", f"{source_prefix}_Country"),
    ]


def _pricing_details(details: Any) -> list[dict[str, Any]] | None:
    if details is None:
        return None
    return [
        {
            "id": detail.get("id"),
            "fromRange": detail.get("from_range"),
            "toRange": detail.get("to_range"),
            "discount": detail.get("discount"),
        }
        for detail in details
    ]


# Order totals shared by quotes, sales orders, purchase orders and invoices
TOTALS = (
    ReadField("subTotal", "Sub_Total"),
    ReadField("discount", "Discount"),
    ReadField("tax", "Tax"),
    ReadField("adjustment", "Adjustment"),
    ReadField("grandTotal", "Grand_Total"),
)


PRODUCT = EntityMapper(
    "Product",
    read_fields=[
        ReadField("productName", "Product_Name", required_text),
        ReadField("productCode", "Product_Code"),
        ReadField("productCategory", "Product_Category"),
        ReadField("manufacturer", "Manufacturer"),
        ReadField("vendorName", "Vendor_Name", ref_name),
        ReadField("productActive", "Product_Active", passthrough),
        ReadField("unitPrice", "Unit_Price"),
        ReadField("salesStartDate", "Sales_Start_Date"),
        ReadField("salesEndDate", "Sales_End_Date"),
        ReadField("supportStartDate", "Support_Start_Date"),
        ReadField("supportExpiryDate", "Support_Expiry_Date"),
        ReadField("usageUnit", "Usage_Unit"),
        ReadField("quantityInStock", "Qty_in_Stock"),
        ReadField("quantityInDemand", "Qty_in_Demand"),
        ReadField("reorderLevel", "Reorder_Level"),
        ReadField("handler", "Handler", ref_name),
        ReadField("quantityOrdered", "Qty_Ordered"),
        ReadField("taxable", "Taxable", passthrough),
        ReadField("commissionRate", "Commission_Rate"),
        ReadField("description", "Description"),
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("productName", "Product_Name", **ALWAYS_DEFINED),
        WriteField("productCode", "Product_Code"),
        WriteField("productCategory", "Product_Category"),
        WriteField("manufacturer", "Manufacturer"),
        WriteField("productActive", "Product_Active", **ALWAYS_DEFINED),
        WriteField("unitPrice", "Unit_Price", **ALWAYS_DEFINED),
        WriteField("usageUnit", "Usage_Unit"),
        WriteField("taxable", "Taxable", **ALWAYS_DEFINED),
        WriteField("description", "Description"),
    ],
)


QUOTE = EntityMapper(
    "Quote",
    read_fields=[
        ReadField("subject", "Subject", required_text),
        ReadField("quoteNumber", "Quote_Number"),
        ReadField("quoteStage", "Quote_Stage"),
        *_lookup("deal", "Deal_Name"),
        *_lookup("contact", "Contact_Name"),
        *_lookup("account", "Account_Name"),
        ReadField("validUntil", "Valid_Till"),
        ReadField("team", "Team"),
        ReadField("carrier", "Carrier"),
        *_address("shipping", "Shipping"),
        *_address("billing", "Billing"),
        *TOTALS,
        ReadField("termsAndConditions", "Terms_and_Conditions"),
        ReadField("description", "Description"),
        ReadField("quotedItems", "Quoted_Items", line_items(with_id=True, with_totals=True)),
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("subject", "Subject", **ALWAYS_DEFINED),
        WriteField("dealId", "Deal_Name", convert=as_ref),
        WriteField("contactId", "Contact_Name", convert=as_ref),
        WriteField("accountId", "Account_Name", convert=as_ref),
        WriteField("validUntil", "Valid_Till"),
        WriteField("quoteStage", "Quote_Stage"),
        WriteField("termsAndConditions", "Terms_and_Conditions"),
        WriteField("description", "Description"),
        WriteField("quotedItems", "Quoted_Items", convert=write_line_items, **CREATE_ONLY),
    ],
)


SALES_ORDER = EntityMapper(
    "SalesOrder",
    read_fields=[
        ReadField("subject", "Subject", required_text),
        ReadField("soNumber", "SO_Number"),
        ReadField("status", "Status"),
        *_lookup("deal", "Deal_Name"),
        *_lookup("contact", "Contact_Name"),
        *_lookup("account", "Account_Name"),
        *_lookup("quote", "Quote_Name"),
        ReadField("dueDate", "Due_Date"),
        ReadField("carrier", "Carrier"),
        ReadField("pending", "Pending"),
        ReadField("exciseDuty", "Excise_Duty"),
        ReadField("salesCommission", "Sales_Commission"),
        *TOTALS,
        ReadField("orderedItems", "Ordered_Items", line_items()),
        ReadField("termsAndConditions", "Terms_and_Conditions"),
        ReadField("description", "Description"),
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("subject", "Subject", **ALWAYS_DEFINED),
        WriteField("dealId", "Deal_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("contactId", "Contact_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("accountId", "Account_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("quoteId", "Quote_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("status", "Status"),
        WriteField("dueDate", "Due_Date"),
        WriteField("description", "Description"),
        WriteField("orderedItems", "Ordered_Items", convert=write_line_items, **CREATE_ONLY),
    ],
)


PURCHASE_ORDER = EntityMapper(
    "PurchaseOrder",
    read_fields=[
        ReadField("subject", "Subject", required_text),
        ReadField("poNumber", "PO_Number"),
        ReadField("status", "Status"),
        *_lookup("vendor", "Vendor_Name"),
        *_lookup("contact", "Contact_Name"),
        ReadField("dueDate", "Due_Date"),
        ReadField("carrier", "Carrier"),
        ReadField("requisitionNo", "Requisition_No"),
        ReadField("trackingNumber", "Tracking_Number"),
        ReadField("salesCommission", "Sales_Commission"),
        ReadField("exciseDuty", "Excise_Duty"),
        *TOTALS,
        ReadField("orderedItems", "Ordered_Items", line_items()),
        ReadField("termsAndConditions", "Terms_and_Conditions"),
        ReadField("description", "Description"),
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("subject", "Subject", **ALWAYS_DEFINED),
        WriteField("vendorId", "Vendor_Name", convert=as_ref, **ALWAYS_DEFINED),
        WriteField("contactId", "Contact_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("status", "Status"),
        WriteField("dueDate", "Due_Date"),
        WriteField("description", "Description"),
        WriteField("orderedItems", "Ordered_Items", convert=write_line_items, **CREATE_ONLY),
    ],
)


INVOICE = EntityMapper(
    "Invoice",
    read_fields=[
        ReadField("subject", "Subject", required_text),
        ReadField("invoiceNumber", "Invoice_Number"),
        ReadField("status", "Status"),
        *_lookup("salesOrder", "Sales_Order"),
        *_lookup("deal", "Deal_Name"),
        *_lookup("contact", "Contact_Name"),
        *_lookup("account", "Account_Name"),
        ReadField("invoiceDate", "Invoice_Date"),
        ReadField("dueDate", "Due_Date"),
        ReadField("salesCommission", "Sales_Commission"),
        ReadField("exciseDuty", "Excise_Duty"),
        *TOTALS,
        ReadField("invoicedItems", "Invoiced_Items", line_items()),
        ReadField("termsAndConditions", "Terms_and_Conditions"),
        ReadField("description", "Description"),
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("subject", "Subject", **ALWAYS_DEFINED),
        WriteField("salesOrderId", "Sales_Order", convert=as_ref, **CREATE_ONLY),
        WriteField("dealId", "Deal_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("contactId", "Contact_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("accountId", "Account_Name", convert=as_ref, **CREATE_ONLY),
        WriteField("status", "Status"),
        WriteField("invoiceDate", "Invoice_Date"),
        WriteField("dueDate", "Due_Date"),
        WriteField("description", "Description"),
        WriteField("invoicedItems", "Invoiced_Items", convert=write_line_items, **CREATE_ONLY),
    ],
)


VENDOR = EntityMapper(
    "Vendor",
    read_fields=[
        ReadField("vendorName", "Vendor_Name", required_text),
        ReadField("email", "Email"),
        ReadField("phone", "Phone"),
        ReadField("website", "Website"),
        ReadField("category", "Category"),
        ReadField("glAccount", "GL_Account"),
        ReadField("street", "Street"),
        ReadField("city", "City"),
        ReadField("state", "State"),
        ReadField("zipCode", "Zip_Code"),
        ReadField("country", "Country"),
        ReadField("description", "Description"),
        OWNER,
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("vendorName", "Vendor_Name", **ALWAYS_DEFINED),
        WriteField("email", "Email"),
        WriteField("phone", "Phone"),
        WriteField("website", "Website"),
        WriteField("category", "Category"),
        WriteField("description", "Description"),
    ],
)


PRICE_BOOK = EntityMapper(
    "PriceBook",
    read_fields=[
        ReadField("priceBookName", "Price_Book_Name", required_text),
        ReadField("pricingModel", "Pricing_Model", passthrough),
        ReadField("pricingDetails", "Pricing_Details", _pricing_details),
        ReadField("active", "Active", passthrough),
        ReadField("description", "Description"),
        *TIMESTAMPS,
    ],
    write_fields=[
        WriteField("priceBookName", "Price_Book_Name", **ALWAYS_DEFINED),
        WriteField("pricingModel", "Pricing_Model"),
        WriteField("active", "Active", **ALWAYS_DEFINED),
        WriteField("description", "Description"),
    ],
)
