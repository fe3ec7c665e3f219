"""
Document content — everything a layout needs, computed once.

Layouts (PDF rich, PDF simple, XLSX) only place the strings and numbers
prepared here, so all three always agree on the totals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Union

from inventory_engine.config import settings
from inventory_engine.models import Purchase, SalesOrder, Supplier

DOCUMENT_TITLES = {
    "invoice": "PURCHASE INVOICE",
    "receipt": "PAYMENT RECEIPT",
}


@dataclass
class ItemRow:
    index: int
    name: str
    sku: str
    quantity: float
    unit_price: float
    total: float


@dataclass
class DocumentContent:
    doc_type: str
    title: str
    document_number: str
    generated_at: datetime
    order_number: str
    order_date: Optional[datetime]
    party_label: str
    party_name: str
    party_address: str
    party_phone: str
    party_email: str
    payment_method: str
    payment_status: str
    payment_date: Optional[datetime]
    notes: str
    items: List[ItemRow] = field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    discount: float = 0.0
    total: float = 0.0
    currency: str = "PKR"


def make_document_filename(doc_type: str, document_number, ext: str,
                           now: Optional[datetime] = None) -> str:
    """
    `{type}_{number}_{timestamp}.{ext}`, timestamp like 2024-05-01T09-30-00 (UTC).

    >>> make_document_filename("invoice", "PO-0007", "pdf", datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc))
    'invoice_PO-0007_2024-05-01T09-30-00.pdf'
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    timestamp = now.isoformat()[:19].replace(":", "-")
    number = str(document_number or "N-A").replace("/", "-").replace("\\", "-")
    return f"{doc_type}_{number}_{timestamp}.{ext}"


def format_money(amount: float, currency: str) -> str:
    return f"{currency} {amount:,.2f}"


def format_date(value: Optional[datetime]) -> str:
    return value.strftime("%m/%d/%Y") if value else "N/A"


def format_payment_method(method: Optional[str]) -> str:
    return method.replace("_", " ").upper() if method else "Not Specified"


def order_totals(record: Union[Purchase, SalesOrder]) -> dict:
    """
    Subtotal, tax, discount and total of an order.

    subtotal = totalAmount, or the sum of line totals when that is missing
    total    = finalAmount, or subtotal + tax - discount
    """
    subtotal = float(record.total_amount) or sum(item.line_total for item in record.items)
    tax = float(record.tax_amount)
    discount = float(record.discount_amount)
    if record.final_amount:
        total = float(record.final_amount)
    else:
        total = subtotal + tax - discount
    return {"subtotal": subtotal, "tax": tax, "discount": discount, "total": total}


def coerce_record(record) -> Union[Purchase, SalesOrder]:
    """Accept a model or a raw API dict; dicts with a purchase number or supplier are purchases."""
    if isinstance(record, (Purchase, SalesOrder)):
        return record
    if not isinstance(record, dict):
        raise TypeError(f"Cannot build a document from {type(record).__name__}")
    if "purchaseNumber" in record or "supplierId" in record or "purchase_number" in record:
        return Purchase.model_validate(record)
    return SalesOrder.model_validate(record)


def build_content(record, doc_type: str = "invoice", document_number: Optional[str] = None,
                  now: Optional[datetime] = None) -> DocumentContent:
    order = coerce_record(record)
    generated_at = now or datetime.now(timezone.utc)

    if isinstance(order, Purchase):
        order_number = order.purchase_number or "N/A"
        order_date = order.purchase_date or order.created_at
        supplier = order.supplier if isinstance(order.supplier, Supplier) else Supplier()
        party = {
            "party_label": "Bill To",
            "party_name": supplier.name or "Unknown Supplier",
            "party_address": supplier.address_text,
            "party_phone": supplier.phone or "N/A",
            "party_email": supplier.email or "N/A",
        }
    else:
        order_number = order.order_number or "N/A"
        order_date = order.created_at
        address = order.delivery_address
        if isinstance(address, dict):
            address = ", ".join(str(v) for v in address.values() if v)
        party = {
            "party_label": "Customer",
            "party_name": order.customer_info.name or "Walk-in Customer",
            "party_address": address or "No Address",
            "party_phone": order.customer_info.phone or "N/A",
            "party_email": order.customer_info.email or "N/A",
        }

    rows = [
        ItemRow(
            index=i,
            name=item.display_name,
            sku=item.sku,
            quantity=float(item.quantity),
            unit_price=float(item.unit_price),
            total=item.line_total,
        )
        for i, item in enumerate(order.items, start=1)
    ]

    return DocumentContent(
        doc_type=doc_type,
        title=DOCUMENT_TITLES.get(doc_type, doc_type.upper()),
        document_number=str(document_number or order_number),
        generated_at=generated_at,
        order_number=order_number,
        order_date=order_date,
        payment_method=format_payment_method(order.payment_method),
        payment_status=(order.payment_status or "pending").upper(),
        payment_date=order.payment_date,
        notes=order.notes or "",
        items=rows,
        currency=settings.CURRENCY,
        **party,
        **order_totals(order),
    )
