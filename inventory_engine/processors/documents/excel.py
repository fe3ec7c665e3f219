"""Two-sheet XLSX workbook for a document (pandas + openpyxl)."""

from __future__ import annotations

from io import BytesIO

import pandas as pd

from .content import DocumentContent, format_date, format_money

ITEM_COLUMNS = ["#", "Product Name", "SKU", "Quantity", "Unit Price", "Total Price"]


def build_workbook(content: DocumentContent) -> bytes:
    info = pd.DataFrame(
        [
            ["Document Type", content.title],
            ["Document Number", content.document_number],
            ["Generated Date", format_date(content.generated_at)],
            ["Order Number", content.order_number],
            ["Order Date", format_date(content.order_date)],
            [content.party_label, content.party_name],
            ["Payment Method", content.payment_method],
            ["Payment Status", content.payment_status],
            ["Subtotal", format_money(content.subtotal, content.currency)],
            ["Tax", format_money(content.tax, content.currency)],
            ["Discount", format_money(content.discount, content.currency)],
            ["Total Amount", format_money(content.total, content.currency)],
        ],
        columns=["Field", "Value"],
    )
    items = pd.DataFrame(
        [[i.index, i.name, i.sku, i.quantity, i.unit_price, i.total] for i in content.items],
        columns=ITEM_COLUMNS,
    )

    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        info.to_excel(writer, sheet_name="Document Info", index=False)
        items.to_excel(writer, sheet_name="Items", index=False)
    return output.getvalue()
