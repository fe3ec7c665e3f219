"""Invoice / receipt generation."""

import re
from datetime import datetime, timezone
from io import BytesIO

import pandas as pd
import pytest

from inventory_engine.processors.documents import generate_document, make_document_filename
from inventory_engine.processors.documents import generator, pdf
from inventory_engine.processors.documents.content import build_content, order_totals
from inventory_engine.models import Purchase

NOW = datetime(2024, 5, 15, 9, 30, 5, tzinfo=timezone.utc)


class TestFilename:

    def test_invoice_pdf_pattern(self):
        name = make_document_filename("invoice", "PO-0007", "pdf")
        assert re.fullmatch(r"invoice_PO-0007_\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}\.pdf", name)

    def test_fixed_time(self):
        assert make_document_filename("receipt", "PO-1", "xlsx", NOW) == "receipt_PO-1_2024-05-15T09-30-05.xlsx"

    def test_slashes_replaced(self):
        assert make_document_filename("invoice", "PO/7", "pdf", NOW).startswith("invoice_PO-7_")


class TestTotals:

    def test_stored_amounts(self, purchase_record):
        totals = order_totals(Purchase.model_validate(purchase_record))
        assert totals == {"subtotal": 400, "tax": 40, "discount": 10, "total": 430}

    def test_derived_amounts(self):
        purchase = Purchase.model_validate({
            "items": [{"quantity": 2, "unitPrice": 50}, {"quantity": 1, "unitPrice": 25}],
            "taxAmount": 5,
            "discountAmount": 10,
        })
        totals = order_totals(purchase)
        assert totals["subtotal"] == 125
        assert totals["total"] == 120


class TestContent:

    def test_purchase_parties(self, purchase_record):
        content = build_content(purchase_record, "invoice", now=NOW)
        assert content.title == "PURCHASE INVOICE"
        assert content.document_number == "PO-0007"
        assert content.party_name == "Acme Supplies & Co"
        assert content.party_address == "1 Main St, Lahore"
        assert content.payment_method == "BANK TRANSFER"
        assert [row.sku for row in content.items] == ["WID-1", "GAD-2"]

    def test_sales_order_customer(self):
        content = build_content({
            "orderNumber": "SO-3",
            "customerInfo": {"name": "Ayesha", "phone": "0300"},
            "deliveryAddress": {"street": "5 Mall Rd", "city": "Karachi"},
            "items": [],
        }, "receipt", now=NOW)
        assert content.title == "PAYMENT RECEIPT"
        assert content.party_name == "Ayesha"
        assert content.party_address == "5 Mall Rd, Karachi"
        assert content.party_email == "N/A"


class TestGenerateDocument:

    def test_pdf_rich_layout(self, purchase_record):
        result = generate_document(purchase_record, "pdf", "invoice", now=NOW)
        assert result.success
        assert result.layout == "rich"
        assert result.filename == "invoice_PO-0007_2024-05-15T09-30-05.pdf"
        assert result.content.startswith(b"%PDF")

    def test_falls_back_to_simple_layout(self, purchase_record, monkeypatch):
        def broken(content):
            raise RuntimeError("table overflow")

        monkeypatch.setattr(generator.pdf, "build_rich_pdf", broken)
        result = generate_document(purchase_record, "pdf", "receipt", now=NOW)
        assert result.success
        assert result.layout == "simple"
        assert result.content.startswith(b"%PDF")

    def test_xlsx_sheets(self, purchase_record):
        result = generate_document(purchase_record, "excel", "invoice", now=NOW)
        assert result.success
        assert result.filename.endswith(".xlsx")
        sheets = pd.read_excel(BytesIO(result.content), sheet_name=None)
        assert list(sheets) == ["Document Info", "Items"]
        items = sheets["Items"]
        assert list(items.columns) == ["#", "Product Name", "SKU", "Quantity", "Unit Price", "Total Price"]
        assert items["Total Price"].tolist() == [250, 150]
        info = dict(zip(sheets["Document Info"]["Field"], sheets["Document Info"]["Value"]))
        assert info["Total Amount"] == "PKR 430.00"

    def test_unsupported_format(self, purchase_record):
        result = generate_document(purchase_record, "docx")
        assert not result.success
        assert "Unsupported" in result.error

    def test_bad_record_is_reported_not_raised(self):
        result = generate_document(["not", "a", "record"], "pdf")
        assert not result.success

    def test_written_to_output_dir(self, purchase_record, tmp_path):
        result = generate_document(purchase_record, "pdf", output_dir=str(tmp_path / "docs"), now=NOW)
        assert result.path is not None
        with open(result.path, "rb") as f:
            assert f.read() == result.content

    def test_explicit_document_number(self, purchase_record):
        result = generate_document(purchase_record, "pdf", document_number="INV-0001", now=NOW)
        assert result.filename.startswith("invoice_INV-0001_")


@pytest.mark.parametrize("doc_type", ["invoice", "receipt"])
def test_both_document_types_render(purchase_record, doc_type):
    assert generate_document(purchase_record, "pdf", doc_type, now=NOW).success


class TestSimpleLayoutPaging:
    """The canvas layout breaks pages instead of drawing past the footer."""

    @pytest.fixture
    def drawn(self, monkeypatch):
        calls = []
        base = pdf.canvas.Canvas

        class RecordingCanvas(base):
            def drawString(self, x, y, text, *args, **kwargs):
                calls.append((self.getPageNumber(), y, text))
                return super().drawString(x, y, text, *args, **kwargs)

        monkeypatch.setattr(pdf.canvas, "Canvas", RecordingCanvas)
        return calls

    def test_long_receipt_stays_above_footer(self, purchase_record, drawn):
        purchase_record["items"] = [
            {"productId": {"_id": f"p{i}", "name": f"Part {i}", "sku": f"PRT-{i}"}, "quantity": 1, "unitPrice": 5}
            for i in range(40)
        ]
        content = build_content(purchase_record, "receipt", now=NOW)
        assert pdf.build_simple_pdf(content).startswith(b"%PDF")

        footer = {"Thank you for your business!"}
        body = [(page, y, text) for page, y, text in drawn
                if text not in footer and not text.startswith("Generated on:")]
        assert all(y >= pdf.CONTENT_BOTTOM for _, y, _ in body)
        assert max(page for page, _, _ in drawn) >= 2
        texts = [text for _, _, text in body]
        assert "Total Amount: PKR 430.00" in texts
        assert "Payment Status: PAID" in texts
        assert texts[-1] == "Deliver to back door"

    def test_footer_on_every_page(self, purchase_record, drawn):
        purchase_record["items"] = purchase_record["items"] * 20
        pdf.build_simple_pdf(build_content(purchase_record, "invoice", now=NOW))
        pages = {page for page, _, _ in drawn}
        footer_pages = {page for page, _, text in drawn if text == "Thank you for your business!"}
        assert footer_pages == pages
