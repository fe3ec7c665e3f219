"""
PDF layouts for invoices and receipts (reportlab).

build_rich_pdf   — platypus story: letterhead, parties, item table, totals
build_simple_pdf — plain canvas text, used when the rich layout fails
"""

from __future__ import annotations

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from inventory_engine.config import settings
from .content import DocumentContent, format_date, format_money

_HEADER_BLUE = colors.Color(59 / 255, 130 / 255, 246 / 255)

# Simple layout: footer baseline, and the lowest baseline body text may use
FOOTER_Y = 20 * mm
CONTENT_BOTTOM = 30 * mm

FOOTER_LINES = (
    "Thank you for your purchase! All sales are final after 30 days.",
    "Please retain this invoice for warranty or exchange purposes.",
    "For questions or support, contact us at info@company.com or (555) 123-4567",
)


def build_rich_pdf(content: DocumentContent) -> bytes:
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        leftMargin=14 * mm, rightMargin=14 * mm, topMargin=14 * mm, bottomMargin=14 * mm,
        title=f"{content.title} {content.document_number}",
    )
    styles = getSampleStyleSheet()
    normal = styles["Normal"]

    def money(amount):
        return format_money(amount, content.currency)

    story = [
        Paragraph(f"<b>{escape(settings.COMPANY_NAME)}</b>", styles["Title"]),
        Paragraph(escape(settings.COMPANY_ADDRESS), normal),
        Paragraph(escape(settings.COMPANY_CONTACT), normal),
        Spacer(1, 8 * mm),
        Paragraph(content.title, styles["Heading1"]),
    ]

    header = Table(
        [
            [f"{content.doc_type.title()} #: {content.document_number}",
             f"Order #: {content.order_number}"],
            [f"{content.doc_type.title()} date: {format_date(content.generated_at)}",
             f"Order date: {format_date(content.order_date)}"],
            ["", f"Payment: {content.payment_method}"],
        ],
        colWidths=[90 * mm, 90 * mm],
    )
    header.setStyle(TableStyle([("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold")]))
    story += [header, Spacer(1, 6 * mm)]

    story += [
        Paragraph(f"<b>{content.party_label}:</b>", normal),
        Paragraph(escape(content.party_name), normal),
        Paragraph(escape(content.party_address), normal),
        Paragraph(escape(f"Phone: {content.party_phone}"), normal),
        Paragraph(escape(f"Email: {content.party_email}"), normal),
        Spacer(1, 6 * mm),
    ]

    rows = [["QTY", "Description", "Unit Price", "Amount"]]
    for item in content.items:
        rows.append([
            f"{item.quantity:g}",
            Paragraph(f"{escape(item.name)}<br/><font size=8>SKU: {escape(item.sku)}</font>", normal),
            money(item.unit_price),
            money(item.total),
        ])
    items = Table(rows, colWidths=[20 * mm, 90 * mm, 35 * mm, 35 * mm], repeatRows=1)
    items.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("ALIGN", (0, 0), (0, -1), "CENTER"),
        ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
    ]))
    story += [items, Spacer(1, 6 * mm)]

    totals = [["Subtotal", money(content.subtotal)]]
    if content.tax > 0:
        totals.append(["Sales Tax", money(content.tax)])
    if content.discount > 0:
        totals.append(["Discount", f"-{money(content.discount)}"])
    totals.append([f"Total ({content.currency})", money(content.total)])
    totals_table = Table(totals, colWidths=[40 * mm, 40 * mm], hAlign="RIGHT")
    totals_table.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEABOVE", (0, -1), (-1, -1), 0.75, colors.black),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
    ]))
    story += [totals_table, Spacer(1, 6 * mm)]

    if content.notes:
        story += [Paragraph("<b>Notes</b>", normal), Paragraph(escape(content.notes), normal), Spacer(1, 4 * mm)]

    if content.doc_type == "receipt":
        story += [
            Paragraph("<b>Payment Confirmed</b>", normal),
            Paragraph(f"Payment Date: {format_date(content.payment_date)}", normal),
            Spacer(1, 4 * mm),
        ]

    story += [Spacer(1, 10 * mm)] + [Paragraph(f"<font size=8>{line}</font>", normal) for line in FOOTER_LINES]
    story.append(Paragraph(
        f"<font size=8>Generated on: {content.generated_at.strftime('%m/%d/%Y %H:%M')}</font>", normal,
    ))

    doc.build(story)
    return buf.getvalue()


def build_simple_pdf(content: DocumentContent) -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    W, H = A4
    x = 14 * mm
    y = H - 45 * mm

    def money(amount):
        return format_money(amount, content.currency)

    def footer():
        c.setFont("Helvetica", 8)
        c.drawString(x, FOOTER_Y, "Thank you for your business!")
        c.drawString(120 * mm, FOOTER_Y, f"Generated on: {content.generated_at.strftime('%m/%d/%Y %H:%M')}")

    def line(text, font=("Helvetica", 11), gap=6 * mm):
        nonlocal y
        if y < CONTENT_BOTTOM:
            footer()
            c.showPage()
            y = H - 20 * mm
        c.setFont(*font)
        c.drawString(x, y, text)
        y -= gap

    bold = ("Helvetica-Bold", 11)

    c.setFillColor(_HEADER_BLUE)
    c.rect(0, H - 35 * mm, W, 35 * mm, stroke=0, fill=1)
    c.setFillColor(colors.white)
    c.setFont("Helvetica-Bold", 20)
    c.drawString(x, H - 18 * mm, settings.COMPANY_NAME)
    c.setFont("Helvetica", 14)
    c.drawString(x, H - 28 * mm, content.title)
    c.setFillColor(colors.black)

    line(f"Document No: {content.document_number}")
    line(f"Date: {format_date(content.generated_at)}", gap=12 * mm)

    line("Order Details:", bold, 8 * mm)
    line(f"Order Number: {content.order_number}")
    line(f"Order Date: {format_date(content.order_date)}")
    line(f"{content.party_label}: {content.party_name}")
    line(f"Payment Method: {content.payment_method}", gap=12 * mm)

    line("Items:", bold, 8 * mm)
    for item in content.items:
        line(
            f"{item.index}. {item.name} ({item.sku}) - Qty: {item.quantity:g} - {money(item.total)}",
            ("Helvetica", 10), 7 * mm,
        )
    y -= 6 * mm

    line("Summary:", bold, 8 * mm)
    line(f"Subtotal: {money(content.subtotal)}")
    if content.tax > 0:
        line(f"Tax: {money(content.tax)}")
    if content.discount > 0:
        line(f"Discount: -{money(content.discount)}")
    line(f"Total Amount: {money(content.total)}", bold, 12 * mm)

    if content.doc_type == "receipt":
        line("Payment Status: PAID", bold)
        line(f"Payment Date: {format_date(content.payment_date)}", bold, 12 * mm)

    if content.notes:
        line("Notes:", bold)
        line(content.notes[:110])

    footer()
    c.showPage()
    c.save()
    return buf.getvalue()
