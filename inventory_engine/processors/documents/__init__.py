"""
Documents — invoices and receipts for purchases and sales orders.

Modules:
    content    — Record -> DocumentContent (parties, rows, totals, filename)
    pdf        — Rich platypus layout and plain canvas fallback
    excel      — Two-sheet workbook ("Document Info" + "Items")
    generator  — generate_document(), the single entry point
"""

from .content import make_document_filename
from .generator import DocumentResult, generate_document

__all__ = ["DocumentResult", "generate_document", "make_document_filename"]
