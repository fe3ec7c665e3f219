"""
Document generator — single entry point for invoices and receipts.

    result = generate_document(purchase, "pdf", "invoice")
    if result.success:
        st.download_button("Download", result.content, file_name=result.filename)

PDF output tries the rich platypus layout first and falls back to the plain
canvas layout. Failures come back as an unsuccessful DocumentResult, they
are never raised to the caller.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from . import excel, pdf
from .content import build_content, make_document_filename

logger = logging.getLogger(__name__)

FORMAT_EXTENSIONS = {"pdf": "pdf", "xlsx": "xlsx", "excel": "xlsx"}


@dataclass
class DocumentResult:
    success: bool
    filename: Optional[str] = None
    content: Optional[bytes] = None
    path: Optional[str] = None
    layout: Optional[str] = None
    error: Optional[str] = None


def _render_pdf(content) -> tuple[bytes, str]:
    try:
        return pdf.build_rich_pdf(content), "rich"
    except Exception as e:
        logger.warning("Rich PDF layout failed, using simple layout: %s", e)
    return pdf.build_simple_pdf(content), "simple"


def generate_document(
    record,
    fmt: str = "pdf",
    doc_type: str = "invoice",
    *,
    document_number: Optional[str] = None,
    output_dir: Optional[str] = None,
    now: Optional[datetime] = None,
) -> DocumentResult:
    """
    Render a purchase or sales order as an invoice / receipt.

    Args:
        record:          Purchase or SalesOrder model, or the raw API dict.
        fmt:             "pdf", "xlsx" or "excel".
        doc_type:        "invoice" or "receipt".
        document_number: Number printed on the document and used in the
                         filename, defaults to the order number.
        output_dir:      When given, the file is also written there.
        now:             Generation time (UTC), used in the filename.
    """
    ext = FORMAT_EXTENSIONS.get((fmt or "").lower())
    if ext is None:
        return DocumentResult(success=False, error=f"Unsupported format: {fmt}")

    try:
        content = build_content(record, doc_type, document_number, now)
        if ext == "pdf":
            data, layout = _render_pdf(content)
        else:
            data, layout = excel.build_workbook(content), "workbook"
    except Exception as e:
        logger.error("Document generation failed (%s %s): %s", doc_type, fmt, e)
        return DocumentResult(success=False, error=str(e))

    filename = make_document_filename(doc_type, content.document_number, ext, content.generated_at)
    result = DocumentResult(success=True, filename=filename, content=data, layout=layout)

    if output_dir:
        try:
            os.makedirs(output_dir, exist_ok=True)
            path = os.path.join(output_dir, filename)
            with open(path, "wb") as f:
                f.write(data)
            result.path = path
        except OSError as e:
            logger.error("Could not write %s: %s", filename, e)
            return DocumentResult(success=False, filename=filename, content=data, error=str(e))

    logger.info("Generated %s (%s layout)", filename, layout)
    return result
