# app/domain/services/invoice_pdf.py
"""
Generate order invoice PDFs with ReportLab.

The file is written to ``INVOICE_DIR/invoice_<order_id>.pdf`` and the path is
returned so the caller can upload it as a WhatsApp document. Generation is
synchronous; callers on the event loop run it in a worker thread.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from app.core.config import settings
from app.domain.catalog import format_price
from app.domain.models.conversation import OrderDraft

logger = logging.getLogger("invoice_pdf")


def invoice_filename(order_id: str) -> str:
    return f"invoice_{order_id}.pdf"


class PdfInvoiceGenerator:
    def __init__(self, output_dir: str | Path | None = None, store_name: str | None = None):
        self.output_dir = Path(output_dir or settings.INVOICE_DIR)
        self.store_name = store_name or settings.STORE_NAME

    def generate(self, order_id: str, draft: OrderDraft) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / invoice_filename(order_id)

        doc = SimpleDocTemplate(
            str(path),
            pagesize=A4,
            leftMargin=15 * mm,
            rightMargin=15 * mm,
            topMargin=15 * mm,
            bottomMargin=15 * mm,
            title=f"Invoice {order_id}",
        )
        doc.build(self._elements(order_id, draft))
        logger.info("Invoice written: %s", path)
        return path

    def _elements(self, order_id: str, draft: OrderDraft) -> list:
        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "InvoiceTitle",
            parent=styles["Heading1"],
            fontSize=18,
            alignment=1,  # center
            spaceAfter=6,
        )
        subtitle_style = ParagraphStyle(
            "InvoiceSubtitle",
            parent=styles["Normal"],
            fontSize=10,
            alignment=1,
            spaceAfter=18,
        )

        elements = [
            Paragraph(escape(self.store_name), title_style),
            Paragraph(
                f"Invoice {escape(order_id)} | {datetime.now().strftime('%d-%b-%Y %H:%M')}",
                subtitle_style,
            ),
        ]

        details = [
            ["Order ID", order_id],
            ["Customer Name", draft.customer_name],
            ["Phone", draft.user_id],
            ["Delivery Address", draft.delivery_address],
            ["Delivery Location", draft.delivery_location or "N/A"],
            ["Billing Address", draft.billing_address],
            ["Payment", "Cash on delivery"],
        ]
        value_style = ParagraphStyle("Value", parent=styles["Normal"], fontSize=9, leading=12)
        details_table = Table(
            [[label, Paragraph(escape(str(value)), value_style)] for label, value in details],
            colWidths=[110, 350],
        )
        details_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (0, -1), colors.Color(0.95, 0.95, 0.95)),
                    ("TEXTCOLOR", (0, 0), (0, -1), colors.grey),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.Color(0.8, 0.8, 0.8)),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("TOPPADDING", (0, 0), (-1, -1), 5),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
                    ("LEFTPADDING", (0, 0), (-1, -1), 8),
                ]
            )
        )
        elements.append(details_table)
        elements.append(Spacer(1, 15))

        rows = [["Product", "Qty", "Unit price", "Subtotal"]]
        for line in draft.lines:
            rows.append([
                line.name,
                str(line.quantity),
                format_price(line.unit_price),
                format_price(line.subtotal),
            ])
        rows.append(["TOTAL", "", "", format_price(draft.total)])

        items_table = Table(rows, colWidths=[220, 50, 95, 95])
        items_table.setStyle(
            TableStyle(
                [
                    # Header row
                    ("BACKGROUND", (0, 0), (-1, 0), colors.Color(0.2, 0.3, 0.5)),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    # Total row
                    ("BACKGROUND", (0, -1), (-1, -1), colors.Color(0.9, 0.95, 1.0)),
                    ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.Color(0.8, 0.8, 0.8)),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        elements.append(items_table)
        elements.append(Spacer(1, 20))

        elements.append(
            Paragraph(
                "Thank you for shopping with us. Payment is collected on delivery.",
                ParagraphStyle(
                    "Footer",
                    parent=styles["Normal"],
                    fontSize=8,
                    textColor=colors.grey,
                    alignment=1,
                ),
            )
        )
        return elements
