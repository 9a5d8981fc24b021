# invoices/services/documents.py

"""
INVOICE PDF RECEIPT

Renders an invoice (title, customer, date, one row per line, total) with
reportlab's platypus layer into memory.

- The download endpoint streams a fresh in-memory render, so concurrent
  downloads never share a file.
- Checkout keeps a copy at INVOICE_DOCUMENT_DIR/invoice_<id>.pdf only when
  INVOICE_DOCUMENT_CLEANUP is off.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from django.conf import settings
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from invoices.models import Invoice


def document_path_for(invoice: Invoice) -> Path:
    return Path(settings.INVOICE_DOCUMENT_DIR) / f"invoice_{invoice.pk}.pdf"


def _money(value) -> str:
    return f"${value:,.2f}"


def render_invoice_document(invoice: Invoice) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter, title=f"Invoice {invoice.pk}")
    elements = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        "InvoiceTitle",
        parent=styles["Heading1"],
        fontSize=22,
        spaceAfter=20,
        alignment=TA_CENTER,
        fontName="Helvetica-Bold",
    )

    user = invoice.user
    customer = " ".join(p for p in (user.name, user.surname) if p) or user.username
    issued = timezone.localtime(invoice.created_at).strftime("%d/%m/%Y %H:%M")

    elements.append(Paragraph("INVOICE", title_style))
    elements.append(Spacer(1, 0.2 * inch))

    header_table = Table(
        [
            ["Invoice:", str(invoice.pk)],
            ["Customer:", f"{customer} ({user.email})"],
            ["Date:", issued],
        ],
        colWidths=[1.5 * inch, 4.5 * inch],
    )
    header_table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    elements.append(header_table)
    elements.append(Spacer(1, 0.3 * inch))

    elements.append(Paragraph("<b>Products</b>", styles["Heading2"]))
    elements.append(Spacer(1, 0.1 * inch))

    rows = [["Product", "Quantity", "Unit price", "Subtotal"]]
    for item in invoice.items.all():
        rows.append([
            item.product_name,
            str(item.quantity),
            _money(item.unit_price),
            _money(item.subtotal),
        ])
    rows.append(["", "", "Total", _money(invoice.total_amount)])

    lines_table = Table(rows, colWidths=[3 * inch, 1 * inch, 1.25 * inch, 1.25 * inch])
    lines_table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, 1), (-1, -2), "Helvetica"),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#333333")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -2), 0.5, colors.grey),
        ("LINEABOVE", (2, -1), (-1, -1), 1, colors.black),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
    ]))
    elements.append(lines_table)

    doc.build(elements)
    return buffer.getvalue()


def write_invoice_document(invoice: Invoice, content: bytes) -> Path:
    output_path = document_path_for(invoice)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(content)
    return output_path
