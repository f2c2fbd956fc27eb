"""
Receipt generation for recorded transactions.

Builds PDF receipts with reportlab in two layouts:
- Thermal printer format (80mm width)
- Standard receipt format (A4)
"""

import io

from django.conf import settings
from django.utils import timezone

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch, mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.flowables import HRFlowable

from .models import Transaction


class ReceiptGenerator:
    """Receipt generator for a single ``Transaction``."""

    THERMAL_WIDTH = 80 * mm
    THERMAL_MARGIN = 5 * mm
    STANDARD_MARGIN = 20 * mm

    def __init__(self, record: Transaction):
        self.record = record
        self.styles = getSampleStyleSheet()
        self._create_custom_styles()

    def _create_custom_styles(self):
        self.header_style = ParagraphStyle(
            "ReceiptHeader",
            parent=self.styles["Heading1"],
            fontSize=16,
            spaceAfter=12,
            alignment=1,
            fontName="Helvetica-Bold",
        )
        self.thermal_header_style = ParagraphStyle(
            "ThermalHeader",
            parent=self.header_style,
            fontSize=12,
            spaceAfter=8,
        )
        self.body_style = ParagraphStyle(
            "ReceiptBody",
            parent=self.styles["Normal"],
            fontSize=10,
            spaceAfter=6,
        )
        self.thermal_body_style = ParagraphStyle(
            "ThermalBody",
            parent=self.body_style,
            fontSize=8,
            spaceAfter=4,
        )
        self.total_style = ParagraphStyle(
            "ReceiptTotal",
            parent=self.styles["Normal"],
            fontSize=12,
            spaceAfter=6,
            alignment=2,
            fontName="Helvetica-Bold",
        )
        self.thermal_total_style = ParagraphStyle(
            "ThermalTotal",
            parent=self.total_style,
            fontSize=10,
            spaceAfter=4,
        )

    def generate_pdf_receipt(self, format_type: str = "thermal") -> bytes:
        """
        Generate PDF receipt.

        Args:
            format_type: 'thermal' for 80mm paper, 'standard' for A4

        Returns:
            PDF bytes
        """
        thermal = format_type == "thermal"
        buffer = io.BytesIO()

        if thermal:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=(self.THERMAL_WIDTH, 11 * inch),
                rightMargin=self.THERMAL_MARGIN,
                leftMargin=self.THERMAL_MARGIN,
                topMargin=self.THERMAL_MARGIN,
                bottomMargin=self.THERMAL_MARGIN,
            )
        else:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                rightMargin=self.STANDARD_MARGIN,
                leftMargin=self.STANDARD_MARGIN,
                topMargin=self.STANDARD_MARGIN,
                bottomMargin=self.STANDARD_MARGIN,
            )

        doc.build(self._build_content(thermal))
        pdf_bytes = buffer.getvalue()
        buffer.close()
        return pdf_bytes

    def _build_content(self, thermal):
        story = []
        header_style = self.thermal_header_style if thermal else self.header_style
        story.append(Paragraph(settings.POS_STORE_NAME, header_style))
        story.append(Paragraph("SALES RECEIPT", header_style))
        story.extend(self._build_transaction_info(thermal))
        story.extend(self._build_items_table(thermal))
        story.extend(self._build_totals_section(thermal))
        story.extend(self._build_footer(thermal))
        return story

    def _separator(self, thermal):
        gap = 8 if thermal else 12
        return [
            Spacer(1, gap),
            HRFlowable(width="100%", thickness=1, color=colors.black),
            Spacer(1, gap),
        ]

    def _build_transaction_info(self, thermal):
        body_style = self.thermal_body_style if thermal else self.body_style
        created_at = timezone.localtime(self.record.created_at)

        lines = [
            f"Receipt #: {self.record.transaction_number or self.record.backend_id}",
            f"Date: {created_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Cashier: {self.record.cashier.get_full_name() or self.record.cashier.get_username()}",
            f"Customer: {self.record.get_customer_display()}",
        ]
        if self.record.customer_phone:
            lines.append(f"Phone: {self.record.customer_phone}")

        elements = [Paragraph(line, body_style) for line in lines]
        elements.extend(self._separator(thermal))
        return elements

    def _build_items_table(self, thermal):
        if thermal:
            data = [["Item", "Qty", "Price", "Total"]]
            col_widths = [35 * mm, 10 * mm, 15 * mm, 15 * mm]
            font_size = 7
        else:
            data = [["Item", "SKU", "Qty", "Unit Price", "Total"]]
            col_widths = [70 * mm, 30 * mm, 20 * mm, 25 * mm, 25 * mm]
            font_size = 9

        for item in self.record.items.all():
            if thermal:
                name = item.name[:20] + ("..." if len(item.name) > 20 else "")
                data.append(
                    [name, str(item.quantity), f"${item.unit_price:.2f}", f"${item.line_total:.2f}"]
                )
            else:
                data.append(
                    [
                        item.name,
                        item.sku,
                        str(item.quantity),
                        f"${item.unit_price:.2f}",
                        f"${item.line_total:.2f}",
                    ]
                )

        table = Table(data, colWidths=col_widths)
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), font_size + 1),
                    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                    ("FONTSIZE", (0, 1), (-1, -1), font_size),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("LINEBELOW", (0, 0), (-1, 0), 1, colors.black),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        return [table, Spacer(1, 8 if thermal else 12)]

    def _build_totals_section(self, thermal):
        body_style = self.thermal_body_style if thermal else self.body_style
        total_style = self.thermal_total_style if thermal else self.total_style
        record = self.record

        lines = [f"Subtotal: ${record.subtotal:.2f}", f"Tax: ${record.tax:.2f}"]
        if record.discount:
            lines.append(f"Discount: -${record.discount:.2f}")

        elements = [Paragraph(f"<para align='right'>{line}</para>", body_style) for line in lines]
        elements.append(HRFlowable(width="100%", thickness=2, color=colors.black))
        elements.append(Paragraph(f"<b>TOTAL: ${record.total:.2f}</b>", total_style))

        method = dict(Transaction.PAYMENT_METHOD_CHOICES).get(
            record.payment_method, record.payment_method
        )
        payment_lines = [f"Payment Method: {method}", f"Paid: ${record.amount_paid:.2f}"]
        if record.change_amount:
            payment_lines.append(f"Change: ${record.change_amount:.2f}")
        if record.due_amount:
            payment_lines.append(f"Amount Due: ${record.due_amount:.2f}")
        elements.extend(Paragraph(line, body_style) for line in payment_lines)
        return elements

    def _build_footer(self, thermal):
        body_style = self.thermal_body_style if thermal else self.body_style
        elements = self._separator(thermal)
        elements.append(
            Paragraph("<para align='center'>Thank you for your business!</para>", body_style)
        )
        return elements


class ReceiptService:
    """High-level entry point for receipt generation."""

    FORMATS = ("thermal", "standard")

    @staticmethod
    def generate_receipt(record: Transaction, format_type: str = "thermal") -> bytes:
        if format_type not in ReceiptService.FORMATS:
            raise ValueError(f"Unsupported receipt format: {format_type}")
        return ReceiptGenerator(record).generate_pdf_receipt(format_type)

    @staticmethod
    def get_filename(record: Transaction, format_type: str = "thermal") -> str:
        number = record.transaction_number or record.backend_id
        return f"receipt_{number}_{format_type}.pdf"
