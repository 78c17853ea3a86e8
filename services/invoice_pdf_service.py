from io import BytesIO
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from core.config import settings
from models.orders import Order
from utils.logger import get_logger
from utils.money import to_money

logger = get_logger(__name__)

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
BOTTOM_MARGIN = 25 * mm


class InvoicePdfService:
    """
    Renders an order (and its bill, when issued) as a one-document PDF invoice.

    Layout: header with invoice number and date, seller and buyer columns,
    the line table, then the totals block. Long orders continue on new pages.
    """

    @staticmethod
    def render(order: Order) -> bytes:
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=A4)
        width, height = A4

        def draw_text(x, y, text, font=FONT_REGULAR, size=10, align="left"):
            c.setFont(font, size)
            text = str(text) if text is not None else ""
            if align == "right":
                c.drawRightString(x, y, text)
            elif align == "center":
                c.drawCentredString(x, y, text)
            else:
                c.drawString(x, y, text)

        bill = order.bill
        number = f"INV-{bill.id}" if bill else f"ORD-{order.id}"
        issued = bill.created_at if bill and bill.created_at else order.order_date

        # Header
        y = height - 20 * mm
        draw_text(190 * mm, y, f"Invoice {number}", font=FONT_BOLD, size=16, align="right")
        y -= 7 * mm
        draw_text(190 * mm, y, f"Date: {issued:%Y-%m-%d %H:%M}", align="right")
        y -= 5 * mm
        draw_text(190 * mm, y, f"Order #{order.id}  ({order.order_type.value})", align="right")

        y -= 6 * mm
        c.setLineWidth(0.5)
        c.line(20 * mm, y, 190 * mm, y)
        y -= 10 * mm

        # Seller / buyer
        draw_text(20 * mm, y, "SELLER:", font=FONT_BOLD)
        draw_text(110 * mm, y, "BUYER:", font=FONT_BOLD)
        y -= 5 * mm
        draw_text(20 * mm, y, settings.INVOICE_COMPANY_NAME)

        buyer_lines = [order.name, order.address, order.phone, order.email]
        if not any(buyer_lines) and order.customer is not None:
            buyer_lines = [order.customer.full_name, order.customer.address,
                           order.customer.phone_number, order.customer.email]
        for line in buyer_lines:
            if line:
                draw_text(110 * mm, y, line)
                y -= 5 * mm
        y -= 8 * mm

        # Line table
        def table_header(y):
            draw_text(20 * mm, y, "#", font=FONT_BOLD)
            draw_text(30 * mm, y, "Product", font=FONT_BOLD)
            draw_text(130 * mm, y, "Qty", font=FONT_BOLD, align="right")
            draw_text(160 * mm, y, "Price", font=FONT_BOLD, align="right")
            draw_text(190 * mm, y, "Subtotal", font=FONT_BOLD, align="right")
            y -= 2 * mm
            c.line(20 * mm, y, 190 * mm, y)
            return y - 5 * mm

        y = table_header(y)
        for index, item in enumerate(order.items, start=1):
            if y < BOTTOM_MARGIN + 30 * mm:
                c.showPage()
                y = table_header(height - 20 * mm)
            name = item.product_name or f"Product {item.product_id}"
            draw_text(20 * mm, y, index)
            draw_text(30 * mm, y, name[:55])
            draw_text(130 * mm, y, item.quantity, align="right")
            draw_text(160 * mm, y, f"{to_money(item.price):,.2f}", align="right")
            draw_text(190 * mm, y, f"{to_money(item.subtotal):,.2f}", align="right")
            y -= 6 * mm

        c.line(20 * mm, y + 2 * mm, 190 * mm, y + 2 * mm)
        y -= 4 * mm

        # Totals
        totals = [
            ("Total", order.total_amount),
            ("Discount", order.discount_amount),
            ("Amount due", order.amount_due),
        ]
        for label, amount in totals:
            draw_text(160 * mm, y, f"{label}:", align="right")
            draw_text(190 * mm, y, f"{to_money(amount):,.2f}", font=FONT_BOLD, align="right")
            y -= 6 * mm

        status = bill.pay_status.value if bill else order.pay_status.value
        draw_text(190 * mm, y - 2 * mm, f"Payment status: {status}", size=9, align="right")

        c.showPage()
        c.save()

        logger.info("Invoice rendered", extra={"order_id": order.id, "invoice_number": number})
        return buffer.getvalue()
