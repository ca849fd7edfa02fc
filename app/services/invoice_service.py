from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas


def render_invoice_pdf(detail: dict) -> bytes:
    """Invoice-style PDF for one lecturer and period (output of hr_detail)."""
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    y = height - 40

    # HEADER
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawString(40, y, "Lecturer Claim Invoice")
    y -= 30

    pdf.setFont("Helvetica", 10)
    pdf.drawString(40, y, f"Lecturer: {detail['lecturer_name']}")
    y -= 15
    pdf.drawString(40, y, f"Period: {detail['year']}-{detail['month']:02d}")
    y -= 15
    pdf.drawString(40, y, f"Total hours: {float(detail['total_hours']):.2f}")
    y -= 15
    pdf.drawString(40, y, f"Total amount: {float(detail['total_amount']):.2f}")
    y -= 30

    # CLAIMS
    for claim in detail["claims"]:
        if y < 80:
            pdf.showPage()
            y = height - 40

        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(40, y, f"{claim.module_code} (claim {claim.id})")
        y -= 14

        pdf.setFont("Helvetica", 9)
        for item in claim.line_items:
            if y < 60:
                pdf.showPage()
                y = height - 40
                pdf.setFont("Helvetica", 9)
            pdf.drawString(
                60,
                y,
                f"{item.date} | {float(item.hours):.2f} h x {float(item.rate_per_hour):.2f}"
                f" = {item.amount}",
            )
            y -= 12

        pdf.drawString(60, y, f"Claim total: {claim.total_amount}")
        y -= 22

    pdf.showPage()
    pdf.save()

    buffer.seek(0)
    return buffer.read()
