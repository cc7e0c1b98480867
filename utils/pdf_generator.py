from io import BytesIO
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from logging_config import get_logger
from schemas.reports import Report, ReportType
from crud.reports import report_table

logger = get_logger(__name__)


class PDFGenerator:
    def __init__(self, facility_name: str = "Medical Supply Store"):
        self.facility_name = facility_name

    def create_pdf(self, report: Report) -> bytes:
        buffer = BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                rightMargin=54,
                leftMargin=54,
                topMargin=54,
                bottomMargin=54
            )

            styles = getSampleStyleSheet()
            title_style = ParagraphStyle(
                'TitleStyle',
                parent=styles['Title'],
                fontSize=16,
                textColor=colors.navy,
                spaceAfter=12
            )
            elements = []

            elements.append(Paragraph(self.facility_name, styles['Heading2']))
            elements.append(Paragraph(report.title, title_style))
            elements.append(Paragraph(
                f"Generated {report.generated_at.strftime('%d/%m/%Y %H:%M')} UTC", styles['Normal']
            ))
            elements.append(Spacer(1, 20))

            table_data = [[str(v) for v in row] for row in report_table(report)]
            quantity_col = table_data[0].index("Quantity")
            total_row = [''] * len(table_data[0])
            total_row[0] = 'Total'
            total_row[quantity_col] = str(report.total_quantity)
            table_data.append(total_row)

            table = Table(table_data, repeatRows=1)
            table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
                ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTSIZE', (0, 0), (-1, 0), 11),
                ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
                ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
                ('FONTSIZE', (0, 1), (-1, -1), 9),
                ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
                ('BACKGROUND', (0, -1), (-1, -1), colors.lightgrey),
                ('ALIGN', (quantity_col, 1), (quantity_col, -1), 'RIGHT'),
                ('GRID', (0, 0), (-1, -1), 0.5, colors.black)
            ]))
            elements.append(table)

            if report.report_type != ReportType.INVENTORY and report.totals_by_direction:
                elements.append(Spacer(1, 12))
                for direction, quantity in report.totals_by_direction.items():
                    elements.append(Paragraph(f"{direction}: {quantity}", styles['Normal']))

            def add_page_number(canvas, doc):
                canvas.drawRightString(A4[0] - 0.5 * inch, 0.5 * inch, f"Page {canvas.getPageNumber()}")

            doc.build(elements, onFirstPage=add_page_number, onLaterPages=add_page_number)
            return buffer.getvalue()

        except Exception:
            logger.exception("Error creating PDF for %s report", report.report_type.value)
            raise
        finally:
            buffer.close()
