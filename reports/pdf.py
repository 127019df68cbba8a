"""
PDF report builders.

Every report is a title, a few caption lines, one table and an optional
summary block, rendered on letter-sized pages with the same table style.
"""
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, PageBreak

TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("ALIGN", (0, 0), (-1, -1), "CENTER"),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTSIZE", (0, 0), (-1, -1), 9),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 12),
    ("BACKGROUND", (0, 1), (-1, -1), colors.beige),
    ("GRID", (0, 0), (-1, -1), 1, colors.black),
])


def _section(title, header, rows, caption_lines=(), summary_lines=(), summary_title="Summary"):
    styles = getSampleStyleSheet()
    elements = [Paragraph(title, styles["Title"])]
    for line in caption_lines:
        elements.append(Paragraph(line, styles["Normal"]))
    elements.append(Spacer(1, 12))

    if rows:
        t = Table([header] + [[str(cell) for cell in row] for row in rows], repeatRows=1)
        t.setStyle(TABLE_STYLE)
        elements.append(t)
    else:
        elements.append(Paragraph("No records found", styles["Italic"]))

    if summary_lines:
        elements.append(Spacer(1, 18))
        elements.append(Paragraph(summary_title, styles["Heading2"]))
        for line in summary_lines:
            elements.append(Paragraph(line, styles["Normal"]))
    return elements


def _render(elements, title):
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter, title=title)
    doc.build(elements)
    return buffer.getvalue()


def build_table_pdf(title, header, rows, caption_lines=(), summary_lines=()):
    return _render(_section(title, header, rows, caption_lines, summary_lines), title)


def build_student_reports_pdf(reports, title="Student Progress Reports"):
    """One page per student; each report is the dict from ``student_report``."""
    elements = []
    for index, report in enumerate(reports):
        if index:
            elements.append(PageBreak())
        elements.extend(_section(
            report["title"],
            report["header"],
            report["rows"],
            report["caption_lines"],
            report["summary_lines"],
            summary_title="Overall",
        ))
    if not elements:
        elements = _section(title, [], [])
    return _render(elements, title)
