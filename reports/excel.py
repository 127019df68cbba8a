from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter


def build_workbook(sheet_title, header, rows):
    """Single-sheet workbook with a bold header row; returns xlsx bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title
    ws.append(header)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in rows:
        ws.append(list(row))

    for index, column in enumerate(header, start=1):
        width = max([len(str(column))] + [len(str(row[index - 1])) for row in rows if len(row) >= index])
        ws.column_dimensions[get_column_letter(index)].width = min(width + 2, 40)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
