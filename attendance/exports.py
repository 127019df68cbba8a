import calendar

from reports.excel import build_workbook
from reports.pdf import build_table_pdf
from .summary import PRESENT

HEADER = ['Student Name', 'Class', 'Date', 'Status']


def month_label(year, month):
    return f"{calendar.month_name[month]} {year}"


def attendance_rows(records):
    return [
        (r.student.name, f"Class {r.student.student_class}", r.date.strftime('%d/%m/%Y'), r.status.capitalize())
        for r in records
    ]


def attendance_pdf(records, label=None):
    records = list(records)
    present = sum(1 for r in records if r.status == PRESENT)
    return build_table_pdf(
        "Attendance Report",
        HEADER,
        attendance_rows(records),
        caption_lines=[f"Month: {label}"] if label else [],
        summary_lines=[
            f"Total Records: {len(records)}",
            f"Present: {present}",
            f"Absent: {len(records) - present}",
        ],
    )


def attendance_workbook(records):
    return build_workbook('Attendance', HEADER, attendance_rows(records))
