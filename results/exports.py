from reports.excel import build_workbook
from reports.pdf import build_table_pdf
from .grading import grade_for, mark_percentage

PDF_HEADER = ['Student', 'Subject', 'Week', 'Year', 'Marks', 'Percentage', 'Test Date']
SHEET_HEADER = ['Student Name', 'Subject', 'Week Number', 'Year', 'Marks Obtained', 'Total Marks',
                'Percentage', 'Test Date', 'Remarks']


def number(value):
    """85.00 -> '85', 42.50 -> '42.5'"""
    return f"{float(value):g}"


def marks_pdf(marks, subject=None, week=None, year=None):
    marks = list(marks)
    rows = [(
        m.student.name,
        m.subject,
        f"W{m.week_number}",
        m.year,
        f"{number(m.marks_obtained)}/{number(m.total_marks)}",
        f"{m.percentage:.1f}%",
        m.test_date.strftime('%d/%m/%Y'),
    ) for m in marks]

    captions = []
    if subject:
        captions.append(f"Subject: {subject}")
    if week:
        captions.append(f"Week: {week}")
    if year:
        captions.append(f"Year: {year}")

    average = sum(m.percentage for m in marks) / len(marks) if marks else 0.0
    return build_table_pdf(
        "Weekly Test Marks Report",
        PDF_HEADER,
        rows,
        caption_lines=captions,
        summary_lines=[f"Total Tests: {len(marks)}", f"Average Percentage: {average:.1f}%"],
    )


def marks_workbook(marks):
    rows = [(
        m.student.name,
        m.subject,
        m.week_number,
        m.year,
        float(m.marks_obtained),
        float(m.total_marks),
        round(m.percentage, 2),
        m.test_date.strftime('%d/%m/%Y'),
        m.remarks or '',
    ) for m in marks]
    return build_workbook('Weekly Marks', SHEET_HEADER, rows)


def student_report(student, attendance, marks, period_label):
    """Content of one student's progress page for ``build_student_reports_pdf``."""
    marks = sorted(marks, key=lambda m: (m.year, m.week_number, m.subject))
    rows = []
    obtained = possible = 0.0
    for m in marks:
        percentage = mark_percentage(m.marks_obtained, m.total_marks)
        obtained += float(m.marks_obtained)
        possible += float(m.total_marks)
        rows.append((m.subject, f"W{m.week_number}", f"{number(m.marks_obtained)}/{number(m.total_marks)}",
                     f"{percentage:.1f}%", grade_for(percentage)))

    overall = obtained / possible * 100 if possible else 0.0
    return {
        'title': f"{student.name} - {period_label}",
        'caption_lines': [
            f"Class: {student.student_class}",
            f"Subjects: {', '.join(student.subjects)}",
            f"Attendance: {attendance.present_days}/{attendance.total_days} days ({attendance.percentage:.1f}%)",
        ],
        'header': ['Subject', 'Week', 'Marks', 'Percentage', 'Grade'],
        'rows': rows,
        'summary_lines': [
            f"Tests Taken: {len(rows)}",
            f"Overall Average: {overall:.1f}%",
            f"Overall Grade: {grade_for(overall) if rows else '-'}",
        ],
    }
