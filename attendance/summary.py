"""
Attendance aggregation.

All functions take plain iterables of records (anything with ``student_id``,
``date`` and ``status``) and students (``id``, ``name``, ``student_class``),
so they work the same on querysets, lists and the grid's local state.
"""
import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date

PRESENT = 'present'
ABSENT = 'absent'


@dataclass
class AttendanceSummary:
    student_id: int
    student_name: str
    total_days: int
    present_days: int
    percentage: float

    @property
    def absent_days(self):
        return self.total_days - self.present_days

    def to_dict(self):
        return {
            'student_id': self.student_id,
            'student_name': self.student_name,
            'total_days': self.total_days,
            'present_days': self.present_days,
            'absent_days': self.absent_days,
            'percentage': self.percentage,
        }


def attendance_percentage(present, total):
    return present / total * 100 if total > 0 else 0.0


def summarize_attendance(records, students):
    """One summary per student, in the order the students are given."""
    totals = defaultdict(lambda: [0, 0])
    for record in records:
        counts = totals[record.student_id]
        counts[0] += 1
        if record.status == PRESENT:
            counts[1] += 1

    summaries = []
    for student in students:
        total, present = totals.get(student.id, (0, 0))
        summaries.append(AttendanceSummary(
            student_id=student.id,
            student_name=student.name,
            total_days=total,
            present_days=present,
            percentage=attendance_percentage(present, total),
        ))
    return summaries


def summarize_student(student, records):
    return summarize_attendance(records, [student])[0]


def parse_month(value):
    """'YYYY-MM' -> (year, month); raises ValueError on anything else."""
    year, month = map(int, value.split('-'))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {value}")
    return year, month


def month_bounds(year, month):
    """First day of the month and first day of the next month."""
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def month_days(year, month):
    return [date(year, month, day) for day in range(1, calendar.monthrange(year, month)[1] + 1)]


def daily_summary(records, students, day):
    """
    Per-class counts for one date. Students without a record that day are
    reported as unmarked rather than absent.
    """
    status_by_student = {r.student_id: r.status for r in records if r.date == day}
    data = defaultdict(lambda: {'total': 0, 'present': 0, 'absent': 0, 'unmarked': 0})

    for student in students:
        counts = data[student.student_class]
        counts['total'] += 1
        status = status_by_student.get(student.id)
        if status == PRESENT:
            counts['present'] += 1
        elif status == ABSENT:
            counts['absent'] += 1
        else:
            counts['unmarked'] += 1

    summaries = []
    for student_class in sorted(data, key=_class_order):
        counts = data[student_class]
        marked = counts['present'] + counts['absent']
        summaries.append({
            'date': day,
            'student_class': student_class,
            'total_students': counts['total'],
            'present_count': counts['present'],
            'absent_count': counts['absent'],
            'unmarked_count': counts['unmarked'],
            'attendance_percentage': round(attendance_percentage(counts['present'], marked), 2),
        })
    return summaries


def calendar_month(records, year, month):
    """Present/absent counts for every day of a month."""
    counts = defaultdict(lambda: [0, 0])
    for record in records:
        if record.date.year == year and record.date.month == month:
            if record.status == PRESENT:
                counts[record.date][0] += 1
            else:
                counts[record.date][1] += 1

    days = []
    for day in month_days(year, month):
        present, absent = counts.get(day, (0, 0))
        total = present + absent
        days.append({
            'date': day,
            'present': present,
            'absent': absent,
            'total': total,
            'percentage': round(attendance_percentage(present, total)),
        })
    return days


def today_stats(records, total_students):
    """Students without a record today are unmarked, not absent."""
    present = sum(1 for r in records if r.status == PRESENT)
    absent = sum(1 for r in records if r.status == ABSENT)
    return {
        'total_students': total_students,
        'present_today': present,
        'absent_today': absent,
        'unmarked_today': max(total_students - present - absent, 0),
        'attendance_rate': round(attendance_percentage(present, total_students), 2),
    }


def attendance_band(percentage):
    """Display band used by the grid and reports: good, average or poor."""
    if percentage >= 75:
        return 'good'
    if percentage >= 60:
        return 'average'
    return 'poor'


def _class_order(student_class):
    return (0, int(student_class)) if str(student_class).isdigit() else (1, str(student_class))
