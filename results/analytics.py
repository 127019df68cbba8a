"""
Academic analytics over weekly test marks.

Marks are any objects with ``student_id``, ``subject``, ``marks_obtained``,
``total_marks``, ``week_number`` and ``year``.
"""
from collections import defaultdict

from .grading import grade_distribution, grade_for, mark_percentage

TREND_WINDOW = 3


def _mean(values):
    return sum(values) / len(values) if values else 0.0


def class_performance(marks, students):
    marks = list(marks)
    by_subject = defaultdict(lambda: {'percentages': [], 'students': set()})
    obtained = possible = 0.0

    for mark in marks:
        entry = by_subject[mark.subject]
        entry['percentages'].append(mark_percentage(mark.marks_obtained, mark.total_marks))
        entry['students'].add(mark.student_id)
        obtained += float(mark.marks_obtained)
        possible += float(mark.total_marks)

    subject_performance = [{
        'subject': subject,
        'average_percentage': round(_mean(data['percentages']), 2),
        'test_count': len(data['percentages']),
        'student_count': len(data['students']),
    } for subject, data in sorted(by_subject.items())]

    percentages = [mark_percentage(m.marks_obtained, m.total_marks) for m in marks]
    overall = obtained / possible * 100 if possible else 0.0
    return {
        'subject_performance': subject_performance,
        'grade_distribution': grade_distribution(percentages),
        'overall_average': round(overall, 2),
        'overall_grade': grade_for(overall) if marks else None,
        'total_tests': len(marks),
        'active_students': len({m.student_id for m in marks}),
        'total_students': len(list(students)),
    }


def performance_trend(percentages, window=TREND_WINDOW):
    """
    Compare the mean of the last ``window`` scores with the ``window``
    before them. Fewer than two windows' worth of history is neutral.
    """
    recent = percentages[-window:]
    previous = percentages[-2 * window:-window]
    if not recent or not previous:
        return {'direction': 'neutral', 'change': 0.0}

    change = _mean(recent) - _mean(previous)
    if change > 0:
        direction = 'up'
    elif change < 0:
        direction = 'down'
    else:
        direction = 'neutral'
    return {'direction': direction, 'change': round(abs(change), 2)}


def student_performance(marks):
    ordered = sorted(marks, key=lambda m: (m.year, m.week_number, m.test_date, m.pk))
    series = []
    for mark in ordered:
        percentage = mark_percentage(mark.marks_obtained, mark.total_marks)
        series.append({
            'label': f"W{mark.week_number} {mark.year}",
            'subject': mark.subject,
            'week_number': mark.week_number,
            'year': mark.year,
            'marks_obtained': float(mark.marks_obtained),
            'total_marks': float(mark.total_marks),
            'percentage': round(percentage, 2),
            'grade': grade_for(percentage),
        })

    percentages = [point['percentage'] for point in series]
    average = _mean(percentages)
    return {
        'series': series,
        'average_percentage': round(average, 2),
        'grade': grade_for(average) if series else None,
        'total_tests': len(series),
        'trend': performance_trend(percentages),
    }
