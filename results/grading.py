GRADE_THRESHOLDS = [
    (90, 'A+'),
    (80, 'A'),
    (70, 'B+'),
    (60, 'B'),
    (50, 'C'),
    (40, 'D'),
]
FAIL_GRADE = 'F'
GRADES = [grade for _, grade in GRADE_THRESHOLDS] + [FAIL_GRADE]


def grade_for(percentage):
    """Letter grade for a percentage; the lower bound of each band is inclusive."""
    for threshold, grade in GRADE_THRESHOLDS:
        if percentage >= threshold:
            return grade
    return FAIL_GRADE


def mark_percentage(marks_obtained, total_marks):
    if not total_marks:
        return 0.0
    return float(marks_obtained) / float(total_marks) * 100


def grade_distribution(percentages):
    percentages = list(percentages)
    counts = {grade: 0 for grade in GRADES}
    for percentage in percentages:
        counts[grade_for(percentage)] += 1
    total = len(percentages)
    return [{
        'grade': grade,
        'count': counts[grade],
        'percentage': round(counts[grade] / total * 100, 2) if total else 0.0,
    } for grade in GRADES]


def filing_week(day):
    """
    ``(year, week_number)`` a test on ``day`` is filed under. ISO years
    occasionally have a 53rd week; tests are numbered 1-52.
    """
    iso_year, iso_week, _ = day.isocalendar()
    return iso_year, min(iso_week, 52)
