from django.core.exceptions import ValidationError


def validate_mark_range(marks_obtained, total_marks):
    """0 <= marks_obtained <= total_marks and total_marks > 0."""
    errors = {}
    if total_marks is None or total_marks <= 0:
        errors['total_marks'] = 'Total marks must be greater than 0'
    if marks_obtained is None:
        errors['marks_obtained'] = 'Marks obtained is required'
    elif marks_obtained < 0:
        errors['marks_obtained'] = 'Marks obtained cannot be negative'
    elif 'total_marks' not in errors and marks_obtained > total_marks:
        errors['marks_obtained'] = 'Marks obtained cannot be greater than total marks'
    if errors:
        raise ValidationError(errors)
