import logging

from django.db import DatabaseError, transaction

from academics.models import Student
from .models import AttendanceRecord

logger = logging.getLogger(__name__)

VALID_STATUSES = {AttendanceRecord.PRESENT, AttendanceRecord.ABSENT}


class AttendanceStoreError(Exception):
    pass


class AttendanceStore:
    """
    Data access for attendance records.

    One record per (student, date): ``mark`` upserts and ``remove`` deletes,
    which is how a cell goes back to unmarked. Views build a store per
    request with the acting user so writes carry ``marked_by``.
    """

    def __init__(self, user=None):
        self.user = user if user is not None and user.is_authenticated else None

    def fetch(self, student_ids=None, start=None, end=None):
        """Records in ``[start, end)``; either bound may be omitted."""
        qs = AttendanceRecord.objects.select_related('student')
        if student_ids is not None:
            qs = qs.filter(student_id__in=list(student_ids))
        if start is not None:
            qs = qs.filter(date__gte=start)
        if end is not None:
            qs = qs.filter(date__lt=end)
        return qs

    def mark(self, student_id, day, status):
        if status not in VALID_STATUSES:
            raise AttendanceStoreError(f"Invalid status: {status}")
        if not Student.objects.filter(pk=student_id).exists():
            raise AttendanceStoreError(f"Student {student_id} does not exist")

        with transaction.atomic():
            record, created = AttendanceRecord.objects.update_or_create(
                student_id=student_id,
                date=day,
                defaults={'status': status, 'marked_by': self.user},
            )
        logger.debug("Attendance %s for student=%s date=%s: %s", 'created' if created else 'updated', student_id, day, status)
        return record, created

    def remove(self, student_id, day):
        deleted, _ = AttendanceRecord.objects.filter(student_id=student_id, date=day).delete()
        return deleted

    def bulk_mark(self, entries):
        """
        Mark each ``{'student', 'date', 'status'}`` entry independently.
        Returns (saved_records, errors); one failure does not stop the rest.
        """
        saved = []
        errors = []
        for entry in entries:
            try:
                record, _ = self.mark(entry['student'], entry['date'], entry['status'])
                saved.append(record)
            except (KeyError, AttendanceStoreError, DatabaseError) as e:
                logger.warning("Attendance bulk mark failed for %s: %s", entry, e)
                errors.append({'student': entry.get('student'), 'date': str(entry.get('date')), 'error': str(e)})
        return saved, errors
