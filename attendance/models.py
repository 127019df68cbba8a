from django.conf import settings
from django.db import models
from academics.models import Student


class AttendanceRecord(models.Model):
    PRESENT = 'present'
    ABSENT = 'absent'
    STATUS_CHOICES = [
        (PRESENT, 'Present'),
        (ABSENT, 'Absent'),
    ]

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='attendance_records')
    date = models.DateField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES)
    marked_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='marked_attendance')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('student', 'date')
        ordering = ['-date', 'student__name']
        indexes = [
            models.Index(fields=['date'], name='attendance_date_idx'),
            models.Index(fields=['status', 'date'], name='attendance_status_date_idx'),
        ]

    def __str__(self):
        return f"{self.student.name} - {self.date} - {'P' if self.status == self.PRESENT else 'A'}"
