from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone

from academics.models import Student
from .grading import grade_for, mark_percentage
from .validators import validate_mark_range

User = settings.AUTH_USER_MODEL


class WeeklyTestMark(models.Model):
    """One student's score in one weekly test"""
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='test_marks')
    subject = models.CharField(max_length=100)
    week_number = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(52)])
    year = models.PositiveIntegerField()
    marks_obtained = models.DecimalField(max_digits=6, decimal_places=2, validators=[MinValueValidator(0)])
    total_marks = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('100'),
                                      validators=[MinValueValidator(Decimal('0.01'))])
    test_date = models.DateField(default=timezone.localdate)
    remarks = models.TextField(blank=True)
    entered_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='entered_marks')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-year', '-week_number', 'student__name']
        indexes = [
            models.Index(fields=['student', 'year', 'week_number'], name='mark_student_week_idx'),
            models.Index(fields=['subject'], name='mark_subject_idx'),
            models.Index(fields=['year', 'week_number'], name='mark_week_idx'),
        ]

    def clean(self):
        validate_mark_range(self.marks_obtained, self.total_marks)

    @property
    def percentage(self):
        return mark_percentage(self.marks_obtained, self.total_marks)

    @property
    def grade(self):
        return grade_for(self.percentage)

    def __str__(self):
        return f"{self.student.name} - {self.subject} W{self.week_number}/{self.year}: {self.marks_obtained}/{self.total_marks}"
