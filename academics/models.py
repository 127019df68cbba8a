from django.db import models
from django.conf import settings
from .constants import CLASSES, GENDER_CHOICES

# Use the project's custom user model
User = settings.AUTH_USER_MODEL


def normalize_subjects(subjects):
    """
    Strip blanks and duplicates while keeping the order they were given in.
    Duplicates are matched without regard to case; the first spelling wins.
    """
    seen = []
    folded = set()
    for subject in subjects or []:
        name = str(subject).strip()
        if name and name.casefold() not in folded:
            folded.add(name.casefold())
            seen.append(name)
    return seen


class Student(models.Model):
    CLASS_CHOICES = [(c, f"Class {c}") for c in CLASSES]

    name = models.CharField(max_length=255)
    student_class = models.CharField(max_length=10, choices=CLASS_CHOICES)
    subjects = models.JSONField(default=list, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    parent_phone = models.CharField(max_length=20, blank=True, null=True)
    school_name = models.CharField(max_length=255, blank=True, null=True)
    assigned_staff = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='students')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name', 'id']
        indexes = [
            models.Index(fields=['student_class'], name='student_class_idx'),
            models.Index(fields=['name'], name='student_name_idx'),
        ]

    def save(self, *args, **kwargs):
        self.subjects = normalize_subjects(self.subjects)
        self.name = (self.name or '').strip()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} (Class {self.student_class})"
