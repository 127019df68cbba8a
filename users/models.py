from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    phone_number = models.CharField(max_length=20, null=True, blank=True, help_text='Phone number with country code (e.g., +919876543210)')

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip() or self.username

    def __str__(self):
        return self.username


class Profile(models.Model):
    ROLE_CHOICES = [
        ('admin', 'Admin'),
        ('staff', 'Staff'),
    ]
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='staff')
    designation = models.CharField(max_length=100, blank=True, null=True, help_text='Designation shown next to the staff name (e.g., Maths Tutor)')

    class Meta:
        indexes = [
            models.Index(fields=['role'], name='profile_role_idx'),
        ]

    def __str__(self):
        return f"{self.user.username} - {self.role}"
