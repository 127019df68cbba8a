from django.conf import settings
from django.db import models
from academics.models import Student


class WhatsAppMessage(models.Model):
    """Log of every message handed to the WhatsApp provider"""
    STATUS_CHOICES = [
        ('sent', 'Sent'),
        ('failed', 'Failed'),
    ]
    TYPE_CHOICES = [
        ('text', 'Text'),
        ('document', 'Document'),
    ]

    student = models.ForeignKey(Student, on_delete=models.SET_NULL, null=True, blank=True, related_name='whatsapp_messages')
    student_name = models.CharField(max_length=255, blank=True)
    phone_number = models.CharField(max_length=20)
    message = models.TextField()
    message_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='text')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES)
    whatsapp_message_id = models.CharField(max_length=128, blank=True)
    error = models.TextField(blank=True)
    sent_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='whatsapp_messages')
    sent_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-sent_at']
        indexes = [
            models.Index(fields=['status', 'sent_at'], name='whatsapp_status_idx'),
        ]

    def __str__(self):
        return f"{self.phone_number} - {self.status} - {self.sent_at:%Y-%m-%d %H:%M}"
