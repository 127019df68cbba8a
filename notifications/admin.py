from django.contrib import admin
from .models import WhatsAppMessage


@admin.register(WhatsAppMessage)
class WhatsAppMessageAdmin(admin.ModelAdmin):
    list_display = ['id', 'student_name', 'phone_number', 'message_type', 'status', 'sent_by', 'sent_at']
    list_filter = ['status', 'message_type']
    search_fields = ['student_name', 'phone_number']
    readonly_fields = ['sent_at']
