from django.contrib import admin
from .models import AttendanceRecord


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ['id', 'student', 'date', 'status', 'marked_by']
    list_filter = ['status', 'date', 'student__student_class']
    search_fields = ['student__name']
    date_hierarchy = 'date'
    raw_id_fields = ['student', 'marked_by']
