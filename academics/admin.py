from django.contrib import admin
from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'student_class', 'gender', 'parent_phone', 'assigned_staff']
    list_filter = ['student_class', 'gender']
    search_fields = ['name', 'school_name', 'parent_phone']
    raw_id_fields = ['assigned_staff']
