from django.contrib import admin
from .models import WeeklyTestMark


@admin.register(WeeklyTestMark)
class WeeklyTestMarkAdmin(admin.ModelAdmin):
    list_display = ['id', 'student', 'subject', 'week_number', 'year', 'marks_obtained', 'total_marks', 'get_grade', 'test_date']
    list_filter = ['subject', 'year', 'week_number', 'student__student_class']
    search_fields = ['student__name', 'subject']
    raw_id_fields = ['student', 'entered_by']

    def get_grade(self, obj):
        return obj.grade
    get_grade.short_description = 'Grade'
