from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone
from rest_framework import serializers

from .grading import filing_week
from .models import WeeklyTestMark
from .validators import validate_mark_range


class WeeklyTestMarkSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.name', read_only=True)
    student_class = serializers.CharField(source='student.student_class', read_only=True)
    percentage = serializers.SerializerMethodField()
    grade = serializers.CharField(read_only=True)
    week_number = serializers.IntegerField(min_value=1, max_value=52, required=False)
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)

    class Meta:
        model = WeeklyTestMark
        fields = ['id', 'student', 'student_name', 'student_class', 'subject', 'week_number', 'year',
                  'marks_obtained', 'total_marks', 'percentage', 'grade', 'test_date', 'remarks',
                  'entered_by', 'created_at']
        read_only_fields = ['id', 'entered_by', 'created_at']

    def get_percentage(self, obj):
        return round(obj.percentage, 2)

    def validate_subject(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Subject is required")
        return value

    def validate(self, data):
        instance = self.instance
        marks_obtained = data.get('marks_obtained', getattr(instance, 'marks_obtained', None))
        total_marks = data.get('total_marks', getattr(instance, 'total_marks', 100))
        try:
            validate_mark_range(marks_obtained, total_marks)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.message_dict)

        if instance is None:
            test_date = data.get('test_date') or timezone.localdate()
            year, week_number = filing_week(test_date)
            data.setdefault('week_number', week_number)
            data.setdefault('year', year)
        return data
