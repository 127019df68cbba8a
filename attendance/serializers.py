from rest_framework import serializers
from .models import AttendanceRecord


class AttendanceRecordSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.name', read_only=True)
    student_class = serializers.CharField(source='student.student_class', read_only=True)
    marked_by_name = serializers.SerializerMethodField()

    class Meta:
        model = AttendanceRecord
        fields = ['id', 'student', 'student_name', 'student_class', 'date', 'status', 'marked_by', 'marked_by_name']
        read_only_fields = ['id', 'marked_by']
        # (student, date) is upserted by the view on create; updates are checked in validate()
        validators = []

    def get_marked_by_name(self, obj):
        return obj.marked_by.full_name if obj.marked_by else None

    def validate(self, data):
        if self.instance is None:
            return data
        student = data.get('student', self.instance.student)
        day = data.get('date', self.instance.date)
        clash = AttendanceRecord.objects.filter(student=student, date=day).exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError(
                {'date': f"Attendance for {student.name} on {day.isoformat()} is already recorded"}
            )
        return data


class BulkMarkSerializer(serializers.Serializer):
    """
    Either one status for many students on a date, or explicit records.
    Invalid records are reported in ``invalid`` and do not stop the rest.
    """
    date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=AttendanceRecord.STATUS_CHOICES, required=False)
    student_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    records = serializers.ListField(child=serializers.DictField(), required=False)

    def validate(self, data):
        if data.get('records'):
            entries = []
            invalid = []
            for item in data['records']:
                record = AttendanceRecordSerializer(data=item)
                if not record.is_valid():
                    invalid.append({
                        'student': item.get('student'),
                        'date': str(item.get('date')),
                        'error': "; ".join(f"{field}: {' '.join(str(m) for m in msgs)}"
                                           for field, msgs in record.errors.items()),
                    })
                    continue
                entries.append({
                    'student': record.validated_data['student'].pk,
                    'date': record.validated_data['date'],
                    'status': record.validated_data['status'],
                })
            data['entries'] = entries
            data['invalid'] = invalid
            return data

        if not data.get('student_ids') or not data.get('date') or not data.get('status'):
            raise serializers.ValidationError("Provide 'records', or 'date', 'status' and 'student_ids'")
        data['entries'] = [
            {'student': student_id, 'date': data['date'], 'status': data['status']}
            for student_id in data['student_ids']
        ]
        data['invalid'] = []
        return data


class AttendanceSummarySerializer(serializers.Serializer):
    """Serializer for per-student attendance summaries"""
    student_id = serializers.IntegerField()
    student_name = serializers.CharField()
    total_days = serializers.IntegerField()
    present_days = serializers.IntegerField()
    absent_days = serializers.IntegerField()
    percentage = serializers.FloatField()


class DailySummarySerializer(serializers.Serializer):
    """Serializer for daily attendance summary by class"""
    date = serializers.DateField()
    student_class = serializers.CharField()
    total_students = serializers.IntegerField()
    present_count = serializers.IntegerField()
    absent_count = serializers.IntegerField()
    unmarked_count = serializers.IntegerField()
    attendance_percentage = serializers.FloatField()


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    present = serializers.IntegerField()
    absent = serializers.IntegerField()
    total = serializers.IntegerField()
    percentage = serializers.IntegerField()


class GridToggleSerializer(serializers.Serializer):
    student_id = serializers.IntegerField()
    date = serializers.DateField()


class GridNavigateSerializer(serializers.Serializer):
    month = serializers.RegexField(r'^\d{4}-\d{2}$')
    student_class = serializers.CharField(required=False, allow_blank=True)

    def validate_student_class(self, value):
        return value or None
