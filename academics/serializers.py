from rest_framework import serializers
from django.contrib.auth import get_user_model
from .constants import CLASSES
from .groups import group_id, group_name
from .models import Student, normalize_subjects

User = get_user_model()


class StudentSerializer(serializers.ModelSerializer):
    student_class = serializers.CharField(max_length=20)
    subjects = serializers.ListField(child=serializers.CharField(allow_blank=True), allow_empty=True)
    assigned_staff = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), allow_null=True, required=False)
    assigned_staff_name = serializers.SerializerMethodField()
    group_id = serializers.SerializerMethodField()
    group_name = serializers.SerializerMethodField()

    class Meta:
        model = Student
        fields = ['id', 'name', 'student_class', 'subjects', 'gender', 'parent_phone', 'school_name',
                  'assigned_staff', 'assigned_staff_name', 'group_id', 'group_name', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_assigned_staff_name(self, obj):
        return obj.assigned_staff.full_name if obj.assigned_staff else None

    def get_group_id(self, obj):
        return group_id(obj.student_class, obj.subjects)

    def get_group_name(self, obj):
        return group_name(obj.student_class, obj.subjects)

    def validate_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value

    def validate_student_class(self, value):
        value = str(value).strip()
        if value.lower().startswith('class'):
            value = value[5:].strip()
        if value not in CLASSES:
            raise serializers.ValidationError(f"Class must be one of {', '.join(CLASSES)}")
        return value

    def validate_subjects(self, value):
        subjects = normalize_subjects(value)
        if not subjects:
            raise serializers.ValidationError("Select at least one subject")
        return subjects

    def validate_parent_phone(self, value):
        if value is None:
            return value
        value = value.strip()
        digits = ''.join(ch for ch in value if ch.isdigit())
        if value and len(digits) < 10:
            raise serializers.ValidationError("Phone number must have at least 10 digits")
        return value or None
