from rest_framework import serializers
from academics.constants import CLASSES
from .models import WhatsAppMessage
from .progress import BANDS


class WhatsAppMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = WhatsAppMessage
        fields = ['id', 'student', 'student_name', 'phone_number', 'message', 'message_type', 'status',
                  'whatsapp_message_id', 'error', 'sent_by', 'sent_at']
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    student_id = serializers.IntegerField()
    message = serializers.CharField(required=False, allow_blank=True)


class SendReportSerializer(serializers.Serializer):
    student_id = serializers.IntegerField()
    year = serializers.IntegerField(required=False, min_value=2000, max_value=2100)


class BulkSendSerializer(serializers.Serializer):
    student_class = serializers.ChoiceField(choices=CLASSES, required=False, allow_blank=True)
    band = serializers.ChoiceField(choices=BANDS, default='all')
    min_percentage = serializers.FloatField(required=False, min_value=0, max_value=100)
    max_percentage = serializers.FloatField(required=False, min_value=0, max_value=100)
    dry_run = serializers.BooleanField(default=False)

    def validate(self, data):
        if data['band'] == 'custom':
            low = data.get('min_percentage', 0)
            high = data.get('max_percentage', 100)
            if low > high:
                raise serializers.ValidationError("min_percentage cannot be greater than max_percentage")
        return data
