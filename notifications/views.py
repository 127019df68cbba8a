import logging

from django.shortcuts import get_object_or_404
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, status
from rest_framework.response import Response
from rest_framework.views import APIView

from academics.models import Student
from reports.responses import pdf_response
from users.permissions import RolePermission
from .models import WhatsAppMessage
from .progress import (
    progress_link, progress_message, reports_pdf, select_recipients,
    send_bulk_progress, send_report_document, send_to_parent,
)
from .serializers import WhatsAppMessageSerializer, SendMessageSerializer, SendReportSerializer, BulkSendSerializer

logger = logging.getLogger(__name__)


def requested_year(request):
    year = request.query_params.get('year')
    return int(year) if year and year.isdigit() else timezone.localdate().year


class ProgressMessageView(APIView):
    """Progress message text and a wa.me link for one student"""
    permission_classes = [RolePermission]

    def get(self, request, student_id):
        student = get_object_or_404(Student, pk=student_id)
        return Response(progress_link(student))


class SendMessageView(APIView):
    """Send the progress message (or a custom text) to a student's parent"""
    permission_classes = [RolePermission]

    def post(self, request):
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        student = get_object_or_404(Student, pk=serializer.validated_data['student_id'])
        if not student.parent_phone:
            return Response({'error': 'Student has no parent phone number'}, status=status.HTTP_400_BAD_REQUEST)

        message = serializer.validated_data.get('message') or progress_message(student)
        success, result = send_to_parent(student, message, user=request.user)
        if not success:
            return Response({'success': False, 'error': result}, status=status.HTTP_502_BAD_GATEWAY)
        return Response({'success': True, 'message_id': result})


class BulkSendView(APIView):
    """
    Progress messages for every student matching the class and attendance
    band filters. ``dry_run`` only lists recipients with their wa.me links.
    """
    permission_classes = [RolePermission]

    def post(self, request):
        serializer = BulkSendSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        students = Student.objects.all()
        if data.get('student_class'):
            students = students.filter(student_class=data['student_class'])
        recipients = select_recipients(
            students, band=data['band'],
            min_percentage=data.get('min_percentage'), max_percentage=data.get('max_percentage'),
        )

        if data['dry_run']:
            return Response({
                'total': len(recipients),
                'recipients': [{
                    **progress_link(student),
                    'attendance_percentage': round(summary.percentage, 2),
                } for student, summary in recipients],
            })

        return Response(send_bulk_progress(recipients, user=request.user))


class SendReportView(APIView):
    """Send a student's academic-year PDF to the parent as a document"""
    permission_classes = [RolePermission]

    def post(self, request):
        serializer = SendReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        student = get_object_or_404(Student, pk=serializer.validated_data['student_id'])
        year = serializer.validated_data.get('year') or timezone.localdate().year

        if not student.parent_phone:
            return Response({'error': 'Student has no parent phone number'}, status=status.HTTP_400_BAD_REQUEST)
        success, result = send_report_document(student, year, user=request.user)
        if not success:
            return Response({'success': False, 'error': result}, status=status.HTTP_502_BAD_GATEWAY)
        return Response({'success': True, 'message_id': result})


class StudentReportPdfView(APIView):
    permission_classes = [RolePermission]

    def get(self, request, student_id):
        student = get_object_or_404(Student, pk=student_id)
        year = requested_year(request)
        return pdf_response(reports_pdf([student], year), f"{student.name.replace(' ', '_')}_report_{year}.pdf")


class BulkReportPdfView(APIView):
    """All students' academic-year reports in one PDF, a page each"""
    permission_classes = [RolePermission]

    def get(self, request):
        students = Student.objects.all()
        student_class = request.query_params.get('student_class')
        if student_class:
            students = students.filter(student_class=student_class)
        year = requested_year(request)
        return pdf_response(reports_pdf(students, year), f"student_reports_{year}.pdf")


class WhatsAppMessageViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = WhatsAppMessage.objects.select_related('student', 'sent_by').all()
    serializer_class = WhatsAppMessageSerializer
    permission_classes = [RolePermission]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['status', 'student', 'message_type']
