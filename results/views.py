import logging

from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response

from academics.models import Student
from reports.responses import pdf_response, xlsx_response
from users.permissions import RolePermission
from .analytics import class_performance, student_performance
from .exports import marks_pdf, marks_workbook
from .models import WeeklyTestMark
from .serializers import WeeklyTestMarkSerializer

logger = logging.getLogger(__name__)


class WeeklyTestMarkViewSet(viewsets.ModelViewSet):
    queryset = WeeklyTestMark.objects.select_related('student', 'entered_by').all()
    serializer_class = WeeklyTestMarkSerializer
    permission_classes = [RolePermission]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = {
        'student': ['exact'],
        'subject': ['exact'],
        'week_number': ['exact', 'gte', 'lte'],
        'year': ['exact'],
        'student__student_class': ['exact'],
        'test_date': ['gte', 'lte'],
    }
    search_fields = ['student__name', 'subject']
    ordering_fields = ['test_date', 'week_number', 'year', 'marks_obtained']

    def perform_create(self, serializer):
        serializer.save(entered_by=self.request.user)

    @action(detail=False, methods=['get'])
    def class_performance(self, request):
        """Subject averages, grade distribution and overall average for the filtered marks"""
        marks = self.filter_queryset(self.get_queryset())
        students = Student.objects.all()
        student_class = request.query_params.get('student__student_class')
        if student_class:
            students = students.filter(student_class=student_class)
        return Response(class_performance(marks, students))

    @action(detail=False, methods=['get'])
    def student_performance(self, request):
        """Chronological scores and trend for one student"""
        student_id = request.query_params.get('student')
        if not student_id:
            return Response({'error': 'student parameter is required'}, status=status.HTTP_400_BAD_REQUEST)
        if not student_id.isdigit():
            return Response({'error': 'student must be a numeric id'}, status=status.HTTP_400_BAD_REQUEST)
        student = Student.objects.filter(pk=student_id).first()
        if student is None:
            return Response({'error': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)

        marks = self.filter_queryset(self.get_queryset())
        return Response({
            'student_id': student.id,
            'student_name': student.name,
            **student_performance(marks),
        })

    @action(detail=False, methods=['get'])
    def export_pdf(self, request):
        marks = self.filter_queryset(self.get_queryset()).order_by('year', 'week_number', 'student__name')
        params = request.query_params
        content = marks_pdf(marks, subject=params.get('subject'), week=params.get('week_number'), year=params.get('year'))
        return pdf_response(content, f"weekly-marks-report-{timezone.localdate().isoformat()}.pdf")

    @action(detail=False, methods=['get'])
    def export_excel(self, request):
        marks = self.filter_queryset(self.get_queryset()).order_by('year', 'week_number', 'student__name')
        return xlsx_response(marks_workbook(marks), f"weekly-marks-{timezone.localdate().isoformat()}.xlsx")
