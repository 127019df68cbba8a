import logging
from datetime import timedelta

from django.utils import timezone
from django.utils.dateparse import parse_date
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from academics.models import Student
from reports.responses import pdf_response, xlsx_response
from users.permissions import RolePermission
from .exports import attendance_pdf, attendance_workbook, month_label
from .grid import AttendanceGrid, PendingChangesError
from .models import AttendanceRecord
from .repository import AttendanceStore, AttendanceStoreError
from .serializers import (
    AttendanceRecordSerializer, BulkMarkSerializer, AttendanceSummarySerializer,
    DailySummarySerializer, CalendarDaySerializer, GridToggleSerializer, GridNavigateSerializer,
)
from .summary import summarize_attendance, daily_summary, calendar_month, parse_month, month_bounds

logger = logging.getLogger(__name__)


def students_for(student_class=None):
    qs = Student.objects.all()
    if student_class:
        qs = qs.filter(student_class=student_class)
    return qs


def requested_period(request):
    """
    Resolve ``month=YYYY-MM`` or ``start``/``end`` (inclusive) query params
    into ``(start, end_exclusive, label)``. Raises ValueError on bad input.
    """
    month = request.query_params.get('month')
    if month:
        year, month_num = parse_month(month)
        start, end = month_bounds(year, month_num)
        return start, end, month_label(year, month_num)

    start = request.query_params.get('start')
    end = request.query_params.get('end')
    start_date = parse_date(start) if start else None
    end_date = parse_date(end) if end else None
    if (start and start_date is None) or (end and end_date is None):
        raise ValueError("Invalid date. Use YYYY-MM-DD")
    if end_date is not None:
        end_date = end_date + timedelta(days=1)
    return start_date, end_date, None


class AttendanceRecordViewSet(viewsets.ModelViewSet):
    queryset = AttendanceRecord.objects.select_related('student', 'marked_by').all()
    serializer_class = AttendanceRecordSerializer
    permission_classes = [RolePermission]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = {
        'student': ['exact'],
        'status': ['exact'],
        'date': ['exact', 'gte', 'lte'],
        'student__student_class': ['exact'],
    }
    search_fields = ['student__name']

    def get_store(self):
        return AttendanceStore(user=self.request.user)

    def create(self, request, *args, **kwargs):
        """Mark attendance; an existing record for the same student and date is updated"""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            record, created = self.get_store().mark(data['student'].pk, data['date'], data['status'])
        except AttendanceStoreError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(record).data,
                        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)

    def perform_update(self, serializer):
        serializer.save(marked_by=self.request.user)

    def _filtered_records(self, request):
        """Records filtered by the usual query params plus the requested period."""
        start, end, label = requested_period(request)
        records = self.filter_queryset(self.get_queryset())
        if start is not None:
            records = records.filter(date__gte=start)
        if end is not None:
            records = records.filter(date__lt=end)
        return records, label

    @action(detail=False, methods=['post'])
    def bulk_mark(self, request):
        """Bulk mark or update attendance records"""
        serializer = BulkMarkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        saved, errors = self.get_store().bulk_mark(serializer.validated_data['entries'])
        errors = serializer.validated_data['invalid'] + errors
        logger.info("Bulk attendance by %s: saved=%s failed=%s", request.user, len(saved), len(errors))
        return Response({
            'success': not errors,
            'saved': len(saved),
            'failed': len(errors),
            'errors': errors
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Per-student attendance summary over an optional month or date range"""
        try:
            start, end, _ = requested_period(request)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        students = students_for(request.query_params.get('student_class'))
        student_id = request.query_params.get('student')
        if student_id:
            if not student_id.isdigit():
                return Response({'error': 'student must be a numeric id'}, status=status.HTTP_400_BAD_REQUEST)
            students = students.filter(pk=student_id)

        records = AttendanceStore().fetch(student_ids=students.values_list('id', flat=True), start=start, end=end)
        summaries = [s.to_dict() for s in summarize_attendance(records, students)]
        return Response(AttendanceSummarySerializer(summaries, many=True).data)

    @action(detail=False, methods=['get'])
    def daily_summary(self, request):
        """Get attendance summary for one date, grouped by class"""
        date = request.query_params.get('date')
        if not date:
            return Response({'error': 'date parameter is required'}, status=status.HTTP_400_BAD_REQUEST)
        day = parse_date(date)
        if day is None:
            return Response({'error': 'Invalid date. Use YYYY-MM-DD'}, status=status.HTTP_400_BAD_REQUEST)

        students = students_for(request.query_params.get('student_class'))
        records = AttendanceRecord.objects.filter(date=day, student__in=students)
        return Response(DailySummarySerializer(daily_summary(records, students, day), many=True).data)

    @action(detail=False, methods=['get'])
    def calendar(self, request):
        """Present/absent counts for each day of a month"""
        month = request.query_params.get('month')
        if not month:
            return Response({'error': 'month parameter is required'}, status=status.HTTP_400_BAD_REQUEST)
        try:
            year, month_num = parse_month(month)
        except ValueError:
            return Response({'error': 'Invalid month format. Use YYYY-MM'}, status=status.HTTP_400_BAD_REQUEST)

        start, end = month_bounds(year, month_num)
        students = students_for(request.query_params.get('student_class'))
        records = AttendanceStore().fetch(student_ids=students.values_list('id', flat=True), start=start, end=end)
        return Response(CalendarDaySerializer(calendar_month(records, year, month_num), many=True).data)

    @action(detail=False, methods=['get'])
    def monthly_report(self, request):
        """Get monthly attendance report for students"""
        month = request.query_params.get('month')
        if not month:
            return Response({'error': 'month parameter is required'}, status=status.HTTP_400_BAD_REQUEST)
        try:
            year, month_num = parse_month(month)
        except ValueError:
            return Response({'error': 'Invalid month format. Use YYYY-MM'}, status=status.HTTP_400_BAD_REQUEST)

        start, end = month_bounds(year, month_num)
        students = list(students_for(request.query_params.get('student_class')))
        records = AttendanceStore().fetch(student_ids=[s.id for s in students], start=start, end=end)

        reports = []
        for summary, student in zip(summarize_attendance(records, students), students):
            reports.append({
                **summary.to_dict(),
                'student_class': student.student_class,
                'percentage': round(summary.percentage, 2),
            })
        return Response(reports)

    @action(detail=False, methods=['get'])
    def export_pdf(self, request):
        try:
            records, label = self._filtered_records(request)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        content = attendance_pdf(records.order_by('date', 'student__name'), label)
        return pdf_response(content, f"attendance-report-{timezone.localdate().isoformat()}.pdf")

    @action(detail=False, methods=['get'])
    def export_excel(self, request):
        try:
            records, _ = self._filtered_records(request)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        content = attendance_workbook(records.order_by('date', 'student__name'))
        return xlsx_response(content, f"attendance-report-{timezone.localdate().isoformat()}.xlsx")


class AttendanceGridView(APIView):
    """
    Monthly grid editing session. The grid and its unsaved changes are kept
    in the session between requests.

    POST ``{"action": "toggle", "student_id", "date"}`` advances a cell,
    ``save`` writes pending changes, ``discard`` drops them and
    ``navigate`` with ``month`` (and optional ``student_class``) switches
    month, refusing while changes are pending.
    """
    permission_classes = [RolePermission]
    SESSION_KEY = 'attendance_grid'

    def _load(self, request):
        data = request.session.get(self.SESSION_KEY)
        if data:
            return AttendanceGrid.from_dict(data)
        today = timezone.localdate()
        return AttendanceGrid.load(AttendanceStore(), today.year, today.month, students_for())

    def _store(self, request, grid):
        request.session[self.SESSION_KEY] = grid.to_dict()

    def get(self, request):
        grid = self._load(request)
        grid.refresh(AttendanceStore(), students_for(grid.student_class))
        self._store(request, grid)
        return Response(grid.as_response())

    def post(self, request):
        grid = self._load(request)
        store = AttendanceStore(user=request.user)
        grid_action = request.data.get('action')

        if grid_action == 'toggle':
            serializer = GridToggleSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            try:
                grid.toggle(serializer.validated_data['student_id'], serializer.validated_data['date'])
            except ValueError as e:
                return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
            body, code = grid.as_response(), status.HTTP_200_OK

        elif grid_action == 'save':
            applied, failures = grid.save(store)
            body = {**grid.as_response(), 'saved': applied, 'failed': len(failures), 'errors': failures}
            code = status.HTTP_200_OK

        elif grid_action == 'discard':
            grid.discard()
            body, code = grid.as_response(), status.HTTP_200_OK

        elif grid_action == 'navigate':
            serializer = GridNavigateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            try:
                year, month = parse_month(serializer.validated_data['month'])
            except ValueError:
                return Response({'error': 'Invalid month format. Use YYYY-MM'}, status=status.HTTP_400_BAD_REQUEST)
            student_class = serializer.validated_data.get('student_class')
            try:
                grid.navigate(store, year, month, students_for(student_class), student_class=student_class)
            except PendingChangesError as e:
                return Response({'warning': str(e), **grid.as_response()}, status=status.HTTP_409_CONFLICT)
            body, code = grid.as_response(), status.HTTP_200_OK

        else:
            return Response({'error': "action must be one of toggle, save, discard, navigate"},
                            status=status.HTTP_400_BAD_REQUEST)

        self._store(request, grid)
        return Response(body, status=code)
