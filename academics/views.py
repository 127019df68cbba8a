import csv
import io
import logging
from dataclasses import asdict

from django.contrib.auth import get_user_model
from django.http import HttpResponse
from django.utils.dateparse import parse_date
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.views import APIView

from users.permissions import RolePermission
from .groups import derive_groups, find_group
from .models import Student
from .serializers import StudentSerializer
from .timetable import POLICIES, current_week, generate_timetable, generate_weekend_tests, timetable_as_dict

logger = logging.getLogger(__name__)
User = get_user_model()


class StudentViewSet(viewsets.ModelViewSet):
    queryset = Student.objects.select_related('assigned_staff').all()
    serializer_class = StudentSerializer
    permission_classes = [RolePermission]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['student_class', 'gender', 'assigned_staff']
    search_fields = ['name', 'school_name', 'parent_phone']

    @action(detail=True, methods=['get'])
    def overview(self, request, pk=None):
        """Student details with attendance summary and recent marks"""
        from attendance.models import AttendanceRecord
        from attendance.summary import summarize_student
        from results.models import WeeklyTestMark

        student = self.get_object()
        summary = summarize_student(student, AttendanceRecord.objects.filter(student=student))
        recent = WeeklyTestMark.objects.filter(student=student).order_by('-test_date', '-id')[:5]

        return Response({
            'student': StudentSerializer(student).data,
            'attendance': summary.to_dict(),
            'recent_marks': [{
                'subject': mark.subject,
                'week_number': mark.week_number,
                'year': mark.year,
                'marks_obtained': float(mark.marks_obtained),
                'total_marks': float(mark.total_marks),
                'percentage': round(mark.percentage, 2),
                'grade': mark.grade,
            } for mark in recent],
        })

    @action(detail=False, methods=['get'])
    def export_csv(self, request):
        """Export students to CSV"""
        qs = self.filter_queryset(self.get_queryset())

        response = HttpResponse(content_type='text/csv; charset=utf-8-sig')
        response['Content-Disposition'] = 'attachment; filename="students_export.csv"'

        writer = csv.writer(response)
        writer.writerow(['Serial', 'Name', 'Class', 'Subjects', 'Gender', 'Parent Phone', 'School', 'Assigned Staff'])

        for idx, student in enumerate(qs, start=1):
            staff = student.assigned_staff.username if student.assigned_staff else ''
            writer.writerow([idx, student.name, student.student_class, '; '.join(student.subjects),
                             student.gender, student.parent_phone or '', student.school_name or '', staff])

        return response


class GroupViewSet(viewsets.ViewSet):
    """Groups derived from the current students; read only."""
    permission_classes = [RolePermission]

    def _groups(self, request):
        students = Student.objects.all()
        student_class = request.query_params.get('student_class')
        if student_class:
            students = students.filter(student_class=student_class)
        return derive_groups(students)

    def _get_group(self, request, pk):
        return find_group(self._groups(request), pk)

    def list(self, request):
        include_students = request.query_params.get('include_students', 'true') != 'false'
        return Response([g.to_dict(include_students=include_students) for g in self._groups(request)])

    def retrieve(self, request, pk=None):
        group = self._get_group(request, pk)
        if group is None:
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(group.to_dict())

    @action(detail=True, methods=['get'])
    def timetable(self, request, pk=None):
        group = self._get_group(request, pk)
        if group is None:
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)

        policy = request.query_params.get('policy', 'round_robin')
        if policy not in POLICIES:
            return Response({'error': f"policy must be one of {', '.join(POLICIES)}"}, status=status.HTTP_400_BAD_REQUEST)
        week = request.query_params.get('week') or current_week()

        slots = generate_timetable(group, policy=policy, week=week)
        return Response(timetable_as_dict(group, slots, policy, week))

    @action(detail=False, methods=['get'])
    def test_schedule(self, request):
        """Weekend tests for every group, starting from the coming Saturday"""
        start = request.query_params.get('start')
        start_date = None
        if start:
            start_date = parse_date(start)
            if start_date is None:
                return Response({'error': 'Invalid start date. Use YYYY-MM-DD'}, status=status.HTTP_400_BAD_REQUEST)

        groups = self._groups(request)
        names = {g.id: g.name for g in groups}
        tests = generate_weekend_tests(groups, start=start_date)
        return Response([{**asdict(t), 'group_name': names[t.group_id]} for t in tests])


class ImportStudentsAPI(APIView):
    permission_classes = [RolePermission]
    parser_classes = [MultiPartParser, FormParser]

    HEADER_ALIASES = {
        'student_name': 'name',
        'class': 'student_class',
        'standard': 'student_class',
        'phone': 'parent_phone',
        'parent_phone_number': 'parent_phone',
        'school': 'school_name',
        'staff': 'assigned_staff',
        'staff_username': 'assigned_staff',
    }
    SUPPORTED = {'name', 'student_class', 'subjects', 'gender', 'parent_phone', 'school_name', 'assigned_staff'}

    def post(self, request):
        file = request.FILES.get("file")
        if not file:
            return Response({"detail": "No file uploaded. Use form field 'file'."}, status=status.HTTP_400_BAD_REQUEST)

        name = file.name.lower()
        try:
            if name.endswith(".csv"):
                rows = self._read_csv(file)
            elif name.endswith((".xlsx", ".xlsm")):
                rows = self._read_xlsx(file)
            else:
                return Response({"detail": "Unsupported file type. Use CSV or XLSX."}, status=status.HTTP_400_BAD_REQUEST)
        except ValueError as e:
            return Response({"detail": f"Failed to import: {e}"}, status=status.HTTP_400_BAD_REQUEST)

        created, updated = 0, 0
        errors = []
        for row_num, data in rows:
            try:
                cu, uu = self._create_or_update_student(data)
                created += cu
                updated += uu
            except ValueError as e:
                errors.append({"row": row_num, "error": str(e)})

        logger.info("Student import %s: created=%s updated=%s errors=%s", file.name, created, updated, len(errors))
        return Response({
            "message": "Import complete",
            "created": created,
            "updated": updated,
            "errors": errors,
        }, status=status.HTTP_200_OK)

    def _normalize_headers(self, headers):
        normalized = [h.strip().lower().replace(" ", "_") for h in headers]
        return [self.HEADER_ALIASES.get(h, h) for h in normalized]

    def _read_csv(self, uploaded_file):
        content = uploaded_file.read()
        for enc in ["utf-8-sig", "utf-8", "latin-1"]:
            try:
                text = content.decode(enc)
                break
            except UnicodeDecodeError:
                continue
        else:
            raise ValueError("Unable to decode CSV file")

        reader = csv.DictReader(io.StringIO(text))
        reader.fieldnames = self._normalize_headers(reader.fieldnames or [])
        return [
            (row_num, {k: (row.get(k) or "").strip() for k in self.SUPPORTED})
            for row_num, row in enumerate(reader, start=2)
        ]

    def _read_xlsx(self, uploaded_file):
        from openpyxl import load_workbook

        try:
            wb = load_workbook(uploaded_file, data_only=True)
        except Exception as e:
            raise ValueError(f"Failed to open Excel file: {e}")

        ws = wb.active
        rows_iter = ws.iter_rows(values_only=True)
        try:
            headers = next(rows_iter)
        except StopIteration:
            return []
        headers = self._normalize_headers([str(h) if h is not None else '' for h in headers])

        rows = []
        for idx, row in enumerate(rows_iter, start=2):
            values = [str(v).strip() if v is not None else '' for v in row]
            if not any(values):
                continue
            data = {h: (values[i] if i < len(values) else '') for i, h in enumerate(headers) if h in self.SUPPORTED}
            rows.append((idx, data))
        return rows

    def _create_or_update_student(self, data):
        """
        Create or update a student matched on (name, class).
        Returns (created_count, updated_count).
        """
        payload = {
            'name': data.get('name', ''),
            'student_class': data.get('student_class', ''),
            'subjects': data.get('subjects', '').replace(';', ',').split(','),
        }
        for optional in ('gender', 'parent_phone', 'school_name'):
            if data.get(optional):
                payload[optional] = data[optional].lower() if optional == 'gender' else data[optional]

        staff_username = data.get('assigned_staff')
        if staff_username:
            staff = User.objects.filter(username=staff_username).first()
            if staff is None:
                raise ValueError(f"Unknown staff username: {staff_username}")
            payload['assigned_staff'] = staff.pk

        student_class = payload['student_class'].strip()
        if student_class.lower().startswith('class'):
            student_class = student_class[5:].strip()
        existing = Student.objects.filter(name=payload['name'].strip(), student_class=student_class).first()
        if existing and not data.get('subjects', '').strip():
            # keep the stored subjects when the sheet leaves them out
            payload.pop('subjects')
        serializer = StudentSerializer(existing, data=payload, partial=existing is not None)
        if not serializer.is_valid():
            raise ValueError("; ".join(f"{field}: {' '.join(str(m) for m in msgs)}" for field, msgs in serializer.errors.items()))
        serializer.save()
        return (0, 1) if existing else (1, 0)
