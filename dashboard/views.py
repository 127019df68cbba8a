from datetime import timedelta

from django.db.models import Count, Q
from django.utils import timezone
from rest_framework import permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from academics.groups import derive_groups
from academics.models import Student
from academics.timetable import generate_weekend_tests, next_saturday
from attendance.models import AttendanceRecord
from attendance.summary import today_stats
from results.grading import filing_week
from results.models import WeeklyTestMark
from users.models import Profile


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def dashboard_stats(request):
    """
    Get statistics for dashboard
    """
    today = timezone.localdate()
    year, week_number = filing_week(today)
    students = list(Student.objects.all())
    groups = derive_groups(students)

    todays_records = AttendanceRecord.objects.filter(date=today)

    # Recent attendance stats (last 7 days)
    week_ago = today - timedelta(days=6)
    attendance_data = (
        AttendanceRecord.objects.filter(date__gte=week_ago, date__lte=today)
        .values('date')
        .annotate(
            present=Count('id', filter=Q(status=AttendanceRecord.PRESENT)),
            absent=Count('id', filter=Q(status=AttendanceRecord.ABSENT)),
        )
        .order_by('date')
    )

    # Class distribution
    class_distribution = (
        Student.objects.values('student_class')
        .annotate(count=Count('id'))
        .order_by('student_class')
    )

    saturday = next_saturday(today)
    upcoming_tests = [t for t in generate_weekend_tests(groups, start=today)
                      if t.date in (saturday.isoformat(), (saturday + timedelta(days=1)).isoformat())]

    return Response({
        'students_count': len(students),
        'staff_count': Profile.objects.count(),
        'groups_count': len(groups),
        'tests_this_week': WeeklyTestMark.objects.filter(year=year, week_number=week_number).count(),
        'upcoming_weekend_tests': len(upcoming_tests),
        'attendance_today': today_stats(todays_records, len(students)),
        'attendance_data': list(attendance_data),
        'class_distribution': list(class_distribution),
    })
