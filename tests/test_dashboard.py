import pytest
from django.core.management import call_command
from django.utils import timezone

from academics.models import Student
from attendance.models import AttendanceRecord
from results.grading import filing_week
from results.models import WeeklyTestMark

pytestmark = pytest.mark.django_db


def test_dashboard_stats(api_client, make_student, make_attendance, make_mark):
    today = timezone.localdate()
    year, week = filing_week(today)
    arun = make_student(name='Arun')
    divya = make_student(name='Divya')
    make_student(name='Karthik', student_class='9', subjects=['Tamil'])
    make_attendance(arun, today, 'present')
    make_attendance(divya, today, 'absent')
    make_mark(arun, week=week, year=year, test_date=today)

    data = api_client.get('/api/dashboard-stats/').data

    assert data['students_count'] == 3
    assert data['groups_count'] == 2
    assert data['upcoming_weekend_tests'] == 3
    assert data['attendance_today'] == {
        'total_students': 3,
        'present_today': 1,
        'absent_today': 1,
        'unmarked_today': 1,
        'attendance_rate': 33.33,
    }
    assert data['tests_this_week'] == 1
    assert data['attendance_data'][-1]['present'] == 1
    assert data['attendance_data'][-1]['absent'] == 1
    assert {row['student_class']: row['count'] for row in data['class_distribution']} == {'10': 2, '9': 1}


def test_seed_demo_data_is_repeatable():
    call_command('seed_demo_data', students=4, staff=1, attendance_days=3, weeks=1)
    counts = (Student.objects.count(), AttendanceRecord.objects.count(), WeeklyTestMark.objects.count())
    assert counts[0] == 4
    assert counts[1] == 12

    call_command('seed_demo_data', students=4, staff=1, attendance_days=3, weeks=1)
    assert (Student.objects.count(), AttendanceRecord.objects.count(), WeeklyTestMark.objects.count()) == counts
