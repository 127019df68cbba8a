from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from academics.models import Student
from attendance.models import AttendanceRecord
from results.models import WeeklyTestMark
from users.models import User


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(username='staff1', password='pass1234', first_name='Asha', last_name='Raman')


@pytest.fixture
def admin_user(db):
    user = User.objects.create_user(username='admin1', password='pass1234')
    user.profile.role = 'admin'
    user.profile.save()
    return user


@pytest.fixture
def api_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def make_student(db):
    def _make(name='Arun Kumar', student_class='10', subjects=None, parent_phone='9876543210', **extra):
        return Student.objects.create(
            name=name,
            student_class=student_class,
            subjects=subjects if subjects is not None else ['Maths', 'Science'],
            parent_phone=parent_phone,
            **extra,
        )
    return _make


@pytest.fixture
def make_attendance(db):
    def _make(student, day, status='present'):
        return AttendanceRecord.objects.create(student=student, date=day, status=status)
    return _make


@pytest.fixture
def make_mark(db):
    def _make(student, subject='Maths', obtained=80, total=100, week=10, year=2026, test_date=None, remarks=''):
        return WeeklyTestMark.objects.create(
            student=student,
            subject=subject,
            marks_obtained=Decimal(obtained),
            total_marks=Decimal(total),
            week_number=week,
            year=year,
            test_date=test_date or date(year, 3, 7),
            remarks=remarks,
        )
    return _make
