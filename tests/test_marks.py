from datetime import date
from decimal import Decimal
from io import BytesIO

import pytest
from django.core.exceptions import ValidationError
from openpyxl import load_workbook

from results.models import WeeklyTestMark
from results.validators import validate_mark_range

pytestmark = pytest.mark.django_db


def test_validator_accepts_zero_and_full_marks():
    validate_mark_range(0, 100)
    validate_mark_range(100, 100)


@pytest.mark.parametrize('obtained,total,field', [
    (101, 100, 'marks_obtained'),
    (-1, 100, 'marks_obtained'),
    (10, 0, 'total_marks'),
])
def test_validator_rejects(obtained, total, field):
    with pytest.raises(ValidationError) as exc:
        validate_mark_range(obtained, total)
    assert field in exc.value.message_dict


def test_model_clean_runs_range_check(make_student):
    mark = WeeklyTestMark(student=make_student(), subject='Maths', week_number=3, year=2026,
                          marks_obtained=Decimal('101'), total_marks=Decimal('100'))
    with pytest.raises(ValidationError):
        mark.full_clean()


def test_percentage_and_grade(make_student, make_mark):
    mark = make_mark(make_student(), obtained=45, total=50)
    assert mark.percentage == 90.0
    assert mark.grade == 'A+'


def test_create_rejects_marks_above_total(api_client, make_student):
    student = make_student()
    response = api_client.post('/api/marks/', {
        'student': student.id, 'subject': 'Maths', 'week_number': 5, 'year': 2026,
        'marks_obtained': '101', 'total_marks': '100',
    }, format='json')

    assert response.status_code == 400
    assert 'marks_obtained' in response.data
    assert not WeeklyTestMark.objects.exists()


def test_create_accepts_zero_and_fills_week_from_test_date(api_client, make_student, staff_user):
    student = make_student()
    response = api_client.post('/api/marks/', {
        'student': student.id, 'subject': 'Maths', 'marks_obtained': '0', 'test_date': '2026-03-07',
    }, format='json')

    assert response.status_code == 201
    mark = WeeklyTestMark.objects.get()
    assert mark.week_number == 10
    assert mark.year == 2026
    assert mark.total_marks == Decimal('100')
    assert mark.entered_by == staff_user
    assert response.data['grade'] == 'F'


@pytest.mark.parametrize('week', [0, 53])
def test_week_number_range(api_client, make_student, week):
    response = api_client.post('/api/marks/', {
        'student': make_student().id, 'subject': 'Maths', 'week_number': week, 'year': 2026, 'marks_obtained': '50',
    }, format='json')
    assert response.status_code == 400
    assert 'week_number' in response.data


def test_partial_update_checks_against_stored_total(api_client, make_student, make_mark):
    mark = make_mark(make_student(), obtained=20, total=25)
    response = api_client.patch(f'/api/marks/{mark.id}/', {'marks_obtained': '30'}, format='json')
    assert response.status_code == 400


def test_filters(api_client, make_student, make_mark):
    student = make_student()
    make_mark(student, subject='Maths', week=10)
    make_mark(student, subject='Science', week=10)
    make_mark(student, subject='Maths', week=11)

    response = api_client.get('/api/marks/', {'subject': 'Maths', 'week_number': 10})

    assert response.status_code == 200
    assert len(response.data) == 1


def test_class_performance_endpoint(api_client, make_student, make_mark):
    a = make_student(name='A')
    b = make_student(name='B')
    make_student(name='C')
    make_mark(a, subject='Maths', obtained=90)
    make_mark(b, subject='Maths', obtained=70)
    make_mark(a, subject='Science', obtained=40, total=50)

    data = api_client.get('/api/marks/class_performance/').data

    maths = next(s for s in data['subject_performance'] if s['subject'] == 'Maths')
    assert maths['average_percentage'] == 80.0
    assert maths['test_count'] == 2
    assert maths['student_count'] == 2
    assert data['overall_average'] == 80.0
    assert data['total_tests'] == 3
    assert data['active_students'] == 2
    assert data['total_students'] == 3


def test_student_performance_endpoint(api_client, make_student, make_mark):
    student = make_student()
    for week, score in [(1, 50), (2, 55), (3, 60), (4, 70), (5, 75), (6, 80)]:
        make_mark(student, week=week, obtained=score, test_date=date(2026, 1, week))

    data = api_client.get('/api/marks/student_performance/', {'student': student.id}).data

    assert [p['week_number'] for p in data['series']] == [1, 2, 3, 4, 5, 6]
    assert data['trend']['direction'] == 'up'
    assert data['trend']['change'] == 20.0
    assert api_client.get('/api/marks/student_performance/').status_code == 400
    assert api_client.get('/api/marks/student_performance/', {'student': 'abc'}).status_code == 400


def test_marks_exports(api_client, make_student, make_mark):
    make_mark(make_student(name='Priya'), subject='Maths', obtained=42.5, total=50, week=9, remarks='Good')

    pdf = api_client.get('/api/marks/export_pdf/', {'subject': 'Maths'})
    xlsx = api_client.get('/api/marks/export_excel/')

    assert pdf.content.startswith(b'%PDF')
    sheet = load_workbook(BytesIO(xlsx.content)).active
    assert sheet.title == 'Weekly Marks'
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0][0] == 'Student Name'
    assert rows[1][:6] == ('Priya', 'Maths', 9, 2026, 42.5, 50)
    assert rows[1][6] == 85.0
    assert rows[1][8] == 'Good'
