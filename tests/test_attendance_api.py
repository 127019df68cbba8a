from datetime import date

import pytest
from openpyxl import load_workbook
from io import BytesIO

from attendance.models import AttendanceRecord
from attendance.repository import AttendanceStore, AttendanceStoreError

pytestmark = pytest.mark.django_db


def test_store_mark_upserts(make_student, staff_user):
    student = make_student()
    store = AttendanceStore(user=staff_user)

    _, created = store.mark(student.id, date(2026, 3, 2), 'present')
    record, created_again = store.mark(student.id, date(2026, 3, 2), 'absent')

    assert created and not created_again
    assert AttendanceRecord.objects.filter(student=student).count() == 1
    assert record.status == 'absent'
    assert record.marked_by == staff_user


def test_store_rejects_bad_status_and_unknown_student(make_student):
    student = make_student()
    store = AttendanceStore()
    with pytest.raises(AttendanceStoreError):
        store.mark(student.id, date(2026, 3, 2), 'late')
    with pytest.raises(AttendanceStoreError):
        store.mark(999999, date(2026, 3, 2), 'present')


def test_create_endpoint_upserts(api_client, make_student):
    student = make_student()
    payload = {'student': student.id, 'date': '2026-03-02', 'status': 'present'}

    first = api_client.post('/api/attendance/records/', payload, format='json')
    second = api_client.post('/api/attendance/records/', {**payload, 'status': 'absent'}, format='json')

    assert first.status_code == 201
    assert second.status_code == 200
    assert AttendanceRecord.objects.get(student=student).status == 'absent'


def test_bulk_mark_counts_failures_without_aborting(api_client, make_student):
    a = make_student(name='A')
    b = make_student(name='B')

    response = api_client.post('/api/attendance/records/bulk_mark/', {
        'date': '2026-03-02', 'status': 'present', 'student_ids': [a.id, 424242, b.id],
    }, format='json')

    assert response.status_code == 200
    assert response.data['saved'] == 2
    assert response.data['failed'] == 1
    assert response.data['errors'][0]['student'] == 424242
    assert AttendanceRecord.objects.filter(date=date(2026, 3, 2), status='present').count() == 2


def test_bulk_mark_requires_payload(api_client):
    response = api_client.post('/api/attendance/records/bulk_mark/', {}, format='json')
    assert response.status_code == 400


def test_summary_endpoint(api_client, make_student, make_attendance):
    student = make_student()
    for day in range(2, 12):
        make_attendance(student, date(2026, 3, day), 'present' if day < 10 else 'absent')

    response = api_client.get('/api/attendance/records/summary/', {'month': '2026-03'})

    assert response.status_code == 200
    row = response.data[0]
    assert row['total_days'] == 10
    assert row['present_days'] == 8
    assert row['percentage'] == 80.0


def test_daily_summary_requires_date(api_client):
    assert api_client.get('/api/attendance/records/daily_summary/').status_code == 400


def test_calendar_and_monthly_report(api_client, make_student, make_attendance):
    student = make_student(student_class='9')
    make_attendance(student, date(2026, 2, 3), 'present')
    make_attendance(student, date(2026, 2, 4), 'absent')

    calendar = api_client.get('/api/attendance/records/calendar/', {'month': '2026-02'})
    report = api_client.get('/api/attendance/records/monthly_report/', {'month': '2026-02'})

    assert calendar.status_code == 200
    assert len(calendar.data) == 28
    assert calendar.data[2]['present'] == 1
    assert report.data[0]['percentage'] == 50.0
    assert report.data[0]['student_class'] == '9'
    assert api_client.get('/api/attendance/records/calendar/', {'month': 'feb'}).status_code == 400


def test_exports(api_client, make_student, make_attendance):
    student = make_student(name='Kavya')
    make_attendance(student, date(2026, 3, 2), 'present')

    pdf = api_client.get('/api/attendance/records/export_pdf/', {'month': '2026-03'})
    xlsx = api_client.get('/api/attendance/records/export_excel/', {'month': '2026-03'})

    assert pdf.status_code == 200
    assert pdf['Content-Type'] == 'application/pdf'
    assert pdf.content.startswith(b'%PDF')

    sheet = load_workbook(BytesIO(xlsx.content)).active
    assert sheet.title == 'Attendance'
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0] == ('Student Name', 'Class', 'Date', 'Status')
    assert rows[1] == ('Kavya', 'Class 10', '02/03/2026', 'Present')


def test_grid_session_flow(api_client, make_student):
    student = make_student()
    navigate = api_client.post('/api/attendance/grid/', {'action': 'navigate', 'month': '2026-03'}, format='json')
    assert navigate.status_code == 200
    assert navigate.data['month'] == '2026-03'

    toggled = api_client.post('/api/attendance/grid/', {'action': 'toggle', 'student_id': student.id, 'date': '2026-03-04'}, format='json')
    assert toggled.data['is_dirty'] is True
    assert toggled.data['students'][0]['cells']['2026-03-04'] == 'present'
    assert not AttendanceRecord.objects.exists()

    blocked = api_client.post('/api/attendance/grid/', {'action': 'navigate', 'month': '2026-04'}, format='json')
    assert blocked.status_code == 409
    assert 'warning' in blocked.data

    saved = api_client.post('/api/attendance/grid/', {'action': 'save'}, format='json')
    assert saved.data['saved'] == 1
    assert saved.data['is_dirty'] is False
    assert AttendanceRecord.objects.get(student=student).status == 'present'

    moved = api_client.post('/api/attendance/grid/', {'action': 'navigate', 'month': '2026-04'}, format='json')
    assert moved.status_code == 200
    assert moved.data['month'] == '2026-04'


def test_grid_discard(api_client, make_student):
    student = make_student()
    api_client.post('/api/attendance/grid/', {'action': 'navigate', 'month': '2026-03'}, format='json')
    api_client.post('/api/attendance/grid/', {'action': 'toggle', 'student_id': student.id, 'date': '2026-03-04'}, format='json')

    discarded = api_client.post('/api/attendance/grid/', {'action': 'discard'}, format='json')

    assert discarded.data['is_dirty'] is False
    assert discarded.data['students'][0]['cells']['2026-03-04'] is None


def test_grid_unknown_action(api_client):
    assert api_client.post('/api/attendance/grid/', {'action': 'explode'}, format='json').status_code == 400


def test_requires_authentication(make_student):
    from rest_framework.test import APIClient
    assert APIClient().get('/api/attendance/records/').status_code == 401


def test_bulk_mark_records_with_bad_items_saves_the_rest(api_client, make_student):
    student = make_student()

    response = api_client.post('/api/attendance/records/bulk_mark/', {'records': [
        {'student': student.id, 'date': '2026-03-02', 'status': 'present'},
        {'student': 999999, 'date': '2026-03-02', 'status': 'present'},
        {'student': student.id, 'date': '2026-03-03', 'status': 'late'},
    ]}, format='json')

    assert response.status_code == 200
    assert response.data['saved'] == 1
    assert response.data['failed'] == 2
    assert response.data['errors'][0]['student'] == 999999
    assert 'student' in response.data['errors'][0]['error']
    assert 'status' in response.data['errors'][1]['error']
    assert AttendanceRecord.objects.count() == 1


def test_update_onto_existing_date_is_rejected(api_client, make_student, make_attendance):
    student = make_student()
    make_attendance(student, date(2026, 3, 2), 'present')
    later = make_attendance(student, date(2026, 3, 3), 'absent')

    response = api_client.patch(f'/api/attendance/records/{later.id}/', {'date': '2026-03-02'}, format='json')

    assert response.status_code == 400
    assert 'date' in response.data
    later.refresh_from_db()
    assert later.date == date(2026, 3, 3)


def test_update_keeps_own_date(api_client, make_student, make_attendance):
    record = make_attendance(make_student(), date(2026, 3, 2), 'present')
    response = api_client.patch(f'/api/attendance/records/{record.id}/', {'status': 'absent'}, format='json')
    assert response.status_code == 200
    assert response.data['status'] == 'absent'


def test_summary_rejects_non_numeric_student(api_client):
    response = api_client.get('/api/attendance/records/summary/', {'student': 'abc'})
    assert response.status_code == 400


def test_grid_picks_up_students_added_later(api_client, make_student):
    make_student(name='Arun')
    api_client.post('/api/attendance/grid/', {'action': 'navigate', 'month': '2026-03'}, format='json')
    make_student(name='Divya')

    grid = api_client.get('/api/attendance/grid/')

    assert [s['name'] for s in grid.data['students']] == ['Arun', 'Divya']
