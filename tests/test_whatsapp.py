from datetime import date
from types import SimpleNamespace
from unittest import mock

import pytest
from django.test import override_settings

from attendance.summary import AttendanceSummary
from notifications.models import WhatsAppMessage
from notifications.progress import in_band
from notifications.whatsapp_service import WhatsAppService, WhatsAppTemplates, deep_link, normalize_phone


def mark(subject, week, obtained, total):
    return SimpleNamespace(subject=subject, week_number=week, marks_obtained=obtained, total_marks=total,
                           percentage=obtained / total * 100)


def summary(total, present):
    return AttendanceSummary(student_id=1, student_name='Arun', total_days=total, present_days=present,
                             percentage=present / total * 100 if total else 0.0)


def test_progress_report_layout():
    text = WhatsAppTemplates.progress_report('Arun Kumar', '10', summary(10, 8), [mark('Maths', 10, 45, 50)],
                                             today=date(2026, 3, 9))
    assert text == (
        "🎓 *Student Progress Report*\n"
        "\n"
        "*Student:* Arun Kumar\n"
        "*Class:* 10\n"
        "\n"
        "📊 *Attendance Summary*\n"
        "Total Days: 10\n"
        "Present Days: 8\n"
        "Attendance Percentage: 80.0%\n"
        "\n"
        "📝 *Recent Test Marks*\n"
        "• Maths (Week 10): 45/50 (90.0%)\n"
        "\n"
        "📱 Generated from School Management System\n"
        "📅 Date: 09/03/2026"
    )


def test_progress_report_without_marks_and_capped_at_five():
    empty = WhatsAppTemplates.progress_report('A', '9', summary(0, 0), [], today=date(2026, 3, 9))
    assert "No recent test marks available" in empty
    assert "Attendance Percentage: 0.0%" in empty

    many = WhatsAppTemplates.progress_report('A', '9', summary(1, 1), [mark('Maths', w, 10, 20) for w in range(1, 8)])
    assert many.count("• Maths") == 5


@pytest.mark.parametrize('raw,expected', [
    ('98765 43210', '919876543210'),
    ('+91 98765-43210', '919876543210'),
    ('', ''),
])
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_deep_link_encodes_message():
    assert deep_link('9876543210', 'Hi there & bye') == 'https://wa.me/919876543210?text=Hi%20there%20%26%20bye'


@pytest.mark.parametrize('percentage,band,expected', [
    (74.9, 'low', True),
    (75, 'low', False),
    (75, 'medium', True),
    (89.9, 'medium', True),
    (90, 'medium', False),
    (90, 'high', True),
    (50, 'all', True),
])
def test_attendance_bands(percentage, band, expected):
    assert in_band(percentage, band) is expected


def test_custom_band_is_inclusive():
    assert in_band(60, 'custom', 60, 80)
    assert in_band(80, 'custom', 60, 80)
    assert not in_band(80.1, 'custom', 60, 80)


def test_console_provider_does_not_call_http():
    with mock.patch('notifications.whatsapp_service.requests.post') as post:
        assert WhatsAppService().send_message('9876543210', 'hello') == (True, 'console')
    post.assert_not_called()


@override_settings(WHATSAPP_PROVIDER='business', WHATSAPP_ACCESS_TOKEN='token', WHATSAPP_PHONE_NUMBER_ID='12345')
def test_business_provider_posts_text_message():
    response = mock.Mock(status_code=200)
    response.json.return_value = {'messages': [{'id': 'wamid.1'}]}
    with mock.patch('notifications.whatsapp_service.requests.post', return_value=response) as post:
        success, result = WhatsAppService().send_message('98765 43210', 'hello')

    assert (success, result) == (True, 'wamid.1')
    url = post.call_args.args[0]
    assert url == 'https://graph.facebook.com/v18.0/12345/messages'
    assert post.call_args.kwargs['headers'] == {'Authorization': 'Bearer token'}
    assert post.call_args.kwargs['json'] == {
        'messaging_product': 'whatsapp',
        'to': '919876543210',
        'type': 'text',
        'text': {'body': 'hello'},
    }


@override_settings(WHATSAPP_PROVIDER='business', WHATSAPP_ACCESS_TOKEN='token', WHATSAPP_PHONE_NUMBER_ID='12345')
def test_business_provider_reports_api_error():
    response = mock.Mock(status_code=400)
    response.json.return_value = {'error': {'message': 'Invalid recipient'}}
    with mock.patch('notifications.whatsapp_service.requests.post', return_value=response):
        assert WhatsAppService().send_message('9876543210', 'hello') == (False, 'Failed: Invalid recipient')


@override_settings(WHATSAPP_PROVIDER='business', WHATSAPP_ACCESS_TOKEN='', WHATSAPP_PHONE_NUMBER_ID='')
def test_business_provider_requires_credentials():
    success, result = WhatsAppService().send_message('9876543210', 'hello')
    assert not success
    assert 'not configured' in result


@override_settings(WHATSAPP_PROVIDER='business', WHATSAPP_ACCESS_TOKEN='token', WHATSAPP_PHONE_NUMBER_ID='12345')
def test_business_document_uploads_then_sends():
    upload = mock.Mock(status_code=200)
    upload.json.return_value = {'id': 'media-1'}
    sent = mock.Mock(status_code=200)
    sent.json.return_value = {'messages': [{'id': 'wamid.2'}]}
    with mock.patch('notifications.whatsapp_service.requests.post', side_effect=[upload, sent]) as post:
        success, result = WhatsAppService().send_document('9876543210', b'%PDF-1.4', 'report.pdf', 'Report')

    assert (success, result) == (True, 'wamid.2')
    assert post.call_args_list[0].args[0].endswith('/12345/media')
    assert post.call_args_list[1].kwargs['json']['document'] == {'id': 'media-1', 'filename': 'report.pdf', 'caption': 'Report'}


@pytest.mark.django_db
def test_progress_endpoint_returns_link(api_client, make_student, make_attendance, make_mark):
    student = make_student(name='Arun Kumar', parent_phone='98765 43210')
    make_attendance(student, date(2026, 3, 2), 'present')
    make_mark(student, subject='Maths', obtained=45, total=50, week=10)

    data = api_client.get(f'/api/notifications/progress/{student.id}/').data

    assert data['phone_number'] == '919876543210'
    assert '*Student:* Arun Kumar' in data['message']
    assert 'Maths (Week 10): 45/50 (90.0%)' in data['message']
    assert data['whatsapp_url'].startswith('https://wa.me/919876543210?text=')


@pytest.mark.django_db
def test_send_logs_message(api_client, make_student):
    student = make_student()
    response = api_client.post('/api/notifications/send/', {'student_id': student.id}, format='json')

    assert response.status_code == 200
    log = WhatsAppMessage.objects.get()
    assert log.status == 'sent'
    assert log.phone_number == '919876543210'
    assert log.student_name == student.name


@pytest.mark.django_db
def test_send_without_phone_is_rejected(api_client, make_student):
    student = make_student(parent_phone=None)
    response = api_client.post('/api/notifications/send/', {'student_id': student.id}, format='json')
    assert response.status_code == 400
    assert not WhatsAppMessage.objects.exists()


@pytest.mark.django_db
@override_settings(WHATSAPP_PROVIDER='business', WHATSAPP_ACCESS_TOKEN='token', WHATSAPP_PHONE_NUMBER_ID='12345')
def test_bulk_send_counts_success_and_failure(api_client, make_student, make_attendance):
    good = make_student(name='Good', parent_phone='9000000001')
    bad = make_student(name='Bad', parent_phone='9000000002')
    make_student(name='No Phone', parent_phone=None)
    for student in (good, bad):
        make_attendance(student, date(2026, 3, 2), 'absent')

    ok = mock.Mock(status_code=200)
    ok.json.return_value = {'messages': [{'id': 'wamid.ok'}]}
    failed = mock.Mock(status_code=500)
    failed.json.return_value = {'error': {'message': 'boom'}}

    with mock.patch('notifications.whatsapp_service.requests.post', side_effect=[failed, ok]):
        response = api_client.post('/api/notifications/bulk/', {'band': 'low'}, format='json')

    assert response.data['total'] == 2
    assert response.data['sent'] == 1
    assert response.data['failed'] == 1
    assert WhatsAppMessage.objects.filter(status='failed').count() == 1
    assert WhatsAppMessage.objects.filter(status='sent').count() == 1


@pytest.mark.django_db
def test_bulk_dry_run_filters_by_band_and_class(api_client, make_student, make_attendance):
    low = make_student(name='Low', student_class='9')
    high = make_student(name='High', student_class='9')
    other_class = make_student(name='Other', student_class='10')
    make_attendance(low, date(2026, 3, 2), 'absent')
    make_attendance(high, date(2026, 3, 2), 'present')
    make_attendance(other_class, date(2026, 3, 2), 'absent')

    response = api_client.post('/api/notifications/bulk/', {'student_class': '9', 'band': 'low', 'dry_run': True}, format='json')

    assert response.data['total'] == 1
    assert response.data['recipients'][0]['student_name'] == 'Low'
    assert not WhatsAppMessage.objects.exists()


@pytest.mark.django_db
def test_student_report_pdf(api_client, make_student, make_mark):
    student = make_student()
    make_mark(student, year=2026)
    response = api_client.get(f'/api/notifications/report_pdf/{student.id}/', {'year': '2026'})
    assert response.status_code == 200
    assert response.content.startswith(b'%PDF')

    bulk = api_client.get('/api/notifications/bulk_reports/', {'year': '2026'})
    assert bulk.content.startswith(b'%PDF')


@pytest.mark.django_db
def test_send_report_logs_document_with_caption(api_client, make_student):
    student = make_student(name='Arun Kumar')
    response = api_client.post('/api/notifications/report/', {'student_id': student.id, 'year': 2026}, format='json')

    assert response.status_code == 200
    log = WhatsAppMessage.objects.get()
    assert log.message_type == 'document'
    assert log.message == 'Progress report for Arun Kumar (Academic Year 2026)'
