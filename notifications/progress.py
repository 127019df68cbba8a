import logging
from datetime import date

from django.conf import settings

from attendance.models import AttendanceRecord
from attendance.summary import summarize_attendance, summarize_student
from reports.pdf import build_student_reports_pdf
from results.exports import student_report
from results.models import WeeklyTestMark
from .models import WhatsAppMessage
from .whatsapp_service import WhatsAppService, WhatsAppTemplates, deep_link, normalize_phone

logger = logging.getLogger(__name__)

RECENT_MARKS = 5
BANDS = ('all', 'low', 'medium', 'high', 'custom')


def recent_marks(student):
    return list(WeeklyTestMark.objects.filter(student=student).order_by('-test_date', '-id')[:RECENT_MARKS])


def progress_message(student, today=None):
    attendance = summarize_student(student, AttendanceRecord.objects.filter(student=student))
    return WhatsAppTemplates.progress_report(student.name, student.student_class, attendance, recent_marks(student), today=today)


def progress_link(student):
    message = progress_message(student)
    return {
        'student_id': student.id,
        'student_name': student.name,
        'phone_number': normalize_phone(student.parent_phone) if student.parent_phone else None,
        'message': message,
        'whatsapp_url': deep_link(student.parent_phone, message) if student.parent_phone else None,
    }


def in_band(percentage, band, min_percentage=None, max_percentage=None):
    low = getattr(settings, 'ATTENDANCE_LOW_THRESHOLD', 75)
    high = getattr(settings, 'ATTENDANCE_HIGH_THRESHOLD', 90)
    if band == 'low':
        return percentage < low
    if band == 'medium':
        return low <= percentage < high
    if band == 'high':
        return percentage >= high
    if band == 'custom':
        lower = 0 if min_percentage is None else min_percentage
        upper = 100 if max_percentage is None else max_percentage
        return lower <= percentage <= upper
    return True


def select_recipients(students, band='all', min_percentage=None, max_percentage=None):
    """Students with a parent phone whose overall attendance falls in ``band``."""
    students = [s for s in students if s.parent_phone]
    records = AttendanceRecord.objects.filter(student__in=[s.id for s in students])
    selected = []
    for student, summary in zip(students, summarize_attendance(records, students)):
        if in_band(summary.percentage, band, min_percentage, max_percentage):
            selected.append((student, summary))
    return selected


def log_message(student, phone_number, message, success, result, user=None, message_type='text'):
    return WhatsAppMessage.objects.create(
        student=student,
        student_name=student.name if student else '',
        phone_number=phone_number,
        message=message,
        message_type=message_type,
        status='sent' if success else 'failed',
        whatsapp_message_id=result if success else '',
        error='' if success else result,
        sent_by=user if user is not None and user.is_authenticated else None,
    )


def send_to_parent(student, message, user=None, service=None):
    """Send one text to a student's parent and log it. Returns (success, result)."""
    service = service or WhatsAppService()
    if not student.parent_phone:
        return False, "Student has no parent phone number"
    success, result = service.send_message(student.parent_phone, message)
    log_message(student, normalize_phone(student.parent_phone), message, success, result, user=user)
    return success, result


def send_bulk_progress(recipients, user=None):
    """
    Send each recipient their own progress message. Every send is
    independent; failures are counted, never retried.
    """
    service = WhatsAppService()
    results = []
    for student, _summary in recipients:
        success, result = send_to_parent(student, progress_message(student), user=user, service=service)
        results.append({
            'student_id': student.id,
            'student_name': student.name,
            'phone_number': normalize_phone(student.parent_phone),
            'success': success,
            'message': result,
        })
    sent = sum(1 for r in results if r['success'])
    logger.info("Bulk WhatsApp progress reports: sent=%s failed=%s", sent, len(results) - sent)
    return {'total': len(results), 'sent': sent, 'failed': len(results) - sent, 'results': results}


def academic_year_report(student, year):
    start, end = date(year, 1, 1), date(year + 1, 1, 1)
    attendance = summarize_student(student, AttendanceRecord.objects.filter(student=student, date__gte=start, date__lt=end))
    marks = WeeklyTestMark.objects.filter(student=student, year=year)
    return student_report(student, attendance, marks, f"Academic Year {year}")


def reports_pdf(students, year):
    return build_student_reports_pdf([academic_year_report(s, year) for s in students],
                                     title=f"Student Reports - Academic Year {year}")


def send_report_document(student, year, user=None):
    if not student.parent_phone:
        return False, "Student has no parent phone number"
    content = reports_pdf([student], year)
    filename = f"{student.name.replace(' ', '_')}_report_{year}.pdf"
    caption = WhatsAppTemplates.report_caption(student.name, f"Academic Year {year}")
    success, result = WhatsAppService().send_document(student.parent_phone, content, filename, caption)
    log_message(student, normalize_phone(student.parent_phone), caption, success, result,
                user=user, message_type='document')
    return success, result
