"""
WhatsApp Service Module

Supports two delivery modes:
1. Console (development) - logs the message instead of sending it
2. WhatsApp Business Cloud API - text messages and PDF documents

Configure in settings.py:
WHATSAPP_PROVIDER = 'console' or 'business'
WHATSAPP_ACCESS_TOKEN = 'your_access_token'
WHATSAPP_PHONE_NUMBER_ID = 'your_phone_number_id'
WHATSAPP_API_VERSION = 'v18.0'
WHATSAPP_DEFAULT_COUNTRY_CODE = '91'

Parents without the Business API can still be reached through a wa.me deep
link, which opens WhatsApp with the message pre-filled.
"""

import logging
from urllib.parse import quote

import requests
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

GRAPH_API_URL = "https://graph.facebook.com"


def normalize_phone(phone_number, country_code=None):
    """Digits only, with the default country code prefixed when missing."""
    country_code = country_code or getattr(settings, 'WHATSAPP_DEFAULT_COUNTRY_CODE', '91')
    digits = ''.join(ch for ch in str(phone_number or '') if ch.isdigit())
    if not digits:
        return ''
    if not digits.startswith(country_code):
        digits = country_code + digits
    return digits


def deep_link(phone_number, message):
    return f"https://wa.me/{normalize_phone(phone_number)}?text={quote(message, safe='')}"


class WhatsAppService:
    """Sends messages through the configured provider"""

    def __init__(self):
        self.provider = getattr(settings, 'WHATSAPP_PROVIDER', 'console')
        self.access_token = getattr(settings, 'WHATSAPP_ACCESS_TOKEN', '')
        self.phone_number_id = getattr(settings, 'WHATSAPP_PHONE_NUMBER_ID', '')
        self.api_version = getattr(settings, 'WHATSAPP_API_VERSION', 'v18.0')
        self.timeout = getattr(settings, 'WHATSAPP_TIMEOUT', 10)

    @property
    def base_url(self):
        return f"{GRAPH_API_URL}/{self.api_version}/{self.phone_number_id}"

    def _headers(self):
        return {'Authorization': f"Bearer {self.access_token}"}

    def send_message(self, phone_number, message):
        """Send a text message. Returns (success, message_id_or_error)."""

        if not phone_number:
            logger.error("No phone number provided")
            return False, "No phone number provided"

        if not message:
            logger.error("No message provided")
            return False, "No message provided"

        phone_number = normalize_phone(phone_number)

        if self.provider == 'business':
            return self._send_via_business_api(phone_number, {
                'type': 'text',
                'text': {'body': message},
            })
        # Console mode for development
        return self._send_via_console(phone_number, message)

    def send_document(self, phone_number, content, filename, caption=''):
        """Upload a PDF and send it as a document message."""

        if not phone_number:
            logger.error("No phone number provided")
            return False, "No phone number provided"

        phone_number = normalize_phone(phone_number)

        if self.provider != 'business':
            return self._send_via_console(phone_number, f"[document {filename}, {len(content)} bytes] {caption}")

        success, media_id = self._upload_media(content, filename)
        if not success:
            return False, media_id
        return self._send_via_business_api(phone_number, {
            'type': 'document',
            'document': {'id': media_id, 'filename': filename, 'caption': caption},
        })

    def _check_configured(self):
        if not self.access_token or not self.phone_number_id:
            logger.error("WhatsApp Business API credentials not configured")
            return False
        return True

    def _upload_media(self, content, filename):
        if not self._check_configured():
            return False, "WhatsApp Business API credentials not configured"
        try:
            response = requests.post(
                f"{self.base_url}/media",
                headers=self._headers(),
                data={'messaging_product': 'whatsapp', 'type': 'application/pdf'},
                files={'file': (filename, content, 'application/pdf')},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"WhatsApp media upload error: {str(e)}")
            return False, f"Failed to upload document: {str(e)}"

        if response.status_code != 200:
            logger.error(f"WhatsApp media upload HTTP error: {response.status_code} {response.text}")
            return False, f"HTTP Error: {response.status_code}"
        return True, response.json().get('id')

    def _send_via_business_api(self, phone_number, payload):
        """POST a message to the WhatsApp Business Cloud API"""
        if not self._check_configured():
            return False, "WhatsApp Business API credentials not configured"
        try:
            response = requests.post(
                f"{self.base_url}/messages",
                headers=self._headers(),
                json={'messaging_product': 'whatsapp', 'to': phone_number, **payload},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"WhatsApp API error: {str(e)}")
            return False, f"Failed to send message: {str(e)}"

        if response.status_code != 200:
            try:
                detail = response.json().get('error', {}).get('message', 'Unknown error')
            except ValueError:
                detail = response.text or 'Unknown error'
            logger.error(f"WhatsApp API HTTP error {response.status_code}: {detail}")
            return False, f"Failed: {detail}"

        messages = response.json().get('messages') or [{}]
        message_id = messages[0].get('id', '')
        logger.info(f"WhatsApp message sent to {phone_number}: {message_id}")
        return True, message_id

    def _send_via_console(self, phone_number, message):
        """Console mode for development"""
        logger.info(f"WhatsApp (console mode) to {phone_number}:\n{message}")
        return True, "console"


class WhatsAppTemplates:
    """Pre-defined WhatsApp messages"""

    @staticmethod
    def progress_report(student_name, student_class, attendance, recent_marks, today=None):
        """
        ``attendance`` is an AttendanceSummary; ``recent_marks`` are
        WeeklyTestMark-like objects, most recent first (at most five shown).
        """
        today = today or timezone.localdate()
        lines = [
            "🎓 *Student Progress Report*",
            "",
            f"*Student:* {student_name}",
            f"*Class:* {student_class}",
            "",
            "📊 *Attendance Summary*",
            f"Total Days: {attendance.total_days}",
            f"Present Days: {attendance.present_days}",
            f"Attendance Percentage: {attendance.percentage:.1f}%",
            "",
            "📝 *Recent Test Marks*",
        ]
        recent_marks = list(recent_marks)[:5]
        if recent_marks:
            for mark in recent_marks:
                lines.append(
                    f"• {mark.subject} (Week {mark.week_number}): "
                    f"{float(mark.marks_obtained):g}/{float(mark.total_marks):g} ({mark.percentage:.1f}%)"
                )
        else:
            lines.append("No recent test marks available")
        lines += [
            "",
            "📱 Generated from School Management System",
            f"📅 Date: {today.strftime('%d/%m/%Y')}",
        ]
        return "\n".join(lines)

    @staticmethod
    def report_caption(student_name, period_label):
        return f"Progress report for {student_name} ({period_label})"
