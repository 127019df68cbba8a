from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    ProgressMessageView, SendMessageView, BulkSendView, SendReportView,
    StudentReportPdfView, BulkReportPdfView, WhatsAppMessageViewSet,
)

router = DefaultRouter()
router.register('messages', WhatsAppMessageViewSet)

urlpatterns = [
    path('progress/<int:student_id>/', ProgressMessageView.as_view(), name='progress-message'),
    path('send/', SendMessageView.as_view(), name='send-message'),
    path('bulk/', BulkSendView.as_view(), name='bulk-send'),
    path('report/', SendReportView.as_view(), name='send-report'),
    path('report_pdf/<int:student_id>/', StudentReportPdfView.as_view(), name='student-report-pdf'),
    path('bulk_reports/', BulkReportPdfView.as_view(), name='bulk-report-pdf'),
    path('', include(router.urls)),
]
