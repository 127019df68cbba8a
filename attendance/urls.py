from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import AttendanceRecordViewSet, AttendanceGridView

router = DefaultRouter()
router.register('records', AttendanceRecordViewSet)

urlpatterns = [
    path('grid/', AttendanceGridView.as_view(), name='attendance-grid'),
    path('', include(router.urls)),
]
