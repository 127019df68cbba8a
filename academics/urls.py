from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import StudentViewSet, GroupViewSet, ImportStudentsAPI

router = DefaultRouter()
router.register('students', StudentViewSet)
router.register('groups', GroupViewSet, basename='group')

urlpatterns = [
    path('imports/students/', ImportStudentsAPI.as_view(), name='import-students'),
    path('', include(router.urls)),
]
