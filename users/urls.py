from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import CurrentUserView, StaffViewSet

router = DefaultRouter()
router.register('staff', StaffViewSet)

urlpatterns = [
    path('me/', CurrentUserView.as_view(), name='current-user'),
    path('', include(router.urls)),
]
