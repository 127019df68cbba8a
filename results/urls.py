from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import WeeklyTestMarkViewSet

router = DefaultRouter()
router.register('marks', WeeklyTestMarkViewSet)

urlpatterns = [path('', include(router.urls))]
