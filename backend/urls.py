from django.contrib import admin
from django.urls import path, include
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/', include('dashboard.urls')),
    path('api/', include('academics.urls')),
    path('api/attendance/', include('attendance.urls')),
    path('api/', include('results.urls')),
    path('api/notifications/', include('notifications.urls')),
    path('api/users/', include('users.urls')),
]
