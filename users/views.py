from rest_framework import permissions, status, viewsets, filters
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend
from .models import Profile
from .permissions import IsAdminRole
from .serializers import UserSerializer, ProfileSerializer, StaffSerializer


class CurrentUserView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        user = request.user
        try:
            profile = Profile.objects.get(user=user)
            return Response({
                "user": UserSerializer(user).data,
                "profile": ProfileSerializer(profile).data
            })
        except Profile.DoesNotExist:
            return Response({
                "user": UserSerializer(user).data,
                "message": "Profile does not exist"
            }, status=status.HTTP_404_NOT_FOUND)


class StaffViewSet(viewsets.ModelViewSet):
    """Staff accounts students can be assigned to."""
    queryset = Profile.objects.select_related('user').order_by('user__first_name', 'user__username')
    serializer_class = StaffSerializer
    permission_classes = [IsAdminRole]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['role']
    search_fields = ['user__username', 'user__first_name', 'user__last_name', 'user__email']

    def perform_destroy(self, instance):
        # Deleting the account cascades to the profile; assigned students are unassigned
        instance.user.delete()
