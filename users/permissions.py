from rest_framework import permissions


class RolePermission(permissions.BasePermission):
    """
    Simple role based permission.
    - Read allowed to every authenticated user
    - Create/Update/Delete allowed based on role mapping
    """

    role_map = {
        'staff': ['view', 'change', 'create'],
        'admin': ['view', 'change', 'create', 'delete'],
    }

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        if request.method in permissions.SAFE_METHODS:
            return True

        if request.user.is_superuser:
            return True

        profile = getattr(request.user, 'profile', None)
        if not profile:
            return False
        role = profile.role

        # map method to action
        if request.method == 'POST':
            action = 'create'
        elif request.method in ('PUT', 'PATCH'):
            action = 'change'
        elif request.method == 'DELETE':
            action = 'delete'
        else:
            action = 'view'

        allowed = self.role_map.get(role, [])
        return action in allowed


class IsAdminRole(permissions.BasePermission):
    """Only admins may manage staff accounts."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if request.method in permissions.SAFE_METHODS or user.is_superuser:
            return True
        profile = getattr(user, 'profile', None)
        return bool(profile and profile.role == 'admin')
