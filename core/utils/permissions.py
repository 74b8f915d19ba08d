from rest_framework.permissions import BasePermission  # base for custom permissions


class IsAdministrator(BasePermission):
    """Grants access to authenticated staff accounts only (the quiz organizers)"""
    message = 'Forbidden: administrator access required.'  # 403 message

    def has_permission(self, request, view):  # view-wide check
        user = request.user
        # not logged in -> DRF answers 401 because an authenticator is configured
        if not user or not user.is_authenticated:
            return False
        return bool(user.is_staff and user.is_active)
