"""Contains all necessary URLs for the auth_app API"""
from django.urls import path
from auth_app.api.views import (
    AdminCheckView, AdminExistsView, AdminSetupView, LoginView, LogoutView, TokenRefreshView,
)


urlpatterns = [
    path('admin/exists/', AdminExistsView.as_view(), name='admin-exists'),
    path('admin/setup/', AdminSetupView.as_view(), name='admin-setup'),
    path('admin/check/', AdminCheckView.as_view(), name='admin-check'),
    path('login/', LoginView.as_view(), name='api-login'),
    path('logout/', LogoutView.as_view(), name='api-logout'),
    path('token/refresh/', TokenRefreshView.as_view(), name='api-token-refresh'),
]
