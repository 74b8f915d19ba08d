from django.contrib.auth.models import User
from rest_framework.exceptions import ValidationError

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def validate_username_length(username: str):
    """Checks the administrator username has at least three characters"""
    if len((username or '').strip()) < MIN_USERNAME_LENGTH:
        raise ValidationError(
            {"username": f"Username must be at least {MIN_USERNAME_LENGTH} characters."})


def validate_password_length(password: str):
    """Checks the administrator password has at least six characters"""
    if len(password or '') < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            {"password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters."})


def validate_no_administrator_exists():
    """Setup is only allowed while no staff account exists yet"""
    if User.objects.filter(is_staff=True).exists():
        raise ValidationError({"detail": "An administrator already exists."})
