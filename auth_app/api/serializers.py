from django.contrib.auth.models import User
from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework import serializers
from core.utils.validators import (
    validate_username_length,
    validate_password_length,
    validate_no_administrator_exists,
)


class AdminSetupSerializer(serializers.Serializer):
    """Creates the first administrator (a staff user). Only allowed while none exists"""
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate_username(self, value: str) -> str:
        """Trims the username and checks its length"""
        value = value.strip()
        validate_username_length(value)
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError('Username is already taken.')
        return value

    def validate_password(self, value: str) -> str:
        """Checks the minimal password length"""
        validate_password_length(value)
        return value

    def validate(self, attrs):
        validate_no_administrator_exists()
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict) -> User:
        """Creates the staff account with a hashed password"""
        validate_no_administrator_exists()
        user = User(username=validated_data['username'], is_staff=True)
        user.set_password(validated_data['password'])
        user.save()
        return user


class LoginSerializer(serializers.Serializer):
    """Validates administrator username/password for login"""
    username = serializers.CharField(write_only=True, required=True, trim_whitespace=True)
    password = serializers.CharField(write_only=True, required=True, style={'input_type': 'password'})

    def validate(self, attrs):
        """Returns the authenticated staff user or raises a validation error"""
        user = authenticate(username=attrs.get('username'), password=attrs.get('password'))
        if user is None or not user.is_staff:
            raise serializers.ValidationError('Invalid username or password.')
        attrs['user'] = user
        return attrs
