import logging
from django.conf import settings # access Django settings for lifetimes/flags
from django.contrib.auth.models import User
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.serializers import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView # DRF base API view
from rest_framework.request import Request
from rest_framework.response import Response # DRF HTTP response wrapper
from rest_framework import status # symbolic HTTP status codes
from rest_framework_simplejwt.tokens import RefreshToken # token issuer for JWTs
from rest_framework_simplejwt.exceptions import TokenError
from auth_app.api.serializers import AdminSetupSerializer, LoginSerializer
from core.utils.authentication import CookieJWTAuthentication, access_cookie_name
from core.utils.rate_limit import LoginRateLimiter, client_ip

logger = logging.getLogger(__name__)


def _cookie_settings():
    """Reads cookie names and flags from settings with sensible defaults"""
    return {
        'access_name': access_cookie_name(),
        'refresh_name': getattr(settings, 'JWT_REFRESH_COOKIE_NAME', 'refresh_token'),
        'secure': getattr(settings, 'JWT_COOKIE_SECURE', True),  # True in production
        'samesite': getattr(settings, 'JWT_COOKIE_SAMESITE', 'Lax'),
    }


def _max_age(name: str, fallback: int) -> int:
    """Cookie lifetime in seconds derived from SIMPLE_JWT"""
    lifetime = getattr(settings, 'SIMPLE_JWT', {}).get(name)
    return int(lifetime.total_seconds()) if lifetime else fallback


def _first_message(detail) -> str:
    """Extracts the first message from a list/dict/str ValidationError detail"""
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
    if detail:
        return str(detail)
    return 'Invalid credentials.'


class AdminExistsView(APIView):
    """
    GET /api/admin/exists/
    Tells the frontend whether the first-run setup form should be shown.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        return Response({'exists': User.objects.filter(is_staff=True).exists()}, status=status.HTTP_200_OK)


@method_decorator(csrf_exempt, name='dispatch')
class AdminSetupView(APIView):
    """
    POST /api/admin/setup/
    Creates the first administrator account. Rejected with 400 once one exists.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = AdminSetupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info('Administrator %s created.', user.username)
        return Response(
            {'detail': 'Administrator created.', 'admin': {'id': user.id, 'username': user.username}},
            status=status.HTTP_201_CREATED,
        )


@method_decorator(csrf_exempt, name='dispatch')
class LoginView(APIView):
    """
    Handle administrator login and set JWT cookies.

    On success:
      - returns 200 with admin payload and a 'detail' message
      - sets 'access_token' and 'refresh_token' as HttpOnly cookies

    On failure:
      - returns 401 for invalid credentials
      - returns 429 after too many failed attempts from the same IP
    """
    permission_classes = [AllowAny]
    # disable SessionAuthentication to avoid CSRF 403 on POST
    authentication_classes = []

    def post(self, request: Request):
        """
        Validate credentials, generate JWT tokens, and set them in HttpOnly cookies.
        """
        limiter = LoginRateLimiter()
        ip = client_ip(request)
        wait = limiter.retry_after(ip)
        if wait:
            minutes = max(1, -(-wait // 60))  # round up to whole minutes
            return Response(
                {'detail': f'Too many login attempts. Try again in {minutes} minute(s).'},
                status=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={'Retry-After': str(wait)},
            )

        serializer = LoginSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except ValidationError as exc:
            limiter.record_failure(ip)
            logger.warning('Rejected administrator login from %s.', ip)
            return Response({'detail': _first_message(exc.detail)}, status=status.HTTP_401_UNAUTHORIZED)

        limiter.reset(ip)
        user = serializer.validated_data['user']
        refresh = RefreshToken.for_user(user)
        access = refresh.access_token

        resp = Response(
            {'detail': 'Login successful.', 'admin': {'id': user.id, 'username': user.username}},
            status=status.HTTP_200_OK,
        )
        cookies = _cookie_settings()
        resp.set_cookie(
            key=cookies['access_name'],
            value=str(access),
            max_age=_max_age('ACCESS_TOKEN_LIFETIME', 300),
            secure=cookies['secure'],
            httponly=True,  # prevent JS access to the cookie
            samesite=cookies['samesite'],
            path='/',
        )
        resp.set_cookie(
            key=cookies['refresh_name'],
            value=str(refresh),
            max_age=_max_age('REFRESH_TOKEN_LIFETIME', 86400),
            secure=cookies['secure'],
            httponly=True,
            samesite=cookies['samesite'],
            path='/',
        )
        return resp


@method_decorator(csrf_exempt, name='dispatch')
class LogoutView(APIView):
    """
    Log the administrator out by clearing both JWT cookies.
    """

    authentication_classes = []
    permission_classes = []

    def post(self, request):
        cookies = _cookie_settings()
        if not request.COOKIES.get(cookies['refresh_name']):
            return Response(
                {'detail': 'Authentication credentials were not provided.'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        resp = Response({'detail': 'Logout successful.'}, status=status.HTTP_200_OK)
        resp.delete_cookie(key=cookies['access_name'], path='/', samesite=cookies['samesite'])
        resp.delete_cookie(key=cookies['refresh_name'], path='/', samesite=cookies['samesite'])
        return resp


@method_decorator(csrf_exempt, name='dispatch')
class TokenRefreshView(APIView):
    """
    Issue a new access token from the refresh token stored in an HttpOnly cookie.

    Behavior:
      - Requires the presence of the 'refresh_token' cookie.
      - Sets a fresh 'access_token' cookie on the response.
      - Returns 401 if the refresh cookie is missing or invalid, or if its
        user is no longer an active administrator.
    """

    authentication_classes = []
    permission_classes = []

    def post(self, request):
        cookies = _cookie_settings()
        refresh_token = request.COOKIES.get(cookies['refresh_name'])
        if not refresh_token:
            return Response({'detail': 'Refresh token missing.'}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            refresh = RefreshToken(refresh_token)  # may raise TokenError
        except TokenError:
            return Response({'detail': 'Invalid refresh token.'}, status=status.HTTP_401_UNAUTHORIZED)

        # a demoted or deactivated administrator cannot keep refreshing
        user_id = refresh.get(getattr(settings, 'SIMPLE_JWT', {}).get('USER_ID_CLAIM', 'user_id'))
        if not User.objects.filter(pk=user_id, is_staff=True, is_active=True).exists():
            logger.warning('Refresh refused for user id %s: not an active administrator.', user_id)
            return Response({'detail': 'Invalid refresh token.'}, status=status.HTTP_401_UNAUTHORIZED)
        new_access = refresh.access_token

        resp = Response({'detail': 'Token refreshed', 'access': str(new_access)}, status=status.HTTP_200_OK)
        resp.set_cookie(
            key=cookies['access_name'],
            value=str(new_access),
            max_age=_max_age('ACCESS_TOKEN_LIFETIME', 300),
            secure=cookies['secure'],
            httponly=True,
            samesite=cookies['samesite'],
            path='/',
        )
        return resp


class AdminCheckView(APIView):
    """
    GET /api/admin/check/
    Reports whether the request carries a valid administrator token.
    Never fails: expired or foreign tokens simply read as not authenticated.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        authenticated = False
        cookie = request.COOKIES.get(_cookie_settings()['access_name'])
        if cookie:
            auth = CookieJWTAuthentication()
            try:
                user = auth.get_user(auth.get_validated_token(cookie))
                authenticated = bool(user.is_staff and user.is_active)
            except AuthenticationFailed:  # InvalidToken subclasses it
                authenticated = False
        return Response({'authenticated': authenticated}, status=status.HTTP_200_OK)
