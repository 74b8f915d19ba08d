import logging
from typing import Optional, Tuple

from django.conf import settings
from rest_framework.request import Request
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

logger = logging.getLogger(__name__)


def access_cookie_name() -> str:
    return getattr(settings, 'JWT_ACCESS_COOKIE_NAME', 'access_token')


class CookieJWTAuthentication(JWTAuthentication):
    """
    Authenticates administrators from the HttpOnly access cookie set at login.

    Requests without the cookie fall back to the Authorization header, so
    scripted clients can still send a Bearer token. A bad cookie is a 401,
    it never silently downgrades to anonymous.
    """

    def authenticate(self, request: Request) -> Optional[Tuple[object, object]]:
        raw = request.COOKIES.get(access_cookie_name())
        if not raw:
            return super().authenticate(request)
        try:
            validated = self.get_validated_token(raw)
        except InvalidToken:
            logger.info('Rejected access cookie on %s.', request.path)
            raise
        return self.get_user(validated), validated
