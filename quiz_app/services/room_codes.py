import logging
import secrets
from typing import Callable, Optional

from django.conf import settings

logger = logging.getLogger(__name__)

# no I, O, 0 or 1 so codes survive being read aloud
ROOM_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
ROOM_CODE_LENGTH = 6


def generate_room_code(length: int = ROOM_CODE_LENGTH) -> str:
    """Returns a random room code drawn from the unambiguous alphabet"""
    return ''.join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))


def _code_in_use(code: str) -> bool:
    from quiz_app.models import Room  # local import keeps this module model-free at import time
    return Room.objects.filter(room_code=code).exists()


def generate_unique_room_code(exists: Optional[Callable[[str], bool]] = None,
                              max_attempts: Optional[int] = None) -> str:
    """
    Draws codes until one is not in use, for a bounded number of attempts.

    After the retry budget the last candidate is returned anyway; the unique
    constraint on Room.room_code rejects a genuine clash at insert time.
    """
    exists = exists or _code_in_use
    max_attempts = max_attempts or getattr(settings, 'ROOM_CODE_MAX_ATTEMPTS', 10)
    code = generate_room_code()
    attempts = 0
    while attempts < max_attempts:
        if not exists(code):
            return code
        code = generate_room_code()
        attempts += 1
    logger.warning('Room code retry budget of %s exhausted, using %s.', max_attempts, code)
    return code
