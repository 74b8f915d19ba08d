"""
Admission control for giveaway rooms.

Joining a room admits a participant to play; completing the quiz is what
claims one of the room's ``max_participants`` winner slots. Completions for
the same room are serialized so the number of completed participants never
exceeds the capacity, no matter how many requests arrive at once:

- a process-local lock per room orders completions inside one server process;
- ``select_for_update`` on the room row orders them across processes on
  databases with row locks (PostgreSQL, MySQL).

Both functions return an ``AdmissionResult`` instead of raising, so views can
branch on ``result.outcome``.
"""
import enum
import logging
import threading
import weakref
from dataclasses import dataclass
from typing import Optional

from django.db import transaction
from django.utils import timezone

from quiz_app.models import Participant, Room

logger = logging.getLogger(__name__)


class AdmissionOutcome(enum.Enum):
    ACCEPTED = 'accepted'
    FULL = 'full'
    NOT_FOUND = 'not_found'


@dataclass(frozen=True)
class AdmissionResult:
    outcome: AdmissionOutcome
    participant: Optional[Participant] = None
    created: bool = False

    @property
    def accepted(self) -> bool:
        return self.outcome is AdmissionOutcome.ACCEPTED


# entries vanish once no thread holds or waits for the room's lock
_room_locks = weakref.WeakValueDictionary()
_room_locks_guard = threading.Lock()


def room_lock(room_id) -> threading.Lock:
    """Returns the lock that orders completions for one room in this process."""
    with _room_locks_guard:
        lock = _room_locks.get(room_id)
        if lock is None:
            lock = _room_locks[room_id] = threading.Lock()
        return lock


def resolve_active_room(room_code: Optional[str] = None) -> Optional[Room]:
    """
    Active room for a code. Without a code the newest active room is used,
    which covers the single-room flow that predates room codes.
    """
    rooms = Room.objects.active()
    if room_code:
        return rooms.filter(room_code=room_code.strip().upper()).first()
    return rooms.first()


def join_room(room_code: Optional[str], session_id: str, visitor_id: str = '') -> AdmissionResult:
    """
    Registers a session as a participant of an active room.

    Re-joining with a known session is accepted without a new row. New
    sessions are refused once all winner slots are claimed.
    """
    room = resolve_active_room(room_code)
    if room is None:
        logger.info('Join refused: no active room for code %r.', room_code)
        return AdmissionResult(AdmissionOutcome.NOT_FOUND)

    existing = Participant.objects.filter(room=room, session_id=session_id).first()
    if existing is not None:
        return AdmissionResult(AdmissionOutcome.ACCEPTED, participant=existing)

    if room.is_full():
        logger.info('Join refused: room %s is full.', room.room_code)
        return AdmissionResult(AdmissionOutcome.FULL)

    # the unique (room, session_id) constraint collapses concurrent duplicates
    participant, created = Participant.objects.get_or_create(
        room=room,
        session_id=session_id,
        defaults={'visitor_id': visitor_id or ''},
    )
    if created:
        logger.info('Session %s joined room %s.', session_id, room.room_code)
    return AdmissionResult(AdmissionOutcome.ACCEPTED, participant=participant, created=created)


def _find_participant(session_id: str, room_code: Optional[str]) -> Optional[Participant]:
    participants = Participant.objects.filter(session_id=session_id)
    if room_code:
        participants = participants.filter(room__room_code=room_code.strip().upper())
    return participants.order_by('-joined_at', '-id').first()


def complete_quiz(session_id: str, room_code: Optional[str] = None) -> AdmissionResult:
    """
    Claims a winner slot for the participant behind ``session_id``.

    Already completed participants are accepted again unchanged. Otherwise
    the completed count is checked and the completion written while holding
    the room's lock, inside one transaction.
    """
    participant = _find_participant(session_id, room_code)
    if participant is None:
        logger.info('Completion refused: unknown session %s.', session_id)
        return AdmissionResult(AdmissionOutcome.NOT_FOUND)
    if participant.is_completed:
        return AdmissionResult(AdmissionOutcome.ACCEPTED, participant=participant)

    with room_lock(participant.room_id):
        with transaction.atomic():
            room = Room.objects.select_for_update().filter(pk=participant.room_id).first()
            if room is None:
                return AdmissionResult(AdmissionOutcome.NOT_FOUND)

            participant = Participant.objects.select_for_update().filter(pk=participant.pk).first()
            if participant is None:
                return AdmissionResult(AdmissionOutcome.NOT_FOUND)
            if participant.is_completed:
                return AdmissionResult(AdmissionOutcome.ACCEPTED, participant=participant)

            completed = room.completed_count()
            if room.is_full(completed):
                logger.info('Completion refused: room %s is full (%s/%s).',
                            room.room_code, completed, room.max_participants)
                return AdmissionResult(AdmissionOutcome.FULL, participant=participant)

            participant.completed_at = timezone.now()
            participant.save(update_fields=['completed_at'])

    logger.info('Session %s claimed slot %s/%s in room %s.',
                session_id, completed + 1, room.max_participants, room.room_code)
    return AdmissionResult(AdmissionOutcome.ACCEPTED, participant=participant, created=True)
