from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional

from django.utils import timezone

from quiz_app.models import Question, Room
from quiz_app.services.admission import resolve_active_room


@dataclass
class RoomStatus:
    """Public view of a room: whether it can be played and, if so, its content."""
    available: bool
    too_late: bool = False
    room: Optional[Room] = None
    questions: List[Question] = field(default_factory=list)
    completed_count: int = 0

    @property
    def has_started(self) -> bool:
        if self.room is None or self.room.start_time is None:
            return True
        return self.room.start_time <= timezone.now()

    @property
    def ends_at(self):
        if self.room is None or self.room.start_time is None:
            return None
        return self.room.start_time + timedelta(minutes=self.room.duration_minutes)

    @property
    def slots_remaining(self) -> int:
        if self.room is None:
            return 0
        return self.room.slots_remaining(self.completed_count)


def get_room_status(room_code: Optional[str] = None) -> RoomStatus:
    """
    Resolves an active room and reports whether new players can still win.

    Missing or inactive rooms are unavailable; rooms whose winner slots are
    all claimed are unavailable with too_late set.
    """
    room = resolve_active_room(room_code)
    if room is None:
        return RoomStatus(available=False)

    completed = room.completed_count()
    if room.is_full(completed):
        return RoomStatus(available=False, too_late=True, completed_count=completed)

    questions = list(room.questions.order_by('order_index'))
    return RoomStatus(available=True, room=room, questions=questions, completed_count=completed)
