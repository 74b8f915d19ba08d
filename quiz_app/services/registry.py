import logging
from typing import Iterable, Optional

from django.db import transaction

from quiz_app.models import Question, Room
from quiz_app.services.room_codes import generate_unique_room_code

logger = logging.getLogger(__name__)

ROOM_FIELDS = (
    'title', 'prize', 'start_time', 'duration_minutes',
    'max_participants', 'redirect_link', 'is_active',
)


def _replace_questions(room: Room, questions: Iterable[dict]) -> None:
    """Drops the room's questions and inserts the given list in order."""
    room.questions.all().delete()
    Question.objects.bulk_create([
        Question(
            room=room,
            question_text=item['question_text'],
            correct_answer=item['correct_answer'],
            hint=item.get('hint') or '',
            order_index=index,
        )
        for index, item in enumerate(questions)
    ])


@transaction.atomic
def create_room(room_fields: dict, questions: Iterable[dict]) -> Room:
    """Creates a room under a freshly generated code together with its questions."""
    values = {key: value for key, value in room_fields.items() if key in ROOM_FIELDS}
    room = Room.objects.create(room_code=generate_unique_room_code(), **values)
    _replace_questions(room, questions)
    logger.info('Created room %s (%s) with capacity %s.', room.room_code, room.id, room.max_participants)
    return room


@transaction.atomic
def update_room(room: Room, room_fields: dict, questions: Optional[Iterable[dict]] = None) -> Room:
    """Updates the provided room fields; a given question list replaces the whole set."""
    changed = []
    for key, value in room_fields.items():
        if key in ROOM_FIELDS:
            setattr(room, key, value)
            changed.append(key)
    if changed:
        room.save(update_fields=changed + ['updated_at'])
    if questions is not None:
        _replace_questions(room, questions)
    logger.info('Updated room %s (fields=%s, questions_replaced=%s).',
                room.room_code, ','.join(changed) or '-', questions is not None)
    return room


def delete_room(room: Room) -> None:
    """Deletes the room; questions and participants cascade."""
    code = room.room_code
    room.delete()
    logger.info('Deleted room %s.', code)
