import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from quiz_app.models import Participant, Question, Room


@pytest.mark.django_db
def test_model_str_reprs(make_room):
    """
    Ensures the __str__ representations include ids and useful context.
    """
    room = make_room(room_code='STR234', title='Spring Giveaway')
    question = room.questions.get()
    participant = Participant.objects.create(room=room, session_id='s1')

    assert 'STR234' in str(room) and 'Spring Giveaway' in str(room)
    assert f'{room.id}' in str(question) and '#0' in str(question)
    assert 'playing' in str(participant)
    participant.completed_at = timezone.now()
    assert 'completed' in str(participant)


@pytest.mark.django_db
def test_session_is_unique_per_room_only(make_room):
    """
    Same session twice in one room violates the constraint; the same session
    in another room is fine.
    """
    first = make_room(room_code='ONE234')
    second = make_room(room_code='TWO234')
    Participant.objects.create(room=first, session_id='dup')

    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Participant.objects.create(room=first, session_id='dup')

    Participant.objects.create(room=second, session_id='dup')


@pytest.mark.django_db
def test_question_order_index_unique_per_room(make_room):
    """Two questions cannot share a position inside one room"""
    room = make_room()
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Question.objects.create(room=room, question_text='dup', correct_answer='x', order_index=0)


@pytest.mark.django_db
def test_room_capacity_must_be_positive():
    """The check constraint refuses rooms without winner slots"""
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Room.objects.create(room_code='ZER234', max_participants=0)


@pytest.mark.django_db
def test_completed_count_and_slots(make_room):
    """Only participants with a completion timestamp occupy slots"""
    room = make_room(max_participants=2)
    Participant.objects.create(room=room, session_id='a', completed_at=timezone.now())
    Participant.objects.create(room=room, session_id='b')

    assert room.completed_count() == 1
    assert room.slots_remaining() == 1
    assert not room.is_full()
    Participant.objects.filter(session_id='b').update(completed_at=timezone.now())
    assert room.is_full()
    assert room.slots_remaining() == 0


@pytest.mark.django_db
def test_deleting_room_cascades(make_room):
    """Questions and participants disappear with their room"""
    room = make_room()
    Participant.objects.create(room=room, session_id='a')
    room.delete()
    assert Question.objects.count() == 0
    assert Participant.objects.count() == 0


@pytest.mark.django_db
def test_with_stats_annotations(make_room):
    """with_stats() exposes total and completed participant counts"""
    room = make_room()
    Participant.objects.create(room=room, session_id='a', completed_at=timezone.now())
    Participant.objects.create(room=room, session_id='b')
    annotated = Room.objects.with_stats().get(pk=room.pk)
    assert annotated.total_participants == 2
    assert annotated.completed_participants == 1
