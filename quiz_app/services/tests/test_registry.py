import pytest

from quiz_app.models import Participant, Question, Room
from quiz_app.services.registry import create_room, delete_room, update_room


@pytest.mark.django_db
def test_create_room_assigns_code_and_question_order():
    """Questions are stored in submission order starting at index 0"""
    room = create_room(
        {'title': 'Trivia', 'max_participants': 4, 'is_active': True, 'unknown': 'ignored'},
        [{'question_text': 'A?', 'correct_answer': 'a'}, {'question_text': 'B?', 'correct_answer': 'b', 'hint': 'bee'}],
    )
    assert len(room.room_code) == 6
    assert room.title == 'Trivia'
    assert list(room.questions.values_list('question_text', 'order_index', 'hint')) == [
        ('A?', 0, ''), ('B?', 1, 'bee'),
    ]


@pytest.mark.django_db
def test_update_room_only_touches_given_fields(make_room):
    room = make_room(title='Before', prize='Mug')
    update_room(room, {'title': 'After'})
    room.refresh_from_db()
    assert room.title == 'After'
    assert room.prize == 'Mug'
    assert room.questions.count() == 1


@pytest.mark.django_db
def test_update_room_replaces_questions(make_room):
    room = make_room(questions=[('Q1', 'A1'), ('Q2', 'A2')])
    update_room(room, {}, [{'question_text': 'Only', 'correct_answer': 'one'}])
    assert list(room.questions.values_list('question_text', 'order_index')) == [('Only', 0)]


@pytest.mark.django_db
def test_delete_room_cascades(make_room):
    room = make_room()
    Participant.objects.create(room=room, session_id='s')
    delete_room(room)
    assert not Room.objects.exists()
    assert not Question.objects.exists()
    assert not Participant.objects.exists()
