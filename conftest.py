import pytest  # required to define shared fixtures
from django.core.cache import cache
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def _clear_cache():
    '''
    Login throttling keeps its counters in the cache; start every test clean.
    '''
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Returns a DRF APIClient instance for making HTTP requests in tests"""
    return APIClient()


@pytest.fixture
def admin_user(db, django_user_model):
    """Creates and returns a staff account allowed to manage rooms"""
    return django_user_model.objects.create_user(username='organizer', password='pw123456', is_staff=True)


@pytest.fixture
def make_room(db):
    """Factory creating a room with questions directly through the ORM"""
    from quiz_app.models import Question, Room

    def _make_room(room_code='ABC234', max_participants=2, is_active=True, questions=None, **fields):
        room = Room.objects.create(
            room_code=room_code,
            max_participants=max_participants,
            is_active=is_active,
            **fields,
        )
        for index, (text, answer) in enumerate(questions or [('2+2', '4')]):
            Question.objects.create(room=room, question_text=text, correct_answer=answer, order_index=index)
        return room

    return _make_room
