import pytest

from quiz_app.services import room_codes
from quiz_app.services.room_codes import (
    ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH, generate_room_code, generate_unique_room_code,
)


def test_generated_codes_use_unambiguous_alphabet():
    """Codes are six characters from the alphabet without I, O, 0 and 1"""
    for _ in range(50):
        code = generate_room_code()
        assert len(code) == ROOM_CODE_LENGTH
        assert set(code) <= set(ROOM_CODE_ALPHABET)
    assert not set('IO01') & set(ROOM_CODE_ALPHABET)


def test_unique_code_retries_on_collision(monkeypatch):
    """Taken codes are skipped until a free one comes up"""
    candidates = iter(['AAAAAA', 'BBBBBB', 'CCCCCC'])
    monkeypatch.setattr(room_codes, 'generate_room_code', lambda length=ROOM_CODE_LENGTH: next(candidates))
    taken = {'AAAAAA', 'BBBBBB'}
    assert generate_unique_room_code(exists=taken.__contains__) == 'CCCCCC'


def test_unique_code_gives_up_after_budget(monkeypatch):
    """After the retry budget the last candidate is accepted anyway"""
    calls = []

    def fake_code(length=ROOM_CODE_LENGTH):
        calls.append(1)
        return 'TAKEN2'

    monkeypatch.setattr(room_codes, 'generate_room_code', fake_code)
    assert generate_unique_room_code(exists=lambda code: True, max_attempts=4) == 'TAKEN2'
    assert len(calls) == 5  # first draw plus four retries


@pytest.mark.django_db
def test_unique_code_checks_stored_rooms(make_room, monkeypatch):
    """The default collision check looks at stored room codes"""
    make_room(room_code='USED23')
    candidates = iter(['USED23', 'FREE23'])
    monkeypatch.setattr(room_codes, 'generate_room_code', lambda length=ROOM_CODE_LENGTH: next(candidates))
    assert generate_unique_room_code() == 'FREE23'
