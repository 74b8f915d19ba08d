from rest_framework.exceptions import NotFound, ValidationError

from core.utils.exceptions import RoomFull, api_exception_handler


def test_room_full_is_flagged_too_late():
    resp = api_exception_handler(RoomFull(), {})
    assert resp.status_code == 409
    assert resp.data['too_late'] is True
    assert resp.data['detail'] == 'Too late! All winner slots are already taken.'


def test_field_errors_get_a_detail_summary():
    """Per-field errors stay intact and the first message becomes 'detail'"""
    resp = api_exception_handler(ValidationError({'title': ['This field is required.']}), {})
    assert resp.status_code == 400
    assert resp.data['title'] == ['This field is required.']
    assert resp.data['detail'] == 'This field is required.'


def test_list_errors_are_wrapped():
    resp = api_exception_handler(ValidationError(['Broken.']), {})
    assert resp.data == {'detail': 'Broken.', 'errors': ['Broken.']}


def test_not_found_keeps_its_message():
    resp = api_exception_handler(NotFound('Room not found.'), {})
    assert resp.status_code == 404
    assert 'too_late' not in resp.data


def test_unexpected_errors_become_generic_500(caplog):
    resp = api_exception_handler(RuntimeError('boom'), {'view': None})
    assert resp.status_code == 500
    assert resp.data == {'detail': 'Internal server error.'}
    assert 'Unhandled error' in caplog.text
