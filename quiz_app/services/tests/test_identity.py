import json
import re

from quiz_app.services.identity import JsonFileStore, VisitorIdentity


def test_visitor_id_is_generated_once():
    """The visitor id is created lazily and then reused"""
    store = {}
    identity = VisitorIdentity(store)
    visitor_id = identity.visitor_id
    assert re.fullmatch(r'v_\d+_[0-9a-z]{9}', visitor_id)
    assert identity.visitor_id == visitor_id
    assert VisitorIdentity(store).visitor_id == visitor_id


def test_session_ids_embed_room_and_visitor():
    """Session ids are <room>_<visitor>_<ms>"""
    identity = VisitorIdentity()
    session_id = identity.new_session_id('ABC234')
    assert session_id.startswith(f'ABC234_{identity.visitor_id}_')
    assert session_id.rsplit('_', 1)[1].isdigit()


def test_completed_rooms_are_remembered():
    """Finished rooms are tracked without duplicates"""
    identity = VisitorIdentity()
    assert not identity.has_completed('ABC234')
    identity.mark_completed('ABC234')
    identity.mark_completed('ABC234')
    assert identity.has_completed('ABC234')
    assert identity.completed_rooms() == ['ABC234']


def test_json_file_store_survives_reload(tmp_path):
    """A returning 'browser' keeps its identity and finished rooms"""
    path = tmp_path / 'browser' / 'storage.json'
    identity = VisitorIdentity(JsonFileStore(path))
    visitor_id = identity.visitor_id
    identity.mark_completed('XYZ789')

    reloaded = VisitorIdentity(JsonFileStore(path))
    assert reloaded.visitor_id == visitor_id
    assert reloaded.has_completed('XYZ789')
    assert json.loads(path.read_text())['completed_rooms'] == ['XYZ789']


def test_json_file_store_mapping_behaviour(tmp_path):
    store = JsonFileStore(tmp_path / 'storage.json')
    store['a'] = 1
    assert dict(store) == {'a': 1} and len(store) == 1
    del store['a']
    assert JsonFileStore(tmp_path / 'storage.json') == {}
