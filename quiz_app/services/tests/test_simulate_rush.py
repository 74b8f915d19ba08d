from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from django.utils import timezone

from quiz_app.models import Participant


@pytest.mark.django_db(transaction=True)
def test_rush_respects_capacity(make_room):
    """Five players race for two slots; exactly two win"""
    room = make_room(room_code='RSH234', max_participants=2, questions=[('Capital of France?', 'Paris')])
    out = StringIO()
    call_command('simulate_rush', 'rsh234', players=5, workers=5, stdout=out)
    output = out.getvalue()
    assert 'Joined: 5, refused at join: 0.' in output
    assert 'Winners: 2, too late: 3.' in output
    assert 'Capacity respected.' in output
    assert Participant.objects.filter(room=room, completed_at__isnull=False).count() == 2


@pytest.mark.django_db
def test_rush_refuses_unknown_room():
    with pytest.raises(CommandError, match='room not found or inactive'):
        call_command('simulate_rush', 'NOPE23', stdout=StringIO())


@pytest.mark.django_db
def test_rush_refuses_full_room(make_room):
    room = make_room(room_code='FUL234', max_participants=1)
    Participant.objects.create(room=room, session_id='w', completed_at=timezone.now())
    with pytest.raises(CommandError, match='all winner slots are taken'):
        call_command('simulate_rush', 'FUL234', stdout=StringIO())
