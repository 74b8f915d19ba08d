from concurrent.futures import ThreadPoolExecutor

from django.core.management.base import BaseCommand, CommandError
from django.db import close_old_connections

from quiz_app.services.admission import AdmissionOutcome, complete_quiz, join_room
from quiz_app.services.answers import is_answer_correct
from quiz_app.services.identity import VisitorIdentity
from quiz_app.services.status import get_room_status


class Command(BaseCommand):
    """
    Plays a room with many simulated browsers at once.

    Every player gets its own identity, joins, answers every question and
    then all players submit their completion at the same moment. The summary
    shows how many winner slots were claimed against the room's capacity.
    """
    help = 'Simulate a crowd of players racing for the winner slots of a room.'

    def add_arguments(self, parser):
        parser.add_argument('room_code', help='Code of an active room.')
        parser.add_argument('--players', type=int, default=20, help='Number of simulated players.')
        parser.add_argument('--workers', type=int, default=8, help='Concurrent completion requests.')

    def handle(self, *args, **options):
        room_code = options['room_code'].strip().upper()
        players = options['players']
        if players < 1:
            raise CommandError('--players must be at least 1.')

        room_status = get_room_status(room_code)
        if not room_status.available:
            reason = 'all winner slots are taken' if room_status.too_late else 'room not found or inactive'
            raise CommandError(f'Room {room_code} cannot be played: {reason}.')

        # every simulated player answers with the expected text, in a sloppy case
        answers = [f'  {q.correct_answer.upper()} ' for q in room_status.questions]
        if not all(is_answer_correct(a, q.correct_answer) for a, q in zip(answers, room_status.questions)):
            raise CommandError('Generated answers do not match the questions.')

        sessions = []
        refused = 0
        for _ in range(players):
            identity = VisitorIdentity()
            session_id = identity.new_session_id(room_code)
            result = join_room(room_code, session_id, identity.visitor_id)
            if result.accepted:
                sessions.append((identity, session_id))
            else:
                refused += 1

        def finish(entry):
            identity, session_id = entry
            try:
                result = complete_quiz(session_id, room_code)
                if result.accepted:
                    identity.mark_completed(room_code)
                return result.outcome
            finally:
                close_old_connections()

        with ThreadPoolExecutor(max_workers=max(1, options['workers'])) as pool:
            outcomes = list(pool.map(finish, sessions))

        winners = outcomes.count(AdmissionOutcome.ACCEPTED)
        too_late = outcomes.count(AdmissionOutcome.FULL)
        capacity = room_status.room.max_participants
        already = room_status.completed_count

        self.stdout.write(f'Room {room_code}: capacity {capacity}, {already} slot(s) claimed before the rush.')
        self.stdout.write(f'Joined: {len(sessions)}, refused at join: {refused}.')
        self.stdout.write(f'Winners: {winners}, too late: {too_late}.')
        if already + winners > capacity:
            raise CommandError('Capacity exceeded: more winners than winner slots.')
        self.stdout.write(self.style.SUCCESS('Capacity respected.'))
