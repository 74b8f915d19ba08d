from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Count, Q


class RoomQuerySet(models.QuerySet):
    """Query helpers shared by the admin listing and the public room lookup."""

    def active(self):
        return self.filter(is_active=True)

    def with_stats(self):
        """Annotate participant totals so listings avoid one query per room."""
        return self.annotate(
            total_participants=Count('participants', distinct=True),
            completed_participants=Count(
                'participants',
                filter=Q(participants__completed_at__isnull=False),
                distinct=True,
            ),
        )


class Room(models.Model):
    """
    A giveaway quiz room that participants reach through its shareable code.

    Fields:
    - room_code: Six-character public code (unique).
    - title / prize: Display texts for the room.
    - start_time: Optional scheduled start; None means "open immediately".
    - duration_minutes: Length of the play window once started.
    - max_participants: Number of winner slots, i.e. completions admitted.
    - redirect_link: Prize URL handed to winners.
    - is_active: Only active rooms can be fetched or joined.
    - created_at/updated_at: Timestamps managed by Django.
    """
    room_code = models.CharField(max_length=16, unique=True)  # shareable code
    title = models.CharField(max_length=255, default='Quiz')
    prize = models.CharField(max_length=255, blank=True, default='Prize')
    start_time = models.DateTimeField(null=True, blank=True)
    duration_minutes = models.PositiveIntegerField(default=5, validators=[MinValueValidator(1)])
    max_participants = models.PositiveIntegerField(default=10, validators=[MinValueValidator(1)])
    redirect_link = models.URLField(max_length=500, default='https://example.com')
    is_active = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)  # set on first save
    updated_at = models.DateTimeField(auto_now=True)  # updated on each save

    objects = RoomQuerySet.as_manager()

    class Meta:
        """Winner capacity must admit at least one completion."""
        constraints = [
            models.CheckConstraint(
                condition=Q(max_participants__gte=1),
                name='ck_room_max_participants_positive',
            ),
        ]
        ordering = ['-created_at', '-id']  # newest first

    def __str__(self) -> str:
        """Return readable representation with id, code and title."""
        return f'Room({self.id}) [{self.room_code}]: {self.title}'

    def completed_count(self) -> int:
        """Number of participants that claimed a winner slot."""
        return self.participants.filter(completed_at__isnull=False).count()

    def slots_remaining(self, completed=None) -> int:
        if completed is None:
            completed = self.completed_count()
        return max(0, self.max_participants - completed)

    def is_full(self, completed=None) -> bool:
        if completed is None:
            completed = self.completed_count()
        return completed >= self.max_participants


class Question(models.Model):
    """
    One step of a room's quiz.

    Answers are compared case-insensitively after trimming whitespace, see
    quiz_app.services.answers. The whole set is replaced when a room is saved.
    """
    room = models.ForeignKey(
        'Room', on_delete=models.CASCADE, related_name='questions'
    )
    question_text = models.TextField()
    correct_answer = models.CharField(max_length=500)
    hint = models.TextField(blank=True, default='')
    order_index = models.PositiveIntegerField(default=0)  # zero-based position
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['room', 'order_index'],
                name='uq_question_room_order_index',
            )
        ]
        ordering = ['order_index']

    def __str__(self) -> str:
        return f'Question({self.id}) #{self.order_index} for Room({self.room_id})'


class Participant(models.Model):
    """
    One play-through of a room by a browser session.

    completed_at is written once, by the admission controller, when the
    participant claims a winner slot. It is never cleared afterwards.
    """
    room = models.ForeignKey(
        'Room', on_delete=models.CASCADE, related_name='participants'
    )
    session_id = models.CharField(max_length=255, db_index=True)
    visitor_id = models.CharField(max_length=255, blank=True, default='')
    joined_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(  # join is idempotent per (room, session)
                fields=['room', 'session_id'],
                name='uq_participant_room_session',
            )
        ]
        ordering = ['-joined_at', '-id']

    def __str__(self) -> str:
        state = 'completed' if self.completed_at else 'playing'
        return f'Participant({self.id}) in Room({self.room_id}): {state}'

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None
