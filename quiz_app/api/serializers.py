from rest_framework import serializers # DRF serializers base
from quiz_app.models import Room, Question, Participant # import our ORM models
from quiz_app.services import registry


class QuestionSerializer(serializers.ModelSerializer):
    """
    Read-only nested serializer for returning question data to administrators.
    """
    class Meta:
        model = Question # bind to Question model
        fields = (
        'id', 'question_text', 'correct_answer', 'hint', 'order_index', 'created_at'
        ) # exact response contract
        read_only_fields = fields # ensure nested output only


class ParticipantSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for the participant ledger of a room.
    """
    is_completed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Participant
        fields = ('id', 'session_id', 'visitor_id', 'joined_at', 'completed_at', 'is_completed')
        read_only_fields = fields


class RoomSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for a room including nested questions and slot counters.
    """
    questions = QuestionSerializer(many=True, read_only=True) # include nested questions
    total_participants = serializers.SerializerMethodField()
    completed_participants = serializers.SerializerMethodField()
    slots_remaining = serializers.SerializerMethodField()

    class Meta:
        model = Room # bind to Room model
        fields = (
        'id', 'room_code', 'title', 'prize', 'start_time', 'duration_minutes',
        'max_participants', 'redirect_link', 'is_active', 'created_at', 'updated_at',
        'total_participants', 'completed_participants', 'slots_remaining', 'questions',
        ) # admin response contract
        read_only_fields = fields # output-only

    def get_total_participants(self, obj: Room) -> int:
        """Uses the with_stats() annotation when present, else counts."""
        annotated = getattr(obj, 'total_participants', None)
        return annotated if annotated is not None else obj.participants.count()

    def get_completed_participants(self, obj: Room) -> int:
        annotated = getattr(obj, 'completed_participants', None)
        return annotated if annotated is not None else obj.completed_count()

    def get_slots_remaining(self, obj: Room) -> int:
        return obj.slots_remaining(self.get_completed_participants(obj))


class QuestionInputSerializer(serializers.Serializer):
    """
    Write-only shape of one question inside a room payload.
    The position in the submitted list becomes its order_index.
    """
    question_text = serializers.CharField(max_length=5000, trim_whitespace=True) # prompt text
    correct_answer = serializers.CharField(max_length=500, trim_whitespace=True) # expected answer
    hint = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')


class RoomWriteSerializer(serializers.ModelSerializer):
    """
    Serializer used to create and update rooms.

    Rules:
      - 'questions' is required on create and must not be empty.
      - On update, omitting 'questions' keeps the current set; sending a list
        replaces the whole set (an empty list is rejected).
      - 'room_code' is generated server-side and never writable.
      - Unknown fields are rejected.
    """
    questions = QuestionInputSerializer(many=True, required=False)

    class Meta:
        model = Room
        fields = (
            'title', 'prize', 'start_time', 'duration_minutes',
            'max_participants', 'redirect_link', 'is_active', 'questions',
        )
        extra_kwargs = {
            'max_participants': {'min_value': 1},
            'duration_minutes': {'min_value': 1},
        }

    def validate(self, attrs):
        """Reject fields that are not part of the writable contract."""
        unknown = set(getattr(self, 'initial_data', {}) or {}) - set(self.fields)
        if unknown:
            raise serializers.ValidationError(
                {field: 'This field is not allowed.' for field in sorted(unknown)}
            )
        if self.instance is None and not attrs.get('questions'):
            raise serializers.ValidationError({'questions': 'A room needs at least one question.'})
        if 'questions' in attrs and not attrs['questions']:
            raise serializers.ValidationError({'questions': 'The question list must not be empty.'})
        return attrs

    def validate_title(self, value: str) -> str:
        """Titles must not be blank once trimmed."""
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Title must not be empty.')
        return value

    def create(self, validated_data):
        questions = validated_data.pop('questions')
        return registry.create_room(validated_data, questions)

    def update(self, instance, validated_data):
        questions = validated_data.pop('questions', None)
        return registry.update_room(instance, validated_data, questions)


class PublicQuestionSerializer(serializers.ModelSerializer):
    """
    Question as served to players. Answers and hints are included on purpose:
    answers are checked in the browser without a round trip.
    """
    class Meta:
        model = Question
        fields = ('id', 'order_index', 'question_text', 'correct_answer', 'hint')
        read_only_fields = fields


class JoinSerializer(serializers.Serializer):
    """Input for POST /api/quiz/join/"""
    session_id = serializers.CharField(max_length=255) # per-browser attempt id
    room_code = serializers.CharField(max_length=16, required=False, allow_blank=True) # empty → legacy room
    visitor_id = serializers.CharField(max_length=255, required=False, allow_blank=True)


class CompleteSerializer(serializers.Serializer):
    """Input for POST /api/quiz/complete/"""
    session_id = serializers.CharField(max_length=255)
    room_code = serializers.CharField(max_length=16, required=False, allow_blank=True)


def room_status_payload(room_status) -> dict:
    """Builds the public JSON body for a RoomStatus."""
    if not room_status.available:
        body = {'available': False}
        if room_status.too_late:
            body['too_late'] = True
            body['detail'] = 'Too late! All winner slots are already taken.'
        else:
            body['detail'] = 'Room not found.'
        return body

    room = room_status.room
    ends_at = room_status.ends_at
    return {
        'available': True,
        'room': {
            'id': room.id,
            'room_code': room.room_code,
            'title': room.title,
            'prize': room.prize,
            'start_time': serializers.DateTimeField().to_representation(room.start_time) if room.start_time else None,
            'ends_at': serializers.DateTimeField().to_representation(ends_at) if ends_at else None,
            'has_started': room_status.has_started,
            'duration_minutes': room.duration_minutes,
            'max_participants': room.max_participants,
            'completed_participants': room_status.completed_count,
            'slots_remaining': room_status.slots_remaining,
            'redirect_link': room.redirect_link,
        },
        'questions': PublicQuestionSerializer(room_status.questions, many=True).data,
    }
