from rest_framework.views import APIView # DRF base class
from rest_framework.response import Response # HTTP responses
from rest_framework import status # HTTP codes
from rest_framework.exceptions import NotFound
from rest_framework.generics import ListCreateAPIView, RetrieveUpdateDestroyAPIView, ListAPIView # generic views
from rest_framework.permissions import AllowAny
from core.utils.exceptions import RoomFull
from core.utils.permissions import IsAdministrator # gate by staff account
from quiz_app.api.serializers import (
    CompleteSerializer, JoinSerializer, ParticipantSerializer, RoomSerializer,
    RoomWriteSerializer, room_status_payload,
)
from quiz_app.models import Participant, Room # ORM models
from quiz_app.services import registry
from quiz_app.services.admission import AdmissionOutcome, complete_quiz, join_room
from quiz_app.services.status import get_room_status


class RoomListCreateView(ListCreateAPIView):
    """
    GET  /api/quizzes/  → all rooms, newest first, with slot counters and questions.
    POST /api/quizzes/  → create a room with its full question list.
    Authentication:
      - JWT via HttpOnly cookie, staff accounts only.
    Responses:
      - 200/201: Room(s).
      - 400: Invalid payload (e.g. no questions).
      - 401: Not authenticated.
      - 403: Not an administrator.
    """
    permission_classes = [IsAdministrator]  # organizers only

    def get_queryset(self):
        """Rooms annotated with participant totals (see RoomQuerySet.with_stats)."""
        return Room.objects.with_stats().prefetch_related('questions')

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return RoomWriteSerializer
        return RoomSerializer

    def create(self, request, *args, **kwargs):
        serializer = RoomWriteSerializer(data=request.data)  # parse input
        serializer.is_valid(raise_exception=True)  # 400 on invalid payload
        room = serializer.save()  # room + questions in one transaction
        return Response(RoomSerializer(room).data, status=status.HTTP_201_CREATED)


class RoomDetailView(RetrieveUpdateDestroyAPIView):
    """
    GET    /api/quizzes/{id}/ → room with questions, participants and completed count.
    PUT    /api/quizzes/{id}/ → update provided fields; 'questions' replaces the set.
    PATCH  /api/quizzes/{id}/ → same as PUT.
    DELETE /api/quizzes/{id}/ → delete room, its questions and participants (204).
    """
    permission_classes = [IsAdministrator]
    serializer_class = RoomSerializer

    def get_object(self):
        """Looks the room up by primary key, 404 when missing."""
        room_id = self.kwargs.get('pk')  # room id from URL
        try:
            return Room.objects.prefetch_related('questions').get(pk=room_id)
        except Room.DoesNotExist:
            raise NotFound('Room not found.')

    def retrieve(self, request, *args, **kwargs):
        room = self.get_object()
        data = RoomSerializer(room).data
        data['participants'] = ParticipantSerializer(room.participants.all(), many=True).data
        data['completed_count'] = data['completed_participants']
        return Response(data, status=status.HTTP_200_OK)

    def update(self, request, *args, **kwargs):
        """Both PUT and PATCH only touch the fields that were sent."""
        room = self.get_object()
        serializer = RoomWriteSerializer(instance=room, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        room.refresh_from_db()  # serialize the latest state (timestamps updated)
        return Response(RoomSerializer(room).data, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        registry.delete_room(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)


class RoomParticipantsView(ListAPIView):
    """
    GET /api/quizzes/{id}/participants/
    Returns the participant ledger of a room, most recent joins first.
    """
    permission_classes = [IsAdministrator]
    serializer_class = ParticipantSerializer

    def get_queryset(self):
        room_id = self.kwargs.get('pk')
        if not Room.objects.filter(pk=room_id).exists():
            raise NotFound('Room not found.')
        return Participant.objects.filter(room_id=room_id)


class RoomStatusView(APIView):
    """
    GET /api/room/{room_code}/
    Public room lookup. Always answers 200; 'available' tells whether the
    room can be played and 'too_late' whether its winner slots are gone.
    """
    authentication_classes = []  # public endpoint, ignore stale admin cookies
    permission_classes = [AllowAny]

    def get(self, request, room_code=None):
        return Response(room_status_payload(get_room_status(room_code)), status=status.HTTP_200_OK)


class PublicQuizView(RoomStatusView):
    """
    GET /api/quiz/public/
    Single-room entry point: resolves to the newest active room.
    """

    def get(self, request):
        return super().get(request, room_code=None)


class JoinRoomView(APIView):
    """
    POST /api/quiz/join/
    Body: {'session_id': str, 'room_code': str (optional), 'visitor_id': str (optional)}
    Responses:
      - 200: {'success': true}, also when the session was already registered.
      - 404: No active room for the code.
      - 409: {'too_late': true}, all winner slots are taken.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = JoinSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = join_room(data.get('room_code') or None, data['session_id'], data.get('visitor_id', ''))

        if result.outcome is AdmissionOutcome.NOT_FOUND:
            raise NotFound('No active quiz for this room.')
        if result.outcome is AdmissionOutcome.FULL:
            raise RoomFull()
        detail = 'Joined the room.' if result.created else 'Already registered.'
        return Response({'success': True, 'detail': detail}, status=status.HTTP_200_OK)


class CompleteQuizView(APIView):
    """
    POST /api/quiz/complete/
    Body: {'session_id': str, 'room_code': str (optional)}
    Responses:
      - 200: {'success': true, 'redirect_link': str}; repeat calls stay 200.
      - 404: Unknown session.
      - 409: {'too_late': true}, the last slot was claimed by someone else.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = CompleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = complete_quiz(data['session_id'], data.get('room_code') or None)

        if result.outcome is AdmissionOutcome.NOT_FOUND:
            raise NotFound('Participant not found.')
        if result.outcome is AdmissionOutcome.FULL:
            raise RoomFull()
        return Response(
            {'success': True, 'redirect_link': result.participant.room.redirect_link},
            status=status.HTTP_200_OK,
        )
