from django.urls import path
from quiz_app.api.views import (
    CompleteQuizView, JoinRoomView, PublicQuizView, RoomDetailView,
    RoomListCreateView, RoomParticipantsView, RoomStatusView,
)


urlpatterns = [
    path('quizzes/', RoomListCreateView.as_view(), name='room-list'),
    path('quizzes/<int:pk>/', RoomDetailView.as_view(), name='room-detail'),
    path('quizzes/<int:pk>/participants/', RoomParticipantsView.as_view(), name='room-participants'),
    path('room/<str:room_code>/', RoomStatusView.as_view(), name='room-status'),
    path('quiz/public/', PublicQuizView.as_view(), name='quiz-public'),
    path('quiz/join/', JoinRoomView.as_view(), name='quiz-join'),
    path('quiz/complete/', CompleteQuizView.as_view(), name='quiz-complete'),
]
