from django.contrib import admin
from django.utils.html import format_html_join

from .models import Room, Participant
from .services import registry

# fields an administrator may edit on an existing room
ROOM_ADMIN_FIELDS = (
    'title', 'prize', 'start_time', 'duration_minutes',
    'max_participants', 'redirect_link', 'is_active',
)


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    """
    Admin config for Room to surface code, capacity and activity at a glance.

    Rooms and their question sets are created through the API, which assigns
    the room code and validates the questions. Here existing rooms can be
    edited and deleted; both go through the room registry.
    """
    list_display = ('id', 'room_code', 'title', 'max_participants', 'is_active', 'created_at')  # show key columns
    search_fields = ('room_code', 'title', 'prize')
    list_filter = ('is_active', 'created_at')
    fields = ('id', 'room_code') + ROOM_ADMIN_FIELDS + ('question_list', 'created_at', 'updated_at')
    readonly_fields = ('id', 'room_code', 'question_list', 'created_at', 'updated_at')

    @admin.display(description='Questions')
    def question_list(self, obj):
        if obj is None or obj.pk is None:
            return '-'
        return format_html_join(
            '', '<div>{}. {} &rarr; {}</div>',
            ((q.order_index + 1, q.question_text, q.correct_answer) for q in obj.questions.all()),
        ) or '-'

    def has_add_permission(self, request):
        return False

    def save_model(self, request, obj, form, change):
        registry.update_room(obj, {name: form.cleaned_data[name] for name in form.changed_data})

    def get_deleted_objects(self, objs, request):
        # participants are removed with their room even though they cannot be deleted one by one
        deleted, model_count, perms_needed, protected = super().get_deleted_objects(objs, request)
        perms_needed.discard(Participant._meta.verbose_name)
        return deleted, model_count, perms_needed, protected

    def delete_model(self, request, obj):
        registry.delete_room(obj)

    def delete_queryset(self, request, queryset):
        for room in queryset:
            registry.delete_room(room)


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    """
    Read-only view of who claimed which winner slot.

    The ledger is written by the admission controller only and removed with
    its room, so rows cannot be added, edited or deleted here.
    """
    list_display = ('id', 'room', 'session_id', 'joined_at', 'completed_at')
    search_fields = ('session_id', 'visitor_id', 'room__room_code')
    list_filter = ('room',)
    readonly_fields = ('id', 'room', 'session_id', 'visitor_id', 'joined_at', 'completed_at')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
