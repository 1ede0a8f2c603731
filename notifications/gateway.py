# notifications/gateway.py
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from . import events

logger = logging.getLogger(__name__)

BROADCAST_MESSAGE_TYPE = 'broadcast.event'


class TodoEventsGateway:
    """
    Fire-and-forget publisher of domain events to WebSocket clients.

    Team-scoped events go to the ``team-<id>`` group, user-scoped events go to
    the single channel recorded for that user in the registry. Nothing here
    raises to the caller: unknown users are skipped and channel layer errors
    are logged and dropped.
    """

    def __init__(self, registry, channel_layer=None):
        self.registry = registry
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer()
        return self._channel_layer

    # Connection bookkeeping (called by the consumer)

    def handle_authenticate(self, channel_name, user_id):
        # user_id is whatever the client claims; it is not checked against a session
        self.registry.set(user_id, channel_name)
        logger.info("User authenticated: %s", user_id)

    def handle_disconnect(self, channel_name):
        user_id = self.registry.remove_channel(channel_name)
        if user_id is not None:
            logger.info("User disconnected: %s", user_id)
        return user_id

    # Low level delivery

    @staticmethod
    def _message(event, data):
        return {'type': BROADCAST_MESSAGE_TYPE, 'event': event, 'data': data}

    def broadcast_to_team(self, team_id, event, data):
        room = events.team_room(team_id)
        try:
            async_to_sync(self.channel_layer.group_send)(room, self._message(event, data))
            logger.debug("Broadcast %s to %s", event, room)
        except Exception as e:
            logger.warning("Failed to broadcast %s to %s: %s", event, room, e)

    def emit_to_user(self, user_id, event, data):
        if user_id is None:
            return
        channel_name = self.registry.get(user_id)
        if not channel_name:
            logger.debug("User %s not connected, cannot emit %s", user_id, event)
            return
        try:
            async_to_sync(self.channel_layer.send)(channel_name, self._message(event, data))
            logger.debug("Emitted %s to user %s", event, user_id)
        except Exception as e:
            logger.warning("Failed to emit %s to user %s: %s", event, user_id, e)

    def notify_user(self, user_id, notification_type, title, message, data=None):
        self.emit_to_user(
            user_id,
            events.NOTIFICATION_RECEIVED,
            events.build_notification(notification_type, title, message, data),
        )

    # Todo events

    def emit_todo_created(self, team_id, todo):
        self.broadcast_to_team(team_id, events.TODO_CREATED, todo)

    def emit_todo_updated(self, team_id, todo):
        self.broadcast_to_team(team_id, events.TODO_UPDATED, todo)

    def emit_todo_deleted(self, team_id, todo_id):
        self.broadcast_to_team(team_id, events.TODO_DELETED, {'id': str(todo_id)})

    def emit_todo_assigned(self, team_id, todo):
        self.broadcast_to_team(team_id, events.TODO_ASSIGNED, todo)

    def emit_todo_status_changed(self, team_id, todo):
        self.broadcast_to_team(team_id, events.TODO_STATUS_CHANGED, todo)

    # Team events

    def emit_team_updated(self, team_id, team):
        self.broadcast_to_team(team_id, events.TEAM_UPDATED, team)

    def emit_member_added(self, team_id, data):
        self.broadcast_to_team(team_id, events.TEAM_MEMBER_ADDED, data)

    def emit_member_removed(self, team_id, member_id):
        self.broadcast_to_team(team_id, events.TEAM_MEMBER_REMOVED, {'id': str(member_id)})
