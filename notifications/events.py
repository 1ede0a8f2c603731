# notifications/events.py
from django.utils import timezone

TODO_CREATED = 'todo:created'
TODO_UPDATED = 'todo:updated'
TODO_DELETED = 'todo:deleted'
TODO_ASSIGNED = 'todo:assigned'
TODO_STATUS_CHANGED = 'todo:status_changed'

TEAM_UPDATED = 'team:updated'
TEAM_MEMBER_ADDED = 'team:member_added'
TEAM_MEMBER_REMOVED = 'team:member_removed'

NOTIFICATION_RECEIVED = 'notification:received'

# Client -> server
AUTHENTICATE = 'authenticate'
JOIN_TEAM = 'join-team'
LEAVE_TEAM = 'leave-team'


def team_room(team_id):
    return f"team-{team_id}"


def build_notification(notification_type, title, message, data=None):
    return {
        "type": notification_type,
        "title": title,
        "message": message,
        "data": data,
        "timestamp": timezone.now().isoformat(),
    }
