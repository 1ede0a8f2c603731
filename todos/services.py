# todos/services.py
import logging

from django.contrib.auth import get_user_model
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from notifications.apps import get_gateway
from teams.models import Team
from .models import Todo
from .serializers import TodoSerializer

User = get_user_model()

logger = logging.getLogger(__name__)

VALID_STATUSES = {choice for choice, _ in Todo.STATUS_CHOICES}


def validate_status(status):
    if status not in VALID_STATUSES:
        raise ValidationError({'status': [f'"{status}" is not a valid choice.']})
    return status


class TodosService:
    """
    Todo persistence, the creator/assignee/member rules, and the events each
    change publishes.
    """

    def __init__(self, gateway=None, teams_service=None):
        self.gateway = gateway or get_gateway()
        if teams_service is None:
            from teams.services import TeamsService
            teams_service = TeamsService(gateway=self.gateway)
        self.teams_service = teams_service

    def _queryset(self):
        return Todo.objects.select_related('assignee', 'team', 'created_by')

    def _for_user(self, user):
        return self._queryset().filter(Q(created_by=user) | Q(assignee=user))

    @staticmethod
    def _ensure_user_exists(user_id):
        if user_id is not None and not User.objects.filter(pk=user_id).exists():
            raise NotFound('User not found')

    @staticmethod
    def _ensure_team_exists(team_id):
        if team_id is not None and not Team.objects.filter(pk=team_id).exists():
            raise NotFound('Team not found')

    @staticmethod
    def _other_party(todo, user):
        """Creator if the caller is the assignee, assignee otherwise; None when that is the caller."""
        if str(todo.created_by_id) == str(user.pk):
            other = todo.assignee_id
        else:
            other = todo.created_by_id
        if other is None or str(other) == str(user.pk):
            return None
        return other

    def create(self, data, user):
        team_id = data.get('team_id')
        if team_id and not self.teams_service.is_user_team_member(team_id, user.pk):
            logger.info("User %s denied creating a todo in team %s", user.pk, team_id)
            raise PermissionDenied('You are not a member of this team')

        self._ensure_user_exists(data.get('assignee_id'))

        todo = Todo.objects.create(created_by=user, **data)
        todo = self.find_by_id(todo.pk)
        payload = TodoSerializer(todo).data

        if todo.team_id:
            self.gateway.emit_todo_created(todo.team_id, payload)

        if todo.assignee_id and str(todo.assignee_id) != str(user.pk):
            self.gateway.notify_user(
                todo.assignee_id,
                'todo_created',
                'New Task Created',
                f'A new task has been created and assigned to you: {todo.title}',
                payload,
            )
        return todo

    def find_all(self):
        return self._queryset().all()

    def find_by_id(self, todo_id):
        todo = self._queryset().filter(pk=todo_id).first()
        if todo is None:
            raise NotFound('Todo not found')
        return todo

    def find_my_todos(self, user):
        return list(self._for_user(user))

    def find_by_team(self, team_id, user):
        team = self.teams_service.find_by_id(team_id)
        if not team.is_member(user.pk):
            raise PermissionDenied('You are not a member of this team')
        return list(self._queryset().filter(team=team))

    def update(self, todo_id, data, user):
        todo = self.find_by_id(todo_id)

        if not todo.can_be_modified_by(user.pk):
            raise PermissionDenied('You can only update your own todos or assigned todos')

        if 'assignee_id' in data:
            self._ensure_user_exists(data['assignee_id'])
        if 'team_id' in data:
            self._ensure_team_exists(data['team_id'])

        for attr, value in data.items():
            setattr(todo, attr, value)
        todo.save()

        todo = self.find_by_id(todo_id)
        payload = TodoSerializer(todo).data

        if todo.team_id:
            self.gateway.emit_todo_updated(todo.team_id, payload)

        other_user_id = self._other_party(todo, user)
        if other_user_id:
            self.gateway.notify_user(
                other_user_id,
                'todo_updated',
                'Task Updated',
                f'Task "{todo.title}" has been updated',
                payload,
            )
        return todo

    def delete(self, todo_id, user):
        todo = self.find_by_id(todo_id)

        if str(todo.created_by_id) != str(user.pk):
            raise PermissionDenied('You can only delete your own todos')

        team_id = todo.team_id
        todo.delete()

        if team_id:
            self.gateway.emit_todo_deleted(team_id, todo_id)

    def assign_todo(self, todo_id, assignee_id, user):
        todo = self.find_by_id(todo_id)

        if str(todo.created_by_id) != str(user.pk):
            raise PermissionDenied('You can only assign todos you created')

        self._ensure_user_exists(assignee_id)

        todo.assignee_id = assignee_id
        todo.save(update_fields=['assignee', 'updated_at'])

        todo = self.find_by_id(todo_id)
        payload = TodoSerializer(todo).data

        if todo.team_id:
            self.gateway.emit_todo_assigned(todo.team_id, payload)

        self.gateway.notify_user(
            assignee_id,
            'todo_assigned',
            'Task Assigned',
            f'You have been assigned to task: {todo.title}',
            payload,
        )
        return todo

    def update_status(self, todo_id, status, user):
        validate_status(status)
        todo = self.find_by_id(todo_id)

        if not todo.can_be_modified_by(user.pk):
            raise PermissionDenied('You can only update status of your own todos or assigned todos')

        todo.status = status
        todo.save(update_fields=['status', 'updated_at'])

        todo = self.find_by_id(todo_id)
        payload = TodoSerializer(todo).data

        if todo.team_id:
            self.gateway.emit_todo_status_changed(todo.team_id, payload)

        other_user_id = self._other_party(todo, user)
        if other_user_id:
            self.gateway.notify_user(
                other_user_id,
                'todo_status_changed',
                'Task Status Changed',
                f'Task "{todo.title}" status changed to {status}',
                payload,
            )
        return todo

    def get_todos_by_status(self, status, user):
        validate_status(status)
        return list(self._for_user(user).filter(status=status))

    def get_overdue_todos(self, user):
        return list(
            self._for_user(user)
            .filter(due_date__lt=timezone.now())
            .exclude(status=Todo.COMPLETED)
        )
