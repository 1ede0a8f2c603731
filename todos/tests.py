from datetime import timedelta
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.test import APITestCase

from teams.models import Team
from teams.services import TeamsService
from .models import Todo
from .services import TodosService

User = get_user_model()


def make_user(email, first_name='Test'):
    return User.objects.create_user(email=email, first_name=first_name, last_name='User', password='testpass123')


class TodoModelTest(TestCase):
    def setUp(self):
        self.user = make_user('test@example.com')

    def test_defaults(self):
        todo = Todo.objects.create(title='Complete project', created_by=self.user)
        self.assertEqual(todo.status, Todo.PENDING)
        self.assertEqual(todo.priority, Todo.MEDIUM)
        self.assertIsNone(todo.due_date)
        self.assertTrue(todo.is_personal)

    def test_is_overdue(self):
        past = timezone.now() - timedelta(days=1)
        todo = Todo.objects.create(title='Late', due_date=past, created_by=self.user)
        self.assertTrue(todo.is_overdue)
        todo.status = Todo.COMPLETED
        self.assertFalse(todo.is_overdue)

    def test_assignee_nulled_when_user_deleted(self):
        assignee = make_user('assignee@example.com')
        todo = Todo.objects.create(title='Shared', created_by=self.user, assignee=assignee)
        assignee.delete()
        todo.refresh_from_db()
        self.assertIsNone(todo.assignee_id)


class TodosServiceTest(TestCase):
    def setUp(self):
        self.gateway = mock.Mock()
        self.teams_service = TeamsService(gateway=self.gateway)
        self.service = TodosService(gateway=self.gateway, teams_service=self.teams_service)

        self.creator = make_user('creator@example.com', 'Sam')
        self.assignee = make_user('assignee@example.com', 'John')
        self.stranger = make_user('stranger@example.com', 'Bob')

        self.team = self.teams_service.create({'name': 'Development Team'}, self.creator)
        self.team.members.add(self.assignee)
        self.gateway.reset_mock()

    def _team_todo(self, **extra):
        data = {'title': 'Implement authentication', 'team_id': self.team.pk, 'assignee_id': self.assignee.pk}
        data.update(extra)
        todo = self.service.create(data, self.creator)
        self.gateway.reset_mock()
        return todo

    def test_create_team_todo_broadcasts_and_notifies_assignee(self):
        todo = self.service.create(
            {'title': 'Setup project', 'team_id': self.team.pk, 'assignee_id': self.assignee.pk},
            self.creator,
        )
        self.assertEqual(todo.created_by, self.creator)

        self.gateway.emit_todo_created.assert_called_once()
        team_id, payload = self.gateway.emit_todo_created.call_args[0]
        self.assertEqual(team_id, self.team.pk)
        self.assertEqual(payload['title'], 'Setup project')
        self.assertEqual(payload['assignee']['email'], 'assignee@example.com')

        args = self.gateway.notify_user.call_args[0]
        self.assertEqual(args[0], self.assignee.pk)
        self.assertEqual(args[1], 'todo_created')

    def test_create_personal_todo_is_not_broadcast(self):
        todo = self.service.create({'title': 'Buy milk'}, self.creator)
        self.assertTrue(todo.is_personal)
        self.gateway.emit_todo_created.assert_not_called()
        self.gateway.notify_user.assert_not_called()

    def test_self_assigned_todo_does_not_notify(self):
        self.service.create({'title': 'Mine', 'assignee_id': self.creator.pk}, self.creator)
        self.gateway.notify_user.assert_not_called()

    def test_create_in_foreign_team_forbidden(self):
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.create({'title': 'Sneaky', 'team_id': self.team.pk}, self.stranger)
        self.assertEqual(str(ctx.exception.detail), 'You are not a member of this team')
        self.assertFalse(Todo.objects.exists())

    def test_create_in_missing_team(self):
        with self.assertRaises(NotFound):
            self.service.create({'title': 'Lost', 'team_id': '00000000-0000-0000-0000-000000000000'}, self.creator)

    def test_update_by_assignee_notifies_creator(self):
        todo = self._team_todo()
        updated = self.service.update(todo.pk, {'title': 'Implement JWT auth'}, self.assignee)
        self.assertEqual(updated.title, 'Implement JWT auth')
        self.gateway.emit_todo_updated.assert_called_once()
        args = self.gateway.notify_user.call_args[0]
        self.assertEqual(args[0], self.creator.pk)
        self.assertEqual(args[3], 'Task "Implement JWT auth" has been updated')

    def test_update_by_stranger_forbidden(self):
        todo = self._team_todo()
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.update(todo.pk, {'title': 'Mine now'}, self.stranger)
        self.assertEqual(str(ctx.exception.detail), 'You can only update your own todos or assigned todos')

    def test_delete_only_by_creator(self):
        todo = self._team_todo()
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.delete(todo.pk, self.assignee)
        self.assertEqual(str(ctx.exception.detail), 'You can only delete your own todos')

        self.service.delete(todo.pk, self.creator)
        self.assertFalse(Todo.objects.filter(pk=todo.pk).exists())
        self.gateway.emit_todo_deleted.assert_called_once_with(self.team.pk, todo.pk)

    def test_assign_only_by_creator(self):
        todo = self._team_todo(assignee_id=None)
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.assign_todo(todo.pk, self.stranger.pk, self.assignee)
        self.assertEqual(str(ctx.exception.detail), 'You can only assign todos you created')

        assigned = self.service.assign_todo(todo.pk, self.assignee.pk, self.creator)
        self.assertEqual(assigned.assignee, self.assignee)
        self.gateway.emit_todo_assigned.assert_called_once()
        self.assertEqual(self.gateway.notify_user.call_args[0][1], 'todo_assigned')

    def test_assign_to_unknown_user(self):
        todo = self._team_todo()
        with self.assertRaises(NotFound):
            self.service.assign_todo(todo.pk, '00000000-0000-0000-0000-000000000000', self.creator)

    def test_update_status(self):
        todo = self._team_todo()
        updated = self.service.update_status(todo.pk, Todo.IN_PROGRESS, self.assignee)
        self.assertEqual(updated.status, Todo.IN_PROGRESS)
        self.gateway.emit_todo_status_changed.assert_called_once()
        args = self.gateway.notify_user.call_args[0]
        self.assertEqual(args[0], self.creator.pk)
        self.assertEqual(args[3], 'Task "Implement authentication" status changed to in_progress')

    def test_update_status_invalid_value(self):
        todo = self._team_todo()
        with self.assertRaises(ValidationError):
            self.service.update_status(todo.pk, 'done', self.creator)

    def test_update_status_by_stranger_forbidden(self):
        todo = self._team_todo()
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.update_status(todo.pk, Todo.COMPLETED, self.stranger)
        self.assertEqual(
            str(ctx.exception.detail),
            'You can only update status of your own todos or assigned todos'
        )

    def test_find_my_todos(self):
        todo = self._team_todo()
        Todo.objects.create(title='Other', created_by=self.stranger)
        self.assertEqual(self.service.find_my_todos(self.assignee), [todo])
        self.assertEqual(self.service.find_my_todos(self.creator), [todo])

    def test_find_by_team_requires_membership(self):
        todo = self._team_todo()
        self.assertEqual(self.service.find_by_team(self.team.pk, self.assignee), [todo])
        with self.assertRaises(PermissionDenied):
            self.service.find_by_team(self.team.pk, self.stranger)

    def test_overdue_excludes_completed(self):
        past = timezone.now() - timedelta(days=2)
        late = Todo.objects.create(title='Late', due_date=past, created_by=self.creator)
        Todo.objects.create(title='Done', due_date=past, status=Todo.COMPLETED, created_by=self.creator)
        Todo.objects.create(title='Future', due_date=timezone.now() + timedelta(days=2), created_by=self.creator)
        Todo.objects.create(title='Undated', created_by=self.creator)
        self.assertEqual(self.service.get_overdue_todos(self.creator), [late])

    def test_todos_by_status(self):
        todo = self._team_todo()
        self.service.update_status(todo.pk, Todo.COMPLETED, self.creator)
        self.assertEqual(self.service.get_todos_by_status(Todo.COMPLETED, self.assignee), [todo])
        self.assertEqual(self.service.get_todos_by_status(Todo.PENDING, self.assignee), [])


class TodoViewsTest(APITestCase):
    def setUp(self):
        self.creator = make_user('creator@example.com', 'Sam')
        self.assignee = make_user('assignee@example.com', 'John')
        self.stranger = make_user('stranger@example.com', 'Bob')
        self.team = Team.objects.create(name='Development Team', owner=self.creator)
        self.team.members.add(self.creator, self.assignee)
        self.client.force_authenticate(user=self.creator)

    def _create(self, **extra):
        data = {'title': 'Write API documentation', 'teamId': str(self.team.id)}
        data.update(extra)
        return self.client.post('/api/todos/', data, format='json')

    def test_create_todo(self):
        response = self._create(priority='high', assigneeId=str(self.assignee.id))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['priority'], 'high')
        self.assertEqual(response.data['teamId'], str(self.team.id))
        self.assertEqual(response.data['createdBy']['email'], 'creator@example.com')

    def test_create_requires_title(self):
        response = self.client.post('/api/todos/', {'description': 'untitled'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('title', response.data)

    def test_create_rejects_unknown_priority(self):
        response = self._create(priority='critical')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('priority', response.data)

    def test_stranger_cannot_create_in_team(self):
        self.client.force_authenticate(user=self.stranger)
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['detail'], 'You are not a member of this team')

    def test_list_filters_by_status(self):
        self._create()
        Todo.objects.create(title='Finished', status=Todo.COMPLETED, created_by=self.creator)
        response = self.client.get('/api/todos/', {'status': 'completed'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['title'] for t in response.data], ['Finished'])

    def test_team_todos(self):
        self._create()
        response = self.client.get(f'/api/todos/team/{self.team.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

        self.client.force_authenticate(user=self.stranger)
        response = self.client.get(f'/api/todos/team/{self.team.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_my_todos_and_detail(self):
        todo_id = self._create(assigneeId=str(self.assignee.id)).data['id']
        self.client.force_authenticate(user=self.assignee)
        response = self.client.get('/api/todos/my-todos/')
        self.assertEqual([t['id'] for t in response.data], [todo_id])

        response = self.client.get(f'/api/todos/{todo_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['assigneeId'], str(self.assignee.id))

    def test_missing_todo(self):
        response = self.client.get('/api/todos/00000000-0000-0000-0000-000000000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['detail'], 'Todo not found')

    def test_update_and_delete(self):
        todo_id = self._create().data['id']
        response = self.client.put(f'/api/todos/{todo_id}/', {'priority': 'urgent'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['priority'], 'urgent')
        self.assertEqual(response.data['title'], 'Write API documentation')

        self.client.force_authenticate(user=self.stranger)
        response = self.client.delete(f'/api/todos/{todo_id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.creator)
        response = self.client.delete(f'/api/todos/{todo_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_assign(self):
        todo_id = self._create().data['id']
        response = self.client.put(f'/api/todos/{todo_id}/assign/{self.assignee.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['assignee']['email'], 'assignee@example.com')

    def test_status_change(self):
        todo_id = self._create(assigneeId=str(self.assignee.id)).data['id']
        self.client.force_authenticate(user=self.assignee)
        response = self.client.put(f'/api/todos/{todo_id}/status/in_progress/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'in_progress')

        response = self.client.put(f'/api/todos/{todo_id}/status/finished/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_by_status_and_overdue(self):
        past = timezone.now() - timedelta(days=1)
        late = self._create(dueDate=past.isoformat()).data['id']

        response = self.client.get('/api/todos/status/pending/')
        self.assertEqual([t['id'] for t in response.data], [late])

        response = self.client.get('/api/todos/overdue/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['id'] for t in response.data], [late])


class SeedCommandTest(TestCase):
    def test_seed_is_idempotent(self):
        call_command('seed', stdout=StringIO())
        call_command('seed', stdout=StringIO())

        self.assertEqual(User.objects.count(), 4)
        self.assertEqual(Team.objects.count(), 3)
        self.assertEqual(Todo.objects.count(), 5)

        dev_team = Team.objects.get(name='Development Team')
        self.assertEqual(
            set(dev_team.members.values_list('email', flat=True)),
            {'sam@example.com', 'john@example.com', 'jane@example.com'},
        )
        sam = User.objects.get(email='sam@example.com')
        self.assertTrue(sam.check_password('password123'))
