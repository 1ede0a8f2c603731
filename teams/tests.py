from unittest import mock

from django.test import TestCase
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.test import APITestCase

from todos.models import Todo
from .models import Team
from .services import TeamsService

User = get_user_model()


def make_user(email, first_name='Test'):
    return User.objects.create_user(email=email, first_name=first_name, last_name='User', password='testpass123')


class TeamModelTest(TestCase):
    def setUp(self):
        self.owner = make_user('owner@example.com')
        self.member = make_user('member@example.com')
        self.stranger = make_user('stranger@example.com')
        self.team = Team.objects.create(name='Development Team', owner=self.owner)
        self.team.members.add(self.member)

    def test_owner_is_implicit_member(self):
        # the owner was never added to members here
        self.assertFalse(self.team.members.filter(pk=self.owner.pk).exists())
        self.assertTrue(self.team.is_member(self.owner.pk))

    def test_membership(self):
        self.assertTrue(self.team.is_member(self.member.pk))
        self.assertTrue(self.team.is_member(str(self.member.pk)))
        self.assertFalse(self.team.is_member(self.stranger.pk))


class TeamsServiceTest(TestCase):
    def setUp(self):
        self.gateway = mock.Mock()
        self.service = TeamsService(gateway=self.gateway)
        self.owner = make_user('owner@example.com', 'Sam')
        self.member = make_user('member@example.com', 'John')
        self.stranger = make_user('stranger@example.com', 'Bob')
        self.team = self.service.create({'name': 'Development Team', 'description': 'Main team'}, self.owner)

    def test_create_adds_owner_to_members(self):
        self.assertEqual(self.team.owner_id, self.owner.pk)
        self.assertEqual(list(self.team.members.all()), [self.owner])

    def test_find_by_id_missing(self):
        with self.assertRaises(NotFound):
            self.service.find_by_id('00000000-0000-0000-0000-000000000000')

    def test_add_member_by_owner(self):
        team = self.service.add_member(self.team.pk, 'member@example.com', self.owner)
        self.assertTrue(team.members.filter(pk=self.member.pk).exists())

        self.gateway.emit_member_added.assert_called_once()
        team_id, data = self.gateway.emit_member_added.call_args[0]
        self.assertEqual(team_id, self.team.pk)
        self.assertEqual(data['member']['email'], 'member@example.com')
        self.assertEqual(data['addedBy'], str(self.owner.pk))

        self.gateway.notify_user.assert_called_once()
        args = self.gateway.notify_user.call_args[0]
        self.assertEqual(args[0], self.member.pk)
        self.assertEqual(args[1], 'team_member_added')
        self.assertEqual(args[3], 'You have been added to team: Development Team')

    def test_member_can_add_member(self):
        self.service.add_member(self.team.pk, 'member@example.com', self.owner)
        team = self.service.add_member(self.team.pk, 'stranger@example.com', self.member)
        self.assertTrue(team.members.filter(pk=self.stranger.pk).exists())

    def test_non_member_cannot_add_member(self):
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.add_member(self.team.pk, 'member@example.com', self.stranger)
        self.assertEqual(str(ctx.exception.detail), 'You are not authorized to add members to this team')
        self.gateway.emit_member_added.assert_not_called()

    def test_add_unknown_email(self):
        with self.assertRaises(NotFound):
            self.service.add_member(self.team.pk, 'nobody@example.com', self.owner)

    def test_add_existing_member(self):
        self.service.add_member(self.team.pk, 'member@example.com', self.owner)
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.add_member(self.team.pk, 'member@example.com', self.owner)
        self.assertEqual(str(ctx.exception.detail), 'User is already a member of this team')

    def test_remove_member(self):
        self.service.add_member(self.team.pk, 'member@example.com', self.owner)
        self.gateway.reset_mock()

        team = self.service.remove_member(self.team.pk, self.member.pk, self.owner)
        self.assertFalse(team.members.filter(pk=self.member.pk).exists())
        self.gateway.emit_member_removed.assert_called_once_with(self.team.pk, self.member.pk)
        self.assertEqual(self.gateway.notify_user.call_args[0][1], 'team_member_removed')

    def test_remove_non_member_does_not_notify(self):
        self.service.remove_member(self.team.pk, self.stranger.pk, self.owner)
        self.gateway.emit_member_removed.assert_called_once()
        self.gateway.notify_user.assert_not_called()

    def test_only_owner_removes_members(self):
        self.service.add_member(self.team.pk, 'member@example.com', self.owner)
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.remove_member(self.team.pk, self.owner.pk, self.member)
        self.assertEqual(str(ctx.exception.detail), 'Only team owner can remove members')

    def test_update_by_owner(self):
        team = self.service.update(self.team.pk, {'name': 'Platform Team'}, self.owner)
        self.assertEqual(team.name, 'Platform Team')
        self.assertEqual(team.description, 'Main team')
        self.gateway.emit_team_updated.assert_called_once()

    def test_update_by_member_forbidden(self):
        self.service.add_member(self.team.pk, 'member@example.com', self.owner)
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.update(self.team.pk, {'name': 'Mine now'}, self.member)
        self.assertEqual(str(ctx.exception.detail), 'Only team owner can update team')

    def test_delete_removes_team_todos(self):
        Todo.objects.create(title='Team task', team=self.team, created_by=self.owner)
        personal = Todo.objects.create(title='Personal task', created_by=self.owner)

        self.service.delete(self.team.pk, self.owner)

        self.assertFalse(Team.objects.filter(pk=self.team.pk).exists())
        self.assertEqual(list(Todo.objects.all()), [personal])

    def test_delete_by_stranger_forbidden(self):
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.delete(self.team.pk, self.stranger)
        self.assertEqual(str(ctx.exception.detail), 'Only team owner can delete team')
        self.assertTrue(Team.objects.filter(pk=self.team.pk).exists())

    def test_find_my_teams_includes_owned_teams_without_membership_row(self):
        other_team = Team.objects.create(name='Bare Team', owner=self.stranger)
        self.assertEqual(self.service.find_my_teams(self.stranger), [other_team])
        self.assertEqual(self.service.find_my_teams(self.owner), [self.team])


class TeamViewsTest(APITestCase):
    def setUp(self):
        self.owner = make_user('owner@example.com', 'Sam')
        self.member = make_user('member@example.com', 'John')
        self.stranger = make_user('stranger@example.com', 'Bob')
        self.client.force_authenticate(user=self.owner)
        response = self.client.post('/api/teams/', {'name': 'Development Team'}, format='json')
        self.team_id = response.data['id']

    def test_create_team(self):
        response = self.client.post('/api/teams/', {'name': 'Design Team', 'description': 'UI/UX'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['ownerId'], str(self.owner.id))
        self.assertEqual([m['email'] for m in response.data['members']], ['owner@example.com'])

    def test_create_team_requires_name(self):
        response = self.client.post('/api/teams/', {'description': 'No name'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get('/api/teams/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_my_teams(self):
        self.client.force_authenticate(user=self.stranger)
        response = self.client.get('/api/teams/my-teams/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_add_and_remove_member(self):
        response = self.client.post(f'/api/teams/{self.team_id}/members/', {'email': 'member@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('member@example.com', [m['email'] for m in response.data['members']])

        self.client.force_authenticate(user=self.member)
        response = self.client.get('/api/teams/my-teams/')
        self.assertEqual([t['id'] for t in response.data], [self.team_id])

        self.client.force_authenticate(user=self.owner)
        response = self.client.delete(f'/api/teams/{self.team_id}/members/{self.member.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn('member@example.com', [m['email'] for m in response.data['members']])

    def test_add_member_unknown_user(self):
        response = self.client.post(f'/api/teams/{self.team_id}/members/', {'email': 'nobody@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['detail'], 'User not found')

    def test_stranger_cannot_add_member(self):
        self.client.force_authenticate(user=self.stranger)
        response = self.client.post(f'/api/teams/{self.team_id}/members/', {'email': 'member@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_team(self):
        response = self.client.put(f'/api/teams/{self.team_id}/', {'description': 'Core devs'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Development Team')
        self.assertEqual(response.data['description'], 'Core devs')

    def test_delete_team(self):
        self.client.force_authenticate(user=self.stranger)
        response = self.client.delete(f'/api/teams/{self.team_id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.owner)
        response = self.client.delete(f'/api/teams/{self.team_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        response = self.client.get(f'/api/teams/{self.team_id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['detail'], 'Team not found')
