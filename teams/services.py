# teams/services.py
import logging

from django.db.models import Q
from rest_framework.exceptions import NotFound, PermissionDenied

from accounts.serializers import UserSummarySerializer
from accounts.services import UsersService
from notifications.apps import get_gateway
from todos.models import Todo
from .models import Team
from .serializers import TeamSerializer

logger = logging.getLogger(__name__)


class TeamsService:
    """Team CRUD plus the ownership/membership rules around it."""

    def __init__(self, gateway=None, users_service=None):
        self.gateway = gateway or get_gateway()
        self.users_service = users_service or UsersService()

    def _queryset(self):
        return Team.objects.select_related('owner').prefetch_related('members')

    def create(self, data, owner):
        team = Team.objects.create(
            name=data['name'],
            description=data.get('description'),
            owner=owner,
        )
        # Separate write: the owner is listed as a member too
        team.members.add(owner)
        logger.info("Team %s created by %s", team.pk, owner.pk)
        return self.find_by_id(team.pk)

    def find_all(self):
        return list(self._queryset().all())

    def find_by_id(self, team_id):
        team = self._queryset().filter(pk=team_id).first()
        if team is None:
            raise NotFound('Team not found')
        return team

    def find_my_teams(self, user):
        return list(
            self._queryset().filter(Q(members=user) | Q(owner=user)).distinct()
        )

    def is_user_team_member(self, team_id, user_id):
        return self.find_by_id(team_id).is_member(user_id)

    def _require_owner(self, team, user, message):
        if str(team.owner_id) != str(user.pk):
            logger.info("User %s denied on team %s: %s", user.pk, team.pk, message)
            raise PermissionDenied(message)

    def add_member(self, team_id, email, user):
        team = self.find_by_id(team_id)

        if not team.is_member(user.pk):
            raise PermissionDenied('You are not authorized to add members to this team')

        new_member = self.users_service.find_by_email(email)
        if new_member is None:
            raise NotFound('User not found')

        if team.members.filter(pk=new_member.pk).exists():
            raise PermissionDenied('User is already a member of this team')

        team.members.add(new_member)
        team = self.find_by_id(team_id)
        team_data = TeamSerializer(team).data

        self.gateway.emit_member_added(team.pk, {
            'team': team_data,
            'member': UserSummarySerializer(new_member).data,
            'addedBy': str(user.pk),
        })
        self.gateway.notify_user(
            new_member.pk,
            'team_member_added',
            'Added to Team',
            f'You have been added to team: {team.name}',
            {'team': team_data, 'addedBy': str(user.pk)},
        )
        return team

    def remove_member(self, team_id, member_id, user):
        team = self.find_by_id(team_id)
        self._require_owner(team, user, 'Only team owner can remove members')

        was_member = team.members.filter(pk=member_id).exists()
        if was_member:
            team.members.remove(member_id)

        team = self.find_by_id(team_id)
        self.gateway.emit_member_removed(team.pk, member_id)

        if was_member:
            self.gateway.notify_user(
                member_id,
                'team_member_removed',
                'Removed from Team',
                f'You have been removed from team: {team.name}',
                {'team': TeamSerializer(team).data, 'removedBy': str(user.pk)},
            )
        return team

    def update(self, team_id, data, user):
        team = self.find_by_id(team_id)
        self._require_owner(team, user, 'Only team owner can update team')

        for attr, value in data.items():
            setattr(team, attr, value)
        team.save()

        team = self.find_by_id(team_id)
        self.gateway.emit_team_updated(team.pk, TeamSerializer(team).data)
        return team

    def delete(self, team_id, user):
        team = self.find_by_id(team_id)
        self._require_owner(team, user, 'Only team owner can delete team')

        deleted, _ = Todo.objects.filter(team=team).delete()
        team.delete()
        logger.info("Team %s deleted by %s (%s todos removed)", team_id, user.pk, deleted)
