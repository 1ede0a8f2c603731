# teams/views.py
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from .serializers import (
    AddMemberSerializer, TeamCreateSerializer, TeamSerializer, TeamUpdateSerializer,
)
from .services import TeamsService


class TeamListCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(responses={200: TeamSerializer(many=True)}, tags=['Teams'])
    def get(self, request):
        teams = TeamsService().find_all()
        return Response(TeamSerializer(teams, many=True).data)

    @swagger_auto_schema(
        operation_description="Create a team. The caller becomes its owner and first member.",
        request_body=TeamCreateSerializer,
        responses={201: TeamSerializer},
        tags=['Teams']
    )
    def post(self, request):
        serializer = TeamCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = TeamsService().create(serializer.validated_data, request.user)
        return Response(TeamSerializer(team).data, status=status.HTTP_201_CREATED)


class MyTeamsView(APIView):
    """Teams the caller owns or belongs to."""
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(responses={200: TeamSerializer(many=True)}, tags=['Teams'])
    def get(self, request):
        teams = TeamsService().find_my_teams(request.user)
        return Response(TeamSerializer(teams, many=True).data)


class TeamDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(responses={200: TeamSerializer, 404: "Team not found"}, tags=['Teams'])
    def get(self, request, pk):
        return Response(TeamSerializer(TeamsService().find_by_id(pk)).data)

    @swagger_auto_schema(
        request_body=TeamUpdateSerializer,
        responses={200: TeamSerializer, 403: "Only team owner can update team"},
        tags=['Teams']
    )
    def put(self, request, pk):
        serializer = TeamUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        team = TeamsService().update(pk, serializer.validated_data, request.user)
        return Response(TeamSerializer(team).data)

    @swagger_auto_schema(
        operation_description="Delete a team and every todo that belongs to it.",
        responses={204: "Team deleted", 403: "Only team owner can delete team"},
        tags=['Teams']
    )
    def delete(self, request, pk):
        TeamsService().delete(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TeamMemberListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Add a user (by email) to the team. Allowed for the owner and existing members.",
        request_body=AddMemberSerializer,
        responses={
            200: TeamSerializer,
            403: openapi.Response(description="Not authorized, or user is already a member"),
            404: openapi.Response(description="Team or user not found"),
        },
        tags=['Teams']
    )
    def post(self, request, pk):
        serializer = AddMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = TeamsService().add_member(pk, serializer.validated_data['email'], request.user)
        return Response(TeamSerializer(team).data, status=status.HTTP_200_OK)


class TeamMemberDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        responses={200: TeamSerializer, 403: "Only team owner can remove members"},
        tags=['Teams']
    )
    def delete(self, request, pk, member_id):
        team = TeamsService().remove_member(pk, member_id, request.user)
        return Response(TeamSerializer(team).data, status=status.HTTP_200_OK)
