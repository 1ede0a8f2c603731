# teams/serializers.py
from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from .models import Team


class TeamSummarySerializer(serializers.ModelSerializer):
    ownerId = serializers.UUIDField(source='owner_id', read_only=True)

    class Meta:
        model = Team
        fields = ['id', 'name', 'description', 'ownerId']
        read_only_fields = fields


class TeamSerializer(serializers.ModelSerializer):
    ownerId = serializers.UUIDField(source='owner_id', read_only=True)
    owner = UserSummarySerializer(read_only=True)
    members = UserSummarySerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Team
        fields = [
            'id', 'name', 'description', 'ownerId', 'owner', 'members',
            'createdAt', 'updatedAt'
        ]
        read_only_fields = fields


class TeamCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class TeamUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AddMemberSerializer(serializers.Serializer):
    email = serializers.EmailField()
