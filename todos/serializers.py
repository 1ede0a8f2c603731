# todos/serializers.py
from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from teams.serializers import TeamSummarySerializer
from .models import Todo


class TodoSerializer(serializers.ModelSerializer):
    dueDate = serializers.DateTimeField(source='due_date', read_only=True, allow_null=True)
    assigneeId = serializers.UUIDField(source='assignee_id', read_only=True, allow_null=True)
    assignee = UserSummarySerializer(read_only=True, allow_null=True)
    teamId = serializers.UUIDField(source='team_id', read_only=True, allow_null=True)
    team = TeamSummarySerializer(read_only=True, allow_null=True)
    createdById = serializers.UUIDField(source='created_by_id', read_only=True)
    createdBy = UserSummarySerializer(source='created_by', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Todo
        fields = [
            'id', 'title', 'description', 'dueDate', 'status', 'priority',
            'assigneeId', 'assignee', 'teamId', 'team',
            'createdById', 'createdBy', 'createdAt', 'updatedAt'
        ]
        read_only_fields = fields


class TodoCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    dueDate = serializers.DateTimeField(source='due_date', required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Todo.STATUS_CHOICES, required=False)
    priority = serializers.ChoiceField(choices=Todo.PRIORITY_CHOICES, required=False)
    assigneeId = serializers.UUIDField(source='assignee_id', required=False, allow_null=True)
    teamId = serializers.UUIDField(source='team_id', required=False, allow_null=True)


class TodoUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    dueDate = serializers.DateTimeField(source='due_date', required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Todo.STATUS_CHOICES, required=False)
    priority = serializers.ChoiceField(choices=Todo.PRIORITY_CHOICES, required=False)
    assigneeId = serializers.UUIDField(source='assignee_id', required=False, allow_null=True)
    teamId = serializers.UUIDField(source='team_id', required=False, allow_null=True)
