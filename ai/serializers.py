from rest_framework import serializers

PRIORITY_CHOICES = ['low', 'medium', 'high', 'urgent']


class SuggestDueDateSerializer(serializers.Serializer):
    title = serializers.CharField(trim_whitespace=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='', trim_whitespace=False)
    priority = serializers.ChoiceField(choices=PRIORITY_CHOICES)
    teamWorkload = serializers.FloatField(min_value=1, max_value=10)


class AnalyzeTaskSerializer(serializers.Serializer):
    title = serializers.CharField(trim_whitespace=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='', trim_whitespace=False)


class DueDateSuggestionSerializer(serializers.Serializer):
    suggestedDueDate = serializers.DateTimeField()
    confidence = serializers.FloatField()
    reasoning = serializers.CharField()


class TaskComplexitySerializer(serializers.Serializer):
    complexity = serializers.ChoiceField(choices=['low', 'medium', 'high'])
    estimatedHours = serializers.IntegerField()
    factors = serializers.ListField(child=serializers.CharField())
