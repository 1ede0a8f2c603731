from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_yasg.utils import swagger_auto_schema

from .serializers import (
    AnalyzeTaskSerializer, DueDateSuggestionSerializer,
    SuggestDueDateSerializer, TaskComplexitySerializer,
)
from .services import TaskAIService


class SuggestDueDateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Suggest a due date from title keywords, description length, priority and team workload",
        request_body=SuggestDueDateSerializer,
        responses={200: DueDateSuggestionSerializer, 400: "Validation errors in request body"},
        tags=['AI']
    )
    def post(self, request):
        serializer = SuggestDueDateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        suggestion = TaskAIService.suggest_due_date(
            data['title'],
            data.get('description') or '',
            data['priority'],
            data['teamWorkload'],
        )
        return Response(DueDateSuggestionSerializer(suggestion).data, status=status.HTTP_200_OK)


class AnalyzeTaskView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Estimate task complexity and effort in hours",
        request_body=AnalyzeTaskSerializer,
        responses={200: TaskComplexitySerializer, 400: "Validation errors in request body"},
        tags=['AI']
    )
    def post(self, request):
        serializer = AnalyzeTaskSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        analysis = TaskAIService.analyze_task_complexity(
            serializer.validated_data['title'],
            serializer.validated_data.get('description') or '',
        )
        return Response(analysis, status=status.HTTP_200_OK)
