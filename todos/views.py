# todos/views.py
from rest_framework import generics, permissions, filters, status
from rest_framework.views import APIView
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg.utils import no_body, swagger_auto_schema
from drf_yasg import openapi

from .serializers import TodoCreateSerializer, TodoSerializer, TodoUpdateSerializer
from .services import TodosService


class TodoListCreateView(generics.ListCreateAPIView):
    serializer_class = TodoSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'priority', 'team', 'assignee']
    ordering_fields = ['due_date', 'priority', 'created_at']

    def get_queryset(self):
        return TodosService().find_all()

    @swagger_auto_schema(
        operation_description="Create a todo. With teamId set, the caller must belong to that team.",
        request_body=TodoCreateSerializer,
        responses={
            201: TodoSerializer,
            403: openapi.Response(description="You are not a member of this team"),
            404: openapi.Response(description="Team or assignee not found"),
        },
        tags=['Todos']
    )
    def post(self, request, *args, **kwargs):
        serializer = TodoCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        todo = TodosService().create(serializer.validated_data, request.user)
        return Response(TodoSerializer(todo).data, status=status.HTTP_201_CREATED)


class MyTodosView(APIView):
    """Todos the caller created or is assigned to."""
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(responses={200: TodoSerializer(many=True)}, tags=['Todos'])
    def get(self, request):
        todos = TodosService().find_my_todos(request.user)
        return Response(TodoSerializer(todos, many=True).data)


class TeamTodosView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        responses={200: TodoSerializer(many=True), 403: "You are not a member of this team"},
        tags=['Todos']
    )
    def get(self, request, team_id):
        todos = TodosService().find_by_team(team_id, request.user)
        return Response(TodoSerializer(todos, many=True).data)


class TodosByStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter(
                'todo_status',
                openapi.IN_PATH,
                description="One of: pending, in_progress, completed, cancelled",
                type=openapi.TYPE_STRING
            )
        ],
        responses={200: TodoSerializer(many=True), 400: "Invalid status"},
        tags=['Todos']
    )
    def get(self, request, todo_status):
        todos = TodosService().get_todos_by_status(todo_status, request.user)
        return Response(TodoSerializer(todos, many=True).data)


class OverdueTodosView(APIView):
    """Open todos of the caller whose due date has passed."""
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(responses={200: TodoSerializer(many=True)}, tags=['Todos'])
    def get(self, request):
        todos = TodosService().get_overdue_todos(request.user)
        return Response(TodoSerializer(todos, many=True).data)


class TodoDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(responses={200: TodoSerializer, 404: "Todo not found"}, tags=['Todos'])
    def get(self, request, pk):
        return Response(TodoSerializer(TodosService().find_by_id(pk)).data)

    @swagger_auto_schema(
        request_body=TodoUpdateSerializer,
        responses={200: TodoSerializer, 403: "Only the creator or the assignee can update"},
        tags=['Todos']
    )
    def put(self, request, pk):
        serializer = TodoUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        todo = TodosService().update(pk, serializer.validated_data, request.user)
        return Response(TodoSerializer(todo).data)

    @swagger_auto_schema(responses={204: "Todo deleted", 403: "Only the creator can delete"}, tags=['Todos'])
    def delete(self, request, pk):
        TodosService().delete(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AssignTodoView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        request_body=no_body,
        responses={200: TodoSerializer, 403: "Only the creator can assign", 404: "Todo or user not found"},
        tags=['Todos']
    )
    def put(self, request, pk, assignee_id):
        todo = TodosService().assign_todo(pk, assignee_id, request.user)
        return Response(TodoSerializer(todo).data)


class TodoStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        responses={200: TodoSerializer, 400: "Invalid status", 403: "Only the creator or the assignee can change status"},
        tags=['Todos']
    )
    def put(self, request, pk, todo_status):
        todo = TodosService().update_status(pk, todo_status, request.user)
        return Response(TodoSerializer(todo).data)
