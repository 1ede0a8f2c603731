# todos/urls.py
from django.urls import path
from .views import (
    TodoListCreateView, MyTodosView, TeamTodosView, TodosByStatusView,
    OverdueTodosView, TodoDetailView, AssignTodoView, TodoStatusView,
)

urlpatterns = [
    path('', TodoListCreateView.as_view(), name='todo-list-create'),
    path('my-todos/', MyTodosView.as_view(), name='todo-my-todos'),
    path('team/<uuid:team_id>/', TeamTodosView.as_view(), name='todo-by-team'),
    path('status/<str:todo_status>/', TodosByStatusView.as_view(), name='todo-by-status'),
    path('overdue/', OverdueTodosView.as_view(), name='todo-overdue'),
    path('<uuid:pk>/', TodoDetailView.as_view(), name='todo-detail'),
    path('<uuid:pk>/assign/<uuid:assignee_id>/', AssignTodoView.as_view(), name='todo-assign'),
    path('<uuid:pk>/status/<str:todo_status>/', TodoStatusView.as_view(), name='todo-status'),
]
