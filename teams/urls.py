# teams/urls.py
from django.urls import path
from .views import (
    TeamListCreateView,
    MyTeamsView,
    TeamDetailView,
    TeamMemberListView,
    TeamMemberDetailView,
)

urlpatterns = [
    path('', TeamListCreateView.as_view(), name='team-list-create'),
    path('my-teams/', MyTeamsView.as_view(), name='team-my-teams'),
    path('<uuid:pk>/', TeamDetailView.as_view(), name='team-detail'),

    # Membership
    path('<uuid:pk>/members/', TeamMemberListView.as_view(), name='team-member-add'),
    path('<uuid:pk>/members/<uuid:member_id>/', TeamMemberDetailView.as_view(), name='team-member-remove'),
]
