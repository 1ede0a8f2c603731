from django.urls import path

from .views import UserListCreateView, UserDetailView, ProfileDetailView

urlpatterns = [
    path('', UserListCreateView.as_view(), name='user-list-create'),
    # must precede the detail route
    path('profile/', ProfileDetailView.as_view(), name='profile-detail'),
    path('<uuid:pk>/', UserDetailView.as_view(), name='user-detail'),
]
