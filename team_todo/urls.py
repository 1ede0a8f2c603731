# team_todo/urls.py
from django.contrib import admin
from django.urls import path, include
from django.utils import timezone
from rest_framework import permissions
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.response import Response
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

schema_view = get_schema_view(
    openapi.Info(
        title="Team Todo API",
        default_version='v1',
        description="Team-based todo management with real-time notifications",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([permissions.AllowAny])
def health(request):
    return Response({"status": "ok", "timestamp": timezone.now().isoformat()})


urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', health, name='health'),

    path('api/auth/', include('accounts.urls')),
    path('api/users/', include('accounts.user_urls')),
    path('api/teams/', include('teams.urls')),
    path('api/todos/', include('todos.urls')),
    path('api/ai/', include('ai.urls')),

    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
