from django.urls import path

from .consumers import TodoEventsConsumer

websocket_urlpatterns = [
    path('ws/events/', TodoEventsConsumer.as_asgi()),
]
