from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'notifications'

    def ready(self):
        from .gateway import TodoEventsGateway
        from .registry import ConnectionRegistry

        # One registry per process, owned by the gateway
        self.gateway = TodoEventsGateway(ConnectionRegistry())


def get_gateway():
    from django.apps import apps
    return apps.get_app_config('notifications').gateway
