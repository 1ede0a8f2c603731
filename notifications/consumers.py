# notifications/consumers.py
import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from . import events
from .apps import get_gateway

logger = logging.getLogger(__name__)


class TodoEventsConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket endpoint for real-time todo/team events.

    Frames are JSON objects ``{"event": <name>, "data": <payload>}`` in both
    directions. Clients announce who they are with ``authenticate`` and pick
    the team rooms they want with ``join-team`` / ``leave-team``.
    """

    def get_gateway(self):
        return get_gateway()

    async def connect(self):
        self.gateway = self.get_gateway()
        self.rooms = set()
        await self.accept()
        logger.info("Client connected: %s", self.channel_name)

    async def disconnect(self, code):
        logger.info("Client disconnected: %s", self.channel_name)
        self.gateway.handle_disconnect(self.channel_name)
        for room in list(getattr(self, 'rooms', ())):
            await self.channel_layer.group_discard(room, self.channel_name)
        self.rooms = set()

    async def receive_json(self, content, **kwargs):
        if not isinstance(content, dict):
            logger.debug("Ignoring non-object frame from %s", self.channel_name)
            return

        event = content.get('event')
        data = content.get('data')

        if event == events.AUTHENTICATE:
            await self.handle_authenticate(data)
        elif event == events.JOIN_TEAM:
            await self.handle_join_team(data)
        elif event == events.LEAVE_TEAM:
            await self.handle_leave_team(data)
        else:
            logger.debug("Unknown event %r from %s", event, self.channel_name)

    async def handle_authenticate(self, data):
        user_id = data.get('userId') if isinstance(data, dict) else data
        if not user_id:
            return
        self.gateway.handle_authenticate(self.channel_name, user_id)

    async def handle_join_team(self, team_id):
        if not team_id:
            return
        room = events.team_room(team_id)
        try:
            await self.channel_layer.group_add(room, self.channel_name)
        except TypeError as e:
            logger.warning("Rejected room name %r: %s", room, e)
            return
        self.rooms.add(room)
        logger.info("User joined team: %s", team_id)

    async def handle_leave_team(self, team_id):
        if not team_id:
            return
        room = events.team_room(team_id)
        try:
            await self.channel_layer.group_discard(room, self.channel_name)
        except TypeError as e:
            logger.warning("Rejected room name %r: %s", room, e)
            return
        self.rooms.discard(room)
        logger.info("User left team: %s", team_id)

    async def broadcast_event(self, message):
        await self.send_json({'event': message['event'], 'data': message['data']})
