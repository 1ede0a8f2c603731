from asgiref.sync import sync_to_async
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.test import SimpleTestCase

from . import events
from .apps import get_gateway
from .consumers import TodoEventsConsumer
from .gateway import TodoEventsGateway
from .registry import ConnectionRegistry


class RecordingLayer:
    def __init__(self):
        self.sent = []
        self.group_sent = []

    async def send(self, channel, message):
        self.sent.append((channel, message))

    async def group_send(self, group, message):
        self.group_sent.append((group, message))


class BrokenLayer:
    async def send(self, channel, message):
        raise RuntimeError("layer down")

    async def group_send(self, group, message):
        raise RuntimeError("layer down")


class ConnectionRegistryTest(SimpleTestCase):
    def setUp(self):
        self.registry = ConnectionRegistry()

    def test_set_and_get(self):
        self.registry.set('user-1', 'chan-1')
        self.assertEqual(self.registry.get('user-1'), 'chan-1')
        self.assertIn('user-1', self.registry)
        self.assertEqual(len(self.registry), 1)

    def test_reauthenticate_replaces_channel(self):
        self.registry.set('user-1', 'chan-1')
        self.registry.set('user-1', 'chan-2')
        self.assertEqual(self.registry.snapshot(), {'user-1': 'chan-2'})

    def test_remove_channel(self):
        self.registry.set('user-1', 'chan-1')
        self.registry.set('user-2', 'chan-2')
        self.assertEqual(self.registry.remove_channel('chan-1'), 'user-1')
        self.assertIsNone(self.registry.get('user-1'))
        self.assertEqual(self.registry.get('user-2'), 'chan-2')

    def test_remove_unknown_channel(self):
        self.assertIsNone(self.registry.remove_channel('nope'))


class TodoEventsGatewayTest(SimpleTestCase):
    def setUp(self):
        self.layer = RecordingLayer()
        self.gateway = TodoEventsGateway(ConnectionRegistry(), channel_layer=self.layer)

    def test_broadcast_to_team_room(self):
        self.gateway.emit_todo_created('team-id', {'title': 'Setup project'})
        self.assertEqual(self.layer.group_sent, [(
            'team-team-id',
            {'type': 'broadcast.event', 'event': events.TODO_CREATED, 'data': {'title': 'Setup project'}},
        )])

    def test_emit_to_unconnected_user_is_noop(self):
        self.gateway.emit_to_user('user-1', events.NOTIFICATION_RECEIVED, {})
        self.gateway.emit_to_user(None, events.NOTIFICATION_RECEIVED, {})
        self.assertEqual(self.layer.sent, [])

    def test_notify_connected_user(self):
        self.gateway.handle_authenticate('chan-1', 'user-1')
        self.gateway.notify_user('user-1', 'todo_assigned', 'Task Assigned', 'You have been assigned to task: X', {'id': 1})

        channel, message = self.layer.sent[0]
        self.assertEqual(channel, 'chan-1')
        self.assertEqual(message['event'], events.NOTIFICATION_RECEIVED)
        notification = message['data']
        self.assertEqual(notification['type'], 'todo_assigned')
        self.assertEqual(notification['title'], 'Task Assigned')
        self.assertEqual(notification['data'], {'id': 1})
        self.assertIn('timestamp', notification)

    def test_disconnect_unregisters_user(self):
        self.gateway.handle_authenticate('chan-1', 'user-1')
        self.assertEqual(self.gateway.handle_disconnect('chan-1'), 'user-1')
        self.gateway.emit_to_user('user-1', events.TODO_UPDATED, {})
        self.assertEqual(self.layer.sent, [])

    def test_deleted_and_removed_payloads(self):
        self.gateway.emit_todo_deleted('t', 'todo-1')
        self.gateway.emit_member_removed('t', 'user-1')
        self.assertEqual(self.layer.group_sent[0][1]['data'], {'id': 'todo-1'})
        self.assertEqual(self.layer.group_sent[1][1]['event'], events.TEAM_MEMBER_REMOVED)

    def test_layer_failures_are_swallowed(self):
        gateway = TodoEventsGateway(ConnectionRegistry(), channel_layer=BrokenLayer())
        gateway.handle_authenticate('chan-1', 'user-1')
        with self.assertLogs('notifications.gateway', level='WARNING'):
            gateway.broadcast_to_team('t', events.TODO_UPDATED, {})
            gateway.emit_to_user('user-1', events.TODO_UPDATED, {})


class TodoEventsConsumerTest(SimpleTestCase):
    def setUp(self):
        self.gateway = get_gateway()
        self.gateway.registry.clear()

    def _communicator(self):
        return WebsocketCommunicator(TodoEventsConsumer.as_asgi(), '/ws/events/')

    async def test_authenticate_registers_connection(self):
        communicator = self._communicator()
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        await communicator.send_json_to({'event': 'authenticate', 'data': 'user-1'})
        await communicator.receive_nothing()
        self.assertIn('user-1', self.gateway.registry)

        await communicator.disconnect()
        self.assertNotIn('user-1', self.gateway.registry)

    async def test_authenticate_with_object_payload(self):
        communicator = self._communicator()
        await communicator.connect()
        await communicator.send_json_to({'event': 'authenticate', 'data': {'userId': 'user-2'}})
        await communicator.receive_nothing()
        self.assertIn('user-2', self.gateway.registry)
        await communicator.disconnect()

    async def test_team_broadcast_reaches_joined_clients(self):
        member = self._communicator()
        outsider = self._communicator()
        await member.connect()
        await outsider.connect()

        await member.send_json_to({'event': 'join-team', 'data': 'team-1'})
        await member.receive_nothing()

        await sync_to_async(self.gateway.emit_todo_created)('team-1', {'title': 'Setup project'})

        frame = await member.receive_json_from()
        self.assertEqual(frame, {'event': 'todo:created', 'data': {'title': 'Setup project'}})
        self.assertTrue(await outsider.receive_nothing())

        await member.send_json_to({'event': 'leave-team', 'data': 'team-1'})
        await member.receive_nothing()
        await sync_to_async(self.gateway.emit_todo_updated)('team-1', {'title': 'Setup project'})
        self.assertTrue(await member.receive_nothing())

        await member.disconnect()
        await outsider.disconnect()

    async def test_user_notification_reaches_authenticated_client(self):
        communicator = self._communicator()
        await communicator.connect()
        await communicator.send_json_to({'event': 'authenticate', 'data': 'user-3'})
        await communicator.receive_nothing()

        await sync_to_async(self.gateway.notify_user)(
            'user-3', 'todo_assigned', 'Task Assigned', 'You have been assigned to task: Demo'
        )

        frame = await communicator.receive_json_from()
        self.assertEqual(frame['event'], 'notification:received')
        self.assertEqual(frame['data']['message'], 'You have been assigned to task: Demo')
        await communicator.disconnect()

    async def test_unknown_event_is_ignored(self):
        communicator = self._communicator()
        await communicator.connect()
        await communicator.send_json_to({'event': 'dance', 'data': None})
        self.assertTrue(await communicator.receive_nothing())
        await communicator.disconnect()

    async def test_disconnect_leaves_joined_rooms(self):
        room = events.team_room('team-9')
        layer = get_channel_layer()

        old = self._communicator()
        await old.connect()
        await old.send_json_to({'event': 'authenticate', 'data': 'user-9'})
        await old.send_json_to({'event': 'join-team', 'data': 'team-9'})
        await old.receive_nothing()
        old_channel = self.gateway.registry.get('user-9')
        self.assertIn(old_channel, layer.groups.get(room, {}))

        await old.disconnect()
        self.assertNotIn(old_channel, layer.groups.get(room, {}))

        fresh = self._communicator()
        await fresh.connect()
        await fresh.send_json_to({'event': 'authenticate', 'data': 'user-10'})
        await fresh.send_json_to({'event': 'join-team', 'data': 'team-9'})
        await fresh.receive_nothing()
        fresh_channel = self.gateway.registry.get('user-10')

        await sync_to_async(self.gateway.emit_todo_created)('team-9', {'title': 'Setup project'})
        frame = await fresh.receive_json_from()
        self.assertEqual(frame['event'], 'todo:created')
        self.assertEqual(set(layer.groups.get(room, {})), {fresh_channel})

        await fresh.disconnect()
