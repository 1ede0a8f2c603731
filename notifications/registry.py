import threading


class ConnectionRegistry:
    """
    Maps a user id to the channel name of that user's live WebSocket.

    Process-local and not persisted. Consumers run on the event loop while
    views run in worker threads, so every access goes through a lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._connections = {}

    def set(self, user_id, channel_name):
        with self._lock:
            self._connections[str(user_id)] = channel_name

    def get(self, user_id):
        with self._lock:
            return self._connections.get(str(user_id))

    def remove_channel(self, channel_name):
        """Drop the entry pointing at channel_name and return its user id, if any."""
        with self._lock:
            for user_id, name in self._connections.items():
                if name == channel_name:
                    del self._connections[user_id]
                    return user_id
        return None

    def clear(self):
        with self._lock:
            self._connections.clear()

    def snapshot(self):
        with self._lock:
            return dict(self._connections)

    def __len__(self):
        with self._lock:
            return len(self._connections)

    def __contains__(self, user_id):
        with self._lock:
            return str(user_id) in self._connections
