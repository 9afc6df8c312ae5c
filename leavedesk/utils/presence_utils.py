import logging
import threading
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class PresenceRegistry:
    """
    Maps a user id to the live channel it announced on.

    Entries exist only while this process runs and the connection is open.
    A channel speaks for one user at a time: announcing it under a new id
    drops its previous entry.
    One slot per user: announcing again (a second tab, a reconnect) replaces
    the previous channel, and disconnecting that channel leaves the user
    unreachable even if an older connection is still open.
    """

    def __init__(self) -> None:
        self._channels: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def announce(self, user_id: str, channel: Any) -> None:
        with self._lock:
            for previous_id in [uid for uid, registered in self._channels.items() if registered is channel]:
                del self._channels[previous_id]
            self._channels[user_id] = channel
        logger.info("User %s is online", user_id)

    def remove(self, channel: Any) -> Optional[str]:
        """Drop the entry whose channel is ``channel``, returning its user id."""
        with self._lock:
            for user_id, registered in self._channels.items():
                if registered is channel:
                    del self._channels[user_id]
                    break
            else:
                return None
        logger.info("User %s went offline", user_id)
        return user_id

    def lookup(self, user_id: str) -> Optional[Any]:
        with self._lock:
            return self._channels.get(user_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)
