"""Session identity store

Persists the visitor's pre-chat name/phone per chatbot. Storage backends are
tab-scoped key/value stores: an in-memory one (the sessionStorage analogue)
and a Supabase table for hosts that run more than one process.
"""
import json
import time
from typing import Callable, Dict, Optional
import logging

from chatwidget.models.chat import UserDetails

logger = logging.getLogger(__name__)

USER_DETAILS_TTL_MS = 24 * 60 * 60 * 1000
SESSION_STORAGE_TABLE = "widget_session_storage"


def storage_key(chatbot_id: str) -> str:
    return f"chatbot_user_{chatbot_id}"


def now_ms() -> int:
    return int(time.time() * 1000)


class MemoryStorage:
    """Dict-backed storage scoped to one browser session"""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class SupabaseStorage:
    """
    Storage rows in the widget_session_storage table

    Args:
        client: Supabase client (service role)
        namespace: Browser session identifier the rows belong to
    """

    def __init__(self, client, namespace: str):
        self.client = client
        self.namespace = namespace

    def get_item(self, key: str) -> Optional[str]:
        result = self.client.table(SESSION_STORAGE_TABLE).select("value").eq(
            "namespace", self.namespace
        ).eq("storage_key", key).limit(1).execute()

        if result.data:
            return result.data[0]["value"]
        return None

    def set_item(self, key: str, value: str) -> None:
        self.client.table(SESSION_STORAGE_TABLE).upsert({
            "namespace": self.namespace,
            "storage_key": key,
            "value": value
        }, on_conflict="namespace,storage_key").execute()

    def remove_item(self, key: str) -> None:
        self.client.table(SESSION_STORAGE_TABLE).delete().eq(
            "namespace", self.namespace
        ).eq("storage_key", key).execute()


class SessionStore:
    """Save/load/clear of UserDetails with a 24 hour validity window"""

    def __init__(self, storage, clock: Callable[[], int] = now_ms):
        self.storage = storage
        self.clock = clock

    def save(self, chatbot_id: str, details: UserDetails) -> None:
        self.storage.set_item(storage_key(chatbot_id), json.dumps({
            "name": details.name,
            "phone": details.phone,
            "timestamp": details.timestamp
        }))

    def load(self, chatbot_id: str) -> Optional[UserDetails]:
        """
        Stored details for a chatbot

        Returns:
            The details, or None when absent, expired or unreadable.
            Expired and unreadable entries are removed.
        """
        key = storage_key(chatbot_id)
        try:
            raw = self.storage.get_item(key)
        except Exception as e:
            logger.error(f"Error reading stored user details for chatbot {chatbot_id}: {e}")
            return None

        if raw is None:
            return None

        try:
            details = UserDetails.model_validate(json.loads(raw))
        except Exception as e:
            logger.error(f"Error parsing stored user details for chatbot {chatbot_id}: {e}")
            self._purge(key)
            return None

        if self.clock() - details.timestamp > USER_DETAILS_TTL_MS:
            logger.info(f"Stored user details for chatbot {chatbot_id} expired")
            self._purge(key)
            return None

        return details

    def clear(self, chatbot_id: str) -> None:
        self.storage.remove_item(storage_key(chatbot_id))

    def _purge(self, key: str) -> None:
        """Drop an unusable entry; a failed delete is logged, never raised"""
        try:
            self.storage.remove_item(key)
        except Exception as e:
            logger.error(f"Error removing stored user details {key}: {e}")
