"""In-process registry of mounted widget engines"""
import uuid
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple
import logging

from chatwidget.services.message_client import WidgetApiClient
from chatwidget.services.session_store import (
    SessionStore,
    MemoryStorage,
    SupabaseStorage,
    USER_DETAILS_TTL_MS,
)
from chatwidget.services.widget_engine import WidgetEngine, utcnow
from chatwidget.services.widget_state import PRECHAT_SUBMIT_DELAY, epoch_ms

logger = logging.getLogger(__name__)

SESSION_IDLE_TIMEOUT = 30 * 60  # seconds
STORAGE_IDLE_TIMEOUT = timedelta(milliseconds=USER_DETAILS_TTL_MS)


class MemoryStorageFactory:
    """
    One MemoryStorage per browser session

    A storage nobody asked for in 24 hours can only hold expired details,
    so `evict_idle` drops it.
    """

    def __init__(self):
        self.storages: Dict[str, MemoryStorage] = {}
        self.last_used: Dict[str, datetime] = {}

    def __call__(self, browser_session_id: str, now: Optional[datetime] = None) -> MemoryStorage:
        if browser_session_id not in self.storages:
            self.storages[browser_session_id] = MemoryStorage()
        self.last_used[browser_session_id] = now or utcnow()
        return self.storages[browser_session_id]

    def evict_idle(self, now: datetime) -> int:
        stale = [key for key, used in self.last_used.items() if now - used > STORAGE_IDLE_TIMEOUT]
        for key in stale:
            self.storages.pop(key, None)
            self.last_used.pop(key, None)
        return len(stale)


def supabase_storage_factory(client) -> Callable[[str], SupabaseStorage]:
    def factory(browser_session_id: str, now: Optional[datetime] = None) -> SupabaseStorage:
        return SupabaseStorage(client, namespace=browser_session_id)

    return factory


class WidgetSessionRegistry:
    """
    Keeps one WidgetEngine per visitor page view

    Page views that stop calling in (closed tab, crashed browser) never send
    a DELETE; `evict_idle` unmounts them once idle_timeout has passed.

    Args:
        api: Platform API client shared by all engines
        timers: Timer service shared by all engines
        storage_factory: (browser_session_id, now) -> storage backend
        prechat_delay: Pre-chat submit delay in seconds
        idle_timeout: Seconds without activity before a session is evicted
    """

    def __init__(
        self,
        api: WidgetApiClient,
        timers,
        storage_factory: Callable[..., object],
        prechat_delay: float = PRECHAT_SUBMIT_DELAY,
        clock=utcnow,
        idle_timeout: float = SESSION_IDLE_TIMEOUT
    ):
        self.api = api
        self.timers = timers
        self.storage_factory = storage_factory
        self.prechat_delay = prechat_delay
        self.clock = clock
        self.idle_timeout = timedelta(seconds=idle_timeout)
        self.sessions: Dict[str, WidgetEngine] = {}

    async def create(
        self,
        chatbot_id: str,
        mode: Optional[str] = None,
        browser_session_id: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> Tuple[Optional[WidgetEngine], str]:
        """Mount a widget; returns (engine or None, browser session id)"""
        browser_session_id = browser_session_id or uuid.uuid4().hex
        storage = self.storage_factory(browser_session_id, now=self.clock())
        store = SessionStore(storage, clock=lambda: epoch_ms(self.clock()))

        engine = await WidgetEngine.create(
            chatbot_id,
            api=self.api,
            store=store,
            timers=self.timers,
            mode=mode,
            clock=self.clock,
            prechat_delay=self.prechat_delay
        )
        if engine is None:
            return None, browser_session_id

        engine.user_agent = user_agent
        self.sessions[engine.id] = engine
        return engine, browser_session_id

    def get(self, session_id: str) -> Optional[WidgetEngine]:
        return self.sessions.get(session_id)

    async def remove(self, session_id: str) -> bool:
        engine = self.sessions.pop(session_id, None)
        if engine is None:
            return False
        await engine.unmount()
        logger.info(f"Widget {session_id} unmounted")
        return True

    async def evict_idle(self) -> int:
        """Unmount sessions idle longer than idle_timeout; returns how many"""
        now = self.clock()
        idle = [
            session_id
            for session_id, engine in self.sessions.items()
            if now - engine.last_active > self.idle_timeout
        ]
        for session_id in idle:
            try:
                await self.remove(session_id)
            except Exception as e:
                logger.error(f"Error evicting idle widget {session_id}: {e}")

        evict_storage = getattr(self.storage_factory, "evict_idle", None)
        dropped = evict_storage(now) if evict_storage else 0

        if idle or dropped:
            logger.info(f"Evicted {len(idle)} idle widget sessions and {dropped} idle browser storages")
        return len(idle)

    async def close_all(self) -> None:
        for session_id in list(self.sessions):
            await self.remove(session_id)
