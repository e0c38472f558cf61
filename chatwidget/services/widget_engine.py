"""Widget engine - runs the state machine's effects"""
import asyncio
import uuid
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Iterable, List, Optional, Set
import logging

from chatwidget.models.config import WidgetBootstrap
from chatwidget.models.widget import WidgetStatusEvent, WidgetView
from chatwidget.services.config_resolver import ConfigResolver
from chatwidget.services.message_client import WidgetApiClient
from chatwidget.services.render import render
from chatwidget.services.session_store import SessionStore
from chatwidget.services.widget_state import (
    FULLPAGE,
    PRECHAT_SUBMIT_DELAY,
    Effect,
    Event,
    ScheduleTimer,
    CancelTimer,
    SendMessage,
    CaptureLead,
    SaveUserDetails,
    PostStatus,
    TimerHandle,
    TimerFired,
    MessageReplied,
    LeadCaptureFinished,
    Unmounted,
    WidgetState,
    epoch_ms,
    mount,
    reduce,
)

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WidgetEngine:
    """
    One widget instance for one page view

    Events go through the reducer; the resulting effects are executed here
    and their outcomes are dispatched back as events. Message sends are
    awaited, lead captures from detection and the pre-chat form run as
    background tasks.

    Args:
        chatbot_id: Chatbot identifier
        bootstrap: Loaded widget configuration
        api: Platform API client
        store: Session identity store for this browser session
        timers: Object with schedule(job_id, delay, callback) and cancel(job_id)
        clock: Returns the current timezone-aware instant
    """

    def __init__(
        self,
        chatbot_id: str,
        bootstrap: WidgetBootstrap,
        api: WidgetApiClient,
        store: SessionStore,
        timers,
        clock: Callable[[], datetime] = utcnow
    ):
        self.id = uuid.uuid4().hex
        self.chatbot_id = chatbot_id
        self.bootstrap = bootstrap
        self.config = bootstrap.config
        self.api = api
        self.store = store
        self.timers = timers
        self.clock = clock
        self.state: Optional[WidgetState] = None
        self.last_active = clock()
        self.user_agent: Optional[str] = None
        self.status_listeners: List[Callable[[WidgetStatusEvent], None]] = []
        self._outbox: List[WidgetStatusEvent] = []
        self._tasks: Set[asyncio.Task] = set()

    @classmethod
    async def create(
        cls,
        chatbot_id: str,
        api: WidgetApiClient,
        store: SessionStore,
        timers,
        mode: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
        prechat_delay: float = PRECHAT_SUBMIT_DELAY
    ) -> Optional["WidgetEngine"]:
        """
        Load the configuration and mount a widget

        Returns:
            The mounted engine, or None when the widget must render nothing
        """
        bootstrap = await ConfigResolver(api).fetch(chatbot_id)
        if bootstrap is None or not bootstrap.is_renderable:
            return None

        engine = cls(chatbot_id, bootstrap, api, store, timers, clock=clock)
        await engine.mount(mode=mode, prechat_delay=prechat_delay)
        return engine

    async def mount(self, mode: Optional[str] = None, prechat_delay: float = PRECHAT_SUBMIT_DELAY) -> None:
        now = self.clock()
        stamp = epoch_ms(now)
        mode = mode or self.config.widget_settings.mode
        prefix = "fullpage" if mode == FULLPAGE else "widget"

        transition = mount(
            chatbot_id=self.chatbot_id,
            config=self.config,
            session_id=f"{prefix}-{stamp}",
            conversation_id=f"conv-{stamp}",
            now=now,
            mode=mode,
            user_details=self.store.load(self.chatbot_id),
            prechat_delay=prechat_delay
        )
        self.state = transition.state
        logger.info(f"Widget {self.id} mounted for chatbot {self.chatbot_id} ({self.state.mode}, {self.state.phase.value})")
        await self._run(transition.effects)

    async def dispatch(self, event: Event) -> WidgetState:
        self.last_active = self.clock()
        transition = reduce(self.state, event, self.config)
        self.state = transition.state
        await self._run(transition.effects)
        return self.state

    async def unmount(self) -> None:
        await self.dispatch(Unmounted())

    async def drain(self) -> None:
        """Wait for background lead captures to finish"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def view(self, user_agent: Optional[str] = None) -> Optional[WidgetView]:
        self.last_active = self.clock()
        return render(self.bootstrap, self.state, self.clock(), user_agent)

    def take_events(self) -> List[WidgetStatusEvent]:
        """Pending widget-status frame events, oldest first"""
        events, self._outbox = self._outbox, []
        return events

    def _job_id(self, handle: TimerHandle) -> str:
        return f"{self.id}:{handle.name}:{handle.token}"

    async def _fire(self, handle: TimerHandle) -> None:
        await self.dispatch(TimerFired(name=handle.name, token=handle.token, now=self.clock()))

    async def _run(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, ScheduleTimer):
                self.timers.schedule(self._job_id(effect.handle), effect.handle.delay, partial(self._fire, effect.handle))

            elif isinstance(effect, CancelTimer):
                self.timers.cancel(self._job_id(effect.handle))

            elif isinstance(effect, SaveUserDetails):
                try:
                    self.store.save(self.chatbot_id, effect.details)
                except Exception as e:
                    logger.error(f"Failed to save user details for chatbot {self.chatbot_id}: {e}")

            elif isinstance(effect, PostStatus):
                self._post_status(WidgetStatusEvent(is_open=effect.is_open, is_minimized=effect.is_minimized))

            elif isinstance(effect, CaptureLead):
                if effect.background:
                    task = asyncio.create_task(self._capture_lead(effect))
                    self._tasks.add(task)
                    task.add_done_callback(self._tasks.discard)
                else:
                    await self._capture_lead(effect)

            elif isinstance(effect, SendMessage):
                result = await self.api.send_message(self.chatbot_id, effect.text, self.state.session_id)
                await self.dispatch(MessageReplied(result=result, now=self.clock()))

    async def _capture_lead(self, effect: CaptureLead) -> None:
        result = await self.api.capture_lead(self.chatbot_id, effect.request)
        if not result.ok:
            logger.warning(f"Lead capture ({effect.request.source}) failed for chatbot {self.chatbot_id}, continuing")
        if effect.report:
            await self.dispatch(LeadCaptureFinished(
                result=result,
                info=effect.info,
                from_form=effect.from_form,
                now=self.clock()
            ))

    def _post_status(self, event: WidgetStatusEvent) -> None:
        self._outbox.append(event)
        for listener in self.status_listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Widget status listener error: {e}")
