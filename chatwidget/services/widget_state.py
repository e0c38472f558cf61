"""Widget state machine

`reduce(state, event, config)` is the single place widget state changes. It
performs no I/O: network calls, timers, persistence and frame events are
returned as effects for the engine to run, and their outcomes come back as
events.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional, Tuple, Union

from chatwidget.models.chat import (
    ChatMessage,
    LeadInfo,
    UserDetails,
    LeadCaptureRequest,
    MessageResult,
    LeadCaptureResult,
)
from chatwidget.models.config import (
    ChatbotConfig,
    LeadField,
    DEFAULT_WELCOME_MESSAGE,
    DEFAULT_FALLBACK_MESSAGE,
    DEFAULT_EMPTY_REPLY_MESSAGE,
    DEFAULT_AUTO_OPEN_DELAY,
    DEFAULT_ASK_AFTER_MESSAGES,
    DEFAULT_LANGUAGE,
    DEFAULT_LEAD_FIELDS,
)
from chatwidget.services.lead_detector import detect_lead
from chatwidget.services.localization import get_translations
from chatwidget.services.prechat import validate_prechat

AUTO_OPEN_TIMER = "auto-open"
PRECHAT_TIMER = "prechat-submit"
PRECHAT_SUBMIT_DELAY = 0.3  # seconds

LEAD_SOURCE_WIDGET = "widget"
LEAD_SOURCE_PRECHAT = "pre-chat-form"
NO_INITIAL_MESSAGE = "No initial message"
LEAD_FORM_REQUIRED_ERROR = "Please fill in all required fields"

FLOATING = "floating"
FULLPAGE = "fullpage"


class Phase(str, Enum):
    CLOSED = "closed"
    PRE_CHAT = "pre_chat"
    OPEN = "open"
    MINIMIZED = "minimized"


@dataclass(frozen=True)
class TimerHandle:
    name: str
    token: int
    delay: float


@dataclass(frozen=True)
class PreChatForm:
    error: Optional[str] = None
    submitting: bool = False
    pending: Optional[UserDetails] = None


@dataclass(frozen=True)
class WidgetState:
    chatbot_id: str
    session_id: str
    conversation_id: str
    mode: str = FLOATING
    phase: Phase = Phase.CLOSED
    prechat_satisfied: bool = False
    user_details: Optional[UserDetails] = None
    prechat: PreChatForm = field(default_factory=PreChatForm)
    prechat_delay: float = PRECHAT_SUBMIT_DELAY
    messages: Tuple[ChatMessage, ...] = ()
    next_message_seq: int = 1
    user_message_count: int = 0
    is_loading: bool = False
    show_typing: bool = False
    lead_info: LeadInfo = field(default_factory=LeadInfo)
    lead_form_showing: bool = False
    lead_form_error: Optional[str] = None
    lead_captured: bool = False
    language: str = DEFAULT_LANGUAGE
    auto_open_timer: Optional[TimerHandle] = None
    prechat_timer: Optional[TimerHandle] = None
    next_timer_token: int = 1
    mounted: bool = True

    @property
    def is_open(self) -> bool:
        return self.phase != Phase.CLOSED

    @property
    def is_minimized(self) -> bool:
        return self.phase == Phase.MINIMIZED


# Events

@dataclass(frozen=True)
class LauncherClicked:
    pass


@dataclass(frozen=True)
class CloseClicked:
    pass


@dataclass(frozen=True)
class HeaderClicked:
    pass


@dataclass(frozen=True)
class TimerFired:
    name: str
    token: int
    now: datetime


@dataclass(frozen=True)
class PreChatSubmitted:
    name: str
    phone: str
    now: datetime


@dataclass(frozen=True)
class MessageSubmitted:
    text: str
    now: datetime


@dataclass(frozen=True)
class SuggestedPromptClicked:
    text: str
    now: datetime


@dataclass(frozen=True)
class ResponseOptionClicked:
    message_id: str
    option: str
    now: datetime


@dataclass(frozen=True)
class MessageReplied:
    result: MessageResult
    now: datetime


@dataclass(frozen=True)
class LeadCaptureFinished:
    result: LeadCaptureResult
    info: LeadInfo
    from_form: bool
    now: datetime


@dataclass(frozen=True)
class LeadFormSubmitted:
    info: LeadInfo
    now: datetime


@dataclass(frozen=True)
class LeadFormSkipped:
    pass


@dataclass(frozen=True)
class LanguageChanged:
    code: str


@dataclass(frozen=True)
class Unmounted:
    pass


Event = Union[
    LauncherClicked, CloseClicked, HeaderClicked, TimerFired, PreChatSubmitted,
    MessageSubmitted, SuggestedPromptClicked, ResponseOptionClicked, MessageReplied,
    LeadCaptureFinished, LeadFormSubmitted, LeadFormSkipped, LanguageChanged, Unmounted,
]


# Effects

@dataclass(frozen=True)
class ScheduleTimer:
    handle: TimerHandle


@dataclass(frozen=True)
class CancelTimer:
    handle: TimerHandle


@dataclass(frozen=True)
class SendMessage:
    text: str


@dataclass(frozen=True)
class CaptureLead:
    request: LeadCaptureRequest
    info: LeadInfo
    report: bool = True
    from_form: bool = False
    background: bool = True


@dataclass(frozen=True)
class SaveUserDetails:
    details: UserDetails


@dataclass(frozen=True)
class PostStatus:
    is_open: bool
    is_minimized: bool


Effect = Union[ScheduleTimer, CancelTimer, SendMessage, CaptureLead, SaveUserDetails, PostStatus]


class Transition(NamedTuple):
    state: WidgetState
    effects: Tuple[Effect, ...] = ()


def epoch_ms(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def lead_field(config: ChatbotConfig, name: str) -> Tuple[bool, bool, str]:
    """(enabled, required, placeholder) of a lead form field with defaults applied"""
    enabled, required, placeholder = DEFAULT_LEAD_FIELDS[name]
    fields = config.lead_capture.fields
    settings: Optional[LeadField] = getattr(fields, name) if fields else None
    if settings is None:
        return enabled, required, placeholder
    return (
        enabled if settings.enabled is None else settings.enabled,
        required if settings.required is None else settings.required,
        settings.placeholder or placeholder,
    )


def _append(state: WidgetState, role: str, content: str, now: datetime, **extra) -> WidgetState:
    message = ChatMessage(
        id=f"msg-{state.next_message_seq}",
        role=role,
        content=content,
        timestamp=now,
        **extra
    )
    return replace(
        state,
        messages=state.messages + (message,),
        next_message_seq=state.next_message_seq + 1
    )


def _seed_welcome(state: WidgetState, config: ChatbotConfig, now: datetime) -> WidgetState:
    if state.messages:
        return state
    welcome = ChatMessage(
        id="welcome",
        role="assistant",
        content=config.behavior.welcome_message or DEFAULT_WELCOME_MESSAGE,
        timestamp=now,
        response_options=list(config.behavior.suggested_prompts) if config.behavior.suggested_prompts else None
    )
    return replace(state, messages=(welcome,))


def _new_timer(state: WidgetState, name: str, delay: float) -> Tuple[WidgetState, TimerHandle]:
    handle = TimerHandle(name=name, token=state.next_timer_token, delay=delay)
    return replace(state, next_timer_token=state.next_timer_token + 1), handle


def _lead_request(state: WidgetState, info: LeadInfo, source: str) -> LeadCaptureRequest:
    if source == LEAD_SOURCE_PRECHAT:
        message = info.message
    else:
        message = info.message or (state.messages[0].content if state.messages else NO_INITIAL_MESSAGE)
    return LeadCaptureRequest(
        name=info.name,
        email=info.email,
        phone=info.phone,
        message=message,
        conversation_id=state.conversation_id,
        source=source
    )


def mount(
    chatbot_id: str,
    config: ChatbotConfig,
    session_id: str,
    conversation_id: str,
    now: datetime,
    mode: Optional[str] = None,
    user_details: Optional[UserDetails] = None,
    prechat_delay: float = PRECHAT_SUBMIT_DELAY
) -> Transition:
    """
    Initial state for a page view

    Pre-chat is skipped when lead capture is disabled or valid stored
    details exist. The auto-open timer is armed here, once.
    """
    mode = mode or config.widget_settings.mode
    mode = FULLPAGE if mode == FULLPAGE else FLOATING

    satisfied = not config.lead_capture.enabled or user_details is not None
    if mode == FULLPAGE:
        phase = Phase.OPEN if satisfied else Phase.PRE_CHAT
    else:
        phase = Phase.CLOSED

    state = WidgetState(
        chatbot_id=chatbot_id,
        session_id=session_id,
        conversation_id=conversation_id,
        mode=mode,
        phase=phase,
        prechat_satisfied=satisfied,
        user_details=user_details,
        prechat_delay=prechat_delay,
        language=config.widget_settings.default_language or DEFAULT_LANGUAGE
    )
    if satisfied:
        state = _seed_welcome(state, config, now)

    effects = []
    if mode == FLOATING and config.widget_settings.auto_open:
        delay = config.widget_settings.auto_open_delay
        state, handle = _new_timer(state, AUTO_OPEN_TIMER, DEFAULT_AUTO_OPEN_DELAY if delay is None else delay)
        state = replace(state, auto_open_timer=handle)
        effects.append(ScheduleTimer(handle))

    effects.append(PostStatus(is_open=state.is_open, is_minimized=state.is_minimized))
    return Transition(state, tuple(effects))


def reduce(state: WidgetState, event: Event, config: ChatbotConfig) -> Transition:
    """Apply one event; a status effect is added whenever open/minimized changes"""
    if not state.mounted:
        return Transition(state)

    transition = _reduce(state, event, config)
    new_state = transition.state
    if (new_state.is_open, new_state.is_minimized) != (state.is_open, state.is_minimized):
        status = PostStatus(is_open=new_state.is_open, is_minimized=new_state.is_minimized)
        return Transition(new_state, transition.effects + (status,))
    return transition


def _reduce(state: WidgetState, event: Event, config: ChatbotConfig) -> Transition:
    if isinstance(event, LauncherClicked):
        return _open(state)

    if isinstance(event, TimerFired):
        return _timer_fired(state, event, config)

    if isinstance(event, CloseClicked):
        if state.mode != FLOATING or state.phase == Phase.CLOSED:
            return Transition(state)
        return Transition(replace(state, phase=Phase.CLOSED))

    if isinstance(event, HeaderClicked):
        if state.mode != FLOATING:
            return Transition(state)
        if state.phase == Phase.OPEN:
            return Transition(replace(state, phase=Phase.MINIMIZED))
        if state.phase == Phase.MINIMIZED:
            return Transition(replace(state, phase=Phase.OPEN))
        return Transition(state)

    if isinstance(event, PreChatSubmitted):
        return _prechat_submitted(state, event)

    if isinstance(event, (MessageSubmitted, SuggestedPromptClicked)):
        return _send(state, event.text, event.now, config)

    if isinstance(event, ResponseOptionClicked):
        return _response_option(state, event, config)

    if isinstance(event, MessageReplied):
        return _replied(state, event, config)

    if isinstance(event, LeadCaptureFinished):
        if not event.result.ok:
            return Transition(state)
        state = replace(state, lead_captured=True, lead_info=state.lead_info.merge(event.info))
        if event.from_form:
            thank_you = config.lead_capture.thank_you_message or get_translations(state.language)["thankYou"]
            state = _append(state, "assistant", thank_you, event.now)
        return Transition(state)

    if isinstance(event, LeadFormSubmitted):
        return _lead_form_submitted(state, event, config)

    if isinstance(event, LeadFormSkipped):
        if not state.lead_form_showing:
            return Transition(state)
        # Skipping counts as captured so the form is never offered again
        return Transition(replace(state, lead_form_showing=False, lead_form_error=None, lead_captured=True))

    if isinstance(event, LanguageChanged):
        settings = config.widget_settings
        codes = [language.code for language in settings.supported_languages or []]
        if not settings.enable_language_switcher or event.code not in codes:
            return Transition(state)
        return Transition(replace(state, language=event.code))

    if isinstance(event, Unmounted):
        effects = tuple(
            CancelTimer(handle)
            for handle in (state.auto_open_timer, state.prechat_timer)
            if handle is not None
        )
        return Transition(replace(state, mounted=False, auto_open_timer=None, prechat_timer=None), effects)

    return Transition(state)


def _open(state: WidgetState) -> Transition:
    if state.phase != Phase.CLOSED:
        return Transition(state)

    effects = ()
    if state.auto_open_timer is not None:
        effects = (CancelTimer(state.auto_open_timer),)

    phase = Phase.OPEN if state.prechat_satisfied else Phase.PRE_CHAT
    return Transition(replace(state, phase=phase, auto_open_timer=None), effects)


def _timer_fired(state: WidgetState, event: TimerFired, config: ChatbotConfig) -> Transition:
    if event.name == AUTO_OPEN_TIMER:
        handle = state.auto_open_timer
        if handle is None or handle.token != event.token:
            return Transition(state)
        state = replace(state, auto_open_timer=None)
        return _open(state)

    if event.name == PRECHAT_TIMER:
        handle = state.prechat_timer
        if handle is None or handle.token != event.token:
            return Transition(state)

        state = replace(
            state,
            prechat_timer=None,
            prechat_satisfied=True,
            user_details=state.prechat.pending,
            prechat=PreChatForm()
        )
        state = _seed_welcome(state, config, event.now)
        if state.phase == Phase.PRE_CHAT:
            state = replace(state, phase=Phase.OPEN)
        return Transition(state)

    return Transition(state)


def _prechat_submitted(state: WidgetState, event: PreChatSubmitted) -> Transition:
    if state.phase != Phase.PRE_CHAT or state.prechat.submitting:
        return Transition(state)

    error = validate_prechat(event.name, event.phone)
    if error:
        return Transition(replace(state, prechat=PreChatForm(error=error)))

    details = UserDetails(
        name=event.name.strip(),
        phone=event.phone.strip(),
        timestamp=epoch_ms(event.now)
    )
    state, handle = _new_timer(state, PRECHAT_TIMER, state.prechat_delay)
    state = replace(
        state,
        prechat=PreChatForm(submitting=True, pending=details),
        prechat_timer=handle
    )
    info = LeadInfo(name=details.name, phone=details.phone)
    return Transition(state, (
        SaveUserDetails(details),
        CaptureLead(
            request=_lead_request(state, info, LEAD_SOURCE_PRECHAT),
            info=info,
            report=False
        ),
        ScheduleTimer(handle),
    ))


def _send(state: WidgetState, text: str, now: datetime, config: ChatbotConfig) -> Transition:
    if not (text or "").strip() or state.is_loading:
        return Transition(state)
    if state.phase != Phase.OPEN or not state.prechat_satisfied:
        return Transition(state)

    state = _append(state, "user", text, now)
    state = replace(
        state,
        user_message_count=state.user_message_count + 1,
        is_loading=True,
        show_typing=True
    )

    effects = []
    lead_capture = config.lead_capture
    detect = lead_capture.detect_from_messages is not False
    if lead_capture.enabled and detect and not state.lead_captured:
        detected = detect_lead(text)
        if not detected.is_empty:
            state = replace(state, lead_info=state.lead_info.merge(detected))
            if state.lead_info.has_contact:
                effects.append(CaptureLead(
                    request=_lead_request(state, state.lead_info, LEAD_SOURCE_WIDGET),
                    info=state.lead_info
                ))

    effects.append(SendMessage(text))
    return Transition(state, tuple(effects))


def _response_option(state: WidgetState, event: ResponseOptionClicked, config: ChatbotConfig) -> Transition:
    if state.is_loading or state.phase != Phase.OPEN:
        return Transition(state)

    for index, message in enumerate(state.messages):
        if message.id == event.message_id:
            break
    else:
        return Transition(state)

    if not message.response_options or event.option not in message.response_options:
        return Transition(state)

    cleared = message.model_copy(update={"response_options": None})
    messages = state.messages[:index] + (cleared,) + state.messages[index + 1:]
    return _send(replace(state, messages=messages), event.option, event.now, config)


def _replied(state: WidgetState, event: MessageReplied, config: ChatbotConfig) -> Transition:
    if not state.is_loading:
        return Transition(state)

    result = event.result
    fallback = config.behavior.fallback_message
    if result.ok and result.reply is not None:
        reply = result.reply
        state = _append(
            state,
            "assistant",
            reply.response or fallback or DEFAULT_EMPTY_REPLY_MESSAGE,
            event.now,
            response_options=reply.response_options or None,
            links=reply.links or None
        )
    else:
        state = _append(state, "assistant", fallback or DEFAULT_FALLBACK_MESSAGE, event.now)

    state = replace(state, is_loading=False, show_typing=False)

    if result.ok and _should_ask_for_lead(state, config):
        state = replace(state, lead_form_showing=True, lead_form_error=None)
    return Transition(state)


def _should_ask_for_lead(state: WidgetState, config: ChatbotConfig) -> bool:
    lead_capture = config.lead_capture
    if not lead_capture.enabled or not lead_capture.auto_ask_for_lead:
        return False
    if state.lead_captured or state.lead_form_showing:
        return False
    threshold = lead_capture.ask_after_messages or DEFAULT_ASK_AFTER_MESSAGES
    return state.user_message_count >= threshold


def _lead_form_submitted(state: WidgetState, event: LeadFormSubmitted, config: ChatbotConfig) -> Transition:
    if not state.lead_form_showing:
        return Transition(state)

    info = state.lead_info.merge(event.info)
    for name in ("name", "email", "phone"):
        enabled, required, _ = lead_field(config, name)
        if enabled and required and not (getattr(info, name) or "").strip():
            return Transition(replace(state, lead_form_error=LEAD_FORM_REQUIRED_ERROR))

    state = replace(state, lead_form_showing=False, lead_form_error=None)
    return Transition(state, (
        CaptureLead(
            request=_lead_request(state, info, LEAD_SOURCE_WIDGET),
            info=info,
            from_form=True,
            background=False
        ),
    ))
