"""Widget-related Pydantic models"""
from pydantic import Field
from typing import Optional, List, Dict, Literal
from datetime import datetime

from chatwidget.models.config import CamelModel
from chatwidget.models.chat import ResponseLink


class WidgetStatusEvent(CamelModel):
    """Frame event posted to the embedding page so it can resize the iframe"""
    type: Literal["widget-status"] = "widget-status"
    is_open: bool
    is_minimized: bool


class LauncherView(CamelModel):
    tooltip: str
    style: Dict[str, str]


class HeaderView(CamelModel):
    title: str
    logo_url: Optional[str] = None
    online: bool = True
    status_label: Optional[str] = None
    can_minimize: bool = True
    can_close: bool = True
    minimize_label: str
    close_label: str
    style: Dict[str, str]


class PreChatView(CamelModel):
    title: str
    subtitle: str
    name_placeholder: str
    phone_placeholder: str
    submit_label: str
    error: Optional[str] = None
    submitting: bool = False
    accent_color: str


class MessageView(CamelModel):
    id: str
    role: str
    content: str
    timestamp: datetime
    response_options: Optional[List[str]] = None
    links: Optional[List[ResponseLink]] = None
    style: Dict[str, str]


class LeadFieldView(CamelModel):
    name: str
    required: bool
    placeholder: str
    value: Optional[str] = None


class LeadFormView(CamelModel):
    message: str
    fields: List[LeadFieldView]
    submit_label: str
    skip_label: str
    error: Optional[str] = None
    accent_color: str


class InputView(CamelModel):
    placeholder: str
    disabled: bool = False
    send_label: str
    accent_color: str


class LanguageOptionView(CamelModel):
    code: str
    name: str
    rtl: bool = False


class LanguageSwitcherView(CamelModel):
    current: str
    languages: List[LanguageOptionView]


class WidgetView(CamelModel):
    """Everything the front end needs to paint the widget"""
    mode: str
    phase: str
    position: str
    theme: str
    language: str
    direction: Literal["ltr", "rtl"] = "ltr"
    launcher: Optional[LauncherView] = None
    shell_style: Optional[Dict[str, str]] = None
    header: Optional[HeaderView] = None
    prechat: Optional[PreChatView] = None
    offline_notice: Optional[str] = None
    messages: List[MessageView] = Field(default_factory=list)
    quick_questions_label: Optional[str] = None
    typing: bool = False
    typing_color: Optional[str] = None
    lead_form: Optional[LeadFormView] = None
    input: Optional[InputView] = None
    language_switcher: Optional[LanguageSwitcherView] = None


# Widget host API

class CreateSessionRequest(CamelModel):
    mode: Optional[Literal["floating", "fullpage"]] = None
    browser_session_id: Optional[str] = None
    user_agent: Optional[str] = None


class WidgetAction(CamelModel):
    """A visitor interaction forwarded by the iframe page"""
    type: Literal[
        "open",
        "close",
        "toggle_minimize",
        "prechat_submit",
        "send",
        "suggested_prompt",
        "response_option",
        "lead_form_submit",
        "lead_form_skip",
        "language",
    ]
    text: Optional[str] = None
    message_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    code: Optional[str] = None


class WidgetSessionResponse(CamelModel):
    session_id: Optional[str] = None
    browser_session_id: Optional[str] = None
    rendered: bool
    view: Optional[WidgetView] = None
    events: List[WidgetStatusEvent] = Field(default_factory=list)
