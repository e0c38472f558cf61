"""Chatbot configuration Pydantic models

Every section and every field is optional. The models never fill in values
on their own: consumers apply the documented defaults below so that a partial
configuration never blocks rendering.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Optional, List


DEFAULT_PRIMARY_COLOR = "#3B82F6"
DEFAULT_SECONDARY_COLOR = "#10B981"
DEFAULT_BOT_MESSAGE_BG_COLOR = "#F3F4F6"
DEFAULT_CHAT_WINDOW_BG_COLOR = "#FFFFFF"
DEFAULT_THEME = "soft"
DEFAULT_POSITION = "bottom-right"
DEFAULT_MODE = "floating"
DEFAULT_TOOLTIP_TEXT = "Chat with us!"
DEFAULT_WELCOME_MESSAGE = "Hello! Welcome to our service. How can I help you today?"
DEFAULT_FALLBACK_MESSAGE = "I'm sorry, something went wrong. Please try again."
DEFAULT_EMPTY_REPLY_MESSAGE = "I'm sorry, I couldn't process your request."
DEFAULT_OFFLINE_MESSAGE = "We're currently closed. Our business hours are Monday-Friday 9:00 AM - 5:00 PM."
DEFAULT_TIMEZONE = "UTC"
DEFAULT_AUTO_OPEN_DELAY = 5  # seconds
DEFAULT_ASK_AFTER_MESSAGES = 3
DEFAULT_LANGUAGE = "en"
DEFAULT_COMPANY_NAME = "Chat"

# (enabled, required, placeholder) per lead form field
DEFAULT_LEAD_FIELDS = {
    "name": (True, False, "Your name"),
    "email": (True, True, "your.email@example.com"),
    "phone": (True, False, "+1 (555) 123-4567"),
}

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class CamelModel(BaseModel):
    """Base model reading and writing the platform's camelCase JSON"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore"
    )


class Branding(CamelModel):
    """Brand colors and imagery"""
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    logo_url: Optional[str] = None
    background_image_url: Optional[str] = None
    company_name: Optional[str] = None
    chat_window_bg_color: Optional[str] = None
    user_message_bg_color: Optional[str] = None
    bot_message_bg_color: Optional[str] = None
    thinking_dots_color: Optional[str] = None
    send_button_color: Optional[str] = None


class Behavior(CamelModel):
    """Conversation behavior"""
    welcome_message: Optional[str] = None
    fallback_message: Optional[str] = None
    suggested_prompts: Optional[List[str]] = None
    ai_personality: Optional[Any] = None
    custom_instructions: Optional[str] = None
    main_language: Optional[str] = None


class SupportedLanguage(CamelModel):
    code: str
    name: Optional[str] = None
    rtl: Optional[bool] = None


class WidgetSettings(CamelModel):
    """Widget presentation settings"""
    mode: Optional[str] = None
    position: Optional[str] = None
    tooltip_text: Optional[str] = None
    show_on_mobile: Optional[bool] = None
    auto_open: Optional[bool] = None
    auto_open_delay: Optional[float] = None
    design_theme: Optional[str] = None
    enable_language_switcher: Optional[bool] = None
    supported_languages: Optional[List[SupportedLanguage]] = None
    default_language: Optional[str] = None


class DaySchedule(CamelModel):
    open: Optional[str] = None
    close: Optional[str] = None
    closed: Optional[bool] = None


class WeeklySchedule(CamelModel):
    monday: Optional[DaySchedule] = None
    tuesday: Optional[DaySchedule] = None
    wednesday: Optional[DaySchedule] = None
    thursday: Optional[DaySchedule] = None
    friday: Optional[DaySchedule] = None
    saturday: Optional[DaySchedule] = None
    sunday: Optional[DaySchedule] = None

    def for_weekday(self, weekday: str) -> Optional[DaySchedule]:
        """Schedule entry for a lowercase weekday name"""
        if weekday not in WEEKDAYS:
            return None
        return getattr(self, weekday)

    def is_empty(self) -> bool:
        return all(getattr(self, day) is None for day in WEEKDAYS)


class BusinessHours(CamelModel):
    enabled: Optional[bool] = None
    timezone: Optional[str] = None
    schedule: Optional[WeeklySchedule] = None
    offline_message: Optional[str] = None


class LeadField(CamelModel):
    enabled: Optional[bool] = None
    required: Optional[bool] = None
    placeholder: Optional[str] = None


class LeadFields(CamelModel):
    name: Optional[LeadField] = None
    email: Optional[LeadField] = None
    phone: Optional[LeadField] = None


class LeadCapture(CamelModel):
    """Lead capture rules"""
    enabled: Optional[bool] = None
    capture_message: Optional[str] = None
    thank_you_message: Optional[str] = None
    auto_ask_for_lead: Optional[bool] = None
    ask_after_messages: Optional[int] = None
    fields: Optional[LeadFields] = None
    detect_from_messages: Optional[bool] = None


class ChatbotConfig(CamelModel):
    """Chatbot configuration consumed by the widget (read-only)"""
    branding: Branding = Field(default_factory=Branding)
    behavior: Behavior = Field(default_factory=Behavior)
    widget_settings: WidgetSettings = Field(default_factory=WidgetSettings)
    business_hours: BusinessHours = Field(default_factory=BusinessHours)
    lead_capture: LeadCapture = Field(default_factory=LeadCapture)

    @field_validator("branding", "behavior", "widget_settings", "business_hours", "lead_capture", mode="before")
    @classmethod
    def absent_section(cls, value):
        # An explicit null section reads the same as a missing one
        return {} if value is None else value


class ClientInfo(CamelModel):
    name: Optional[str] = None


class SubscriptionInfo(CamelModel):
    status: Optional[str] = None


class WidgetBootstrap(CamelModel):
    """Response of GET /api/widget/{chatbotId}"""
    id: Optional[str] = None
    config: ChatbotConfig = Field(default_factory=ChatbotConfig)
    status: Optional[str] = None
    client: ClientInfo = Field(default_factory=ClientInfo)
    subscription: SubscriptionInfo = Field(default_factory=SubscriptionInfo)

    @field_validator("config", "client", "subscription", mode="before")
    @classmethod
    def absent_section(cls, value):
        return {} if value is None else value

    @property
    def is_renderable(self) -> bool:
        """An expired subscription or inactive chatbot renders nothing"""
        if self.subscription.status == "expired":
            return False
        return self.status == "active"

    @property
    def company_name(self) -> str:
        return self.config.branding.company_name or self.client.name or DEFAULT_COMPANY_NAME
