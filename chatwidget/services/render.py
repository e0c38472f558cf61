"""Pure projection of widget state into a view model"""
import re
from datetime import datetime
from typing import Optional

from chatwidget.models.config import WidgetBootstrap, DEFAULT_POSITION, DEFAULT_TOOLTIP_TEXT
from chatwidget.models.widget import (
    WidgetView,
    LauncherView,
    HeaderView,
    PreChatView,
    MessageView,
    LeadFieldView,
    LeadFormView,
    InputView,
    LanguageOptionView,
    LanguageSwitcherView,
)
from chatwidget.services import business_hours, localization, theme as themes
from chatwidget.services.widget_state import WidgetState, Phase, FLOATING, FULLPAGE, lead_field

MOBILE_USER_AGENT = re.compile(r"iPhone|iPad|iPod|Android", re.IGNORECASE)


def is_mobile(user_agent: Optional[str]) -> bool:
    return bool(user_agent and MOBILE_USER_AGENT.search(user_agent))


def render(
    bootstrap: WidgetBootstrap,
    state: WidgetState,
    now: datetime,
    user_agent: Optional[str] = None
) -> Optional[WidgetView]:
    """
    Build the view for the current state

    Returns:
        None when the widget must not be shown at all (inactive chatbot,
        expired subscription, unmounted, or hidden on mobile)
    """
    if not bootstrap.is_renderable or not state.mounted:
        return None

    config = bootstrap.config
    settings = config.widget_settings
    branding = config.branding
    if is_mobile(user_agent) and settings.show_on_mobile is False:
        return None

    theme = themes.normalize_theme(settings.design_theme)
    loc = localization.resolve(state.language, settings.supported_languages)
    accent = themes.accent_color(branding)

    view = {
        "mode": state.mode,
        "phase": state.phase.value,
        "position": settings.position or DEFAULT_POSITION,
        "theme": theme,
        "language": loc.code,
        "direction": "rtl" if loc.rtl else "ltr",
    }

    if state.phase == Phase.CLOSED:
        view["launcher"] = LauncherView(
            tooltip=settings.tooltip_text or DEFAULT_TOOLTIP_TEXT,
            style=themes.launcher_style(branding)
        )
        return WidgetView(**view)

    online = business_hours.is_open(config.business_hours, now)
    minimized = state.phase == Phase.MINIMIZED
    floating = state.mode == FLOATING
    view["shell_style"] = themes.shell_style(theme, branding)
    view["header"] = HeaderView(
        title=bootstrap.company_name,
        logo_url=branding.logo_url,
        online=online,
        status_label=None if minimized else loc.t("weAreOnline" if online else "currentlyOffline"),
        can_minimize=floating and state.phase != Phase.PRE_CHAT,
        can_close=floating,
        minimize_label=loc.t("expand" if minimized else "minimize"),
        close_label=loc.t("close"),
        style=themes.header_style(theme, branding)
    )

    if minimized:
        return WidgetView(**view)

    if state.phase == Phase.PRE_CHAT:
        view["prechat"] = PreChatView(
            title=f"{loc.t('welcomeTo')} {bootstrap.company_name}",
            subtitle=loc.t("provideDetails"),
            name_placeholder=loc.t("yourName"),
            phone_placeholder=loc.t("yourPhone"),
            submit_label=loc.t("starting" if state.prechat.submitting else "startChat"),
            error=state.prechat.error,
            submitting=state.prechat.submitting,
            accent_color=accent
        )
        return WidgetView(**view)

    if not online:
        view["offline_notice"] = business_hours.offline_message(config.business_hours)

    view["messages"] = [
        MessageView(
            id=message.id,
            role=message.role,
            content=message.content,
            timestamp=message.timestamp,
            response_options=message.response_options,
            links=message.links,
            style=themes.message_style(theme, message.role, branding)
        )
        for message in state.messages
    ]
    if len(state.messages) == 1 and state.messages[0].response_options:
        view["quick_questions_label"] = loc.t("quickQuestions")

    view["typing"] = state.show_typing
    view["typing_color"] = branding.thinking_dots_color or accent

    if state.lead_form_showing:
        fields = []
        for name in ("name", "email", "phone"):
            enabled, required, placeholder = lead_field(config, name)
            if enabled:
                fields.append(LeadFieldView(
                    name=name,
                    required=required,
                    placeholder=placeholder,
                    value=getattr(state.lead_info, name)
                ))
        view["lead_form"] = LeadFormView(
            message=config.lead_capture.capture_message or loc.t("shareContact"),
            fields=fields,
            submit_label=loc.t("submit"),
            skip_label=loc.t("skip"),
            error=state.lead_form_error,
            accent_color=accent
        )

    offline_placeholder = state.mode == FULLPAGE and not online
    view["input"] = InputView(
        placeholder=loc.t("leaveMessage" if offline_placeholder else "typeMessage"),
        disabled=state.is_loading,
        send_label=loc.t("send"),
        accent_color=accent
    )

    languages = settings.supported_languages or []
    if settings.enable_language_switcher and len(languages) > 1:
        view["language_switcher"] = LanguageSwitcherView(
            current=state.language,
            languages=[
                LanguageOptionView(
                    code=language.code,
                    name=language.name or language.code,
                    rtl=localization.is_rtl(language.code, languages)
                )
                for language in languages
            ]
        )

    return WidgetView(**view)
