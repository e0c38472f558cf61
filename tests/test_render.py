from chatwidget.models.chat import MessageReply, MessageResult, UserDetails
from chatwidget.models.config import WidgetBootstrap
from chatwidget.services.render import render, is_mobile
from chatwidget.services.widget_state import (
    LauncherClicked,
    HeaderClicked,
    MessageSubmitted,
    MessageReplied,
    mount,
    reduce,
)
from conftest import START, make_bootstrap, widget_bootstrap

IPHONE = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)"
DESKTOP = "Mozilla/5.0 (X11; Linux x86_64)"


def state_for(bootstrap, *events, mode=None, user_details=None):
    state, _ = mount("bot-1", bootstrap.config, "widget-1", "conv-1", START, mode=mode, user_details=user_details)
    for event in events:
        state, _ = reduce(state, event, bootstrap.config)
    return state


def test_empty_config_renders_with_defaults():
    bootstrap = WidgetBootstrap.model_validate({"status": "active", "config": {}})
    view = render(bootstrap, state_for(bootstrap, LauncherClicked()), START)

    assert view.theme == "soft"
    assert view.position == "bottom-right"
    assert view.header.title == "Chat"
    assert view.messages[0].content == "Hello! Welcome to our service. How can I help you today?"
    assert view.input.placeholder == "Type your message..."
    assert view.typing_color == "#3B82F6"


def test_closed_shows_only_launcher():
    bootstrap = widget_bootstrap(widgetSettings={"tooltipText": "Questions?"})
    view = render(bootstrap, state_for(bootstrap), START)

    assert view.phase == "closed"
    assert view.launcher.tooltip == "Questions?"
    assert "linear-gradient" in view.launcher.style["backgroundImage"]
    assert view.header is None and view.messages == []


def test_not_renderable():
    bootstrap = WidgetBootstrap.model_validate(make_bootstrap(status="inactive"))
    assert render(bootstrap, state_for(bootstrap), START) is None


def test_hidden_on_mobile_when_disabled():
    bootstrap = widget_bootstrap(widgetSettings={"showOnMobile": False})
    state = state_for(bootstrap)
    assert render(bootstrap, state, START, IPHONE) is None
    assert render(bootstrap, state, START, DESKTOP) is not None


def test_shown_on_mobile_by_default():
    bootstrap = widget_bootstrap()
    assert render(bootstrap, state_for(bootstrap), START, IPHONE) is not None
    assert is_mobile("Mozilla/5.0 (Linux; Android 14)")
    assert not is_mobile(None)


def test_minimized_shows_header_only():
    bootstrap = widget_bootstrap()
    view = render(bootstrap, state_for(bootstrap, LauncherClicked(), HeaderClicked()), START)

    assert view.phase == "minimized"
    assert view.header.title == "Acme"
    assert view.header.status_label is None
    assert view.header.minimize_label == "Expand"
    assert view.messages == [] and view.input is None


def test_prechat_view():
    bootstrap = widget_bootstrap(leadCapture={"enabled": True})
    view = render(bootstrap, state_for(bootstrap, LauncherClicked()), START)

    assert view.prechat.title == "Welcome to Acme"
    assert view.prechat.submit_label == "Start Chat"
    assert not view.header.can_minimize
    assert view.input is None


def test_offline_notice_and_fullpage_placeholder():
    hours = {
        "enabled": True,
        "timezone": "UTC",
        "schedule": {"monday": {"open": "9:00", "close": "10:00"}},
        "offlineMessage": "Closed for lunch",
    }
    bootstrap = widget_bootstrap(businessHours=hours)
    view = render(bootstrap, state_for(bootstrap, mode="fullpage"), START)

    assert not view.header.online
    assert view.header.status_label == "Currently offline - Leave us a message"
    assert view.offline_notice == "Closed for lunch"
    assert view.input.placeholder == "Leave us a message..."
    assert not view.header.can_close


def test_online_header_during_hours():
    hours = {"enabled": True, "timezone": "UTC", "schedule": {"monday": {"open": "9:00", "close": "17:00"}}}
    bootstrap = widget_bootstrap(businessHours=hours)
    view = render(bootstrap, state_for(bootstrap, LauncherClicked()), START)
    assert view.header.online
    assert view.offline_notice is None


def test_quick_questions_only_before_first_exchange():
    bootstrap = widget_bootstrap(behavior={"suggestedPrompts": ["Pricing"]})
    view = render(bootstrap, state_for(bootstrap, LauncherClicked()), START)
    assert view.quick_questions_label == "Quick questions to get started:"

    state = state_for(
        bootstrap,
        LauncherClicked(),
        MessageSubmitted(text="hi", now=START),
    )
    view = render(bootstrap, state, START)
    assert view.quick_questions_label is None
    assert view.typing
    assert view.input.disabled


def test_message_styles_follow_roles():
    bootstrap = widget_bootstrap(branding={"userMessageBgColor": "#FFFFFF", "companyName": "Acme"})
    reply = MessageReplied(result=MessageResult(ok=True, reply=MessageReply(response="ok")), now=START)
    state = state_for(bootstrap, LauncherClicked(), MessageSubmitted(text="hi", now=START), reply)
    view = render(bootstrap, state, START)

    user, assistant = view.messages[1], view.messages[2]
    assert user.style["color"] == "#000000"
    assert assistant.style["color"] == "#1f2937"


def test_lead_form_lists_enabled_fields():
    lead_capture = {
        "enabled": True,
        "autoAskForLead": True,
        "askAfterMessages": 1,
        "fields": {"phone": {"enabled": False}, "name": {"required": True, "placeholder": "Full name"}},
    }
    bootstrap = widget_bootstrap(leadCapture=lead_capture)
    reply = MessageReplied(result=MessageResult(ok=True, reply=MessageReply(response="ok")), now=START)
    state = state_for(
        bootstrap,
        LauncherClicked(),
        MessageSubmitted(text="hi", now=START),
        reply,
        user_details=UserDetails(name="Ann", phone="1", timestamp=0),
    )
    view = render(bootstrap, state, START)

    assert [field.name for field in view.lead_form.fields] == ["name", "email"]
    assert view.lead_form.fields[0].placeholder == "Full name"
    assert view.lead_form.fields[0].required
    assert view.lead_form.message == "To help serve you better, would you mind sharing your contact information?"


def test_rtl_language_switcher():
    languages = [{"code": "en", "name": "English"}, {"code": "ar", "name": "العربية", "rtl": True}]
    bootstrap = widget_bootstrap(widgetSettings={
        "enableLanguageSwitcher": True,
        "supportedLanguages": languages,
        "defaultLanguage": "ar",
    })
    view = render(bootstrap, state_for(bootstrap, LauncherClicked()), START)

    assert view.direction == "rtl"
    assert view.language == "ar"
    assert [option.code for option in view.language_switcher.languages] == ["en", "ar"]
    assert view.input.send_label == "إرسال"


def test_switcher_hidden_with_single_language():
    bootstrap = widget_bootstrap(widgetSettings={"enableLanguageSwitcher": True, "supportedLanguages": [{"code": "en"}]})
    view = render(bootstrap, state_for(bootstrap, LauncherClicked()), START)
    assert view.language_switcher is None


def test_view_serializes_camel_case():
    bootstrap = widget_bootstrap()
    data = render(bootstrap, state_for(bootstrap, LauncherClicked()), START).model_dump(by_alias=True)
    assert "shellStyle" in data
    assert "canMinimize" in data["header"]


def test_switcher_with_unnamed_languages():
    languages = [{"code": "en", "name": None, "rtl": None}, {"code": "ar", "name": None, "rtl": None}]
    bootstrap = widget_bootstrap(widgetSettings={"enableLanguageSwitcher": True, "supportedLanguages": languages})
    view = render(bootstrap, state_for(bootstrap, LauncherClicked()), START)

    options = {option.code: option for option in view.language_switcher.languages}
    assert options["ar"].name == "ar"
    assert options["ar"].rtl
    assert not options["en"].rtl
