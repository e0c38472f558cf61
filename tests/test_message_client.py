import asyncio

import httpx

from chatwidget.models.chat import LeadCaptureRequest
from chatwidget.services.message_client import WidgetApiClient
from conftest import BASE_URL


def test_send_message_posts_message_and_session(platform):
    platform.reply = {
        "response": "We open at 9.",
        "responseOptions": ["Book a visit"],
        "links": [{"title": "Hours", "url": "https://acme.test/hours"}],
    }
    result = asyncio.run(platform.client().send_message("bot-1", "When do you open?", "widget-1"))

    assert result.ok
    assert result.reply.response == "We open at 9."
    assert result.reply.response_options == ["Book a visit"]
    assert result.reply.links[0].url == "https://acme.test/hours"

    request = platform.requests[-1]
    assert str(request.url) == f"{BASE_URL}/api/widget/bot-1/message"
    assert platform.bodies("/message") == [{"message": "When do you open?", "sessionId": "widget-1"}]


def test_send_message_non_2xx_is_failure(platform):
    platform.message_status = 500
    result = asyncio.run(platform.client().send_message("bot-1", "hi", "widget-1"))
    assert not result.ok
    assert result.reply is None


def test_send_message_transport_error_is_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = WidgetApiClient(BASE_URL, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    result = asyncio.run(client.send_message("bot-1", "hi", "widget-1"))
    assert not result.ok
    assert "connection refused" in result.error


def test_send_message_is_not_retried(platform):
    platform.message_status = 503
    asyncio.run(platform.client().send_message("bot-1", "hi", "widget-1"))
    assert len(platform.bodies("/message")) == 1


def test_capture_lead_body(platform):
    lead = LeadCaptureRequest(email="ann@example.com", message="Hi", conversation_id="conv-1", source="widget")
    result = asyncio.run(platform.client().capture_lead("bot-1", lead))

    assert result.ok
    assert result.status_code == 200
    assert platform.bodies("/capture-lead") == [{
        "email": "ann@example.com",
        "message": "Hi",
        "conversationId": "conv-1",
        "source": "widget",
    }]


def test_capture_lead_failure(platform):
    platform.lead_status = 400
    lead = LeadCaptureRequest(phone="555", conversation_id="conv-1", source="pre-chat-form")
    result = asyncio.run(platform.client().capture_lead("bot-1", lead))
    assert not result.ok
    assert result.status_code == 400


def test_get_widget(platform):
    data = asyncio.run(platform.client().get_widget("bot-1"))
    assert data["status"] == "active"
    assert str(platform.requests[-1].url) == f"{BASE_URL}/api/widget/bot-1"


def test_get_widget_not_found(platform):
    platform.config_status = 404
    assert asyncio.run(platform.client().get_widget("bot-1")) is None
