"""Message exchange client for the platform widget API"""
import httpx
from typing import Optional
from contextlib import asynccontextmanager
import logging

from chatwidget.models.chat import (
    MessageRequest,
    MessageReply,
    MessageResult,
    LeadCaptureRequest,
    LeadCaptureResult,
)

logger = logging.getLogger(__name__)


class WidgetApiClient:
    """
    HTTP client for /api/widget/{chatbotId} endpoints

    Calls are never retried and never raise: every outcome comes back as a
    result model. No timeout is set here, httpx defaults apply.

    Args:
        base_url: Platform API base URL
        http_client: Optional shared AsyncClient (one is opened per call otherwise)
    """

    def __init__(self, base_url: str, http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client

    @asynccontextmanager
    async def _client(self):
        if self.http_client is not None:
            yield self.http_client
        else:
            async with httpx.AsyncClient() as client:
                yield client

    def _url(self, chatbot_id: str, suffix: str = "") -> str:
        return f"{self.base_url}/api/widget/{chatbot_id}{suffix}"

    async def get_widget(self, chatbot_id: str) -> Optional[dict]:
        """Raw GET /api/widget/{chatbotId} body, None on any failure"""
        try:
            async with self._client() as client:
                response = await client.get(self._url(chatbot_id))

            if response.status_code != 200:
                logger.warning(f"Widget config fetch failed for chatbot {chatbot_id}: {response.status_code}")
                return None

            data = response.json()
            if not isinstance(data, dict):
                logger.warning(f"Widget config for chatbot {chatbot_id} is not an object")
                return None
            return data
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Widget config fetch error for chatbot {chatbot_id}: {e}")
            return None

    async def send_message(self, chatbot_id: str, message: str, session_id: str) -> MessageResult:
        """POST a visitor message and return the assistant reply"""
        body = MessageRequest(message=message, session_id=session_id)
        try:
            async with self._client() as client:
                response = await client.post(
                    self._url(chatbot_id, "/message"),
                    json=body.model_dump(by_alias=True)
                )

            if response.status_code < 200 or response.status_code >= 300:
                logger.error(f"Widget message failed for chatbot {chatbot_id}: {response.status_code}")
                return MessageResult(ok=False, error=f"HTTP {response.status_code}")

            reply = MessageReply.model_validate(response.json())
            return MessageResult(ok=True, reply=reply)
        except Exception as e:
            logger.error(f"Widget message error for chatbot {chatbot_id}: {e}")
            return MessageResult(ok=False, error=str(e))

    async def capture_lead(self, chatbot_id: str, lead: LeadCaptureRequest) -> LeadCaptureResult:
        """POST lead details; only the status code matters"""
        try:
            async with self._client() as client:
                response = await client.post(
                    self._url(chatbot_id, "/capture-lead"),
                    json=lead.model_dump(by_alias=True, exclude_none=True)
                )

            if response.status_code < 200 or response.status_code >= 300:
                logger.error(f"Failed to capture lead for chatbot {chatbot_id}: {response.status_code}")
                return LeadCaptureResult(ok=False, status_code=response.status_code, error=response.text)

            return LeadCaptureResult(ok=True, status_code=response.status_code)
        except Exception as e:
            logger.error(f"Failed to capture lead for chatbot {chatbot_id}: {e}")
            return LeadCaptureResult(ok=False, error=str(e))
