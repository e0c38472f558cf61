"""Chatbot configuration resolution"""
from typing import Optional
from pydantic import ValidationError
import logging

from chatwidget.models.config import WidgetBootstrap
from chatwidget.services.message_client import WidgetApiClient

logger = logging.getLogger(__name__)


class ConfigResolver:
    """Fetches the widget bootstrap (config, status, client, subscription)"""

    def __init__(self, api: WidgetApiClient):
        self.api = api

    async def fetch(self, chatbot_id: str) -> Optional[WidgetBootstrap]:
        """
        Load the configuration for a chatbot

        No defaults are merged in; absent fields stay None for consumers
        to resolve.

        Returns:
            The bootstrap, or None when it cannot be loaded or parsed
        """
        data = await self.api.get_widget(chatbot_id)
        if data is None:
            return None

        try:
            bootstrap = WidgetBootstrap.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid widget config for chatbot {chatbot_id}: {e}")
            return None

        if not bootstrap.is_renderable:
            logger.info(
                f"Chatbot {chatbot_id} not renderable "
                f"(status={bootstrap.status}, subscription={bootstrap.subscription.status})"
            )
        return bootstrap
