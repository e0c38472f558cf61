"""Shared fixtures: fake timers, a mocked platform API and config builders"""
import json
from datetime import datetime, timezone, timedelta
from typing import Callable, Dict, List, Optional

import httpx
import pytest

from chatwidget.models.config import ChatbotConfig, WidgetBootstrap
from chatwidget.services.message_client import WidgetApiClient

BASE_URL = "http://platform.test"
START = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)  # a Monday


class FakeClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class FakeTimers:
    """Drop-in for TimerService driven by a FakeClock"""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.jobs: Dict[str, tuple] = {}
        self.cancelled: List[str] = []

    def schedule(self, job_id, delay, callback):
        self.jobs[job_id] = (self.clock() + timedelta(seconds=delay), callback)

    def cancel(self, job_id):
        if self.jobs.pop(job_id, None) is not None:
            self.cancelled.append(job_id)

    async def advance(self, seconds: float) -> None:
        """Move the clock and run every job that came due, in due order"""
        target = self.clock() + timedelta(seconds=seconds)
        while True:
            due = sorted(
                (when, job_id) for job_id, (when, _) in self.jobs.items() if when <= target
            )
            if not due:
                break
            when, job_id = due[0]
            _, callback = self.jobs.pop(job_id)
            self.clock.now = when
            await callback()
        self.clock.now = target


class FakePlatform:
    """Records requests and answers them like the platform widget API"""

    def __init__(self, bootstrap: Optional[dict] = None):
        self.bootstrap = bootstrap if bootstrap is not None else make_bootstrap()
        self.config_status = 200
        self.reply: dict = {"response": "Sure, happy to help."}
        self.message_status = 200
        self.lead_status = 200
        self.requests: List[httpx.Request] = []
        self.on_message: Optional[Callable[[httpx.Request], None]] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/message"):
            if self.on_message:
                self.on_message(request)
            return httpx.Response(self.message_status, json=self.reply)
        if path.endswith("/capture-lead"):
            return httpx.Response(self.lead_status, json={"success": True})
        return httpx.Response(self.config_status, json=self.bootstrap)

    def bodies(self, suffix: str) -> List[dict]:
        return [json.loads(r.content) for r in self.requests if r.url.path.endswith(suffix)]

    def client(self) -> WidgetApiClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return WidgetApiClient(BASE_URL, http_client=http_client)


def make_config(**sections) -> dict:
    """camelCase config dict; keyword arguments replace whole sections"""
    config = {
        "branding": {"companyName": "Acme"},
        "behavior": {"welcomeMessage": "Hi there!"},
        "widgetSettings": {},
        "businessHours": {"enabled": False},
        "leadCapture": {"enabled": False},
    }
    config.update(sections)
    return config


def make_bootstrap(config: Optional[dict] = None, status: str = "active", subscription: str = "active") -> dict:
    return {
        "id": "bot-1",
        "config": make_config() if config is None else config,
        "status": status,
        "client": {"name": "Acme Inc"},
        "subscription": {"status": subscription},
    }


def chatbot_config(**sections) -> ChatbotConfig:
    return ChatbotConfig.model_validate(make_config(**sections))


def widget_bootstrap(**sections) -> WidgetBootstrap:
    return WidgetBootstrap.model_validate(make_bootstrap(make_config(**sections)))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timers(clock):
    return FakeTimers(clock)


@pytest.fixture
def platform():
    return FakePlatform()
