"""Widget host endpoints - drive embedded widget engines from the iframe page"""
from fastapi import APIRouter, HTTPException, Depends, Request
from typing import Optional
import logging

from chatwidget.models.chat import LeadInfo
from chatwidget.models.widget import (
    CreateSessionRequest,
    WidgetAction,
    WidgetSessionResponse,
)
from chatwidget.services.widget_engine import WidgetEngine
from chatwidget.services.widget_sessions import WidgetSessionRegistry
from chatwidget.services.widget_state import (
    Event,
    LauncherClicked,
    CloseClicked,
    HeaderClicked,
    PreChatSubmitted,
    MessageSubmitted,
    SuggestedPromptClicked,
    ResponseOptionClicked,
    LeadFormSubmitted,
    LeadFormSkipped,
    LanguageChanged,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def get_registry(request: Request) -> WidgetSessionRegistry:
    """Registry created in the application lifespan"""
    return request.app.state.widget_registry


def _require(value: Optional[str], field: str, action: str) -> str:
    if value is None:
        raise HTTPException(status_code=422, detail=f"'{field}' is required for '{action}'")
    return value


def action_to_event(action: WidgetAction, engine: WidgetEngine) -> Event:
    """Translate an HTTP action into a state machine event"""
    now = engine.clock()

    if action.type == "open":
        return LauncherClicked()
    if action.type == "close":
        return CloseClicked()
    if action.type == "toggle_minimize":
        return HeaderClicked()
    if action.type == "prechat_submit":
        return PreChatSubmitted(name=action.name or "", phone=action.phone or "", now=now)
    if action.type == "send":
        return MessageSubmitted(text=_require(action.text, "text", action.type), now=now)
    if action.type == "suggested_prompt":
        return SuggestedPromptClicked(text=_require(action.text, "text", action.type), now=now)
    if action.type == "response_option":
        return ResponseOptionClicked(
            message_id=_require(action.message_id, "messageId", action.type),
            option=_require(action.text, "text", action.type),
            now=now
        )
    if action.type == "lead_form_submit":
        return LeadFormSubmitted(
            info=LeadInfo(name=action.name, email=action.email, phone=action.phone, message=action.message),
            now=now
        )
    if action.type == "lead_form_skip":
        return LeadFormSkipped()
    if action.type == "language":
        return LanguageChanged(code=_require(action.code, "code", action.type))

    raise HTTPException(status_code=422, detail=f"Unsupported action: {action.type}")


def _session_response(engine: WidgetEngine, browser_session_id: Optional[str] = None) -> WidgetSessionResponse:
    view = engine.view(engine.user_agent)
    return WidgetSessionResponse(
        session_id=engine.id,
        browser_session_id=browser_session_id,
        rendered=view is not None,
        view=view,
        events=engine.take_events()
    )


def _get_engine(session_id: str, registry: WidgetSessionRegistry) -> WidgetEngine:
    engine = registry.get(session_id)
    if engine is None:
        raise HTTPException(status_code=404, detail="Widget session not found")
    return engine


@router.post("/{chatbot_id}/sessions", response_model=WidgetSessionResponse)
async def create_widget_session(
    chatbot_id: str,
    body: CreateSessionRequest,
    request: Request,
    registry: WidgetSessionRegistry = Depends(get_registry)
):
    """
    Mount a widget for a page view (PUBLIC endpoint - no auth required)
    Renders nothing for inactive chatbots, expired subscriptions or
    configurations that cannot be loaded
    """
    try:
        user_agent = body.user_agent or request.headers.get("user-agent")
        engine, browser_session_id = await registry.create(
            chatbot_id,
            mode=body.mode,
            browser_session_id=body.browser_session_id,
            user_agent=user_agent
        )

        if engine is None:
            return WidgetSessionResponse(rendered=False, browser_session_id=browser_session_id)

        return _session_response(engine, browser_session_id)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Widget session error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/sessions/{session_id}", response_model=WidgetSessionResponse)
async def get_widget_session(session_id: str, registry: WidgetSessionRegistry = Depends(get_registry)):
    """Current view and pending widget-status events"""
    engine = _get_engine(session_id, registry)
    return _session_response(engine)


@router.post("/sessions/{session_id}/actions", response_model=WidgetSessionResponse)
async def dispatch_widget_action(
    session_id: str,
    action: WidgetAction,
    registry: WidgetSessionRegistry = Depends(get_registry)
):
    """Apply a visitor interaction and return the new view"""
    engine = _get_engine(session_id, registry)
    try:
        await engine.dispatch(action_to_event(action, engine))
        return _session_response(engine)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Widget action error ({action.type}) for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/sessions/{session_id}")
async def delete_widget_session(session_id: str, registry: WidgetSessionRegistry = Depends(get_registry)):
    """Unmount a widget when its page goes away"""
    removed = await registry.remove(session_id)
    if not removed:
        raise HTTPException(status_code=404, detail="Widget session not found")
    return {"success": True}
