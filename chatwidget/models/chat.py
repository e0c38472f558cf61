"""Chat-related Pydantic models"""
from pydantic import ConfigDict, Field
from typing import Optional, List, Literal
from datetime import datetime

from chatwidget.models.config import CamelModel


class ResponseLink(CamelModel):
    title: str
    url: str


class ChatMessage(CamelModel):
    """A transcript entry, immutable once appended"""
    model_config = ConfigDict(frozen=True)

    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime
    response_options: Optional[List[str]] = None
    links: Optional[List[ResponseLink]] = None


class LeadInfo(CamelModel):
    """Visitor contact details gathered during a conversation"""
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None

    def merge(self, other: "LeadInfo") -> "LeadInfo":
        """Later non-empty fields overwrite, empty ones never erase"""
        update = {
            key: value
            for key, value in other.model_dump().items()
            if value
        }
        return self.model_copy(update=update)

    @property
    def has_contact(self) -> bool:
        return bool(self.email or self.phone)

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.email or self.phone or self.message)


class UserDetails(CamelModel):
    """Pre-chat identity persisted per chatbot"""
    name: str
    phone: str
    timestamp: int = Field(..., description="Capture time, epoch milliseconds")


class MessageRequest(CamelModel):
    """Body of POST /api/widget/{chatbotId}/message"""
    message: str
    session_id: str


class MessageReply(CamelModel):
    """Response of POST /api/widget/{chatbotId}/message"""
    response: Optional[str] = None
    response_options: Optional[List[str]] = None
    links: Optional[List[ResponseLink]] = None


class LeadCaptureRequest(CamelModel):
    """Body of POST /api/widget/{chatbotId}/capture-lead"""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    conversation_id: str
    source: str


class MessageResult(CamelModel):
    """Outcome of a message send; failures carry no reply"""
    ok: bool
    reply: Optional[MessageReply] = None
    error: Optional[str] = None


class LeadCaptureResult(CamelModel):
    """Outcome of a lead capture call"""
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
