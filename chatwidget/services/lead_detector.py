"""Lead detection from free-text messages"""
import re
from typing import Optional

from chatwidget.models.chat import LeadInfo

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# Optional +1, area code 2-9XX, separators ( ) . - or space
PHONE_PATTERN = re.compile(r"(?:\+?1[-.\s]?)?\(?[2-9]\d{2}\)?[-.\s]?\d{3}[-.\s]?\d{4}")

# Tried in order, first match wins. The phrase is case-insensitive,
# the captured name must be one or two capitalized words.
_NAME_WORDS = r"([A-Z][a-z]+(?: [A-Z][a-z]+)?)\b"
NAME_PATTERNS = [
    re.compile(r"(?i:\bmy name is)\s+" + _NAME_WORDS),
    re.compile(r"(?i:\bi['\u2019]m)\s+" + _NAME_WORDS),
    re.compile(r"(?i:\bi am)\s+" + _NAME_WORDS),
    re.compile(r"(?i:\bcall me)\s+" + _NAME_WORDS),
]


def detect_email(text: str) -> Optional[str]:
    match = EMAIL_PATTERN.search(text or "")
    return match.group(0) if match else None


def detect_phone(text: str) -> Optional[str]:
    match = PHONE_PATTERN.search(text or "")
    return match.group(0) if match else None


def detect_name(text: str) -> Optional[str]:
    for pattern in NAME_PATTERNS:
        match = pattern.search(text or "")
        if match:
            return match.group(1)
    return None


def detect_lead(text: str) -> LeadInfo:
    """
    Run all three extractors over a message

    Nothing is validated: the first match of each kind is returned as written.
    """
    return LeadInfo(
        name=detect_name(text),
        email=detect_email(text),
        phone=detect_phone(text)
    )
