"""Pre-chat form validation"""
import re
from typing import Optional

MIN_PHONE_DIGITS = 5


def validate_prechat(name: str, phone: str) -> Optional[str]:
    """
    Validate the pre-chat name/phone form

    Returns:
        A single human-readable error, or None when the form may be submitted
    """
    if not (name or "").strip():
        return "Please enter your name"

    if not (phone or "").strip():
        return "Please enter your phone number"

    # Basic phone validation - just check for some digits
    if len(re.sub(r"\D", "", phone)) < MIN_PHONE_DIGITS:
        return "Please enter a valid phone number"

    return None
