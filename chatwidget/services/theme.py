"""Theme and style resolution for widget elements

Styles are plain dicts of CSS properties (camelCase, as consumed by the
widget front end). Everything here is a pure function of the theme name and
the configured brand colors.
"""
from typing import Dict, Optional

from chatwidget.models.config import (
    Branding,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    DEFAULT_BOT_MESSAGE_BG_COLOR,
    DEFAULT_CHAT_WINDOW_BG_COLOR,
    DEFAULT_THEME,
)

Style = Dict[str, str]

THEMES = ("sleek", "soft", "glass", "minimal", "elevated")

USER_TEXT_DARK = "#000000"
BOT_TEXT_DARK = "#1f2937"
TEXT_LIGHT = "#ffffff"
BORDER_GRAY = "#e5e7eb"

GLASS_BLUR = "blur(20px) saturate(180%)"
GLASS_BUBBLE_BLUR = "blur(12px) saturate(180%)"

BUBBLE_RADIUS = {"sleek": "8px", "minimal": "6px", "soft": "16px", "glass": "18px", "elevated": "18px"}
SHELL_RADIUS = {"sleek": "12px", "minimal": "8px"}
SHELL_SHADOW = {
    "elevated": "0 20px 40px rgba(0, 0, 0, 0.15), 0 8px 16px rgba(0, 0, 0, 0.08)",
    "sleek": "0 8px 24px rgba(0, 0, 0, 0.12)",
    "soft": "0 4px 16px rgba(0, 0, 0, 0.08)",
    "glass": "0 8px 32px rgba(0, 0, 0, 0.08)",
    "minimal": "0 1px 3px rgba(0, 0, 0, 0.12)",
}


def normalize_theme(theme: Optional[str]) -> str:
    return theme if theme in THEMES else DEFAULT_THEME


def brightness(color: str) -> Optional[float]:
    """Perceived brightness (0-255) of a #RRGGBB color, None if unparseable"""
    hex_value = (color or "").replace("#", "")
    try:
        r = int(hex_value[0:2], 16)
        g = int(hex_value[2:4], 16)
        b = int(hex_value[4:6], 16)
    except ValueError:
        return None
    return (r * 299 + g * 587 + b * 114) / 1000


def is_light_color(color: str) -> bool:
    value = brightness(color)
    return value is not None and value > 155


def user_text_color(background: str) -> str:
    return USER_TEXT_DARK if is_light_color(background) else TEXT_LIGHT


def bot_text_color(background: str) -> str:
    return BOT_TEXT_DARK if is_light_color(background) else TEXT_LIGHT


def _colors(branding: Optional[Branding]):
    branding = branding or Branding()
    primary = branding.primary_color or DEFAULT_PRIMARY_COLOR
    return {
        "primary": primary,
        "secondary": branding.secondary_color or DEFAULT_SECONDARY_COLOR,
        "user_bg": branding.user_message_bg_color or primary,
        "bot_bg": branding.bot_message_bg_color or DEFAULT_BOT_MESSAGE_BG_COLOR,
        "window_bg": branding.chat_window_bg_color or DEFAULT_CHAT_WINDOW_BG_COLOR,
    }


def header_style(theme: Optional[str], branding: Optional[Branding]) -> Style:
    theme = normalize_theme(theme)
    primary = _colors(branding)["primary"]

    if theme == "sleek":
        return {"backgroundColor": primary, "borderRadius": "0", "borderBottom": "none"}
    if theme == "soft":
        return {"backgroundColor": primary, "boxShadow": "0 1px 3px rgba(0, 0, 0, 0.08)"}
    if theme == "glass":
        return {
            "backgroundColor": f"{primary}15",
            "backdropFilter": GLASS_BLUR,
            "WebkitBackdropFilter": GLASS_BLUR,
            "borderBottom": f"1px solid {primary}20",
        }
    if theme == "minimal":
        return {"backgroundColor": "white", "color": primary, "borderBottom": f"1px solid {BORDER_GRAY}"}
    # elevated
    return {"backgroundColor": primary, "boxShadow": "0 2px 8px rgba(0, 0, 0, 0.08)"}


def user_bubble_style(theme: Optional[str], branding: Optional[Branding]) -> Style:
    theme = normalize_theme(theme)
    background = _colors(branding)["user_bg"]
    text = user_text_color(background)

    if theme == "sleek":
        style = {"backgroundColor": background, "color": text}
    elif theme == "soft":
        style = {"backgroundColor": background, "color": text, "boxShadow": "0 1px 2px rgba(0, 0, 0, 0.06)"}
    elif theme == "glass":
        style = {
            "backgroundColor": f"{background}90",
            "backdropFilter": GLASS_BUBBLE_BLUR,
            "WebkitBackdropFilter": GLASS_BUBBLE_BLUR,
            "color": text,
            "border": f"1px solid {background}40",
        }
    elif theme == "minimal":
        style = {"backgroundColor": background, "color": text, "border": f"1px solid {background}"}
    else:
        style = {
            "backgroundColor": background,
            "color": text,
            "boxShadow": "0 2px 8px rgba(0, 0, 0, 0.1), 0 1px 3px rgba(0, 0, 0, 0.06)",
        }
    style["borderRadius"] = BUBBLE_RADIUS[theme]
    return style


def bot_bubble_style(theme: Optional[str], branding: Optional[Branding]) -> Style:
    theme = normalize_theme(theme)
    background = _colors(branding)["bot_bg"]
    text = bot_text_color(background)

    if theme == "sleek":
        style = {"backgroundColor": background, "color": text}
    elif theme == "soft":
        style = {"backgroundColor": background, "color": text, "boxShadow": "0 1px 2px rgba(0, 0, 0, 0.04)"}
    elif theme == "glass":
        style = {
            "backgroundColor": f"{background}90",
            "backdropFilter": GLASS_BUBBLE_BLUR,
            "WebkitBackdropFilter": GLASS_BUBBLE_BLUR,
            "border": "1px solid rgba(0, 0, 0, 0.06)",
            "color": text,
        }
    elif theme == "minimal":
        style = {"backgroundColor": background, "border": f"1px solid {BORDER_GRAY}", "color": text}
    else:
        style = {"backgroundColor": background, "color": text, "boxShadow": "0 1px 3px rgba(0, 0, 0, 0.08)"}
    style["borderRadius"] = BUBBLE_RADIUS[theme]
    return style


def message_style(theme: Optional[str], role: str, branding: Optional[Branding]) -> Style:
    """Bubble style for a transcript message of the given role"""
    if role == "user":
        return user_bubble_style(theme, branding)
    return bot_bubble_style(theme, branding)


def shell_style(theme: Optional[str], branding: Optional[Branding]) -> Style:
    """Style of the chat window container"""
    theme = normalize_theme(theme)
    branding = branding or Branding()

    if branding.background_image_url:
        background = f"url({branding.background_image_url})"
    elif theme == "glass":
        background = "rgba(255, 255, 255, 0.7)"
    else:
        background = _colors(branding)["window_bg"]

    style = {
        "borderRadius": SHELL_RADIUS.get(theme, "16px"),
        "boxShadow": SHELL_SHADOW[theme],
        "background": background,
        "backgroundSize": "cover",
        "backgroundPosition": "center",
        "backgroundRepeat": "no-repeat",
        "border": "none",
    }
    if theme == "glass":
        style["backdropFilter"] = GLASS_BLUR
        style["WebkitBackdropFilter"] = GLASS_BLUR
        style["border"] = "1px solid rgba(255, 255, 255, 0.2)"
    elif theme == "minimal":
        style["border"] = f"1px solid {BORDER_GRAY}"
    return style


def launcher_style(branding: Optional[Branding]) -> Style:
    """Floating launcher button, a primary to secondary gradient"""
    colors = _colors(branding)
    primary, secondary = colors["primary"], colors["secondary"]
    return {
        "backgroundColor": primary,
        "backgroundImage": f"linear-gradient(135deg, {primary} 0%, {secondary} 100%)",
        "boxShadow": f"0 8px 24px {primary}50, 0 4px 12px {primary}30",
    }


def accent_color(branding: Optional[Branding]) -> str:
    """Color for buttons and the typing indicator"""
    branding = branding or Branding()
    return branding.send_button_color or _colors(branding)["primary"]
