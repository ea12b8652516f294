"""UI Theme Constants for Knit Community Hub.

Centralises all colour, font, and sizing constants for the
CustomTkinter interface.  Light header + soft content area with rose
and purple accents.

This file contains **zero logic**; only ``Final`` constants.
"""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Colour palette
# ---------------------------------------------------------------------------

HEADER_BG: Final[str] = "#ffffff"
HEADER_BORDER: Final[str] = "#e5e7eb"

CONTENT_BG: Final[str] = "#fdf2f8"
CONTENT_CARD_BG: Final[str] = "#ffffff"
CARD_BORDER: Final[str] = "#f3f4f6"

ACCENT_ROSE: Final[str] = "#f43f5e"
ACCENT_ROSE_SOFT: Final[str] = "#ffe4e6"
ACCENT_PURPLE: Final[str] = "#a855f7"
ACCENT_PURPLE_SOFT: Final[str] = "#f3e8ff"
ACCENT_AMBER: Final[str] = "#f59e0b"
ACCENT_AMBER_SOFT: Final[str] = "#fef3c7"

TEXT_PRIMARY: Final[str] = "#111827"
TEXT_SECONDARY: Final[str] = "#4b5563"
TEXT_MUTED: Final[str] = "#6b7280"
TEXT_LIGHT: Final[str] = "#ffffff"

# Buttons
BUTTON_BG: Final[str] = "#ffffff"
BUTTON_HOVER: Final[str] = "#f9fafb"
BUTTON_BORDER: Final[str] = "#d1d5db"
BUTTON_SECONDARY_BG: Final[str] = "#f3f4f6"
BUTTON_SECONDARY_HOVER: Final[str] = "#e5e7eb"

# ---------------------------------------------------------------------------
# Fonts (Segoe UI, fallback to system)
# ---------------------------------------------------------------------------

FONT_FAMILY: Final[str] = "Segoe UI"
FONT_BRAND: Final[tuple[str, int, str]] = (FONT_FAMILY, 16, "bold")
FONT_HERO: Final[tuple[str, int, str]] = (FONT_FAMILY, 30, "bold")
FONT_HEADING: Final[tuple[str, int, str]] = (FONT_FAMILY, 20, "bold")
FONT_CARD_TITLE: Final[tuple[str, int, str]] = (FONT_FAMILY, 17, "bold")
FONT_BODY: Final[tuple[str, int]] = (FONT_FAMILY, 13)
FONT_SMALL: Final[tuple[str, int]] = (FONT_FAMILY, 11)
FONT_BUTTON: Final[tuple[str, int, str]] = (FONT_FAMILY, 12, "bold")
FONT_AVATAR: Final[tuple[str, int, str]] = (FONT_FAMILY, 14, "bold")

# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

HEADER_HEIGHT: Final[int] = 56
MAIN_WINDOW_WIDTH: Final[int] = 1100
MAIN_WINDOW_HEIGHT: Final[int] = 760
MIN_WINDOW_WIDTH: Final[int] = 720
MIN_WINDOW_HEIGHT: Final[int] = 520
CONTENT_MAX_WIDTH: Final[int] = 960
CORNER_RADIUS: Final[int] = 8
CARD_RADIUS: Final[int] = 12
ICON_TILE_SIZE: Final[int] = 48
AVATAR_SIZE: Final[int] = 40
EMAIL_MAX_CHARS: Final[int] = 28
PADDING_SM: Final[int] = 8
PADDING_MD: Final[int] = 16
PADDING_LG: Final[int] = 24
PADDING_XL: Final[int] = 48
