"""Static landing page content.

Copy for the hero, feature cards, and activity feed.  Contains no
logic; the shell renders it as-is.
"""

from __future__ import annotations

from typing import Final

from knit_hub.models.content_models import ActivityItem, FeatureCard
from knit_hub.ui.theme import (
    ACCENT_AMBER,
    ACCENT_AMBER_SOFT,
    ACCENT_PURPLE,
    ACCENT_PURPLE_SOFT,
    ACCENT_ROSE,
    ACCENT_ROSE_SOFT,
)

APP_TITLE: Final[str] = "Knit Community Hub"
APP_DESCRIPTION: Final[str] = (
    "Connect with your knitting community, share patterns, and discover new projects"
)

HERO_TITLE: Final[str] = "Welcome to Knit Community Hub"
HERO_TAGLINE: Final[str] = (
    "Connect with fellow knitters, discover new patterns, share your projects, "
    "and be part of a warm, creative community."
)

FEATURE_CARDS: Final[tuple[FeatureCard, ...]] = (
    FeatureCard(
        title="Community",
        description="Join thousands of passionate knitters sharing tips, inspiration, and support.",
        icon="\U0001F465",  # Busts in silhouette
        accent=ACCENT_ROSE,
        tile=ACCENT_ROSE_SOFT,
    ),
    FeatureCard(
        title="Patterns",
        description="Browse and share knitting patterns from beginner to advanced levels.",
        icon="\U0001F4C4",  # Page
        accent=ACCENT_PURPLE,
        tile=ACCENT_PURPLE_SOFT,
    ),
    FeatureCard(
        title="Projects",
        description="Showcase your finished works and get inspired by others creations.",
        icon="\U0001F5BC",  # Framed picture
        accent=ACCENT_AMBER,
        tile=ACCENT_AMBER_SOFT,
    ),
)

ACTIVITY_TITLE: Final[str] = "Recent Community Activity"

RECENT_ACTIVITY: Final[tuple[ActivityItem, ...]] = (
    ActivityItem(user="Sarah M.", action="shared a new cable knit pattern", time="2 hours ago"),
    ActivityItem(user="Emily K.", action="completed a colorful blanket project", time="5 hours ago"),
    ActivityItem(user="Mark T.", action="joined the community", time="1 day ago"),
)
