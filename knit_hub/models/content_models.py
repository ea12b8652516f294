"""
Pydantic Models for the Landing Page Content.

Static marketing content rendered by the presentation shell.  Kept as
typed models so the UI never indexes into loose tuples or dicts.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FeatureCard(BaseModel):
    """One feature tile in the hero grid.

    Attributes
    ----------
    title:
        Card heading.
    description:
        One-sentence body text.
    icon:
        Single glyph drawn inside the coloured tile.
    accent:
        Foreground colour of the glyph.
    tile:
        Background colour of the icon tile.
    """

    title: str
    description: str
    icon: str
    accent: str
    tile: str


class ActivityItem(BaseModel):
    """One entry of the community activity feed."""

    user: str = Field(min_length=1)
    action: str
    time: str

    @property
    def initial(self) -> str:
        """Avatar letter: the first character of the user name."""
        return self.user[0]
