"""
Extract - a quote from an anime, optionally filed under a theme.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .base import BaseEntity


class Timing(BaseModel):
    """Start/end of the quote. Opaque strings (e.g. "00:12:31")."""
    start: str = ""
    end: str = ""


class Character(BaseModel):
    """A character appearing in the extract (pass-through record)."""
    mal_id: Optional[int] = None
    name: str = ""
    image: Optional[str] = None


class Extract(BaseEntity):
    """
    An extract.

    `is_used_in_video` belongs to the video builder; imports always
    create extracts with it unset.
    """
    text: str = ""

    # Anime reference metadata
    anime_id: Optional[int] = None
    anime_title: str = ""
    anime_image: Optional[str] = None
    api_source: Optional[str] = None

    timing: Timing = Field(default_factory=Timing)
    episode: Optional[int] = None
    season: Optional[int] = None
    characters: list[Character] = Field(default_factory=list)

    theme_id: Optional[str] = None
    is_used_in_video: bool = False
