"""
Snapshot - the portable export document.

Wire format uses camelCase keys; entities reference each other through
their `originalId`, never through IDs of the target store.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

from config import DEFAULT_COLOR, SNAPSHOT_FORMAT_VERSION
from .extract import Extract, Timing


class WireModel(BaseModel):
    """Base for snapshot records: camelCase on the wire, snake_case in code."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SnapshotCharacter(WireModel):
    mal_id: Optional[int] = None
    name: str = ""
    image: Optional[str] = None


class SnapshotTheme(WireModel):
    original_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    color: str = DEFAULT_COLOR


class SnapshotThemeGroup(WireModel):
    original_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    color: str = DEFAULT_COLOR
    theme_original_ids: list[str] = Field(default_factory=list)


class SnapshotExtract(WireModel):
    original_id: str = Field(min_length=1)
    text: str = ""
    anime_id: Optional[int] = None
    anime_title: str = ""
    anime_image: Optional[str] = None
    api_source: Optional[str] = None
    timing: Timing = Field(default_factory=Timing)
    episode: Optional[int] = None
    season: Optional[int] = None
    characters: list[SnapshotCharacter] = Field(default_factory=list)
    theme_original_id: Optional[str] = None

    @classmethod
    def from_extract(cls, extract: Extract) -> "SnapshotExtract":
        """Snapshot record for a stored extract (keeps its ID as originalId)."""
        return cls(
            original_id=extract.id,
            text=extract.text,
            anime_id=extract.anime_id,
            anime_title=extract.anime_title,
            anime_image=extract.anime_image,
            api_source=extract.api_source,
            timing=extract.timing,
            episode=extract.episode,
            season=extract.season,
            characters=[SnapshotCharacter(**c.model_dump()) for c in extract.characters],
            theme_original_id=extract.theme_id,
        )


class SnapshotMetadata(WireModel):
    total_themes: int = 0
    total_theme_groups: int = 0
    total_extracts: int = 0
    exported_at: Optional[datetime] = None


class Snapshot(WireModel):
    """
    A self-contained subset of the library.

    Every list keeps store order. `metadata` totals are derived from the
    lists at encode time.
    """
    format_version: str = SNAPSHOT_FORMAT_VERSION
    export_type: str = "all"
    themes: list[SnapshotTheme] = Field(default_factory=list)
    theme_groups: list[SnapshotThemeGroup] = Field(default_factory=list)
    extracts: list[SnapshotExtract] = Field(default_factory=list)
    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)

    def theme_by_original_id(self) -> dict[str, SnapshotTheme]:
        return {t.original_id: t for t in self.themes}
