from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer

from ..dates import to_iso


class RawItem(BaseModel):
    """
    One entry as handed over by the fetch capability. Everything is optional.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    link: Optional[str] = None
    content_snippet: Optional[str] = Field(None, alias="contentSnippet")
    content: Optional[str] = None
    pub_date: Optional[str] = Field(None, alias="pubDate")
    iso_date: Optional[str] = Field(None, alias="isoDate")
    author: Optional[str] = None
    creator: Optional[str] = None
    guid: Optional[str] = None
    category: Optional[str] = None


class RawFeed(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    items: List[RawItem] = Field(default_factory=list)


class FeedInfo(BaseModel):
    """
    Per-source summary carried into meta.sources of the merged document.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    category: Optional[str] = None
    name: Optional[str] = None
    min_date: Optional[datetime] = Field(None, alias="minDate")
    # Only set on failed sources
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return bool(self.title and self.title.startswith("Error: "))


class CanonicalItem(BaseModel):
    """
    Normalized, source-tagged feed entry.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    link: Optional[str] = None
    description: str = ""
    pub_date: Optional[str] = Field(None, alias="pubDate")
    iso_date: Optional[str] = Field(None, alias="isoDate")
    author: str = "Unknown"
    guid: Optional[str] = None
    category: Optional[str] = None
    source: Optional[str] = None
    feed_title: Optional[str] = Field(None, alias="feedTitle")


class FeedResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    feed_info: FeedInfo = Field(alias="feedInfo")
    items: List[CanonicalItem] = Field(default_factory=list)


class MergedMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str
    last_updated: datetime = Field(alias="lastUpdated")
    total_items: int = Field(alias="totalItems")
    sources: List[FeedInfo] = Field(default_factory=list)
    generated_by: str = Field(alias="generatedBy")

    @field_serializer("last_updated")
    def _serialize_last_updated(self, value: datetime) -> str:
        return to_iso(value)


class MergedFeed(BaseModel):
    meta: MergedMeta
    items: List[CanonicalItem] = Field(default_factory=list)

    def to_document(self) -> dict:
        """JSON-ready dict with camelCase keys; unset fields are left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
