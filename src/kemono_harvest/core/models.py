"""Result records produced by the extractors.

Records are created fresh for every extraction call and never mutated after
they are returned, so they are declared frozen.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field


class PostSource(str, Enum):
    """Which post discovery tier produced a record."""

    STRUCTURED_CARD = "structured-card"
    LIST_ITEM = "list-item"
    GENERIC_LINK = "generic-link"
    FALLBACK_SCAN = "fallback-scan"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    ARCHIVE = "archive"
    UNKNOWN = "unknown"


class MediaKind(str, Enum):
    """Provenance tag of a media record (the `type` field)."""

    MAIN = "main"
    ATTACHMENT = "attachment"
    PREVIEW = "preview"
    LEGACY = "legacy"
    CONTENT = "content"
    FILE_THUMB = "file-thumb"
    ATTACHMENT_SECTION = "attachment-section"
    IMAGE = "image"
    VIDEO = "video"
    DOWNLOAD_LINK = "download-link"
    DATA_ATTRIBUTE = "data-attribute"
    REGEX_EXTRACTED = "regex-extracted"
    HTML = "html"


class PostRecord(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    url: str
    id: str = "unknown"
    title: str = "Untitled"
    published: Optional[str] = None
    source: PostSource


class MediaRecord(BaseModel):
    model_config = ConfigDict(
        frozen=True, use_enum_values=True, populate_by_name=True
    )

    url: str
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")
    filename: Optional[str] = None
    type: MediaKind
    media_type: MediaType = Field(default=MediaType.UNKNOWN, alias="mediaType")
    source: str


class PostMetadata(BaseModel):
    """Title/body/date/author read from a single post page."""

    model_config = ConfigDict(frozen=True)

    url: str
    id: str = "unknown"
    title: str = "Untitled"
    content: str = ""
    published: Optional[str] = None
    user: Optional[str] = None


Record = Union[PostRecord, MediaRecord]


def records_to_frame(records: Iterable[Record]) -> pd.DataFrame:
    """Build a DataFrame from records, using the camelCase field names."""
    rows = [r.model_dump(by_alias=True, mode="json") for r in records]
    return pd.DataFrame(rows)
