"""Multi-strategy post and media extraction for kemono-style archive pages."""

from kemono_harvest.core.models import (
    MediaKind,
    MediaRecord,
    MediaType,
    PostMetadata,
    PostRecord,
    PostSource,
)

__all__ = [
    "MediaKind",
    "MediaRecord",
    "MediaType",
    "PostMetadata",
    "PostRecord",
    "PostSource",
]
