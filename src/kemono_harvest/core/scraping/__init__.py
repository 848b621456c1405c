"""Core scraping primitives exported for reuse across extractors and flows.

This package contains small building blocks: Document parsing and the media
collector, the URL normalizer, the media type detector, Fetcher and
Downloader. The Prefect task wrappers live in `prefect_tasks` and are
imported from there directly.
"""

from .detector import (
    MediaType,
    classify_media_type,
    is_archive_url,
    is_downloadable_url,
    is_image_url,
    is_media_url,
    is_video_url,
)
from .downloader import Downloader
from .fetcher import Fetcher
from .normalizer import (
    canonicalize_url,
    media_filename,
    post_id_from_url,
    resolve_full_resolution,
    sanitize_filename,
    user_info_from_url,
    validate_url,
)
from .parser import Document, MediaCollector, as_document, parse_document

__all__ = [
    "Document",
    "Downloader",
    "Fetcher",
    "MediaCollector",
    "MediaType",
    "as_document",
    "canonicalize_url",
    "classify_media_type",
    "is_archive_url",
    "is_downloadable_url",
    "is_image_url",
    "is_media_url",
    "is_video_url",
    "media_filename",
    "parse_document",
    "post_id_from_url",
    "resolve_full_resolution",
    "sanitize_filename",
    "user_info_from_url",
    "validate_url",
]
