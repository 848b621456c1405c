"""Extraction strategies for profile pages, post pages and post payloads."""

from .media_html import extract_media, extract_media_from_markup
from .media_payload import extract_payload_media
from .metadata import extract_post_metadata, extract_username
from .posts import POST_TIERS, extract_posts

__all__ = [
    "POST_TIERS",
    "extract_media",
    "extract_media_from_markup",
    "extract_payload_media",
    "extract_post_metadata",
    "extract_posts",
    "extract_username",
]
