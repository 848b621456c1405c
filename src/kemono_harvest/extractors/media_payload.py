"""Extract media references from a post's JSON payload.

The API response changed shape over time. Current payloads nest the files
under ``post`` (``post.file``, ``post.attachments``) and list server-hosted
``previews``; older ones put ``file``, ``attachments``, ``images`` and
``content`` at the top level. All shapes are read, in a fixed order, and the
first occurrence of a canonical url wins.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Mapping, Optional
from urllib.parse import urlsplit

from kemono_harvest.core.config import DEFAULT_BASE_URL
from kemono_harvest.core.models import MediaKind, MediaRecord
from kemono_harvest.core.scraping.detector import classify_media_type
from kemono_harvest.core.scraping.normalizer import canonicalize_url
from kemono_harvest.core.scraping.parser import MediaCollector

log = logging.getLogger(__name__)

CONTENT_URL_RE = re.compile(
    r"https?://[^\s\"'<>]+\."
    r"(?:jpg|jpeg|png|gif|webp|bmp|mp4|webm|avi|mov|wmv|flv|mkv|m4v|3gp|ogv|zip|rar|7z|tar)",
    re.IGNORECASE,
)


def _record(
    url: str, kind: MediaKind, source: str, filename: Optional[str] = None
) -> MediaRecord:
    return MediaRecord(
        url=url,
        filename=filename or None,
        type=kind,
        media_type=classify_media_type(url),
        source=source,
    )


def _file_path(obj: Any) -> Optional[str]:
    if not isinstance(obj, Mapping):
        return None
    path = obj.get("path") or obj.get("url") or obj.get("src")
    return path if isinstance(path, str) and path.strip() else None


def _name(obj: Any) -> Optional[str]:
    if isinstance(obj, Mapping) and isinstance(obj.get("name"), str):
        return obj["name"]
    return None


def _list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _collect_main_file(post: Mapping, base_url: str, media: MediaCollector) -> None:
    file_obj = post.get("file")
    path = _file_path(file_obj)
    if path:
        url = canonicalize_url(path, base_url)
        media.add(_record(url, MediaKind.MAIN, "post-file", _name(file_obj)))


def _collect_attachments(post: Mapping, base_url: str, media: MediaCollector) -> None:
    for attachment in _list(post.get("attachments")):
        path = _file_path(attachment)
        if path:
            url = canonicalize_url(path, base_url)
            media.add(
                _record(url, MediaKind.ATTACHMENT, "post-attachments", _name(attachment))
            )


def _collect_previews(payload: Mapping, base_url: str, media: MediaCollector) -> None:
    for preview in _list(payload.get("previews")):
        if not isinstance(preview, Mapping):
            continue
        server, path = preview.get("server"), preview.get("path")
        if not (isinstance(server, str) and isinstance(path, str) and server and path):
            continue
        url = canonicalize_url(f"{server.rstrip('/')}{path}", base_url)
        # previews are usually served from another host than the main file,
        # so they are matched against what was already collected by path
        preview_path = urlsplit(url).path
        if any(urlsplit(u).path == preview_path for u in media.urls()):
            continue
        media.add(_record(url, MediaKind.PREVIEW, "previews", _name(preview)))


def _collect_legacy_file(payload: Mapping, base_url: str, media: MediaCollector) -> None:
    file_obj = payload.get("file")
    path = _file_path(file_obj)
    if path:
        url = canonicalize_url(path, base_url)
        media.add(_record(url, MediaKind.LEGACY, "legacy-file", _name(file_obj)))


def _collect_legacy_lists(payload: Mapping, base_url: str, media: MediaCollector) -> None:
    for key in ("attachments", "images"):
        for item in _list(payload.get(key)):
            if isinstance(item, str) and item.strip():
                url = canonicalize_url(item, base_url)
                media.add(_record(url, MediaKind.LEGACY, f"legacy-{key}"))
                continue
            path = _file_path(item)
            if path:
                url = canonicalize_url(path, base_url)
                media.add(_record(url, MediaKind.LEGACY, f"legacy-{key}", _name(item)))


def _collect_content_urls(text: Any, media: MediaCollector) -> None:
    if not isinstance(text, str):
        return
    for match in CONTENT_URL_RE.finditer(text):
        media.add(_record(match.group(0), MediaKind.CONTENT, "content-scan"))


def extract_payload_media(
    payload: Optional[Mapping[str, Any]],
    base_url: str = DEFAULT_BASE_URL,
    logger: Optional[logging.Logger] = None,
) -> List[MediaRecord]:
    """Return the media referenced by a post payload.

    Never raises: any fault while reading the payload is logged and yields
    an empty list for the whole call.
    """
    logger = logger or log
    if not isinstance(payload, Mapping):
        return []

    media = MediaCollector()
    try:
        post = payload.get("post")
        if isinstance(post, Mapping):
            _collect_main_file(post, base_url, media)
            _collect_attachments(post, base_url, media)
        _collect_previews(payload, base_url, media)
        _collect_legacy_file(payload, base_url, media)
        _collect_legacy_lists(payload, base_url, media)
        _collect_content_urls(payload.get("content"), media)
        if isinstance(post, Mapping):
            _collect_content_urls(post.get("content"), media)
    except Exception as exc:
        logger.warning("Error extracting media from post data: %s", exc)
        return []

    records = media.records()
    logger.info("Found %d media files in post data", len(records))
    return records
