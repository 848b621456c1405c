"""Discover downloadable media on a rendered post page.

Unlike post discovery, every strategy runs and the results are merged. The
strategies are applied in a fixed priority order and the first one to
produce a canonical url keeps it (see `MediaCollector`).
"""

from __future__ import annotations

import html
import logging
import re
from collections import Counter
from typing import Callable, List, Optional, Sequence

from kemono_harvest.core.config import DEFAULT_BASE_URL
from kemono_harvest.core.models import MediaKind, MediaRecord
from kemono_harvest.core.scraping.detector import classify_media_type, is_downloadable_url
from kemono_harvest.core.scraping.normalizer import (
    canonicalize_url,
    resolve_full_resolution,
)
from kemono_harvest.core.scraping.parser import (
    Document,
    DocumentLike,
    MediaCollector,
    as_document,
    attr_of,
    text_of,
)

log = logging.getLogger(__name__)

FILE_THUMB_SELECTOR = ".post__files .fileThumb, .post__thumbnail .fileThumb, a.fileThumb"
ATTACHMENT_SELECTOR = ".post__attachments .post__attachment, .post__files .post__file"
IMAGE_SELECTOR = "img.post__image, .post__thumbnail img, .post__content img, article img"
VIDEO_SELECTOR = "video.post__video, .post__content video, article video"
DOWNLOAD_LINK_SELECTOR = (
    "a.post__attachment-link, a.image-link, a[download], "
    'a[href*="/data/"], a[href*="/files/"], a[href*="kemono.cr/data"]'
)
DATA_ATTRIBUTE_SELECTOR = "[data-file], [data-url]"

# image sources containing these are site chrome, not post content
IMAGE_SKIP_MARKERS = ("avatar", "icon")

_URL_TAIL = r"[^\s\"'<>)]+"
MEDIA_URL_PATTERNS = (
    # kemono CDN nodes (n1.kemono.cr, n2.kemono.cr, ...)
    re.compile(rf"https?://n\d+\.kemono\.cr/data/{_URL_TAIL}", re.IGNORECASE),
    re.compile(rf"https?://[^/\s\"'<>]*kemono[^/\s\"'<>]*/data/{_URL_TAIL}", re.IGNORECASE),
    re.compile(rf"//img\.kemono\.cr/data/{_URL_TAIL}", re.IGNORECASE),
    re.compile(
        rf"https?://{_URL_TAIL}\."
        r"(?:jpg|jpeg|png|gif|webp|bmp|mp4|webm|avi|mov|wmv|flv|mkv|m4v|zip|rar|7z)"
        rf"(?:\?{_URL_TAIL})?",
        re.IGNORECASE,
    ),
)

Strategy = Callable[[Document, str, MediaCollector], None]


def _record(
    url: str,
    kind: MediaKind,
    source: str,
    filename: Optional[str] = None,
    thumbnail_url: Optional[str] = None,
) -> MediaRecord:
    return MediaRecord(
        url=url,
        thumbnail_url=thumbnail_url,
        filename=filename or None,
        type=kind,
        media_type=classify_media_type(url),
        source=source,
    )


def collect_file_thumbs(doc: Document, base_url: str, media: MediaCollector) -> None:
    for link in doc.select(FILE_THUMB_SELECTOR):
        href = attr_of(link, "href")
        if not href or not is_downloadable_url(href):
            continue
        media.add(
            _record(
                canonicalize_url(href, base_url),
                MediaKind.FILE_THUMB,
                "fileThumb-links",
                filename=attr_of(link, "download"),
            )
        )


def collect_attachments(doc: Document, base_url: str, media: MediaCollector) -> None:
    for attachment in doc.select(ATTACHMENT_SELECTOR):
        link = attachment.select_one("a")
        href = attr_of(link, "href", "data-href")
        if not href or not is_downloadable_url(href):
            continue
        filename = (
            text_of(link)
            or attr_of(link, "download")
            or text_of(attachment.select_one(".post__attachment-name"))
        )
        media.add(
            _record(
                canonicalize_url(href, base_url),
                MediaKind.ATTACHMENT,
                "attachments-section",
                filename=filename,
            )
        )


def collect_images(doc: Document, base_url: str, media: MediaCollector) -> None:
    for img in doc.select(IMAGE_SELECTOR):
        src = attr_of(img, "data-src", "src", "data-original")
        if not src or any(marker in src for marker in IMAGE_SKIP_MARKERS):
            continue
        url, thumbnail_url = resolve_full_resolution(src, base_url)
        media.add(
            _record(
                url,
                MediaKind.IMAGE,
                "img-tags",
                filename=attr_of(img, "alt"),
                thumbnail_url=thumbnail_url,
            )
        )


def collect_videos(doc: Document, base_url: str, media: MediaCollector) -> None:
    for video in doc.select(VIDEO_SELECTOR):
        src = attr_of(video, "src", "data-src") or attr_of(
            video.select_one("source"), "src"
        )
        if not src:
            continue
        media.add(_record(canonicalize_url(src, base_url), MediaKind.VIDEO, "video-tags"))


def collect_download_links(doc: Document, base_url: str, media: MediaCollector) -> None:
    for link in doc.select(DOWNLOAD_LINK_SELECTOR):
        href = attr_of(link, "href")
        if not href or not is_downloadable_url(href):
            continue
        media.add(
            _record(
                canonicalize_url(href, base_url),
                MediaKind.DOWNLOAD_LINK,
                "download-links",
                filename=attr_of(link, "download") or text_of(link),
            )
        )


def collect_data_attributes(doc: Document, base_url: str, media: MediaCollector) -> None:
    for el in doc.select(DATA_ATTRIBUTE_SELECTOR):
        value = attr_of(el, "data-file", "data-url")
        if not value or "/thumbnail/" in value or not is_downloadable_url(value):
            continue
        media.add(
            _record(
                canonicalize_url(value, base_url),
                MediaKind.DATA_ATTRIBUTE,
                "data-attributes",
            )
        )


def collect_source_matches(doc: Document, base_url: str, media: MediaCollector) -> None:
    for pattern in MEDIA_URL_PATTERNS:
        for match in pattern.finditer(doc.source):
            # raw markup keeps entities such as &amp; that attribute reads decode
            url = html.unescape(match.group(0))
            if url.startswith("//"):
                url = f"https:{url}"
            if "/thumbnail/" in url or not is_downloadable_url(url):
                continue
            media.add(_record(url, MediaKind.REGEX_EXTRACTED, "regex-extraction"))


MEDIA_STRATEGIES: Sequence[Strategy] = (
    collect_file_thumbs,
    collect_attachments,
    collect_images,
    collect_videos,
    collect_download_links,
    collect_data_attributes,
    collect_source_matches,
)


def extract_media(
    document: DocumentLike,
    base_url: str = DEFAULT_BASE_URL,
    logger: Optional[logging.Logger] = None,
) -> List[MediaRecord]:
    """Return every media reference found on a post page, de-duplicated by url."""
    logger = logger or log
    doc = as_document(document)
    media = MediaCollector()
    for strategy in MEDIA_STRATEGIES:
        strategy(doc, base_url, media)

    records = media.records()
    summary = Counter(r.source for r in records)
    logger.info("Extracted %d media files", len(records))
    for source, count in summary.items():
        logger.info("  %d from %s", count, source)
    return records


def extract_media_from_markup(
    document: DocumentLike, base_url: str = DEFAULT_BASE_URL
) -> List[MediaRecord]:
    """Single-pass scan of the post body used before the layouts diverged.

    Kept for pages where the strategy merge is too permissive: it only looks
    inside the post content and attachment blocks and does no thumbnail
    rewriting.
    """
    doc = as_document(document)
    media = MediaCollector()

    for img in doc.select(".post__content img, .post__thumbnail img, .post__attachment img"):
        src = attr_of(img, "src", "data-src")
        if src:
            media.add(_record(canonicalize_url(src, base_url), MediaKind.HTML, "html"))

    for video in doc.select(".post__content video, .post__attachment video"):
        src = attr_of(video, "src") or attr_of(video.select_one("source"), "src")
        if src:
            media.add(_record(canonicalize_url(src, base_url), MediaKind.HTML, "html"))

    for link in doc.select(".post__attachment a"):
        href = attr_of(link, "href")
        if href and is_downloadable_url(href):
            media.add(_record(canonicalize_url(href, base_url), MediaKind.HTML, "html"))

    return media.records()
