"""Detect the media type of a URL from its file extension.

Provides the `classify_media_type` helper and the extension predicates it is
built from. Extensions are matched case-insensitively at the end of the URL,
optionally followed by a query string or fragment.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from kemono_harvest.core.models import MediaType

IMAGE_EXTENSIONS = (
    "jpg",
    "jpeg",
    "png",
    "gif",
    "webp",
    "bmp",
    "tiff",
    "svg",
    "ico",
    "avif",
)
VIDEO_EXTENSIONS = (
    "mp4",
    "webm",
    "avi",
    "mov",
    "wmv",
    "flv",
    "mkv",
    "m4v",
    "3gp",
    "ogv",
)
# compressed tar suffixes come first so "x.tar.gz" is not read as plain "gz"
ARCHIVE_EXTENSIONS = ("tar.gz", "tar.bz2", "tar.xz", "tgz", "zip", "rar", "7z", "tar")


def _extension_pattern(extensions: Iterable[str]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(ext) for ext in extensions)
    return re.compile(rf"\.(?:{alternatives})(?:[?#].*)?$", re.IGNORECASE)


_IMAGE_RE = _extension_pattern(IMAGE_EXTENSIONS)
_VIDEO_RE = _extension_pattern(VIDEO_EXTENSIONS)
_ARCHIVE_RE = _extension_pattern(ARCHIVE_EXTENSIONS)


def _matches(pattern: re.Pattern[str], url: Optional[str]) -> bool:
    if not url or not isinstance(url, str):
        return False
    return pattern.search(url.strip()) is not None


def is_image_url(url: Optional[str]) -> bool:
    return _matches(_IMAGE_RE, url)


def is_video_url(url: Optional[str]) -> bool:
    return _matches(_VIDEO_RE, url)


def is_archive_url(url: Optional[str]) -> bool:
    return _matches(_ARCHIVE_RE, url)


def is_media_url(url: Optional[str]) -> bool:
    return is_image_url(url) or is_video_url(url)


def is_downloadable_url(url: Optional[str]) -> bool:
    """True for URLs pointing at an image, a video or an archive.

    Documents (pdf, psd, ...) and pages are not downloadable here.
    """
    return is_image_url(url) or is_video_url(url) or is_archive_url(url)


def classify_media_type(url: Optional[str]) -> MediaType:
    """Map a URL to a MediaType.

    Checked in order video, archive, image; the first match wins.
    """
    if is_video_url(url):
        return MediaType.VIDEO
    if is_archive_url(url):
        return MediaType.ARCHIVE
    if is_image_url(url):
        return MediaType.IMAGE
    return MediaType.UNKNOWN
