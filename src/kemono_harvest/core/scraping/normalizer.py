"""URL normalizer utilities.

Resolve the relative, protocol-relative and absolute URL forms found in
kemono pages to one canonical absolute URL, rewrite thumbnail URLs to their
full-resolution counterparts, and derive ids and filenames from URLs.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

from kemono_harvest.core.config import DEFAULT_BASE_URL

THUMBNAIL_MARKERS = ("/thumbnail/", "_thumb.", ".thumb.")

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_POST_ID_RE = re.compile(r"/post/([^/?#]+)")
_RESERVED_NAME_RE = re.compile(
    r"^(CON|PRN|AUX|NUL|COM[1-9]|LPT[1-9])(\..*)?$", re.IGNORECASE
)
_PRIVATE_HOST_PREFIXES = ("127.", "10.", "192.168.", "172.")


def canonicalize_url(url: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """Return the canonical absolute form of `url`.

    - absolute http(s) URLs are returned unchanged;
    - protocol-relative URLs (``//host/...``) get an ``https:`` prefix;
    - anything else is treated as a path on `base_url`.
    """
    value = (url or "").strip()
    if _SCHEME_RE.match(value):
        return value
    if value.startswith("//"):
        return f"https:{value}"
    origin = (base_url or DEFAULT_BASE_URL).rstrip("/")
    if not value.startswith("/"):
        value = f"/{value}"
    return f"{origin}{value}"


def is_thumbnail_url(url: str) -> bool:
    return any(marker in (url or "") for marker in THUMBNAIL_MARKERS)


def resolve_full_resolution(
    url: str, base_url: str = DEFAULT_BASE_URL
) -> Tuple[str, Optional[str]]:
    """Return ``(full_url, thumbnail_url)`` for an image URL.

    Best effort only: the substitutions follow the thumbnail naming seen on
    kemono (``/thumbnail/`` -> ``/data/``, ``_thumb.`` / ``.thumb.`` -> ``.``)
    and may point at a file that does not exist. The canonical thumbnail URL
    is returned alongside so callers can fall back to it. When no thumbnail
    marker is present `thumbnail_url` is None.
    """
    canonical = canonicalize_url(url, base_url)
    if not is_thumbnail_url(canonical):
        return canonical, None

    full = canonical
    if "/thumbnail/data/" in full:
        # thumbnails mirror the data tree: /thumbnail/data/x -> /data/x
        full = full.replace("/thumbnail/data/", "/data/", 1)
    elif "/thumbnail/" in full:
        full = full.replace("/thumbnail/", "/data/", 1)
    if "_thumb." in full:
        full = full.replace("_thumb.", ".", 1)
    if ".thumb." in full:
        full = full.replace(".thumb.", ".", 1)
    return full, canonical


def post_id_from_url(url: str) -> str:
    """Path segment following ``/post/``, or ``"unknown"``."""
    m = _POST_ID_RE.search(url or "")
    return m.group(1) if m else "unknown"


def user_info_from_url(profile_url: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(service, user_id)`` from a ``/<service>/user/<id>`` URL."""
    parts = [p for p in urlsplit(profile_url or "").path.split("/") if p]
    if "user" not in parts:
        return None, None
    idx = parts.index("user")
    service = parts[idx - 1] if idx > 0 else None
    user_id = parts[idx + 1] if idx + 1 < len(parts) else None
    return service, user_id


def post_api_urls(
    base_url: str, service: str, user_id: Optional[str], post_id: str
) -> List[str]:
    """Candidate JSON endpoints for one post, newest API layout first."""
    origin = base_url.rstrip("/")
    urls: List[str] = []
    if user_id:
        urls.append(f"{origin}/api/v1/{service}/user/{user_id}/post/{post_id}")
        urls.append(f"{origin}/api/{service}/user/{user_id}/post/{post_id}")
    urls.append(f"{origin}/api/v1/{service}/post/{post_id}")
    urls.append(f"{origin}/api/{service}/post/{post_id}")
    return urls


def validate_url(url: str) -> str:
    """Reject non-http(s) URLs and URLs targeting local/private hosts."""
    parts = urlsplit(url or "")
    if parts.scheme.lower() not in ("http", "https"):
        raise ValueError(f"Unsupported protocol: {parts.scheme or '<none>'}")
    host = (parts.hostname or "").lower()
    if not host:
        raise ValueError(f"Invalid URL: {url}")
    if host == "localhost" or host.startswith(_PRIVATE_HOST_PREFIXES):
        raise ValueError(f"Private network access not allowed: {host}")
    return url


def sanitize_filename(name: str) -> str:
    """Make `name` safe to use as a file name on Windows, macOS and Linux."""
    value = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "_", name or "")
    value = re.sub(r"\s+", "_", value)
    value = re.sub(r"_{2,}", "_", value)
    value = re.sub(r"^[_.]+|[_.]+$", "", value)
    if _RESERVED_NAME_RE.match(value):
        value = f"_{value}"
    return value[:200]


def media_filename(record, index: int) -> str:
    """Pick a local file name for a media record.

    Uses the record's own filename, then the last URL path segment (when it
    looks like a file), then ``media_<n>``.
    """
    if getattr(record, "filename", None):
        name = sanitize_filename(record.filename)
        if name:
            return name
    url = record if isinstance(record, str) else getattr(record, "url", "")
    basename = PurePosixPath(urlsplit(url or "").path).name
    if "." in basename:
        name = sanitize_filename(basename)
        if name:
            return name
    return f"media_{index + 1}"
