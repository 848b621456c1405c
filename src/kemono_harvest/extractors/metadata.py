"""Read post metadata and profile names from rendered pages.

Each field has its own list of candidate selectors; the first non-empty
candidate wins and the fields do not depend on each other.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from kemono_harvest.core.models import PostMetadata
from kemono_harvest.core.scraping.normalizer import post_id_from_url
from kemono_harvest.core.scraping.parser import (
    Document,
    DocumentLike,
    as_document,
    attr_of,
    inner_html,
    text_of,
)

UNTITLED = "Untitled"
UNKNOWN_USER = "unknown_user"

TITLE_SELECTORS = (".post__title", "h1.title", "article h1")
CONTENT_SELECTORS = (".post__content", ".post__body", "article .content")
AUTHOR_SELECTORS = (".post__user-name", ".user__name", '[class*="author"]')
USERNAME_SELECTORS = (
    '.user-header__profile span[itemprop="name"]',
    ".user-header__name a",
    ".user-header__name",
    ".profile__name",
    "h1.user__name",
    ".user__name",
    '[class*="user"] [class*="name"]',
)

_POSTS_OF_RE = re.compile(r'Posts of "([^"]+)"')
_TITLE_HEAD_RE = re.compile(r"^([^|]+)")
_USER_PATH_RE = re.compile(r"/user/([^/?#]+)")


def _first_text(doc: Document, selectors: Iterable[str]) -> str:
    for selector in selectors:
        text = text_of(doc.select_one(selector))
        if text:
            return text
    return ""


def _page_title(doc: Document) -> str:
    return text_of(doc.select_one("title"))


def extract_title(doc: Document) -> str:
    title = _first_text(doc, TITLE_SELECTORS)
    if title:
        return title
    return _page_title(doc).split("|")[0].strip() or UNTITLED


def extract_content(doc: Document) -> str:
    for selector in CONTENT_SELECTORS:
        html = inner_html(doc.select_one(selector))
        if html:
            return html
    return ""


def extract_published(doc: Document) -> Optional[str]:
    stamped = doc.select_one("time.post__published, .post__published, time[datetime]")
    return (
        attr_of(stamped, "datetime")
        or text_of(doc.select_one(".post__date"))
        or text_of(doc.select_one("time"))
        or None
    )


def extract_author(doc: Document) -> Optional[str]:
    return _first_text(doc, AUTHOR_SELECTORS) or None


def extract_post_metadata(document: DocumentLike, post_url: str) -> PostMetadata:
    doc = as_document(document)
    return PostMetadata(
        url=post_url,
        id=post_id_from_url(post_url),
        title=extract_title(doc),
        content=extract_content(doc),
        published=extract_published(doc),
        user=extract_author(doc),
    )


def extract_username(document: DocumentLike, profile_url: str) -> str:
    """Best-effort creator name for a profile page.

    Falls back through the profile header selectors, the ``artist_name`` meta
    tag, the page title (``Posts of "name" from "service"``, then whatever
    precedes the first ``|``), ``user_<id>`` from the URL and finally
    ``"unknown_user"``.
    """
    doc = as_document(document)
    name = _first_text(doc, USERNAME_SELECTORS)
    if name:
        return name

    meta = attr_of(doc.select_one('meta[name="artist_name"]'), "content")
    if meta:
        return meta

    title = _page_title(doc)
    if title:
        m = _POSTS_OF_RE.search(title)
        if m:
            return m.group(1)
        m = _TITLE_HEAD_RE.match(title)
        if m and m.group(1).strip():
            return m.group(1).strip()

    m = _USER_PATH_RE.search(profile_url or "")
    if m:
        return f"user_{m.group(1)}"
    return UNKNOWN_USER
