"""HTML parsing helpers shared by the extractors.

`Document` wraps a BeautifulSoup tree together with the raw markup it was
parsed from, so the regex fallbacks can scan the original source.
`MediaCollector` is the ordered, first-writer-wins merge used by the media
extractors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Union

from bs4 import BeautifulSoup, Tag

from kemono_harvest.core.models import MediaRecord


@dataclass(frozen=True)
class Document:
    soup: BeautifulSoup
    source: str

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)


DocumentLike = Union[str, bytes, BeautifulSoup, Document]


def parse_document(html: Union[str, bytes]) -> Document:
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")
    return Document(soup=BeautifulSoup(html or "", "html.parser"), source=html or "")


def as_document(doc: DocumentLike) -> Document:
    """Accept raw markup, an existing soup or a Document."""
    if isinstance(doc, Document):
        return doc
    if isinstance(doc, BeautifulSoup):
        return Document(soup=doc, source=str(doc))
    return parse_document(doc)


def text_of(el: Optional[Tag]) -> str:
    if el is None:
        return ""
    return el.get_text().strip()


def attr_of(el: Optional[Tag], *names: str) -> Optional[str]:
    """First non-empty attribute value among `names`."""
    if el is None:
        return None
    for name in names:
        value = el.get(name)
        if isinstance(value, list):
            value = " ".join(value)
        if value and value.strip():
            return value.strip()
    return None


def inner_html(el: Optional[Tag]) -> str:
    if el is None:
        return ""
    return el.decode_contents()


class MediaCollector:
    """Insertion-ordered media records keyed by canonical url.

    The first record for a url wins; later ones are dropped, never merged.
    A url that an earlier record kept as its `thumbnail_url` also counts as
    already collected.
    """

    def __init__(self) -> None:
        self._records: Dict[str, MediaRecord] = {}
        self._thumbnails: Set[str] = set()

    def __contains__(self, url: str) -> bool:
        return url in self._records or url in self._thumbnails

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: MediaRecord) -> bool:
        if record.url in self:
            return False
        self._records[record.url] = record
        if record.thumbnail_url:
            self._thumbnails.add(record.thumbnail_url)
        return True

    def urls(self) -> List[str]:
        return list(self._records)

    def records(self) -> List[MediaRecord]:
        return list(self._records.values())
