from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd
import requests

from kemono_harvest.core.interfaces import BaseExtractor
from kemono_harvest.core.models import MediaRecord, PostMetadata, records_to_frame
from kemono_harvest.core.scraping.fetcher import Fetcher
from kemono_harvest.core.scraping.normalizer import post_id_from_url
from kemono_harvest.extractors.media_html import extract_media
from kemono_harvest.extractors.metadata import extract_post_metadata

log = logging.getLogger(__name__)


class PostHtmlExtractor(BaseExtractor):
    """Media of one post, read from its rendered page.

    Used when the JSON API refuses requests but the page itself loads.
    """

    def __init__(self, url: str, params: dict | None = None):
        super().__init__(url=url, params=params)
        self._html: Optional[str] = None

    def fetch_html(self, timeout: int = 30) -> Optional[str]:
        try:
            return Fetcher(timeout=timeout, base_url=self.base_url).get_html(self.url)
        except (requests.RequestException, ValueError) as exc:
            log.error("Failed to fetch page %s: %s", self.url, exc)
            return None

    def _page(self) -> Optional[str]:
        if self._html is None:
            self._html = self.fetch_html()
        return self._html

    def media(self) -> List[MediaRecord]:
        html = self._page()
        if not html:
            return []
        return extract_media(html, self.base_url, logger=self.params.get("logger"))

    def metadata(self) -> Optional[PostMetadata]:
        html = self._page()
        if not html:
            return None
        return extract_post_metadata(html, self.url)

    def find_files(self) -> List[str]:
        return [r.url for r in self.media()]

    def extract(self) -> pd.DataFrame:
        df = records_to_frame(self.media())
        if not df.empty:
            df["postUrl"] = self.url
            df["postId"] = post_id_from_url(self.url)
        return df
