from __future__ import annotations

import logging
from typing import Any, List, Optional

import pandas as pd
import requests

from kemono_harvest.core.interfaces import BaseExtractor
from kemono_harvest.core.models import MediaRecord, records_to_frame
from kemono_harvest.core.scraping.fetcher import Fetcher
from kemono_harvest.core.scraping.normalizer import (
    post_api_urls,
    post_id_from_url,
    user_info_from_url,
)
from kemono_harvest.extractors.media_payload import extract_payload_media

log = logging.getLogger(__name__)


class PostApiExtractor(BaseExtractor):
    """Media of one post, read from the JSON API.

    The API moved between ``/api/`` and ``/api/v1/`` and between user-scoped
    and global post routes; the candidate endpoints are tried in order and
    the first one that answers is used.
    """

    def __init__(self, url: str, params: dict | None = None):
        super().__init__(url=url, params=params)
        self._payload: Optional[Any] = None

    def endpoints(self) -> List[str]:
        service, user_id = user_info_from_url(self.url)
        post_id = post_id_from_url(self.url)
        if not service or post_id == "unknown":
            return []
        return post_api_urls(self.base_url, service, user_id, post_id)

    def fetch_payload(self, timeout: int = 30) -> Optional[Any]:
        fetcher = Fetcher(timeout=timeout, base_url=self.base_url)
        for endpoint in self.endpoints():
            try:
                return fetcher.get_json(endpoint)
            except (requests.RequestException, ValueError) as exc:
                log.debug("Endpoint %s failed: %s", endpoint, exc)
        log.error("No API endpoint answered for %s", self.url)
        return None

    def media(self) -> List[MediaRecord]:
        if self._payload is None:
            self._payload = self.fetch_payload()
        return extract_payload_media(
            self._payload, self.base_url, logger=self.params.get("logger")
        )

    def find_files(self) -> List[str]:
        return [r.url for r in self.media()]

    def extract(self) -> pd.DataFrame:
        df = records_to_frame(self.media())
        if not df.empty:
            df["postUrl"] = self.url
            df["postId"] = post_id_from_url(self.url)
        return df
