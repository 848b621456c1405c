"""HTTP fetcher with timeout and optional UA rotation.

Provides a small `Fetcher` object exposing `get`, `get_html`, `get_json` and
`stream_get`. Requests are made once: retrying is left to the caller.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Optional

import requests

from kemono_harvest.core.config import DEFAULT_BASE_URL
from kemono_harvest.core.scraping.normalizer import validate_url

DEFAULT_UA_POOL = [
    "Mozilla/5.0 (compatible; kemono-harvest/1.0)",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
]


class Fetcher:
    """Small HTTP client with sensible defaults for scraping.

    Usage:
        f = Fetcher(timeout=30)
        html = f.get_html(url)
    """

    def __init__(
        self,
        timeout: int = 30,
        base_url: str = DEFAULT_BASE_URL,
        ua_pool: Optional[list[str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.ua_pool = ua_pool or DEFAULT_UA_POOL

    def _headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        base = {
            "User-Agent": random.choice(self.ua_pool),
            "Accept-Language": "en-US,en;q=0.9",
            "Referer": f"{self.base_url}/",
        }
        if headers:
            base.update(headers)
        return base

    def get(self, url: str, headers: Optional[Dict[str, str]] = None, **kwargs):
        validate_url(url)
        return self.session.get(
            url, headers=self._headers(headers), timeout=self.timeout, **kwargs
        )

    def get_html(self, url: str) -> str:
        resp = self.get(url, headers={"Accept": "text/html,*/*"})
        resp.raise_for_status()
        return resp.text

    def get_json(self, url: str) -> Any:
        resp = self.get(url, headers={"Accept": "application/json, text/plain, */*"})
        resp.raise_for_status()
        return resp.json()

    def stream_get(self, url: str, headers: Optional[Dict[str, str]] = None, **kwargs):
        # Streamed GET for downloading large files
        validate_url(url)
        return self.session.get(
            url,
            headers=self._headers(headers),
            timeout=self.timeout,
            stream=True,
            **kwargs,
        )
