"""
Downloader

Small component that saves one media file found by the extractors to disk:

- the file is read in chunks (stream) so large videos and archives never sit
  in memory at once;
- the local name comes from the record (its filename, else the URL), made
  safe for any filesystem with `sanitize_filename`;
- a SHA-256 is computed while writing so the caller can check integrity;
- a dict with useful information about the download is returned.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Dict, Optional

from kemono_harvest.core.models import MediaRecord
from kemono_harvest.core.scraping.fetcher import Fetcher
from kemono_harvest.core.scraping.normalizer import media_filename


class Downloader:
    """Download a single MediaRecord and return metadata about it.

    Accepts an optional `Fetcher` (the HTTP layer), which makes it easy to
    inject a fake one in tests.
    """

    def __init__(self, fetcher: Fetcher | None = None):
        self.fetcher = fetcher or Fetcher()

    def download(
        self, record: MediaRecord, dest_dir: str = "data", index: int = 0
    ) -> Dict[str, Optional[str]]:
        """Stream `record.url` into `dest_dir/<filename>`.

        An existing file with the same name is left untouched and reported
        with ``skipped="true"``. A 404 on a url rewritten from a thumbnail
        falls back to `record.thumbnail_url`. Data is written to a ``.part``
        file that only replaces the target once complete. HTTP errors
        propagate from ``raise_for_status``.
        """
        out_dir = Path(dest_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / media_filename(record, index)

        if out_path.exists() and out_path.stat().st_size > 0:
            return {
                "path": str(out_path),
                "url": record.url,
                "fetched_url": None,
                "sha256": None,
                "size": str(out_path.stat().st_size),
                "status_code": None,
                "skipped": "true",
            }

        resp = self.fetcher.stream_get(record.url)
        fetched_url = record.url
        if (
            resp.status_code == 404
            and record.thumbnail_url
            and record.thumbnail_url != record.url
        ):
            # rewritten full-resolution url may not exist
            resp = self.fetcher.stream_get(record.thumbnail_url)
            fetched_url = record.thumbnail_url
        resp.raise_for_status()

        part_path = out_path.with_suffix(out_path.suffix + ".part")
        hasher = hashlib.sha256()
        total = 0
        try:
            with resp as r:
                with open(part_path, "wb") as fh:
                    for chunk in r.iter_content(chunk_size=8192):
                        if not chunk:
                            continue
                        fh.write(chunk)
                        hasher.update(chunk)
                        total += len(chunk)
            part_path.replace(out_path)
        finally:
            part_path.unlink(missing_ok=True)

        return {
            "path": str(out_path),
            "url": record.url,
            "fetched_url": fetched_url,
            "sha256": hasher.hexdigest(),
            "size": str(total),
            "status_code": str(resp.status_code),
            "skipped": "false",
        }
