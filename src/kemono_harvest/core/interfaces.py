from abc import ABC, abstractmethod

import pandas as pd

from kemono_harvest.core.config import DEFAULT_BASE_URL
from kemono_harvest.core.models import MediaRecord


class BaseExtractor(ABC):
    """
    Contract every post extractor follows.

    The flow only talks to this interface, so a new page layout or API
    version means a new extractor, not a new flow.
    """

    def __init__(self, url: str, params: dict | None = None):
        self.url = url
        self.params = params or {}

    @property
    def base_url(self) -> str:
        return self.params.get("base_url") or DEFAULT_BASE_URL

    @abstractmethod
    def media(self) -> list[MediaRecord]:
        """Media records of this post, de-duplicated by url, in discovery order."""
        raise NotImplementedError()

    @abstractmethod
    def extract(self) -> pd.DataFrame:
        """
        Run the extraction and return one row per media record.
        Returns an empty DataFrame when nothing is found.
        """
        pass

    @abstractmethod
    def find_files(self) -> list[str]:
        """Discover the media URLs of this post.

        Implementations return canonical absolute URLs (may be empty), in
        discovery order.
        """
        raise NotImplementedError()
