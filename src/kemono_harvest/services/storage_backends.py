from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd


class Storage(ABC):
    """Abstract storage backend interface."""

    @abstractmethod
    def upload(self, df: pd.DataFrame, path: str, format: str = "csv") -> str:
        """Persist a DataFrame and return where it was written."""
        raise NotImplementedError()


class LocalStorage(Storage):
    """Save a DataFrame locally under `<path>/data.<format>` (csv or json)."""

    def upload(self, df: pd.DataFrame, path: str, format: str = "csv") -> str:
        out_dir = Path(path)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_file = out_dir / f"data.{format}"
        if format == "csv":
            df.to_csv(out_file, index=False)
        elif format == "json":
            df.to_json(out_file, orient="records", indent=2, force_ascii=False)
        else:
            raise ValueError(f"Unsupported manifest format: {format}")
        return str(out_file)
