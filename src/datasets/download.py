"""
Optional download of the input CSVs.

When a table is missing under the data root and a base URL is configured
(env var CHARTS_DATASET_BASE_URL or the `base_url` argument), the file is
fetched from `<base_url>/<file name>` and written locally. Without a base
URL, a missing file is reported as FileNotFoundError.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, Optional

from common.retry import http_get_with_retries
from .loaders import DATA_DIR, TABLE_SCHEMAS

DATASET_BASE_URL_ENV = "CHARTS_DATASET_BASE_URL"


def _dataset_url(base_url: str, name: str) -> str:
    return f"{base_url.rstrip('/')}/{name}"


def download_dataset(
    name: str,
    *,
    base_url: str,
    data_dir: Path | str = DATA_DIR,
    timeout: int = 30,
) -> Path:
    """
    Download one CSV and write it under `data_dir`.

    The payload must start with a header line; an empty body raises
    RuntimeError instead of leaving an empty file behind.
    """
    url = _dataset_url(base_url, name)
    resp = http_get_with_retries(url, timeout=timeout)
    resp.raise_for_status()

    content = resp.content
    if not content.strip():
        raise RuntimeError(f"Empty response downloading {url}")

    target = Path(data_dir) / name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    return target


def ensure_datasets(
    *,
    data_dir: Path | str = DATA_DIR,
    base_url: Optional[str] = None,
    names: Iterable[str] = tuple(TABLE_SCHEMAS),
) -> Dict[str, Path]:
    """
    Make sure every input table exists locally, downloading missing ones.

    Returns a mapping file name -> local path.
    """
    base_url = base_url or os.getenv(DATASET_BASE_URL_ENV) or None
    data_root = Path(data_dir)

    paths: Dict[str, Path] = {}
    for name in names:
        path = data_root / name
        if not path.exists():
            if base_url is None:
                raise FileNotFoundError(
                    f"Input table {path} not found and {DATASET_BASE_URL_ENV} is not set",
                )
            print(f"[datasets] Downloading {name} from {base_url}...")
            path = download_dataset(name, base_url=base_url, data_dir=data_root)
        paths[name] = path
    return paths


__all__ = ["DATASET_BASE_URL_ENV", "download_dataset", "ensure_datasets"]
