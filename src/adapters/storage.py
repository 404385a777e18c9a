from __future__ import annotations

import io
import mimetypes
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def content_type_for(key: str) -> str:
    """MIME type from the key suffix ("img/nations.gif" -> "image/gif")."""
    guessed, _ = mimetypes.guess_type(key)
    return guessed or DEFAULT_CONTENT_TYPE


class StorageAdapter(ABC):
    """
    Where input tables are read from and rendered charts are written to
    (local filesystem, S3, ...).

    Callers work with logical keys such as "img/warming/1880.png" or
    "data/nations.csv"; implementations map them to physical locations.
    """

    @abstractmethod
    def write_raw(self, key: str, content: bytes) -> str:
        """
        Persist encoded bytes (PNG/JPEG/GIF images, CSV text) at `key`.

        Returns the fully-qualified location, for tracing/logging:
        - Local: "img/nations.gif"
        - S3:    "s3://my-bucket/img/nations.gif"
        """

    @abstractmethod
    def read_raw(self, key: str) -> bytes:
        """Bytes previously stored at `key`."""

    @abstractmethod
    def list_keys(self, prefix: str) -> List[str]:
        """Sorted logical keys under `prefix` (directory walk / S3 prefix listing)."""

    def write_csv(self, df: pd.DataFrame, key: str) -> str:
        """Persist a DataFrame as CSV (no index) at `key`."""
        buf = io.StringIO()
        df.to_csv(buf, index=False)
        return self.write_raw(key, buf.getvalue().encode("utf-8"))

    def read_csv(self, key: str) -> pd.DataFrame:
        return pd.read_csv(io.BytesIO(self.read_raw(key)))


class LocalStorageAdapter(StorageAdapter):
    """
    Keys are relative paths under `root_dir`:

        root_dir = Path("img")
        key      = "warming/1880.png"
        -> img/warming/1880.png
    """

    def __init__(self, root_dir: Path | str = ".") -> None:
        self.root_dir = Path(root_dir)

    def _path(self, key: str) -> Path:
        return self.root_dir / key.lstrip("/")

    def write_raw(self, key: str, content: bytes) -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)

    def read_raw(self, key: str) -> bytes:
        return self._path(key).read_bytes()

    def read_csv(self, key: str) -> pd.DataFrame:
        return pd.read_csv(self._path(key))

    def list_keys(self, prefix: str) -> List[str]:
        base = self._path(prefix)
        if not base.exists():
            return []
        return sorted(
            str(path.relative_to(self.root_dir)).replace(os.sep, "/")
            for path in base.rglob("*")
            if path.is_file()
        )


class S3StorageAdapter(StorageAdapter):
    """
    S3-backed adapter (boto3). Keys live under `bucket/base_prefix`;
    objects are uploaded with a Content-Type matching their suffix so
    charts can be served straight from the bucket.
    """

    def __init__(
        self,
        bucket: str,
        *,
        base_prefix: Optional[str] = None,
        boto3_client: Optional["boto3.client"] = None,
    ) -> None:
        if boto3_client is None:
            import boto3  # lazy import to keep local-only runs lighter

            boto3_client = boto3.client("s3")

        self.bucket = bucket
        self.base_prefix = (base_prefix or "").strip("/")
        self._s3 = boto3_client

    def _full_key(self, key: str) -> str:
        key = key.lstrip("/")
        return f"{self.base_prefix}/{key}" if self.base_prefix else key

    def _logical_key(self, full_key: str) -> str:
        if self.base_prefix and full_key.startswith(self.base_prefix + "/"):
            return full_key[len(self.base_prefix) + 1 :]
        return full_key

    def write_raw(self, key: str, content: bytes) -> str:
        full_key = self._full_key(key)
        self._s3.put_object(
            Bucket=self.bucket,
            Key=full_key,
            Body=content,
            ContentType=content_type_for(full_key),
        )
        return f"s3://{self.bucket}/{full_key}"

    def read_raw(self, key: str) -> bytes:
        resp = self._s3.get_object(Bucket=self.bucket, Key=self._full_key(key))
        return resp["Body"].read()

    def list_keys(self, prefix: str) -> List[str]:
        full_prefix = self._full_key(prefix).rstrip("/") + "/"
        paginator = self._s3.get_paginator("list_objects_v2")
        keys: List[str] = []
        for page in paginator.paginate(Bucket=self.bucket, Prefix=full_prefix):
            contents: Iterable[dict] = page.get("Contents") or []
            keys.extend(self._logical_key(obj["Key"]) for obj in contents)
        return sorted(keys)


__all__ = [
    "StorageAdapter",
    "LocalStorageAdapter",
    "S3StorageAdapter",
    "content_type_for",
]
