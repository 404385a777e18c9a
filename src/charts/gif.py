"""Assemble already written frame images into an animated GIF (Pillow)."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Iterable, List, Sequence

from PIL import Image

from adapters import StorageAdapter

LOOP_FOREVER = 0


def _open_frame(location: Path | str, storage: StorageAdapter | None) -> Image.Image:
    if storage is None:
        with Image.open(location) as img:
            return img.convert("RGB")
    data = storage.read_raw(str(location))
    with Image.open(io.BytesIO(data)) as img:
        return img.convert("RGB")


def assemble_gif(
    image_paths: Sequence[Path | str],
    output_path: Path | str,
    *,
    duration_ms: int = 100,
    loop: int = LOOP_FOREVER,
    storage: StorageAdapter | None = None,
) -> Path | str:
    """
    Build a GIF from `image_paths` in the given order.

    All frames are resized to the size of the first one. With a storage
    adapter, frames are read from and the GIF is written to the storage.
    """
    if not image_paths:
        raise RuntimeError(f"No images to assemble into {output_path}")
    if duration_ms <= 0:
        raise ValueError(f"duration_ms must be > 0, got {duration_ms}")

    frames: List[Image.Image] = [_open_frame(p, storage) for p in image_paths]
    target_size = frames[0].size
    frames = [f if f.size == target_size else f.resize(target_size, Image.LANCZOS) for f in frames]

    buf = io.BytesIO()
    frames[0].save(
        buf,
        format="GIF",
        save_all=True,
        append_images=frames[1:],
        duration=duration_ms,
        loop=loop,
    )

    if storage is None:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(buf.getvalue())
        return path
    return storage.write_raw(str(output_path).replace("\\", "/"), buf.getvalue())


def frames_to_gif(
    records: Iterable,
    output_path: Path | str,
    *,
    duration_ms: int = 100,
    storage: StorageAdapter | None = None,
) -> Path | str:
    """
    GIF from the FrameRecords returned by `export_cumulative_frames`, in step order.

    With a storage adapter the frames are read back by their logical keys.
    """
    ordered = sorted(records, key=lambda r: r.step)
    return assemble_gif(
        [r.key if storage is not None else r.location for r in ordered],
        output_path,
        duration_ms=duration_ms,
        storage=storage,
    )


__all__ = ["LOOP_FOREVER", "assemble_gif", "frames_to_gif"]
