from __future__ import annotations

import os
from pathlib import Path


def load_dotenv_if_present(path: str | None = None) -> None:
    """
    Lightweight .env loader used for local development.

    - Reads KEY=VALUE pairs from the given file (default: ".env" in CWD).
    - Ignores empty lines and comments starting with "#".
    - Strips matching single/double quotes around values.
    - Does *not* overwrite variables that are already present in os.environ.

    On AWS Lambda the variables come from the function configuration,
    so the file is simply absent and ignored.
    """
    env_path = Path(path or ".env")
    if not env_path.exists():
        return

    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        if not key:
            continue
        if key not in os.environ:
            os.environ[key] = value


def env_path(name: str, default: Path | str) -> Path:
    """Return the path stored in env var `name`, or `default` when unset/empty."""
    value = os.getenv(name)
    return Path(value) if value else Path(default)


def env_int(name: str, default: int) -> int:
    """
    Return env var `name` parsed as int.

    Raises RuntimeError when the variable is set but not an integer, so
    a typo in the configuration does not silently fall back to the default.
    """
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name!r} must be an integer, got {value!r}") from exc


__all__ = ["load_dotenv_if_present", "env_path", "env_int"]
