"""Application configuration and defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name, "")
    return value if value else default


def _default_http_timeout() -> float | None:
    """Return the HTTP timeout in seconds, or None to block until the server answers.

    Fetches never time out unless the operator asks for it with HMUM_HTTP_TIMEOUT.
    """
    raw = os.environ.get("HMUM_HTTP_TIMEOUT", "")
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError:
        return None
    return timeout if timeout > 0 else None


def _default_scratch_parent() -> Path | None:
    raw = os.environ.get("HMUM_SCRATCH_DIR", "")
    return Path(raw) if raw else None


@dataclass
class Settings:
    index_name: str = field(default_factory=lambda: _env_str("HMUM_INDEX_NAME", "index.yaml"))
    default_config_name: str = field(
        default_factory=lambda: _env_str("HMUM_DEFAULT_CONFIG_NAME", "values.yaml")
    )
    merge_tool: str = field(default_factory=lambda: _env_str("HMUM_MERGE_TOOL", "builtin"))  # "builtin" or "git"
    git_binary: str = field(default_factory=lambda: _env_str("HMUM_GIT_BINARY", "git"))
    http_timeout: float | None = field(default_factory=_default_http_timeout)
    scratch_parent: Path | None = field(default_factory=_default_scratch_parent)


# Global singleton
settings = Settings()
