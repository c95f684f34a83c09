# core/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"

ENV_BASE_URL = "SONGGEN_BASE_URL"
ENV_DOWNLOAD_DIR = "SONGGEN_DOWNLOAD_DIR"
ENV_SETTLE_DELAY = "SONGGEN_SETTLE_DELAY"
ENV_PACING_DELAY = "SONGGEN_PACING_DELAY"
ENV_REQUEST_TIMEOUT = "SONGGEN_REQUEST_TIMEOUT"
ENV_TAG_DOWNLOADS = "SONGGEN_TAG_DOWNLOADS"
ENV_MAX_JOBS = "SONGGEN_MAX_JOBS"


@dataclass(frozen=True)
class AppConfig:
    base_url: str = DEFAULT_BASE_URL
    request_timeout_s: float = 30.0
    download_timeout_s: float = 120.0

    # Heuristics only. Generation may still be running after the settle delay,
    # and the pacing delay just spaces out large transfers.
    settle_delay_s: float = 2.0
    pacing_delay_s: float = 0.5

    max_jobs: int = 10

    # Empty -> resolved by the app (platform Downloads folder).
    download_dir: str = ""
    tag_downloads: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            base_url=(env.get(ENV_BASE_URL) or defaults.base_url).strip().rstrip("/"),
            request_timeout_s=_float(env, ENV_REQUEST_TIMEOUT, defaults.request_timeout_s),
            download_timeout_s=defaults.download_timeout_s,
            settle_delay_s=_float(env, ENV_SETTLE_DELAY, defaults.settle_delay_s),
            pacing_delay_s=_float(env, ENV_PACING_DELAY, defaults.pacing_delay_s),
            max_jobs=_int(env, ENV_MAX_JOBS, defaults.max_jobs),
            download_dir=(env.get(ENV_DOWNLOAD_DIR) or "").strip(),
            tag_downloads=_bool(env, ENV_TAG_DOWNLOADS, defaults.tag_downloads),
        )


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", key, raw)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r: must not be negative", key, raw)
        return default
    return value


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", key, raw)
        return default
    if value < 1:
        logger.warning("Ignoring %s=%r: must be at least 1", key, raw)
        return default
    return value


def _bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}
