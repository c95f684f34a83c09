from __future__ import annotations

import logging
import os
from typing import Any, Optional
from urllib.parse import urljoin

import requests

from core.errors import RefreshTransportError, RetrievalTransportError, SubmissionTransportError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class GenerationClient:
    """
    Thin wrapper around the three endpoints of the generation service plus the
    plain GET used for audio files. Every failure is mapped onto the transport
    error of the operation that triggered it.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        user_agent: str = "songgen-batch/0.1",
        timeout: float = 30.0,
        download_timeout: float = 120.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.download_timeout = download_timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def _url(self, path: str) -> str:
        return urljoin(self.base_url + "/", path.lstrip("/"))

    def resolve_url(self, audio_url: str) -> str:
        """Absolute audio URLs pass through; relative ones hang off the base URL."""
        return audio_url if "://" in audio_url else self._url(audio_url)

    # GET /api/get -> [item, ...] | null
    def get_items(self) -> list[Any]:
        try:
            r = self.session.get(self._url("/api/get"), timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            raise RefreshTransportError(f"Failed to load songs: {e}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise RefreshTransportError(f"Unexpected library payload: {type(data).__name__}")
        return data

    # POST /api/generate {prompt, make_instrumental, wait_audio}
    def generate(self, payload: dict) -> Any:
        return self._post("/api/generate", payload)

    # POST /api/custom_generate {prompt, tags, title, make_instrumental, wait_audio}
    def custom_generate(self, payload: dict) -> Any:
        return self._post("/api/custom_generate", payload)

    def _post(self, path: str, payload: dict) -> Any:
        try:
            r = self.session.post(self._url(path), json=payload, timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except (requests.RequestException, ValueError) as e:
            raise SubmissionTransportError(f"{path}: {e}") from e

    def download(self, audio_url: str, dest_path: str) -> int:
        """
        Stream `audio_url` into `dest_path`. Returns the number of bytes written.
        Relative URLs are resolved against the service base URL.
        """
        url = self.resolve_url(audio_url)
        written = 0
        try:
            with self.session.get(url, stream=True, timeout=self.download_timeout) as r:
                r.raise_for_status()
                with open(dest_path, "wb") as fh:
                    for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
                            written += len(chunk)
        except (requests.RequestException, OSError) as e:
            raise RetrievalTransportError(f"{os.path.basename(dest_path)}: {e}") from e

        logger.debug("Downloaded %d bytes from %s", written, url)
        return written
