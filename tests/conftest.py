import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Qt tests run headless
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.errors import RefreshTransportError, RetrievalTransportError, SubmissionTransportError
from core.models import Item, ItemStatus


def make_item(item_id, status="complete", audio_url="https://cdn.example/a.mp3", title="", tags=""):
    return Item(
        id=item_id,
        title=title,
        status=ItemStatus.parse(status),
        raw_status=status,
        audio_url=audio_url,
        tags=tags,
    )


class FakeClient:
    """In-memory stand-in for GenerationClient that records every call."""

    def __init__(self, items=None, fail_refresh=False, fail_prompts=(), fail_urls=(), audio=b"RIFFdata"):
        self.items = list(items or [])
        self.fail_refresh = fail_refresh
        self.fail_prompts = set(fail_prompts)
        self.fail_urls = set(fail_urls)
        self.audio = audio
        self.generate_calls = []
        self.custom_calls = []
        self.download_calls = []
        self.get_calls = 0

    def get_items(self):
        self.get_calls += 1
        if self.fail_refresh:
            raise RefreshTransportError("Failed to load songs: boom")
        return list(self.items)

    def generate(self, payload):
        self.generate_calls.append(payload)
        if payload["prompt"] in self.fail_prompts:
            raise SubmissionTransportError("/api/generate: 500")
        return [{"id": f"new-{len(self.generate_calls)}", "status": "queued"}]

    def custom_generate(self, payload):
        self.custom_calls.append(payload)
        if payload["prompt"] in self.fail_prompts:
            raise SubmissionTransportError("/api/custom_generate: 500")
        return [{"id": f"custom-{len(self.custom_calls)}", "status": "queued"}]

    def resolve_url(self, audio_url):
        return audio_url if "://" in audio_url else "http://svc.test/" + audio_url.lstrip("/")

    def download(self, audio_url, dest_path):
        self.download_calls.append((audio_url, dest_path))
        if audio_url in self.fail_urls:
            raise RetrievalTransportError(f"{audio_url}: 404")
        with open(dest_path, "wb") as fh:
            fh.write(self.audio)
        return len(self.audio)


@pytest.fixture
def fake_client():
    return FakeClient()
